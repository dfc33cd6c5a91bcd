"""Prometheus metric inventory.

All metrics are declared here and imported by the module that owns the
behavior.  HTTP metrics are fed by MetricsMiddleware; the credential
metrics by the registration workflow and the /verify endpoint.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    # /upload sits around 0.8s when the simulated validator delay is on
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Credential registry
# ---------------------------------------------------------------------------

VALIDATIONS = Counter(
    "credential_validations_total",
    "Certificate submissions by validation outcome",
    ["outcome"],  # passed | rejected | precheck_failed
)

VALIDATION_SCORE = Histogram(
    "credential_validation_score",
    "Composite validator score of full validation runs",
    buckets=[0, 20, 40, 50, 60, 70, 80, 85, 90, 95, 100],
)

CHAIN_VERIFICATIONS = Counter(
    "credential_chain_verifications_total",
    "Verify-on-blockchain requests by lookup key and result",
    ["lookup", "result"],  # lookup: id | hash | none; result: verified | not_found
)
