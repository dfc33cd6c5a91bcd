"""Prometheus middleware: counts and times every HTTP request.

The endpoint label is the raw URL path, so /credentials/{id} produces one
series per id.  Acceptable while the registry is demo-sized.
"""

from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from credchain.core.metrics import ACTIVE_REQUESTS, REQUEST_COUNT, REQUEST_DURATION


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # scrapes of /metrics itself are not counted
        if request.url.path == "/metrics":
            return await call_next(request)

        ACTIVE_REQUESTS.inc()
        start = time.monotonic()
        status_code = "500"

        try:
            response = await call_next(request)
            status_code = str(response.status_code)
        finally:
            ACTIVE_REQUESTS.dec()
            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=request.url.path,
                status_code=status_code,
            ).inc()
            REQUEST_DURATION.labels(
                method=request.method,
                endpoint=request.url.path,
            ).observe(time.monotonic() - start)

        return response
