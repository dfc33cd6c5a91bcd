"""Request ID and timing for every request.

The request ID comes from the X-Request-ID header when the caller sends
one (the dashboard does not), otherwise a fresh UUID.  It lives in a
ContextVar so any log line emitted while handling the request, e.g. the
registration workflow's "Registered credential" line, carries it.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class _RequestContextFilter(logging.Filter):
    """Attach the current request ID to every LogRecord."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("-")  # type: ignore[attr-defined]
        return True


def install_log_filter() -> None:
    """Add the request-ID filter to every root handler.

    Handler filters see records propagated from child loggers; a filter on
    the root logger itself would not.  Call after setup_logging().
    """
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, _RequestContextFilter) for f in handler.filters):
            handler.addFilter(_RequestContextFilter())


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        token = request_id_var.set(req_id)

        start = time.monotonic()
        try:
            response = await call_next(request)
            duration_ms = round((time.monotonic() - start) * 1000, 1)

            logger.info(
                "%s %s → %d (%.1fms)",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )

            response.headers["X-Request-ID"] = req_id
            return response
        finally:
            request_id_var.reset(token)
