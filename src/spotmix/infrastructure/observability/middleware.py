"""Request logging middleware."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from spotmix.infrastructure.observability.logging import set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


# Hey future me - every request gets a correlation ID (taken from the client's
# X-Correlation-ID header or freshly generated) that ends up on all log lines
# of that request and in the response header. /health is polled by Docker and
# would drown everything else, so it isn't logged.
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with status and duration."""

    QUIET_PATHS = frozenset({"/health"})

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        method = request.method
        path = request.url.path
        quiet = path in self.QUIET_PATHS

        if not quiet:
            logger.debug(
                f"→ {method} {path}",
                extra={
                    "method": method,
                    "path": path,
                    "client_ip": request.client.host if request.client else "unknown",
                },
            )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"Request failed: {method} {path}",
                extra={
                    "method": method,
                    "path": path,
                    "duration_ms": int((time.perf_counter() - start_time) * 1000),
                    "error_type": type(e).__name__,
                },
            )
            raise

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        if not quiet:
            marker = "✓" if response.status_code < 400 else "✗"
            logger.info(
                f"{marker} {method} {path} → {response.status_code} ({duration_ms}ms)",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
