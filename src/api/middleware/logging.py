"""Request logging middleware."""

import time
from collections.abc import Callable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.commons.telemetry.logger import (
    correlation_id_var,
    get_logger,
    set_correlation_id,
)

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses.

    The request ID doubles as the logging correlation ID for everything
    logged while the request is handled.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        request_id = set_correlation_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        try:
            start_time = time.perf_counter()
            logger.info(
                "Request started",
                extra={
                    "method": request.method,
                    "http_path": request.url.path,
                    "client_ip": request.client.host if request.client else "unknown",
                },
            )

            try:
                response: Response = await call_next(request)
            except Exception as e:
                logger.warning(
                    "Request failed",
                    extra={
                        "method": request.method,
                        "http_path": request.url.path,
                        "error": type(e).__name__,
                        "duration_ms": round(
                            (time.perf_counter() - start_time) * 1000, 2
                        ),
                    },
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                "Request completed",
                extra={
                    "method": request.method,
                    "http_path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                },
            )
        finally:
            correlation_id_var.set(None)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
