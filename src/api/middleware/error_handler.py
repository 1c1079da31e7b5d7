"""Maps document store failures onto JSON error responses."""

from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from src.api.middleware.logging import REQUEST_ID_HEADER
from src.commons.infrastructure.documentdb.exceptions import (
    DocumentDBConnectionError,
    DocumentDBOperationError,
)
from src.commons.telemetry.logger import get_logger

logger = get_logger(__name__)


def _error_response(
    request: Request,
    code: str,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
                "request_id": request_id,
            }
        },
        headers={REQUEST_ID_HEADER: request_id},
    )


def _handle_exception(request: Request, exc: Exception) -> JSONResponse:
    """Translate a store error into a 503 or 500 response."""
    if isinstance(exc, DocumentDBConnectionError):
        logger.error(f"Document database unavailable: {exc}")
        return _error_response(
            request,
            "DOCUMENT_DB_UNAVAILABLE",
            "The document database is unavailable",
            status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    if isinstance(exc, DocumentDBOperationError):
        logger.error(
            f"Document database operation failed: {exc}",
            extra={"collection": exc.collection, "operation": exc.operation},
        )
        return _error_response(
            request,
            "DOCUMENT_DB_OPERATION_FAILED",
            str(exc),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"collection": exc.collection, "operation": exc.operation},
        )

    logger.exception(f"Unexpected error: {exc}")
    return _error_response(
        request,
        "INTERNAL_ERROR",
        "An unexpected error occurred",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def error_handler_middleware(
    request: Request,
    call_next: RequestResponseEndpoint,
) -> Response:
    """Catch anything the routes raise and answer with a JSON error body."""
    try:
        return await call_next(request)
    except Exception as exc:
        return _handle_exception(request, exc)
