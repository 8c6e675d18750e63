"""FastAPI exception handlers producing ErrorResponse bodies."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from hookguard.errors.exceptions import HookGuardError
from hookguard.models.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(request: Request, code: str, message: str, status_code: int, details=None) -> JSONResponse:
    trace_id = getattr(request.state, "trace_id", "unknown")
    error_response = ErrorResponse(
        error=ErrorDetail(
            code=code,
            message=message,
            details=details,
            trace_id=trace_id,
            timestamp=datetime.now(timezone.utc),
        ),
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json", exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(HookGuardError)
    async def hookguard_error_handler(request: Request, exc: HookGuardError):
        logger.warning(
            "webhook_rejected",
            extra={
                "path": request.url.path,
                "code": exc.code,
                "status_code": exc.status_code,
            },
        )
        return _error_response(request, exc.code, exc.message, exc.status_code, exc.details)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error processing %s %s", request.method, request.url.path)
        return _error_response(request, "INTERNAL_ERROR", "Internal server error", 500)
