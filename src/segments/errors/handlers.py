"""FastAPI exception handlers producing ErrorResponse bodies."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from segments.errors.exceptions import SegmentsError
from segments.models.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(
    request: Request, status_code: int, code: str, message: str, details=None
) -> JSONResponse:
    trace_id = getattr(request.state, "trace_id", "unknown-trace")
    error_response = ErrorResponse(
        schema_version="1.0",
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

    @app.exception_handler(SegmentsError)
    async def segments_error_handler(request: Request, exc: SegmentsError):
        if exc.status_code >= 500:
            logger.error("segments_error", extra={"code": exc.code, "path": request.url.path})
        return _error_response(request, exc.status_code, exc.code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error_response(
            request,
            400,
            "VALIDATION_ERROR",
            "Request validation failed",
            [
                {"loc": list(err.get("loc", [])), "msg": err.get("msg", "")}
                for err in exc.errors()
            ],
        )
