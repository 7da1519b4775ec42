"""
Exception handlers mapping content engine errors to JSON responses.

Error response format:
{
    "error": {
        "status_code": 422,
        "message": "Submission is invalid",
        "type": "Validation Error",
        "details": {"errors": {"price": "must be a number"}},
        "path": "/api/v1/content-types/products/entries/"
    }
}
"""

from typing import Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from core.exceptions import ContentEngineError
from core.logging_config import get_logger

logger = get_logger(__name__)

ERROR_TYPES = {
    400: "Bad Request",
    404: "Not Found",
    409: "Conflict",
    422: "Validation Error",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


def create_error_response(
    status_code: int,
    message: str,
    details: Optional[dict[str, Any]] = None,
    path: Optional[str] = None,
) -> JSONResponse:
    error: dict[str, Any] = {
        "status_code": status_code,
        "message": message,
        "type": ERROR_TYPES.get(status_code, "Error"),
    }
    if details:
        error["details"] = details
    if path:
        error["path"] = path
    return JSONResponse(status_code=status_code, content={"error": error})


async def content_engine_exception_handler(request: Request, exc: ContentEngineError) -> JSONResponse:
    log = logger.error_ctx if exc.status_code >= 500 else logger.warning_ctx
    log(
        f"{type(exc).__name__}: {exc.message}",
        status_code=exc.status_code,
        path=request.url.path,
    )
    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        details=exc.details,
        path=request.url.path,
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(ContentEngineError, content_engine_exception_handler)
