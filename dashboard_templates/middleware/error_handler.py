"""Standard error handler: consistent error responses across all routes."""

from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import StoreError, TemplateError
from ..utils.logging import get_logger

logger = get_logger("middleware.error_handler")


def _envelope(request: Request, status_code: int, detail, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": True,
            "status_code": status_code,
            "detail": detail,
            **extra,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "request_id": getattr(request.state, "request_id", None),
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register standard error handlers on the app."""

    @app.exception_handler(TemplateError)
    async def template_error_handler(request: Request, exc: TemplateError):
        if isinstance(exc, StoreError):
            # Already logged with the failing operation by the store
            return _envelope(request, exc.status_code, "Storage error", code=exc.code)
        return _envelope(
            request,
            exc.status_code,
            exc.message,
            code=exc.code,
            context=exc.context,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _envelope(request, exc.status_code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _envelope(request, 422, "Validation error", errors=jsonable_encoder(exc.errors()))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled_exception",
            error=str(exc),
            path=str(request.url.path),
            exc_info=True,
        )
        return _envelope(request, 500, "Internal server error")
