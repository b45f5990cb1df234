"""FastAPI exception handlers for the application exceptions in core/errors.py."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from propcomply.core.errors import (
    AppException,
    InvalidDateRangeError,
    NotFoundError,
    OrphanCertificateError,
    ValidationError,
)

__all__ = [
    "AppException",
    "InvalidDateRangeError",
    "NotFoundError",
    "OrphanCertificateError",
    "ValidationError",
    "register_exception_handlers",
]

# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def _error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}

def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content=_error_body("NOT_FOUND", "Resource not found"),
        )

    @app.exception_handler(500)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content=_error_body("INTERNAL_ERROR", "An unexpected error occurred"),
        )
