"""
Error taxonomy and the HTTP boundary that maps it to responses.

Controllers raise these; routes never build error responses themselves.

    Unauthenticated  → 401
    ValidationError  → 400
    NotFound         → 404
    Conflict         → 409
    StorageError     → 500   (any SQLAlchemyError is reported as this too)

Response body is always {"error": <code>, "detail": <message>}.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code: int = 500
    error_code: str = "app_error"

    def __init__(self, message: str, headers: dict[str, str] | None = None):
        super().__init__(message)
        self.message = message
        self.headers = headers


class Unauthenticated(AppError):
    status_code = 401
    error_code = "unauthenticated"

    def __init__(self, message: str = "Invalid or missing token"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class ValidationError(AppError):
    status_code = 400
    error_code = "validation_error"


class NotFound(AppError):
    status_code = 404
    error_code = "not_found"

    def __init__(self, what: str, message: str | None = None):
        super().__init__(message or f"{what.capitalize()} not found")
        self.what = what


class Conflict(AppError):
    status_code = 409
    error_code = "conflict"


class StorageError(AppError):
    status_code = 500
    error_code = "storage_error"


# ───────── SAFE VALIDATION HANDLER (bytes in multipart bodies break JSON) ─────────

def _sanitize(obj):
    if isinstance(obj, (bytes, bytearray)):
        return f"<bytes:{len(obj)}>"
    if isinstance(obj, dict):
        return {k: _sanitize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_sanitize(v) for v in obj]
    return obj


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error_code, "detail": exc.message},
        headers=exc.headers,
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Storage failure on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=StorageError.status_code,
        content={"error": StorageError.error_code, "detail": "Storage operation failed"},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": _sanitize(exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
