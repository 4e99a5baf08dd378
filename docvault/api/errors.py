"""HTTP-представление доменных исключений.

Тело ответа всегда ``{"error": CODE, "message": text}``; ошибки валидации
дополнительно указывают поле. Для чужих и отсутствующих сущностей ответ
одинаковый (404), 403 не используется.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from docvault.core.logging import log_context
from docvault.domains.exceptions import (
    AuthenticationError,
    ConflictError,
    DocumentNotFoundError,
    NotFoundError,
    StorageUnavailableError,
    UserAlreadyExistsError,
    ValidationError,
)

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 1


def _error(status_code: int, code: str, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "message": message, **extra})


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    code = "DOCUMENT_NOT_FOUND" if isinstance(exc, DocumentNotFoundError) else "USER_NOT_FOUND"
    return _error(status.HTTP_404_NOT_FOUND, code, str(exc))


async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    code = "USER_ALREADY_EXISTS" if isinstance(exc, UserAlreadyExistsError) else "VERSION_CONFLICT"
    return _error(status.HTTP_409_CONFLICT, code, str(exc))


async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, "validation_error", exc.message, field=exc.field)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": jsonable_encoder(exc.errors()),
        },
    )


async def authentication_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    return _error(status.HTTP_401_UNAUTHORIZED, exc.code, exc.message)


async def unavailable_handler(request: Request, exc: StorageUnavailableError) -> JSONResponse:
    response = _error(status.HTTP_503_SERVICE_UNAVAILABLE, "SERVICE_UNAVAILABLE", str(exc))
    response.headers["Retry-After"] = str(RETRY_AFTER_SECONDS)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_exception",
        extra=log_context(
            path=request.url.path,
            method=request.method,
            exception_type=type(exc).__name__,
        ),
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ConflictError, conflict_handler)
    app.add_exception_handler(ValidationError, validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AuthenticationError, authentication_handler)
    app.add_exception_handler(StorageUnavailableError, unavailable_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
