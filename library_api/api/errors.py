"""
Tradução das exceções de domínio para respostas HTTP.

Tabela única de status codes:
    NotFoundError            -> 404
    PreconditionFailedError  -> 400
    InvalidFilterError       -> 400
    ConflictError            -> 409
    PersistenceError         -> 500
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from library_api.core.exceptions import (
    ConflictError,
    InvalidFilterError,
    LibraryError,
    NotFoundError,
    PersistenceError,
    PreconditionFailedError,
)
from library_api.schemas.base import ErrorResponse

logger = logging.getLogger(__name__)

STATUS_BY_EXCEPTION: dict[type[LibraryError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    PreconditionFailedError: status.HTTP_400_BAD_REQUEST,
    InvalidFilterError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    PersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(exc: LibraryError) -> int:
    """Status HTTP da exceção (subclasses herdam o da classe base mapeada)."""
    for exc_type in type(exc).__mro__:
        if exc_type in STATUS_BY_EXCEPTION:
            return STATUS_BY_EXCEPTION[exc_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, message: str, errors: dict | None = None) -> JSONResponse:
    body = ErrorResponse(status=status_code, message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body, exclude_none=True),
    )


async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} falhou: {exc.message}")
    return error_response(status_code, exc.message, exc.errors)


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    errors = {
        ".".join(str(part) for part in error["loc"]): error["msg"]
        for error in exc.errors()
    }
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Dados inválidos",
        errors,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registra os handlers de erro na aplicação."""
    app.add_exception_handler(LibraryError, library_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
