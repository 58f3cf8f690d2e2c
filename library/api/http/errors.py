"""Отображение доменных ошибок на HTTP-ответы"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from library.core.errors import ConflictOrUnavailable, NotFound, ValidationError
from library.domains.books.entities import Book
from library.domains.books.schemas import BookResponse

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    content = {
        "detail": exc.message,
        "errors": [{"field": error.field, "message": error.message} for error in exc.errors],
    }
    # Исходная запись, чтобы клиент показал её рядом с отклонёнными правками
    if isinstance(exc.record, Book):
        content["book"] = BookResponse.model_validate(exc.record).model_dump(mode="json", by_alias=True)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in error["loc"][1:]) or "body", "message": error["msg"]}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": ", ".join(error["message"] for error in errors), "errors": errors},
    )


async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def unavailable_handler(request: Request, exc: ConflictOrUnavailable) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage is temporarily unavailable"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(NotFound, not_found_handler)
    app.add_exception_handler(ConflictOrUnavailable, unavailable_handler)
