"""Application exceptions and the FastAPI handlers that render them."""
import logging
from datetime import datetime, timezone
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .schemas import StandardError, ValidationErrorBody, FieldMessage

logger = logging.getLogger(__name__)

NOT_FOUND_ERROR = "Resource not found"
NOT_FOUND_MESSAGE = "Entity not found"
VALIDATION_ERROR = "Validation exception"
VALIDATION_MESSAGE = "Invalid request"


class ResourceNotFoundError(Exception):
    """Referenced entity does not exist."""

    def __init__(self, message: str = NOT_FOUND_MESSAGE):
        super().__init__(message)
        self.message = message


class InvalidPageRequestError(Exception):
    """Paging or sorting parameter outside the accepted values."""

    def __init__(self, field_name: str, message: str):
        super().__init__(f"{field_name}: {message}")
        self.field_name = field_name
        self.message = message


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _validation_response(request: Request, errors: list[FieldMessage]) -> JSONResponse:
    body = ValidationErrorBody(
        timestamp=_now(),
        status=status.HTTP_400_BAD_REQUEST,
        error=VALIDATION_ERROR,
        message=VALIDATION_MESSAGE,
        path=request.url.path,
        errors=errors,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(by_alias=True, mode="json"),
    )


async def resource_not_found_handler(request: Request, exc: ResourceNotFoundError) -> JSONResponse:
    logger.warning("%s %s: %s", request.method, request.url.path, exc.message)
    body = StandardError(
        timestamp=_now(),
        status=status.HTTP_404_NOT_FOUND,
        error=NOT_FOUND_ERROR,
        message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=body.model_dump(by_alias=True, mode="json"),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing and framework HTTP errors with the standard envelope."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error = NOT_FOUND_ERROR
    else:
        error = HTTPStatus(exc.status_code).phrase
    body = StandardError(
        timestamp=_now(),
        status=exc.status_code,
        error=error,
        message=str(exc.detail),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(by_alias=True, mode="json"),
        headers=exc.headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        FieldMessage(
            field_name=str(err["loc"][-1]) if err.get("loc") else "request",
            message=err["msg"],
        )
        for err in exc.errors()
    ]
    logger.info("Rejected %s %s: %d invalid field(s)", request.method, request.url.path, len(errors))
    return _validation_response(request, errors)


async def invalid_page_request_handler(request: Request, exc: InvalidPageRequestError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return _validation_response(
        request, [FieldMessage(field_name=exc.field_name, message=exc.message)]
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ResourceNotFoundError, resource_not_found_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(InvalidPageRequestError, invalid_page_request_handler)
