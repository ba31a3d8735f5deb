"""Record service error taxonomy and the FastAPI handlers that render it."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class RecordError(Exception):
    """Base class for failures raised by repositories and services."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RecordError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(RecordError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Record not found"


class ConflictError(RecordError):
    # Duplicate ids are reported as a bad request, not 409.
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Duplicate record"


class StorageUnavailableError(RecordError):
    default_message = "Storage unavailable"


class UnknownError(RecordError):
    pass


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location:
        return f"{location}: {first.get('msg', 'invalid value')}"
    return first.get("msg", ValidationError.default_message)


async def record_error_handler(request: Request, exc: RecordError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return _error_response(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))


async def http_exception_handler(request: Request, exc: HTTPException):
    return _error_response(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log anything unexpected and answer with a generic 500."""
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, UnknownError.default_message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecordError, record_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
