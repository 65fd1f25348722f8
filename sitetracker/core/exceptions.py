"""Exception handling and custom exceptions."""

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from sitetracker.core.config import get_settings

logger = structlog.get_logger()


class BaseCustomException(Exception):
    """Base class for custom exceptions."""

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationException(BaseCustomException):
    """Missing or malformed required input."""

    def __init__(self, message: str = "Validation error"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class NotFoundException(BaseCustomException):
    """Targeted key absent on get, update or delete."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ConflictException(BaseCustomException):
    """Store reported a failed conditional check."""

    def __init__(self, message: str = "Data already exists"):
        super().__init__(message, status.HTTP_409_CONFLICT)


class StoreException(BaseCustomException):
    """Any other failure raised by the store client."""

    def __init__(self, message: str = "Store operation failed"):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


def _error_response(request: Request, status_code: int, error_type: str, message: str, **extra):
    request_id = getattr(request.state, "request_id", "unknown")
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "type": error_type,
                "message": message,
                "request_id": request_id,
                **extra,
            }
        },
    )


async def custom_exception_handler(request: Request, exc: BaseCustomException) -> JSONResponse:
    """Handle custom exceptions."""
    request_id = getattr(request.state, "request_id", "unknown")

    logger.error(
        "Custom exception occurred",
        request_id=request_id,
        exception_type=type(exc).__name__,
        message=exc.message,
        status_code=exc.status_code,
    )

    message = exc.message
    if isinstance(exc, StoreException) and not get_settings().is_development:
        message = "Internal server error"

    return _error_response(request, exc.status_code, type(exc).__name__, message)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    request_id = getattr(request.state, "request_id", "unknown")

    logger.error(
        "HTTP exception occurred",
        request_id=request_id,
        status_code=exc.status_code,
        detail=exc.detail,
    )

    return _error_response(request, exc.status_code, "HTTPException", exc.detail)


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed path, query or body input as a 400."""
    request_id = getattr(request.state, "request_id", "unknown")

    logger.warning(
        "Request validation failed",
        request_id=request_id,
        errors=exc.errors(),
    )

    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "ValidationException",
        "Validation failed",
        details=jsonable_encoder(exc.errors()),
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle store engine errors that escaped the DAL."""
    request_id = getattr(request.state, "request_id", "unknown")

    logger.error(
        "Database exception occurred",
        request_id=request_id,
        error=str(exc),
    )

    message = str(exc) if get_settings().is_development else "Internal server error"
    return _error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "StoreException", message
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle general exceptions."""
    request_id = getattr(request.state, "request_id", "unknown")

    logger.error(
        "Unhandled exception occurred",
        request_id=request_id,
        exception_type=type(exc).__name__,
        error=str(exc),
    )

    return _error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "InternalServerError", "Internal server error"
    )


def add_exception_handlers(app: FastAPI) -> None:
    """Add exception handlers to the FastAPI app."""
    app.add_exception_handler(BaseCustomException, custom_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
