"""
Application exceptions and the handlers that render them.

Services raise the AppException subclasses below. Every error leaves the
API as `{"error", "correlation_id", "details"?}` so the frontend can show
`error` directly and support can trace `correlation_id` through the logs.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shutterconnect.lib.logging import get_correlation_id, get_logger

logger = get_logger(__name__)

INVALID_INPUT_MESSAGE = "Invalid input data"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.headers = headers
        super().__init__(self.message)


class NotFoundException(AppException):
    """`{resource} not found`, with the id in details when known."""

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        super().__init__(
            message=f"{resource} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "resource_id": resource_id} if resource_id else None,
        )


class UnauthorizedException(AppException):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class ForbiddenException(AppException):
    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class BadRequestException(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class ConflictException(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_409_CONFLICT, details)


class TooManyRequestsException(AppException):
    """A resend cooldown has not elapsed yet."""

    def __init__(self, message: str, retry_after_seconds: Optional[int] = None):
        super().__init__(
            message,
            status.HTTP_429_TOO_MANY_REQUESTS,
            details={"retry_after_seconds": retry_after_seconds} if retry_after_seconds else None,
            headers={"Retry-After": str(retry_after_seconds)} if retry_after_seconds else None,
        )


class InternalErrorException(AppException):
    """A downstream dependency such as email delivery failed."""

    def __init__(self, message: str):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or get_correlation_id() or "unknown"


def error_response(
    request: Request,
    status_code: int,
    error: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Render the shared error body."""
    content: Dict[str, Any] = {
        "error": error,
        "correlation_id": _correlation_id(request),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    logger.log(
        logging.WARNING if exc.status_code < 500 else logging.ERROR,
        f"Application error: {exc.message}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
        },
    )
    return error_response(request, exc.status_code, exc.message, exc.details, exc.headers)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Every invalid payload, query or path parameter is reported as 400
    "Invalid input data" with the per-field errors under details.
    """
    errors = [
        {
            "loc": [str(part) for part in error["loc"]],
            "msg": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning(
        "Validation error",
        extra={"path": request.url.path, "method": request.method, "errors": errors},
    )
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        INVALID_INPUT_MESSAGE,
        {"errors": errors},
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Unknown routes (404) and wrong methods (405)."""
    logger.warning(
        f"HTTP exception: {exc.detail}",
        extra={"status_code": exc.status_code, "path": request.url.path, "method": request.method},
    )
    return error_response(
        request,
        exc.status_code,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the stack trace; the client only sees a generic message."""
    logger.error(
        f"Unhandled exception: {exc}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
