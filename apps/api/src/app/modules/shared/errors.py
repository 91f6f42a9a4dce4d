"""
Service Errors

Base exception hierarchy raised by service layers and converted to
structured HTTP errors by the routers.
"""

from typing import NoReturn

from fastapi import HTTPException


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ValidationError(ServiceError):
    """Raised for malformed input that Pydantic cannot catch at the boundary."""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message=message, error_code=error_code, status_code=422)


class NotFoundError(ServiceError):
    """Raised when a referenced record does not exist."""

    def __init__(self, message: str, error_code: str = "NOT_FOUND"):
        super().__init__(message=message, error_code=error_code, status_code=404)


class ForbiddenError(ServiceError):
    """Raised when the caller may not act on a record."""

    def __init__(self, message: str = "You are not allowed to access this record."):
        super().__init__(message=message, error_code="FORBIDDEN", status_code=403)


def raise_http_error(e: ServiceError) -> NoReturn:
    """Convert a service error to an HTTPException."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    ) from e
