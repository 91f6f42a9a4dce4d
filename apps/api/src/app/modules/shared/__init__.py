"""
Shared module - Base model and service error types used by every domain module.
"""

from app.modules.shared.errors import (
    ForbiddenError,
    NotFoundError,
    ServiceError,
    ValidationError,
    raise_http_error,
)
from app.modules.shared.models import BaseModel

__all__ = [
    "BaseModel",
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "ForbiddenError",
    "raise_http_error",
]
