"""Core services and cross-cutting concerns."""

from app.core.database import Base, get_db
from app.core.errors import (
    AppException,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    RequestTimeoutError,
    ServiceUnavailableError,
    UnauthorizedError,
    register_exception_handlers,
)


__all__ = [
    # Errors
    "AppException",
    "BadRequestError",
    # Database
    "Base",
    "ForbiddenError",
    "NotFoundError",
    "RequestTimeoutError",
    "ServiceUnavailableError",
    "UnauthorizedError",
    "get_db",
    "register_exception_handlers",
]
