"""Database layer - session management, base models, and mixins."""

from app.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin
from app.core.database.session import (
    async_engine,
    async_session_factory,
    build_engine,
    enable_sqlite_savepoints,
    get_db,
    get_session_factory,
)


__all__ = [
    "Base",
    "TenantMixin",
    "TimestampMixin",
    "UUIDMixin",
    "async_engine",
    "async_session_factory",
    "build_engine",
    "enable_sqlite_savepoints",
    "get_db",
    "get_session_factory",
]
