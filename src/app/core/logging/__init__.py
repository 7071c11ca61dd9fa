"""Logging module with structured logging and request tracking."""

from app.core.logging.middleware import RequestLoggingMiddleware, redact_query


__all__ = [
    "RequestLoggingMiddleware",
    "redact_query",
]
