"""Request logging middleware.

This module provides middleware for logging all HTTP requests and responses
with structured logging via structlog. Launch identifiers are masked and
launch tokens are never written to the log.
"""

import time
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from app.core.utils.text import mask_identifier


logger = structlog.get_logger()

# Query parameters carrying launch identifiers or secrets
MASKED_QUERY_PARAMS = frozenset({"location", "user"})
DROPPED_QUERY_PARAMS = frozenset({"token"})


def redact_query(request: Request) -> dict[str, str] | None:
    """Return the query parameters safe for logging.

    Args:
        request: The incoming request

    Returns:
        Query parameters with identifiers masked and tokens removed,
        or None when the request had no query string
    """
    if not request.url.query:
        return None

    redacted: dict[str, str] = {}
    for key, value in request.query_params.items():
        if key in DROPPED_QUERY_PARAMS:
            continue
        if key in MASKED_QUERY_PARAMS:
            redacted[key] = mask_identifier(value) or ""
        else:
            redacted[key] = value
    return redacted


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs all HTTP requests and responses.

    Logs include:
    - Request method, path, and redacted query parameters
    - Response status code
    - Request duration
    - Request ID (if set by RequestIdMiddleware)
    - Technician ID and tenant ID (once the launch resolved)
    """

    def __init__(
        self,
        app: Any,
        exclude_paths: list[str] | None = None,
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application
            exclude_paths: Paths to exclude from logging (e.g., health checks)
        """
        super().__init__(app)
        self.exclude_paths = exclude_paths or [
            "/health/live",
            "/health/ready",
            "/docs",
            "/redoc",
            "/openapi.json",
        ]

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process the request and log details.

        Args:
            request: The incoming request
            call_next: The next middleware/handler

        Returns:
            The response from the handler
        """
        if any(request.url.path.startswith(path) for path in self.exclude_paths):
            return await call_next(request)

        start_time = time.perf_counter()

        request_id = getattr(request.state, "request_id", None)
        method = request.method
        path = request.url.path

        log_data: dict[str, Any] = {
            "method": method,
            "path": path,
            "client_ip": request.client.host if request.client else None,
        }

        query = redact_query(request)
        if query:
            log_data["query"] = query

        if request_id:
            log_data["request_id"] = request_id

        logger.info("request_started", **log_data)

        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                "request_failed",
                method=method,
                path=path,
                duration_ms=round(duration_ms, 2),
                error=str(exc),
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        completion_data: dict[str, Any] = {
            "method": method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }

        if request_id:
            completion_data["request_id"] = request_id

        # Add launch context if the request resolved one
        technician_id = getattr(request.state, "technician_id", None)
        tenant_id = getattr(request.state, "tenant_id", None)

        if technician_id:
            completion_data["technician_id"] = str(technician_id)
        if tenant_id:
            completion_data["tenant_id"] = str(tenant_id)

        # Choose log level based on status code
        if response.status_code >= 500:
            logger.error("request_completed", **completion_data)
        elif response.status_code >= 400:
            logger.warning("request_completed", **completion_data)
        else:
            logger.info("request_completed", **completion_data)

        return response
