"""Domain exceptions for the application.

These exceptions represent business-logic errors and are automatically
converted to `{"success": false, ...}` responses by the exception handlers.
The status code encodes the failure category clients branch on: 400 for
caller errors, 401 for "who are you", 403 for "you can't do that", 503
for transient faults worth retrying.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class BadRequestError(AppException):
    """Raised for caller errors such as missing parameters.

    Example:
        raise BadRequestError("Prompt purpose does not match")
    """

    message = "Bad request"
    error_code = "bad_request"
    status_code = 400


class UnauthorizedError(AppException):
    """Raised when the caller cannot be identified.

    Terminal for the request; the caller has to relaunch from the host.

    Example:
        raise UnauthorizedError("Invalid or inactive user")
    """

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401


class ForbiddenError(AppException):
    """Raised when an identified caller may not perform an action.

    Example:
        raise ForbiddenError(
            "You can only activate system prompts or your own prompts",
            details={"prompt_id": str(prompt_id)},
        )
    """

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403


class NotFoundError(AppException):
    """Raised when a requested resource is not found.

    Example:
        raise NotFoundError("Prompt not found", resource="prompt", resource_id=str(pid))
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when a write collides with existing data.

    Example:
        raise ConflictError("Location already mapped", details={"location": masked})
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class ValidationError(AppException):
    """Raised when request data fails validation.

    Example:
        raise ValidationError(
            "Invalid permissions",
            errors=[{"field": "permissions.can_fly", "message": "Unknown capability"}]
        )
    """

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class ServiceUnavailableError(AppException):
    """Raised when a transient fault prevents completing the request.

    Example:
        raise ServiceUnavailableError("Activation is busy, try again")
    """

    message = "Service temporarily unavailable"
    error_code = "service_unavailable"
    status_code = 503

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        details.setdefault("retryable", True)
        super().__init__(message=message, details=details, **kwargs)


class RequestTimeoutError(ServiceUnavailableError):
    """Raised when a store round trip exceeds the request budget.

    Example:
        raise RequestTimeoutError(details={"operation": "activate"})
    """

    message = "The request timed out, please retry"
    error_code = "timeout"
