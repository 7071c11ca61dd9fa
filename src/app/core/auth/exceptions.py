"""Launch authentication failures.

Every failure here short-circuits the request before business logic
runs. None of them is retried.
"""

from app.core.errors import BadRequestError, UnauthorizedError


class MissingLaunchParametersError(BadRequestError):
    """The request did not carry both launch identifiers."""

    message = "Missing required parameters: location and user"
    error_code = "missing_parameters"


class InvalidLaunchTokenError(UnauthorizedError):
    """The signed launch token is malformed, expired, forged or mismatched."""

    message = "Invalid verification token"
    error_code = "invalid_token"


class InvalidLocationError(UnauthorizedError):
    """The location identifier is unknown, inactive, or its tenant is inactive."""

    message = "Invalid or inactive location"
    error_code = "invalid_location"


class InvalidUserError(UnauthorizedError):
    """The user identifier does not resolve to an active technician
    under the resolved location."""

    message = "Invalid or inactive user"
    error_code = "invalid_user"
