"""Signed launch tokens.

The embedding platform may attach a short-lived HS256 JWT to a launch
URL. When present it must verify; when absent the launch proceeds on
identifier resolution alone. Verification is stateless.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from app.config import settings
from app.core.auth.exceptions import InvalidLaunchTokenError
from app.core.auth.schemas import LaunchTokenClaims
from app.core.constants import LAUNCH_TOKEN_ISSUER


def create_launch_token(
    location_id: str,
    user_id: str,
    expires_delta: timedelta | None = None,
    secret: str | None = None,
) -> str:
    """Create a launch token bound to one location/user pair.

    Args:
        location_id: External location identifier
        user_id: External user identifier
        expires_delta: Optional custom expiration time
        secret: Signing secret, defaults to the configured one

    Returns:
        Encoded JWT
    """
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.launch_token_expire_minutes)

    to_encode: dict[str, Any] = {
        "location_id": location_id,
        "user_id": user_id,
        "iss": LAUNCH_TOKEN_ISSUER,
        "iat": now,
        "exp": now + expires_delta,
    }

    return jwt.encode(
        to_encode,
        secret or settings.launch_token_secret,
        algorithm=settings.jwt_algorithm,
    )


def verify_launch_token(
    token: str,
    secret: str,
    *,
    location_id: str | None = None,
    user_id: str | None = None,
) -> LaunchTokenClaims:
    """Verify a launch token.

    Bad signatures, expired or malformed tokens fail, as do tokens
    without an expiry. A token that names a location or user also fails
    when presented with different launch identifiers.

    Args:
        token: The encoded token
        secret: The shared signing secret
        location_id: Launch location to check the token against
        user_id: Launch user to check the token against

    Returns:
        The verified claims

    Raises:
        InvalidLaunchTokenError: If the token does not verify
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
            options={"require_exp": True},
        )
        claims = LaunchTokenClaims(
            location_id=payload.get("location_id"),
            user_id=payload.get("user_id"),
            issuer=payload.get("iss"),
            exp=payload.get("exp"),
        )
    except (JWTError, PydanticValidationError) as exc:
        raise InvalidLaunchTokenError() from exc

    if claims.location_id and location_id and claims.location_id != location_id:
        raise InvalidLaunchTokenError(details={"reason": "location_mismatch"})
    if claims.user_id and user_id and claims.user_id != user_id:
        raise InvalidLaunchTokenError(details={"reason": "user_mismatch"})

    return claims
