"""Launch authentication: token verification, identity resolution, context."""

from app.core.auth.backend import create_launch_token, verify_launch_token
from app.core.auth.context import AuthContext, build_auth_context
from app.core.auth.exceptions import (
    InvalidLaunchTokenError,
    InvalidLocationError,
    InvalidUserError,
    MissingLaunchParametersError,
)
from app.core.auth.resolver import IdentityRepository, IdentityResolver, ResolvedIdentity
from app.core.auth.schemas import AuthContextResponse, LaunchTokenClaims


__all__ = [
    # Context
    "AuthContext",
    "AuthContextResponse",
    # Resolution
    "IdentityRepository",
    "IdentityResolver",
    # Errors
    "InvalidLaunchTokenError",
    "InvalidLocationError",
    "InvalidUserError",
    # Tokens
    "LaunchTokenClaims",
    "MissingLaunchParametersError",
    "ResolvedIdentity",
    "build_auth_context",
    "create_launch_token",
    "verify_launch_token",
]
