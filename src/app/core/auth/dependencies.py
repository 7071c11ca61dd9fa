"""FastAPI dependencies for launch authentication.

This module provides FastAPI dependency injection functions for:
- Verifying the optional launch token
- Resolving launch identifiers into an AuthContext
- Requiring manager or admin roles
"""

from typing import Annotated

import structlog
from fastapi import Depends, Query, Request

from app.api.dependencies import DBSession, SessionFactory
from app.config import settings
from app.core.auth.backend import verify_launch_token
from app.core.auth.context import AuthContext, build_auth_context
from app.core.auth.exceptions import (
    InvalidLaunchTokenError,
    MissingLaunchParametersError,
)
from app.core.auth.resolver import IdentityResolver
from app.core.errors import ForbiddenError


async def get_auth_context(
    request: Request,
    db: DBSession,
    session_factory: SessionFactory,
    location: Annotated[
        str | None, Query(description="External location identifier")
    ] = None,
    user: Annotated[str | None, Query(description="External user identifier")] = None,
    token: Annotated[str | None, Query(description="Signed launch token")] = None,
) -> AuthContext:
    """Authenticate a launch request.

    Checks that both identifiers are present, verifies the token if one
    was sent, resolves the identifiers, and attaches the resulting
    context to the request and the log context.

    Raises:
        MissingLaunchParametersError: If location or user is missing
        InvalidLaunchTokenError: If the token does not verify
        InvalidLocationError: If the location does not resolve
        InvalidUserError: If the user does not resolve under the location
    """
    if not location or not user:
        raise MissingLaunchParametersError()

    if token:
        verify_launch_token(
            token,
            settings.launch_token_secret,
            location_id=location,
            user_id=user,
        )
    elif settings.require_launch_token:
        raise InvalidLaunchTokenError(
            "Missing verification token",
            error_code="missing_token",
        )

    from app.modules.embedding.repos import LaunchMappingRepository  # noqa: PLC0415

    resolver = IdentityResolver(
        LaunchMappingRepository(db, session_factory),
        timeout_seconds=settings.request_timeout_seconds,
    )
    identity = await resolver.resolve(location, user)
    auth = build_auth_context(identity)

    request.state.auth = auth
    request.state.tenant_id = auth.tenant_id
    request.state.technician_id = auth.technician_id

    structlog.contextvars.bind_contextvars(
        tenant_id=str(auth.tenant_id),
        technician_id=str(auth.technician_id),
        user_role=auth.role.value,
    )

    return auth


async def get_manager_context(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> AuthContext:
    """Require a manager or admin launch.

    Raises:
        ForbiddenError: If the caller is a plain technician
    """
    if not auth.is_manager_or_admin():
        raise ForbiddenError(
            "Manager or admin privileges required",
            error_code="manager_required",
        )
    return auth


async def get_admin_context(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> AuthContext:
    """Require an admin launch.

    Raises:
        ForbiddenError: If the caller is not an admin
    """
    if not auth.is_admin():
        raise ForbiddenError(
            "Admin privileges required",
            error_code="admin_required",
        )
    return auth


# Type aliases for cleaner dependency injection
CurrentAuth = Annotated[AuthContext, Depends(get_auth_context)]
ManagerAuth = Annotated[AuthContext, Depends(get_manager_context)]
AdminAuth = Annotated[AuthContext, Depends(get_admin_context)]
