"""Permission decorators for route protection.

This module provides decorators that can be applied to FastAPI
routes to require a role on the resolved launch context. The decorated
route must take the context as ``auth``.
"""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar, cast

import structlog

from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.permissions.models import Role


if TYPE_CHECKING:
    from app.core.auth.context import AuthContext


logger = structlog.get_logger()

P = ParamSpec("P")
R = TypeVar("R")


def _get_auth(kwargs: dict[str, Any]) -> "AuthContext":
    """Extract the launch context from route kwargs.

    Raises:
        UnauthorizedError: If the route was called without a context
    """
    auth = cast("AuthContext | None", kwargs.get("auth"))
    if auth is None:
        raise UnauthorizedError(
            "Authentication required",
            error_code="auth_required",
        )
    return auth


def require_role(
    *roles: Role,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires one of the given roles.

    Usage:
        @router.post("/embedding/launch-url")
        @require_role(Role.ADMIN)
        async def build_launch_url(data: LaunchUrlRequest, auth: CurrentAuth):
            ...

    Args:
        roles: Roles allowed to call the route

    Returns:
        Decorator function

    Raises:
        ForbiddenError: If the caller's role is not listed
    """
    allowed = frozenset(roles)

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            auth = _get_auth(kwargs)

            if auth.role not in allowed:
                required = sorted(role.value for role in allowed)
                logger.warning(
                    "role_denied",
                    role=auth.role.value,
                    required_roles=required,
                )
                raise ForbiddenError(
                    f"Requires role: {', '.join(required)}",
                    error_code="role_denied",
                    details={"required_roles": required},
                )

            return await func(*args, **kwargs)

        return wrapper

    return decorator

