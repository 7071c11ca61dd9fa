"""Roles, capabilities and the pure permission checks built on them."""

from app.core.permissions.checker import (
    RoleGrant,
    can_access_technician,
    can_manage_integrations,
    derive_permissions,
    has_full_visibility,
)
from app.core.permissions.decorators import require_role
from app.core.permissions.models import Capability, PermissionSet, Role


__all__ = [
    "Capability",
    "PermissionSet",
    "Role",
    "RoleGrant",
    "can_access_technician",
    "can_manage_integrations",
    "derive_permissions",
    "has_full_visibility",
    "require_role",
]
