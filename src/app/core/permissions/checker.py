"""Role and permission derivation.

Everything here is a pure function of what is stored on a user mapping.
Changing a user's effective permissions means updating that mapping.
"""

from typing import Protocol
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.permissions.models import (
    FULL_VISIBILITY_ROLES,
    PermissionSet,
    Role,
)


class GrantSource(Protocol):
    """Anything carrying a stored role and capability columns."""

    role: Role

    @property
    def permissions(self) -> PermissionSet: ...


class RoleGrant(BaseModel):
    """Role and capabilities resolved for one launched user.

    Attributes:
        role: The stored role
        permissions: The stored capability set
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    permissions: PermissionSet


def derive_permissions(user_mapping: GrantSource) -> RoleGrant:
    """Derive the role grant for a user mapping.

    Args:
        user_mapping: The resolved user mapping

    Returns:
        The role and capability set stored on the mapping
    """
    return RoleGrant(
        role=Role(user_mapping.role or Role.TECHNICIAN),
        permissions=user_mapping.permissions,
    )


def has_full_visibility(role: Role) -> bool:
    """Managers and admins see every technician of their tenant."""
    return role in FULL_VISIBILITY_ROLES


def can_access_technician(
    role: Role,
    own_technician_id: UUID,
    technician_id: UUID,
) -> bool:
    """Check whether a user may see another technician's data.

    Args:
        role: The acting user's role
        own_technician_id: The technician the acting user is mapped to
        technician_id: The technician whose data is requested

    Returns:
        True for managers/admins, or when the technician is the actor
    """
    if has_full_visibility(role):
        return True
    return own_technician_id == technician_id


def can_manage_integrations(role: Role) -> bool:
    """Only admins may onboard locations and users."""
    return role == Role.ADMIN

