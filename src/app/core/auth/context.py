"""Per-request launch context.

Built once per request from a resolved identity and handed to every
downstream handler. Handlers never look at raw launch identifiers.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from app.core.permissions.checker import (
    can_access_technician,
    can_manage_integrations,
    derive_permissions,
    has_full_visibility,
)
from app.core.permissions.models import Capability, PermissionSet, Role


if TYPE_CHECKING:
    from app.core.auth.resolver import ResolvedIdentity
    from app.modules.embedding.models import LocationMapping, UserMapping
    from app.modules.technicians.models import Technician
    from app.modules.tenants.models import Tenant


@dataclass(frozen=True)
class AuthContext:
    """Who is acting, for which tenant, with which role and capabilities."""

    tenant: "Tenant"
    technician: "Technician"
    role: Role
    permissions: PermissionSet
    location_mapping: "LocationMapping"
    user_mapping: "UserMapping"

    @property
    def tenant_id(self) -> UUID:
        return self.tenant.id

    @property
    def technician_id(self) -> UUID:
        return self.technician.id

    def is_manager_or_admin(self) -> bool:
        """Managers and admins act with tenant-wide visibility."""
        return has_full_visibility(self.role)

    def is_admin(self) -> bool:
        return can_manage_integrations(self.role)

    def is_self(self, technician_id: UUID) -> bool:
        """Whether the given technician is the one acting."""
        return self.technician.id == technician_id

    def can_access_technician(self, technician_id: UUID) -> bool:
        return can_access_technician(self.role, self.technician.id, technician_id)

    def has_capability(self, capability: Capability) -> bool:
        return self.permissions.allows(capability)


def build_auth_context(identity: "ResolvedIdentity") -> AuthContext:
    """Assemble the request context from a resolved identity."""
    grant = derive_permissions(identity.user_mapping)
    return AuthContext(
        tenant=identity.tenant,
        technician=identity.technician,
        role=grant.role,
        permissions=grant.permissions,
        location_mapping=identity.location_mapping,
        user_mapping=identity.user_mapping,
    )
