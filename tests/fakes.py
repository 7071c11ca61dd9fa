"""In-memory stand-ins for the identity store and launch context."""

from datetime import datetime
from uuid import UUID, uuid4

from app.core.auth.context import AuthContext
from app.core.permissions.models import PermissionSet, Role
from app.modules.embedding.models import LocationMapping, UserMapping
from app.modules.technicians.models import Technician
from app.modules.tenants.models import Tenant


class InMemoryIdentityRepository:
    """Dict-backed IdentityRepository.

    Set `fail_bookkeeping` to make access writes raise.
    """

    def __init__(self) -> None:
        self.locations: dict[str, LocationMapping] = {}
        self.users: dict[str, UserMapping] = {}
        self.fail_bookkeeping = False

    def add_tenant(self, name: str = "Acme", *, is_active: bool = True) -> Tenant:
        return Tenant(id=uuid4(), name=name, is_active=is_active)

    def add_location(
        self, external_id: str, tenant: Tenant, *, is_active: bool = True
    ) -> LocationMapping:
        mapping = LocationMapping(
            id=uuid4(),
            tenant_id=tenant.id,
            external_location_id=external_id,
            is_active=is_active,
        )
        mapping.tenant = tenant
        self.locations[external_id] = mapping
        return mapping

    def add_user(
        self,
        external_id: str,
        location: LocationMapping,
        *,
        tenant: Tenant | None = None,
        role: Role = Role.TECHNICIAN,
        is_active: bool = True,
        technician_active: bool = True,
    ) -> UserMapping:
        tenant = tenant or location.tenant
        technician = Technician(
            id=uuid4(),
            tenant_id=tenant.id,
            name=f"Tech {external_id}",
            is_active=technician_active,
        )
        mapping = UserMapping(
            id=uuid4(),
            external_user_id=external_id,
            technician_id=technician.id,
            location_mapping_id=location.id,
            role=role,
            is_active=is_active,
            failed_access_attempts=0,
        )
        mapping.technician = technician
        self.users[external_id] = mapping
        return mapping

    async def find_location_mapping(
        self, external_location_id: str
    ) -> LocationMapping | None:
        return self.locations.get(external_location_id)

    async def find_user_mapping(
        self, external_user_id: str, location_mapping_id: UUID
    ) -> UserMapping | None:
        mapping = self.users.get(external_user_id)
        if mapping and mapping.location_mapping_id == location_mapping_id:
            return mapping
        return None

    async def record_access(self, user_mapping_id: UUID, accessed_at: datetime) -> None:
        if self.fail_bookkeeping:
            raise RuntimeError("store unavailable")
        for mapping in self.users.values():
            if mapping.id == user_mapping_id:
                mapping.last_access_at = accessed_at

    async def record_failed_access(
        self, external_user_id: str, failed_at: datetime
    ) -> None:
        if self.fail_bookkeeping:
            raise RuntimeError("store unavailable")
        mapping = self.users.get(external_user_id)
        if mapping:
            mapping.failed_access_attempts += 1
            mapping.last_failed_access_at = failed_at


def make_auth_context(
    *,
    role: Role = Role.TECHNICIAN,
    permissions: PermissionSet | None = None,
    technician: Technician | None = None,
    tenant: Tenant | None = None,
) -> AuthContext:
    """Build a launch context without touching a store."""
    tenant = tenant or Tenant(id=uuid4(), name="Acme", is_active=True)
    technician = technician or Technician(
        id=uuid4(), tenant_id=tenant.id, name="Terry Tech", is_active=True
    )
    location = LocationMapping(
        id=uuid4(), tenant_id=tenant.id, external_location_id="LOC1", is_active=True
    )
    user_mapping = UserMapping(
        id=uuid4(),
        external_user_id="U1",
        technician_id=technician.id,
        location_mapping_id=location.id,
        role=role,
        is_active=True,
    )
    permissions = permissions or PermissionSet()
    user_mapping.grant(permissions)
    return AuthContext(
        tenant=tenant,
        technician=technician,
        role=role,
        permissions=permissions,
        location_mapping=location,
        user_mapping=user_mapping,
    )
