"""Technician service: visibility-checked reads."""

from typing import TYPE_CHECKING, Annotated
from uuid import UUID

from fastapi import Depends

from app.core.errors import ForbiddenError, NotFoundError
from app.modules.technicians.models import Technician
from app.modules.technicians.repos import TechnicianRepo


if TYPE_CHECKING:
    from app.core.auth.context import AuthContext


class TechnicianService:
    """Service for reading technicians under the caller's visibility.

    Managers and admins see every technician of their tenant; a
    technician sees only themselves.
    """

    def __init__(self, repo: TechnicianRepo) -> None:
        self.repo = repo

    async def list_visible(self, auth: "AuthContext") -> list[Technician]:
        """List the technicians the caller may see."""
        if auth.is_manager_or_admin():
            return await self.repo.list_by_tenant(auth.tenant_id)
        return [auth.technician]

    async def get_visible(self, technician_id: UUID, auth: "AuthContext") -> Technician:
        """Get one technician the caller may see.

        Raises:
            ForbiddenError: If the caller may not see this technician
            NotFoundError: If the technician is not in the caller's tenant
        """
        if not auth.can_access_technician(technician_id):
            raise ForbiddenError(
                "You can only view your own data",
                details={"technician_id": str(technician_id)},
            )

        technician = await self.repo.get_by_id(technician_id, auth.tenant_id)
        if not technician:
            raise NotFoundError(
                "Technician not found",
                resource="technician",
                resource_id=str(technician_id),
            )
        return technician


# Type alias for dependency injection
TechnicianSvc = Annotated[TechnicianService, Depends(TechnicianService)]
