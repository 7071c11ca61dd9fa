"""Technician repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select

from app.api.dependencies import DBSession
from app.modules.technicians.models import Technician


class TechnicianRepository:
    """Repository for Technician database operations.

    All queries are scoped to a tenant when appropriate.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def get_by_id(
        self, technician_id: UUID, tenant_id: UUID | None = None
    ) -> Technician | None:
        """Get a technician by ID.

        Args:
            technician_id: The technician's UUID
            tenant_id: Optional tenant ID for scoping

        Returns:
            Technician if found, None otherwise
        """
        stmt = select(Technician).where(Technician.id == technician_id)
        if tenant_id:
            stmt = stmt.where(Technician.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_tenant(
        self, tenant_id: UUID, *, active_only: bool = True
    ) -> list[Technician]:
        """List the technicians of a tenant ordered by name.

        Args:
            tenant_id: The tenant's UUID
            active_only: Skip deactivated technicians

        Returns:
            Technicians of the tenant
        """
        stmt = select(Technician).where(Technician.tenant_id == tenant_id)
        if active_only:
            stmt = stmt.where(Technician.is_active == True)  # noqa: E712
        stmt = stmt.order_by(Technician.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, technician: Technician) -> Technician:
        """Create a new technician.

        Args:
            technician: Technician instance to create

        Returns:
            The created technician with ID populated
        """
        self.session.add(technician)
        await self.session.flush()
        await self.session.refresh(technician)
        return technician


# Type alias for dependency injection
TechnicianRepo = Annotated[TechnicianRepository, Depends(TechnicianRepository)]
