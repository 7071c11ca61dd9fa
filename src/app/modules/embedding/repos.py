"""Launch mapping repository for database operations."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select, update

from app.api.dependencies import DBSession, SessionFactory
from app.modules.embedding.models import LocationMapping, UserMapping


class LaunchMappingRepository:
    """Repository for location and user mappings.

    Implements the store side of launch resolution and the admin
    onboarding queries. Bookkeeping writes run in their own short
    transaction, committed at once, so the row locks they take are gone
    before the request carries on and a failure there leaves the request
    transaction untouched.
    """

    def __init__(self, session: DBSession, session_factory: SessionFactory) -> None:
        self.session = session
        self.session_factory = session_factory

    # ============================================================
    # Resolution
    # ============================================================

    async def find_location_mapping(
        self, external_location_id: str
    ) -> LocationMapping | None:
        """Get a location mapping by its external identifier.

        Args:
            external_location_id: Hashed location id from the host

        Returns:
            LocationMapping with its tenant loaded, None if unknown
        """
        stmt = select(LocationMapping).where(
            LocationMapping.external_location_id == external_location_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_user_mapping(
        self, external_user_id: str, location_mapping_id: UUID
    ) -> UserMapping | None:
        """Get a user mapping scoped to one location mapping.

        Args:
            external_user_id: Hashed user id from the host
            location_mapping_id: The already-resolved location mapping

        Returns:
            UserMapping with its technician loaded, None if the user is
            unknown or mapped under a different location
        """
        stmt = select(UserMapping).where(
            UserMapping.external_user_id == external_user_id,
            UserMapping.location_mapping_id == location_mapping_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def record_access(self, user_mapping_id: UUID, accessed_at: datetime) -> None:
        """Stamp a successful launch on the user mapping."""
        async with self.session_factory() as session, session.begin():
            await session.execute(
                update(UserMapping)
                .where(UserMapping.id == user_mapping_id)
                .values(last_access_at=accessed_at)
                .execution_options(synchronize_session=False)
            )

    async def record_failed_access(
        self, external_user_id: str, failed_at: datetime
    ) -> None:
        """Count a rejected launch against the mapping with this external id.

        Does nothing when no mapping carries the identifier.
        """
        async with self.session_factory() as session, session.begin():
            await session.execute(
                update(UserMapping)
                .where(UserMapping.external_user_id == external_user_id)
                .values(
                    failed_access_attempts=UserMapping.failed_access_attempts + 1,
                    last_failed_access_at=failed_at,
                )
                .execution_options(synchronize_session=False)
            )

    # ============================================================
    # Onboarding
    # ============================================================

    async def create_location_mapping(
        self, mapping: LocationMapping
    ) -> LocationMapping:
        """Create a new location mapping.

        Args:
            mapping: LocationMapping instance to create

        Returns:
            The created mapping with ID populated
        """
        self.session.add(mapping)
        await self.session.flush()
        await self.session.refresh(mapping)
        return mapping

    async def get_location_mapping(
        self, mapping_id: UUID, tenant_id: UUID | None = None
    ) -> LocationMapping | None:
        """Get a location mapping by ID.

        Args:
            mapping_id: The mapping's UUID
            tenant_id: Optional tenant ID for scoping

        Returns:
            LocationMapping if found, None otherwise
        """
        stmt = select(LocationMapping).where(LocationMapping.id == mapping_id)
        if tenant_id:
            stmt = stmt.where(LocationMapping.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_location_mappings(self, tenant_id: UUID) -> list[LocationMapping]:
        """List the location mappings of a tenant, newest first."""
        stmt = (
            select(LocationMapping)
            .where(LocationMapping.tenant_id == tenant_id)
            .order_by(LocationMapping.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create_user_mapping(self, mapping: UserMapping) -> UserMapping:
        """Create a new user mapping.

        Args:
            mapping: UserMapping instance to create

        Returns:
            The created mapping with ID populated
        """
        self.session.add(mapping)
        await self.session.flush()
        await self.session.refresh(mapping)
        return mapping

    async def get_user_mapping_by_external_id(
        self, external_user_id: str
    ) -> UserMapping | None:
        """Get a user mapping by external identifier, across locations."""
        stmt = select(UserMapping).where(
            UserMapping.external_user_id == external_user_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_user_mappings(
        self,
        tenant_id: UUID,
        location_mapping_id: UUID | None = None,
    ) -> list[UserMapping]:
        """List the user mappings of a tenant.

        Args:
            tenant_id: The tenant's UUID
            location_mapping_id: Optional filter on one location

        Returns:
            User mappings, newest first
        """
        stmt = (
            select(UserMapping)
            .join(
                LocationMapping,
                UserMapping.location_mapping_id == LocationMapping.id,
            )
            .where(LocationMapping.tenant_id == tenant_id)
            .order_by(UserMapping.created_at.desc())
        )
        if location_mapping_id:
            stmt = stmt.where(UserMapping.location_mapping_id == location_mapping_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


# Type alias for dependency injection
LaunchMappingRepo = Annotated[
    LaunchMappingRepository, Depends(LaunchMappingRepository)
]
