"""Embedding onboarding service.

Creates location and user mappings for the caller's own tenant and
issues signed launch URLs for testing an integration end to end.
"""

from datetime import UTC, datetime, timedelta
from typing import Annotated
from urllib.parse import urlencode
from uuid import UUID

import structlog
from fastapi import Depends

from app.config import settings
from app.core.auth.backend import create_launch_token
from app.core.errors import ConflictError, NotFoundError
from app.core.permissions.models import PermissionSet
from app.core.utils.text import mask_identifier
from app.modules.embedding.models import LocationMapping, UserMapping
from app.modules.embedding.repos import LaunchMappingRepo
from app.modules.embedding.schemas import (
    LaunchUrlRequest,
    LaunchUrlResponse,
    LocationMappingCreate,
    UserMappingCreate,
)
from app.modules.technicians.repos import TechnicianRepo


logger = structlog.get_logger()


def build_launch_url(
    location_id: str,
    user_id: str,
    base_url: str | None = None,
    expires_minutes: int | None = None,
) -> LaunchUrlResponse:
    """Build a signed launch URL for one location/user pair.

    Args:
        location_id: External location identifier
        user_id: External user identifier
        base_url: Dashboard URL, defaults to the configured one
        expires_minutes: Token lifetime, defaults to the configured one

    Returns:
        The URL, the token it carries and when the token expires
    """
    minutes = expires_minutes or settings.launch_token_expire_minutes
    expires_delta = timedelta(minutes=minutes)
    expires_at = datetime.now(UTC) + expires_delta

    token = create_launch_token(location_id, user_id, expires_delta=expires_delta)
    query = urlencode({"location": location_id, "user": user_id, "token": token})
    base = (base_url or settings.launch_base_url).rstrip("/")

    return LaunchUrlResponse(
        url=f"{base}/?{query}",
        token=token,
        expires_at=expires_at,
    )


class EmbeddingService:
    """Service for onboarding locations and users of the host platform."""

    def __init__(
        self,
        repo: LaunchMappingRepo,
        technicians: TechnicianRepo,
    ) -> None:
        self.repo = repo
        self.technicians = technicians

    async def create_location_mapping(
        self, data: LocationMappingCreate, tenant_id: UUID
    ) -> LocationMapping:
        """Map an external location to a tenant.

        Raises:
            ConflictError: If the external location is already mapped
        """
        existing = await self.repo.find_location_mapping(data.external_location_id)
        if existing:
            raise ConflictError(
                "Location already mapped",
                error_code="location_exists",
                details={"location": mask_identifier(data.external_location_id)},
            )

        mapping = await self.repo.create_location_mapping(
            LocationMapping(
                tenant_id=tenant_id,
                external_location_id=data.external_location_id,
                location_name=data.location_name,
                is_active=data.is_active,
            )
        )
        logger.info(
            "location_mapping_created",
            location_mapping_id=str(mapping.id),
            location=mask_identifier(mapping.external_location_id),
        )
        return mapping

    async def list_location_mappings(self, tenant_id: UUID) -> list[LocationMapping]:
        return await self.repo.list_location_mappings(tenant_id)

    async def create_user_mapping(
        self, data: UserMappingCreate, tenant_id: UUID
    ) -> UserMapping:
        """Map an external user to a technician under one location.

        Both the location mapping and the technician must belong to the
        caller's tenant.

        Raises:
            NotFoundError: If the location or technician is not in the tenant
            ConflictError: If the external user is already mapped
        """
        location = await self.repo.get_location_mapping(
            data.location_mapping_id, tenant_id
        )
        if not location:
            raise NotFoundError(
                "Location mapping not found",
                resource="location_mapping",
                resource_id=str(data.location_mapping_id),
            )

        technician = await self.technicians.get_by_id(data.technician_id, tenant_id)
        if not technician:
            raise NotFoundError(
                "Technician not found",
                resource="technician",
                resource_id=str(data.technician_id),
            )

        existing = await self.repo.get_user_mapping_by_external_id(
            data.external_user_id
        )
        if existing:
            raise ConflictError(
                "User already mapped",
                error_code="user_exists",
                details={"user": mask_identifier(data.external_user_id)},
            )

        mapping = UserMapping(
            external_user_id=data.external_user_id,
            technician_id=technician.id,
            location_mapping_id=location.id,
            role=data.role,
            is_active=data.is_active,
        )
        mapping.grant(data.permissions or PermissionSet())
        mapping = await self.repo.create_user_mapping(mapping)

        logger.info(
            "user_mapping_created",
            user_mapping_id=str(mapping.id),
            technician_id=str(technician.id),
            role=mapping.role.value,
        )
        return mapping

    async def list_user_mappings(
        self, tenant_id: UUID, location_mapping_id: UUID | None = None
    ) -> list[UserMapping]:
        return await self.repo.list_user_mappings(tenant_id, location_mapping_id)

    async def issue_launch_url(
        self, data: LaunchUrlRequest, tenant_id: UUID
    ) -> LaunchUrlResponse:
        """Issue a signed launch URL for testing an integration.

        Only pairs that resolve inside the caller's tenant are signed, so
        an admin cannot mint launches for another tenant.

        Raises:
            NotFoundError: If the location is not mapped to the tenant or
                the user is not mapped under that location
        """
        location = await self.repo.find_location_mapping(data.location_id)
        if location is None or location.tenant_id != tenant_id:
            raise NotFoundError(
                "Location mapping not found",
                resource="location_mapping",
                resource_id=mask_identifier(data.location_id),
            )

        user = await self.repo.find_user_mapping(data.user_id, location.id)
        if user is None:
            raise NotFoundError(
                "User mapping not found",
                resource="user_mapping",
                resource_id=mask_identifier(data.user_id),
            )

        logger.info(
            "launch_url_issued",
            location=mask_identifier(data.location_id),
            user=mask_identifier(data.user_id),
        )
        return build_launch_url(
            data.location_id,
            data.user_id,
            base_url=data.base_url,
            expires_minutes=data.expires_minutes,
        )


# Type alias for dependency injection
EmbeddingSvc = Annotated[EmbeddingService, Depends(EmbeddingService)]
