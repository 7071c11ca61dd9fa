"""Embedding onboarding API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import Query, status

from app.core.auth.dependencies import AdminAuth, CurrentAuth, ManagerAuth
from app.core.permissions import Role, require_role
from app.core.schemas import DataResponse
from app.modules.embedding import router
from app.modules.embedding.schemas import (
    LaunchUrlRequest,
    LaunchUrlResponse,
    LocationMappingCreate,
    LocationMappingResponse,
    UserMappingCreate,
    UserMappingResponse,
)
from app.modules.embedding.services import EmbeddingSvc


# ============================================================
# Location Mappings
# ============================================================


@router.get(
    "/locations",
    response_model=DataResponse[list[LocationMappingResponse]],
    summary="List location mappings",
    description="List the external locations mapped to the caller's tenant.",
)
async def list_locations(
    auth: ManagerAuth,
    service: EmbeddingSvc,
) -> DataResponse[list[LocationMappingResponse]]:
    mappings = await service.list_location_mappings(auth.tenant_id)
    return DataResponse(
        data=[LocationMappingResponse.model_validate(m) for m in mappings]
    )


@router.post(
    "/locations",
    response_model=DataResponse[LocationMappingResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Map a location",
    description="Map an external location to the caller's tenant. Admin only.",
)
async def create_location(
    data: LocationMappingCreate,
    auth: AdminAuth,
    service: EmbeddingSvc,
) -> DataResponse[LocationMappingResponse]:
    mapping = await service.create_location_mapping(data, auth.tenant_id)
    return DataResponse(
        data=LocationMappingResponse.model_validate(mapping),
        message="Location mapped",
    )


# ============================================================
# User Mappings
# ============================================================


@router.get(
    "/users",
    response_model=DataResponse[list[UserMappingResponse]],
    summary="List user mappings",
    description="List the external users mapped within the caller's tenant.",
)
async def list_users(
    auth: ManagerAuth,
    service: EmbeddingSvc,
    location_mapping_id: Annotated[UUID | None, Query()] = None,
) -> DataResponse[list[UserMappingResponse]]:
    mappings = await service.list_user_mappings(auth.tenant_id, location_mapping_id)
    return DataResponse(data=[UserMappingResponse.model_validate(m) for m in mappings])


@router.post(
    "/users",
    response_model=DataResponse[UserMappingResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Map a user",
    description=(
        "Map an external user to a technician under one of the caller's "
        "locations, with a role and explicit permissions. Admin only."
    ),
)
async def create_user(
    data: UserMappingCreate,
    auth: AdminAuth,
    service: EmbeddingSvc,
) -> DataResponse[UserMappingResponse]:
    mapping = await service.create_user_mapping(data, auth.tenant_id)
    return DataResponse(
        data=UserMappingResponse.model_validate(mapping),
        message="User mapped",
    )


# ============================================================
# Launch URLs
# ============================================================


@router.post(
    "/launch-url",
    response_model=DataResponse[LaunchUrlResponse],
    summary="Issue a launch URL",
    description=(
        "Issue a signed launch URL for a location and user mapped in the "
        "caller's tenant. Admin only."
    ),
)
@require_role(Role.ADMIN)
async def create_launch_url(
    data: LaunchUrlRequest,
    auth: CurrentAuth,
    service: EmbeddingSvc,
) -> DataResponse[LaunchUrlResponse]:
    """Issue a signed launch URL."""
    return DataResponse(data=await service.issue_launch_url(data, auth.tenant_id))
