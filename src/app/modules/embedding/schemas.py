"""Pydantic schemas for embedding onboarding."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import MAX_EXTERNAL_ID_LENGTH, MAX_NAME_LENGTH
from app.core.permissions.models import PermissionSet, Role


# ============================================================
# Location Mappings
# ============================================================


class LocationMappingCreate(BaseModel):
    """Schema for mapping an external location to the caller's tenant."""

    model_config = ConfigDict(extra="forbid")

    external_location_id: str = Field(
        ..., min_length=1, max_length=MAX_EXTERNAL_ID_LENGTH
    )
    location_name: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    is_active: bool = True


class LocationMappingResponse(BaseModel):
    """Schema for location mapping responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    external_location_id: str
    location_name: str | None
    is_active: bool
    created_at: datetime


# ============================================================
# User Mappings
# ============================================================


class UserMappingCreate(BaseModel):
    """Schema for mapping an external user to a technician.

    Unknown permission keys are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    external_user_id: str = Field(..., min_length=1, max_length=MAX_EXTERNAL_ID_LENGTH)
    technician_id: UUID
    location_mapping_id: UUID
    role: Role = Role.TECHNICIAN
    permissions: PermissionSet | None = None
    is_active: bool = True


class UserMappingResponse(BaseModel):
    """Schema for user mapping responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    external_user_id: str
    technician_id: UUID
    location_mapping_id: UUID
    role: Role
    permissions: PermissionSet
    is_active: bool
    last_access_at: datetime | None
    failed_access_attempts: int
    created_at: datetime


# ============================================================
# Launch URLs
# ============================================================


class LaunchUrlRequest(BaseModel):
    """Schema for issuing a signed launch URL."""

    location_id: str = Field(..., min_length=1, max_length=MAX_EXTERNAL_ID_LENGTH)
    user_id: str = Field(..., min_length=1, max_length=MAX_EXTERNAL_ID_LENGTH)
    base_url: str | None = None
    expires_minutes: int | None = Field(None, ge=1, le=24 * 60)


class LaunchUrlResponse(BaseModel):
    """A signed launch URL and the token it carries."""

    url: str
    token: str
    expires_at: datetime
