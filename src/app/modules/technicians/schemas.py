"""Pydantic schemas for technician responses."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class TechnicianResponse(BaseModel):
    """Schema for technician responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    name: str
    email: str | None
    crm_code: str | None
    persona: dict[str, Any] | None
    is_active: bool
    created_at: datetime
