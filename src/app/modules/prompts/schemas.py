"""Pydantic schemas for prompt operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.constants import MAX_NAME_LENGTH
from app.modules.prompts.models import PromptPurpose


# ============================================================
# Prompts
# ============================================================


class PromptCreate(BaseModel):
    """Schema for creating a prompt.

    `is_system` is only honored for managers and admins; technicians
    always create personal prompts.
    """

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    purpose: PromptPurpose = PromptPurpose.RESPONSE_GENERATION
    content: str = Field(..., min_length=1)
    description: str | None = None
    is_system: bool = False


class PromptUpdate(BaseModel):
    """Schema for editing a prompt. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    content: str | None = Field(None, min_length=1)
    description: str | None = None

    @field_validator("name", "content")
    @classmethod
    def reject_null(cls, v: str | None) -> str:
        """Name and content may be omitted but never cleared."""
        if v is None:
            raise ValueError("Field may not be null")
        return v


class PromptResponse(BaseModel):
    """Schema for prompt responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    purpose: PromptPurpose
    content: str
    version: int
    created_by: str
    owner_technician_id: UUID | None
    description: str | None
    created_at: datetime
    updated_at: datetime


class PromptListItem(PromptResponse):
    """A prompt annotated for the caller.

    Attributes:
        is_system: Tenant-wide prompt with no owner
        is_active: Active for the technician the listing was made for
        can_edit: Whether the caller may edit it
    """

    is_system: bool
    is_active: bool
    can_edit: bool


# ============================================================
# Activation
# ============================================================


class ActivatePromptRequest(BaseModel):
    """Schema for activating a prompt.

    The acting technician always comes from the launch context; a
    `technician_id` naming anyone else is rejected.
    """

    purpose: PromptPurpose | None = None
    technician_id: UUID | None = None


class ActiveBindingResponse(BaseModel):
    """Schema for active binding responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    technician_id: UUID
    prompt_id: UUID
    purpose: PromptPurpose
    is_active: bool
    updated_at: datetime


class ActivationResultResponse(BaseModel):
    """The binding now in force and the content it selects."""

    active_binding: ActiveBindingResponse
    config_content: str
