"""Schemas for launch tokens and the resolved launch context."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.permissions.models import PermissionSet, Role


if TYPE_CHECKING:
    from app.core.auth.context import AuthContext


class LaunchTokenClaims(BaseModel):
    """Claims carried by a verified launch token.

    Attributes:
        location_id: External location the token was issued for, if bound
        user_id: External user the token was issued for, if bound
        issuer: Token issuer
        exp: Expiration time
    """

    location_id: str | None = None
    user_id: str | None = None
    issuer: str | None = None
    exp: datetime | None = None


class TechnicianSummary(BaseModel):
    """The technician a launch resolved to."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    crm_code: str | None = None


class ClientSummary(BaseModel):
    """The tenant a launch resolved to."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class AuthContextResponse(BaseModel):
    """Public view of the resolved launch context."""

    technician: TechnicianSummary
    client: ClientSummary
    user_role: Role
    permissions: PermissionSet

    @classmethod
    def from_context(cls, auth: "AuthContext") -> "AuthContextResponse":
        """Build the public view from a resolved context."""
        return cls(
            technician=TechnicianSummary.model_validate(auth.technician),
            client=ClientSummary.model_validate(auth.tenant),
            user_role=auth.role,
            permissions=auth.permissions,
        )
