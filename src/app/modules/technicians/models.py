"""Technician database models."""

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.constants import (
    DEFAULT_PERSONA,
    MAX_CRM_CODE_LENGTH,
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
)
from app.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin


if TYPE_CHECKING:
    from app.modules.tenants.models import Tenant


def _default_persona() -> dict[str, Any]:
    return dict(DEFAULT_PERSONA)


class Technician(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """A person acting within one tenant.

    Attributes:
        name: Display name, also recorded as the author of prompts
        email: Optional contact email
        crm_code: Unique login code from the tenant's CRM
        persona: Free-form communication style descriptors
        is_active: Whether launches for this technician are accepted
        is_first_login: Credential state flag, managed by onboarding
        must_change_password: Credential state flag, managed by onboarding
    """

    __tablename__ = "technicians"

    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    email: Mapped[str | None] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=True,
    )
    crm_code: Mapped[str | None] = mapped_column(
        String(MAX_CRM_CODE_LENGTH),
        nullable=True,
        unique=True,
        index=True,
    )
    persona: Mapped[dict[str, Any] | None] = mapped_column(
        JSON,
        nullable=True,
        default=_default_persona,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    is_first_login: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    must_change_password: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship(
        "Tenant",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return (
            f"<Technician(id={self.id}, name={self.name}, tenant_id={self.tenant_id})>"
        )
