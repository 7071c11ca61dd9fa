"""Embedding platform identity mappings.

The host platform launches the dashboard with opaque, hashed location
and user identifiers. These tables bind them to internal tenants and
technicians.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.constants import MAX_EXTERNAL_ID_LENGTH, MAX_NAME_LENGTH
from app.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin
from app.core.permissions.models import PermissionSet, Role


if TYPE_CHECKING:
    from app.modules.technicians.models import Technician
    from app.modules.tenants.models import Tenant


class LocationMapping(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """Binds one external location identifier to exactly one tenant.

    Attributes:
        external_location_id: Hashed location id from the host (globally unique)
        location_name: Human-readable label for operators
        is_active: Inactive mappings fail resolution
    """

    __tablename__ = "location_mappings"

    external_location_id: Mapped[str] = mapped_column(
        String(MAX_EXTERNAL_ID_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    location_name: Mapped[str | None] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship(
        "Tenant",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return (
            f"<LocationMapping(id={self.id}, tenant_id={self.tenant_id}, "
            f"is_active={self.is_active})>"
        )


class UserMapping(Base, UUIDMixin, TimestampMixin):
    """Binds one external user identifier to a technician within a location.

    Role and the five capability columns are the only source of the
    user's permissions.

    Attributes:
        external_user_id: Hashed user id from the host (globally unique)
        technician_id: The technician this user acts as
        location_mapping_id: The only location this user may launch from
        role: technician, manager or admin
        is_active: Inactive mappings fail resolution
        last_access_at: Last successful launch
        failed_access_attempts: Rejected launches presenting this user id
        last_failed_access_at: Last rejected launch
    """

    __tablename__ = "user_mappings"
    __table_args__ = (
        Index("ix_user_mappings_active_last_access", "is_active", "last_access_at"),
    )

    external_user_id: Mapped[str] = mapped_column(
        String(MAX_EXTERNAL_ID_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    technician_id: Mapped[UUID] = mapped_column(
        ForeignKey("technicians.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    location_mapping_id: Mapped[UUID] = mapped_column(
        ForeignKey("location_mappings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[Role] = mapped_column(
        Enum(
            Role,
            name="user_role",
            native_enum=False,
            length=20,
            values_callable=lambda roles: [role.value for role in roles],
        ),
        default=Role.TECHNICIAN,
        nullable=False,
    )

    # Capabilities
    can_generate_responses: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    can_approve_responses: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    can_publish_responses: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    can_view_all_reviews: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    can_manage_configurations: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    # Access bookkeeping
    last_access_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    failed_access_attempts: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    last_failed_access_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Relationships
    technician: Mapped["Technician"] = relationship(
        "Technician",
        lazy="selectin",
    )
    location_mapping: Mapped["LocationMapping"] = relationship(
        "LocationMapping",
        lazy="selectin",
    )

    @property
    def permissions(self) -> PermissionSet:
        """Capability columns as an explicit permission set.

        Columns not populated yet (unflushed rows) fall back to the
        permission set defaults, which mirror the column defaults.
        """
        stored = {name: getattr(self, name) for name in PermissionSet.model_fields}
        return PermissionSet(
            **{name: value for name, value in stored.items() if value is not None}
        )

    def grant(self, permissions: PermissionSet) -> None:
        """Overwrite the capability columns from a permission set."""
        for capability, allowed in permissions.model_dump().items():
            setattr(self, capability, allowed)

    def __repr__(self) -> str:
        return (
            f"<UserMapping(id={self.id}, technician_id={self.technician_id}, "
            f"role={self.role}, is_active={self.is_active})>"
        )
