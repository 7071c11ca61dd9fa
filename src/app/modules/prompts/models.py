"""Prompt database models."""

from enum import StrEnum
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.core.constants import MAX_CREATED_BY_LENGTH, MAX_NAME_LENGTH
from app.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin
from app.modules.prompts.ownership import Ownership, ownership_from_owner


class PromptPurpose(StrEnum):
    """What a prompt is used for."""

    RESPONSE_GENERATION = "response_generation"


def _purpose_enum() -> Enum:
    return Enum(
        PromptPurpose,
        name="prompt_purpose",
        native_enum=False,
        length=50,
        values_callable=lambda purposes: [purpose.value for purpose in purposes],
    )


class Prompt(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """A named, versioned block of reusable instruction text.

    A null owner_technician_id makes the prompt tenant-wide ("system");
    otherwise it is personal to that technician. Use `ownership` rather
    than branching on the column.

    Attributes:
        name: Display name
        purpose: What the prompt is used for
        content: The instruction text
        version: Starts at 1, incremented on every accepted edit
        created_by: Display name of the author
        owner_technician_id: Owning technician, null for system prompts
        description: Optional notes
    """

    __tablename__ = "prompts"

    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    purpose: Mapped[PromptPurpose] = mapped_column(
        _purpose_enum(),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    version: Mapped[int] = mapped_column(
        Integer,
        default=1,
        nullable=False,
    )
    created_by: Mapped[str] = mapped_column(
        String(MAX_CREATED_BY_LENGTH),
        nullable=False,
    )
    owner_technician_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("technicians.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    @property
    def ownership(self) -> Ownership:
        """Tagged ownership derived from the owner column."""
        return ownership_from_owner(self.owner_technician_id)

    def __repr__(self) -> str:
        return (
            f"<Prompt(id={self.id}, name={self.name}, purpose={self.purpose}, "
            f"version={self.version})>"
        )


class ActivePromptBinding(Base, UUIDMixin, TimestampMixin):
    """Which prompt governs a (technician, purpose) pair.

    One row per (technician, purpose, prompt) ever activated. Rows are
    never deleted, only flipped inactive when superseded. The partial
    unique index guarantees at most one active row per
    (technician, purpose), whatever the interleaving of writers.
    """

    __tablename__ = "active_prompt_bindings"
    __table_args__ = (
        UniqueConstraint(
            "technician_id",
            "purpose",
            "prompt_id",
            name="uq_binding_technician_purpose_prompt",
        ),
        Index(
            "uq_binding_one_active_per_purpose",
            "technician_id",
            "purpose",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    technician_id: Mapped[UUID] = mapped_column(
        ForeignKey("technicians.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    prompt_id: Mapped[UUID] = mapped_column(
        ForeignKey("prompts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    purpose: Mapped[PromptPurpose] = mapped_column(
        _purpose_enum(),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<ActivePromptBinding(technician_id={self.technician_id}, "
            f"purpose={self.purpose}, prompt_id={self.prompt_id}, "
            f"is_active={self.is_active})>"
        )
