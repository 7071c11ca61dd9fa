"""Prompt ownership as an explicit two-case type.

A prompt is either tenant-wide (`SystemWide`) or private to one
technician (`Owned`). The database stores this as a nullable owner
column; code outside the model layer only ever sees these two types.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True)
class SystemWide:
    """Usable as an activation candidate by every technician in the tenant."""


@dataclass(frozen=True, slots=True)
class Owned:
    """Private to one technician."""

    technician_id: UUID


Ownership = SystemWide | Owned

SYSTEM_WIDE = SystemWide()


def ownership_from_owner(owner_technician_id: UUID | None) -> Ownership:
    """Map the stored owner column to an ownership value."""
    if owner_technician_id is None:
        return SYSTEM_WIDE
    return Owned(owner_technician_id)


def is_owned_by(ownership: Ownership, technician_id: UUID) -> bool:
    """True only for a personal prompt owned by this technician."""
    return isinstance(ownership, Owned) and ownership.technician_id == technician_id


def may_activate(ownership: Ownership, technician_id: UUID) -> bool:
    """Anyone may activate a system prompt for themselves; personal prompts
    only by their owner."""
    if isinstance(ownership, SystemWide):
        return True
    return ownership.technician_id == technician_id


def may_edit(
    ownership: Ownership,
    technician_id: UUID,
    *,
    is_manager_or_admin: bool,
) -> bool:
    """Owners edit their own prompts; managers and admins edit anything.

    System prompts are never editable by a plain technician.
    """
    if is_manager_or_admin:
        return True
    return is_owned_by(ownership, technician_id)
