"""Role and capability definitions.

Roles and capabilities are stored per user mapping. The capability set is
a closed, explicit struct: unknown keys are rejected rather than carried
along.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class Role(StrEnum):
    """Role a launched user acts with inside their tenant."""

    TECHNICIAN = "technician"
    MANAGER = "manager"
    ADMIN = "admin"


class Capability(StrEnum):
    """Named boolean capabilities a user mapping can grant."""

    GENERATE_RESPONSES = "can_generate_responses"
    APPROVE_RESPONSES = "can_approve_responses"
    PUBLISH_RESPONSES = "can_publish_responses"
    VIEW_ALL_REVIEWS = "can_view_all_reviews"
    MANAGE_CONFIGURATIONS = "can_manage_configurations"


class PermissionSet(BaseModel):
    """Capabilities granted to a user mapping.

    Defaults match a freshly onboarded technician: response generation
    on, everything else off.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    can_generate_responses: bool = True
    can_approve_responses: bool = False
    can_publish_responses: bool = False
    can_view_all_reviews: bool = False
    can_manage_configurations: bool = False

    def allows(self, capability: Capability) -> bool:
        """Check whether a single capability is granted."""
        return bool(getattr(self, capability.value))


# Roles with visibility over every technician of their tenant
FULL_VISIBILITY_ROLES = frozenset({Role.MANAGER, Role.ADMIN})
