"""Identity resolution for embedded launches.

Maps the host's opaque location and user identifiers to internal records
in two stages. The user lookup is scoped by the location mapping that was
just resolved, so a user identifier that is valid under one tenant cannot
be replayed against another tenant's location.
"""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

import structlog

from app.core.auth.exceptions import (
    InvalidLocationError,
    InvalidUserError,
    MissingLaunchParametersError,
)
from app.core.errors import RequestTimeoutError
from app.core.observability import get_tracer
from app.core.utils.text import mask_identifier


if TYPE_CHECKING:
    from collections.abc import Awaitable

    from app.modules.embedding.models import LocationMapping, UserMapping
    from app.modules.technicians.models import Technician
    from app.modules.tenants.models import Tenant


logger = structlog.get_logger()
tracer = get_tracer(__name__)


class IdentityRepository(Protocol):
    """Store operations the resolver needs.

    Mappings are returned with their tenant/technician relationships
    loaded.
    """

    async def find_location_mapping(
        self, external_location_id: str
    ) -> "LocationMapping | None": ...

    async def find_user_mapping(
        self, external_user_id: str, location_mapping_id: UUID
    ) -> "UserMapping | None": ...

    async def record_access(
        self, user_mapping_id: UUID, accessed_at: datetime
    ) -> None: ...

    async def record_failed_access(
        self, external_user_id: str, failed_at: datetime
    ) -> None: ...


@dataclass(frozen=True)
class ResolvedIdentity:
    """The internal records a launch resolved to."""

    tenant: "Tenant"
    technician: "Technician"
    location_mapping: "LocationMapping"
    user_mapping: "UserMapping"


class IdentityResolver:
    """Resolves launch identifiers to a tenant and technician.

    Lookups run under an optional time budget. Access bookkeeping runs
    afterwards under the same budget and never affects the outcome.
    """

    def __init__(
        self,
        repo: IdentityRepository,
        timeout_seconds: float | None = None,
    ) -> None:
        self.repo = repo
        self.timeout_seconds = timeout_seconds

    async def resolve(
        self, location_id: str | None, user_id: str | None
    ) -> ResolvedIdentity:
        """Resolve a location/user identifier pair.

        Args:
            location_id: External location identifier from the launch
            user_id: External user identifier from the launch

        Returns:
            The resolved tenant, technician and both mappings

        Raises:
            MissingLaunchParametersError: If either identifier is absent
            InvalidLocationError: If the location does not resolve to an active tenant
            InvalidUserError: If the user does not resolve to an active technician
                under that location
            RequestTimeoutError: If the lookups exceed the time budget
        """
        if not location_id or not user_id:
            raise MissingLaunchParametersError()

        with tracer.start_as_current_span("identity.resolve"):
            try:
                async with asyncio.timeout(self.timeout_seconds):
                    identity = await self._lookup(location_id, user_id)
            except TimeoutError as exc:
                logger.warning(
                    "launch_resolution_timeout",
                    location=mask_identifier(location_id),
                    user=mask_identifier(user_id),
                    timeout_seconds=self.timeout_seconds,
                )
                raise RequestTimeoutError(
                    details={"operation": "resolve_identity"}
                ) from exc

        await self._bookkeep(self.repo.record_access(identity.user_mapping.id, _now()))

        logger.info(
            "launch_resolved",
            tenant_id=str(identity.tenant.id),
            technician_id=str(identity.technician.id),
            user_role=str(identity.user_mapping.role),
        )
        return identity

    async def _lookup(self, location_id: str, user_id: str) -> ResolvedIdentity:
        location_mapping = await self.repo.find_location_mapping(location_id)
        tenant = location_mapping.tenant if location_mapping else None

        if (
            location_mapping is None
            or not location_mapping.is_active
            or tenant is None
            or not tenant.is_active
        ):
            self._reject("invalid_location", location_id, user_id)
            raise InvalidLocationError()

        user_mapping = await self.repo.find_user_mapping(user_id, location_mapping.id)
        technician = user_mapping.technician if user_mapping else None

        if (
            user_mapping is None
            or not user_mapping.is_active
            or user_mapping.location_mapping_id != location_mapping.id
            or technician is None
            or not technician.is_active
            or technician.tenant_id != tenant.id
        ):
            self._reject("invalid_user", location_id, user_id)
            await self._bookkeep(self.repo.record_failed_access(user_id, _now()))
            raise InvalidUserError()

        return ResolvedIdentity(
            tenant=tenant,
            technician=technician,
            location_mapping=location_mapping,
            user_mapping=user_mapping,
        )

    def _reject(self, reason: str, location_id: str, user_id: str) -> None:
        logger.warning(
            "launch_rejected",
            reason=reason,
            location=mask_identifier(location_id),
            user=mask_identifier(user_id),
        )

    async def _bookkeep(self, write: "Awaitable[None]") -> None:
        # Access timestamps and counters are informational only; a slow
        # write is abandoned at the time budget.
        try:
            async with asyncio.timeout(self.timeout_seconds):
                await write
        except Exception as exc:
            logger.warning(
                "access_bookkeeping_failed",
                error_type=type(exc).__name__,
                error=str(exc),
            )


def _now() -> datetime:
    return datetime.now(UTC)
