"""Prompt service: creation, editing and per-technician activation.

Every operation acts on behalf of the technician in the launch context.
Activation writes are serialized by the store, not by this process: a
conflicting concurrent activation is retried once and then surfaced as
a retryable failure.
"""

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from app.config import settings
from app.core.constants import ACTIVATION_CONFLICT_RETRIES
from app.core.errors import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    RequestTimeoutError,
    ServiceUnavailableError,
)
from app.core.observability import get_tracer
from app.modules.prompts.exceptions import ActivationConflictError
from app.modules.prompts.models import ActivePromptBinding, Prompt, PromptPurpose
from app.modules.prompts.ownership import (
    SystemWide,
    is_owned_by,
    may_activate,
    may_edit,
)
from app.modules.prompts.repos import ActiveBindingRepo, PromptRepo
from app.modules.prompts.schemas import PromptCreate, PromptUpdate


if TYPE_CHECKING:
    from app.core.auth.context import AuthContext


logger = structlog.get_logger()
tracer = get_tracer(__name__)


@dataclass(frozen=True)
class ActivationResult:
    """Outcome of a successful activation."""

    binding: ActivePromptBinding
    prompt: Prompt


@dataclass(frozen=True)
class AnnotatedPrompt:
    """A prompt plus what it means for the caller."""

    prompt: Prompt
    is_system: bool
    is_active: bool
    can_edit: bool


def _is_bound(prompt: Prompt, active_prompt_id: UUID | None) -> bool:
    """The one definition of "active": the bound prompt id for the
    technician and purpose is this prompt's id. Holds for system and
    personal prompts alike."""
    return active_prompt_id == prompt.id


class PromptService:
    """Service for prompt management and activation.

    Args:
        prompts: Prompt repository
        bindings: Active binding repository
    """

    def __init__(
        self,
        prompts: PromptRepo,
        bindings: ActiveBindingRepo,
    ) -> None:
        self.prompts = prompts
        self.bindings = bindings
        self.timeout_seconds = settings.request_timeout_seconds

    # ============================================================
    # Reads
    # ============================================================

    async def get_prompt(self, prompt_id: UUID, auth: "AuthContext") -> Prompt:
        """Get a prompt the caller may see.

        Raises:
            NotFoundError: If the prompt is not in the caller's tenant
            ForbiddenError: If it is another technician's personal prompt
                and the caller is a plain technician
        """
        prompt = await self._get_in_tenant(prompt_id, auth)
        if not self._is_visible(prompt, auth):
            raise ForbiddenError(
                "You can only view system prompts or your own prompts",
                details={"prompt_id": str(prompt_id)},
            )
        return prompt

    async def is_active_for(self, technician_id: UUID, prompt: Prompt) -> bool:
        """Whether the prompt is the technician's active one for its purpose.

        Listings compare against the same bound id without a query per
        prompt.
        """
        active_id = await self.bindings.get_active_prompt_id(
            technician_id, prompt.purpose
        )
        return _is_bound(prompt, active_id)

    async def list_prompts(
        self,
        auth: "AuthContext",
        purpose: PromptPurpose | None = None,
        technician_id: UUID | None = None,
    ) -> list[AnnotatedPrompt]:
        """List the prompts visible to the caller.

        System prompts plus personal prompts: the caller's own for a
        technician, the whole tenant's for managers and admins.

        Args:
            auth: The launch context
            purpose: Optional purpose filter
            technician_id: Technician to compute `is_active` for, defaults
                to the caller

        Raises:
            ForbiddenError: If the caller may not see that technician
        """
        target = technician_id or auth.technician_id
        if not auth.can_access_technician(target):
            raise ForbiddenError(
                "You can only view your own data",
                details={"technician_id": str(target)},
            )

        owner_filter = None if auth.is_manager_or_admin() else auth.technician_id
        prompts = await self.prompts.list_for_tenant(
            auth.tenant_id,
            purpose=purpose,
            owner_technician_id=owner_filter,
        )

        # One lookup per purpose rather than per prompt
        active_ids = {
            prompt_purpose: await self.bindings.get_active_prompt_id(
                target, prompt_purpose
            )
            for prompt_purpose in {prompt.purpose for prompt in prompts}
        }

        return [
            AnnotatedPrompt(
                prompt=prompt,
                is_system=isinstance(prompt.ownership, SystemWide),
                is_active=_is_bound(prompt, active_ids[prompt.purpose]),
                can_edit=self._can_edit(prompt, auth),
            )
            for prompt in prompts
        ]

    async def get_active(
        self, auth: "AuthContext", purpose: PromptPurpose
    ) -> Prompt:
        """Get the caller's active prompt for a purpose.

        Raises:
            NotFoundError: If nothing is active for that purpose
        """
        binding = await self.bindings.get_active(auth.technician_id, purpose)
        prompt = (
            await self.prompts.get_by_id(binding.prompt_id, auth.tenant_id)
            if binding
            else None
        )
        if prompt is None:
            raise NotFoundError(
                "No active prompt",
                resource="active_prompt",
                resource_id=purpose.value,
            )
        return prompt

    # ============================================================
    # Writes
    # ============================================================

    async def create(self, data: PromptCreate, auth: "AuthContext") -> Prompt:
        """Create a prompt.

        Technicians always create personal prompts. Managers and admins
        create a system prompt when `is_system` is set.
        """
        is_system = data.is_system and auth.is_manager_or_admin()

        prompt = await self.prompts.create(
            Prompt(
                tenant_id=auth.tenant_id,
                name=data.name,
                purpose=data.purpose,
                content=data.content,
                description=data.description,
                version=1,
                created_by=auth.technician.name,
                owner_technician_id=None if is_system else auth.technician_id,
            )
        )
        logger.info(
            "prompt_created",
            prompt_id=str(prompt.id),
            purpose=prompt.purpose.value,
            is_system=is_system,
        )
        return prompt

    async def edit(
        self, prompt_id: UUID, auth: "AuthContext", changes: PromptUpdate
    ) -> Prompt:
        """Edit a prompt and bump its version.

        Owners edit their own prompts; managers and admins edit any
        prompt of their tenant. Concurrent edits are last-writer-wins.

        Raises:
            NotFoundError: If the prompt is not in the caller's tenant
            ForbiddenError: If the caller may not edit it
        """
        prompt = await self._get_in_tenant(prompt_id, auth)
        if not self._can_edit(prompt, auth):
            raise ForbiddenError(
                "You can only edit your own prompts",
                details={"prompt_id": str(prompt_id)},
            )

        update_data = changes.model_dump(exclude_unset=True)
        if not update_data:
            return prompt

        for field, value in update_data.items():
            setattr(prompt, field, value)
        prompt.version += 1

        prompt = await self.prompts.update(prompt)
        logger.info(
            "prompt_updated",
            prompt_id=str(prompt.id),
            version=prompt.version,
            fields=sorted(update_data),
        )
        return prompt

    async def activate(
        self,
        prompt_id: UUID,
        auth: "AuthContext",
        purpose: PromptPurpose | None = None,
        technician_id: UUID | None = None,
    ) -> ActivationResult:
        """Make a prompt the caller's active one for its purpose.

        Args:
            prompt_id: The prompt to activate
            auth: The launch context; the acting technician comes from here
            purpose: Purpose the caller expects the prompt to have
            technician_id: Must be the caller if given

        Returns:
            The binding now in force and the prompt it selects

        Raises:
            NotFoundError: If the prompt is not in the caller's tenant
            BadRequestError: If the prompt's purpose differs from `purpose`
            ForbiddenError: If the prompt is another technician's, or
                `technician_id` names someone else
            ServiceUnavailableError: If concurrent activations keep colliding
            RequestTimeoutError: If the store does not answer in time
        """
        if technician_id and not auth.is_self(technician_id):
            raise ForbiddenError(
                "You can only activate prompts for yourself",
                details={"technician_id": str(technician_id)},
            )

        with tracer.start_as_current_span("prompt.activate") as span:
            span.set_attribute("prompt.id", str(prompt_id))
            try:
                async with asyncio.timeout(self.timeout_seconds):
                    return await self._activate(prompt_id, auth, purpose)
            except TimeoutError as exc:
                logger.warning(
                    "prompt_activation_timeout",
                    prompt_id=str(prompt_id),
                    timeout_seconds=self.timeout_seconds,
                )
                raise RequestTimeoutError(details={"operation": "activate"}) from exc

    async def _activate(
        self,
        prompt_id: UUID,
        auth: "AuthContext",
        purpose: PromptPurpose | None,
    ) -> ActivationResult:
        prompt = await self._get_in_tenant(prompt_id, auth)

        if purpose and prompt.purpose != purpose:
            raise BadRequestError(
                "Prompt purpose does not match",
                error_code="purpose_mismatch",
                details={"expected": purpose.value, "actual": prompt.purpose.value},
            )

        if not may_activate(prompt.ownership, auth.technician_id):
            logger.warning(
                "prompt_activation_denied",
                prompt_id=str(prompt.id),
            )
            raise ForbiddenError(
                "You can only activate system prompts or your own prompts",
                details={"prompt_id": str(prompt.id)},
            )

        for attempt in range(ACTIVATION_CONFLICT_RETRIES + 1):
            try:
                binding = await self.bindings.activate(
                    auth.technician_id, prompt.purpose, prompt.id
                )
            except ActivationConflictError as exc:
                if attempt < ACTIVATION_CONFLICT_RETRIES:
                    logger.warning(
                        "activation_conflict_retry",
                        prompt_id=str(prompt.id),
                        attempt=attempt + 1,
                    )
                    continue
                raise ServiceUnavailableError(
                    "Another activation is in progress, please retry",
                    error_code="activation_conflict",
                    details={"prompt_id": str(prompt.id)},
                ) from exc

            logger.info(
                "prompt_activated",
                prompt_id=str(prompt.id),
                purpose=prompt.purpose.value,
                is_system=isinstance(prompt.ownership, SystemWide),
            )
            return ActivationResult(binding=binding, prompt=prompt)

        # The loop either returns or raises
        raise AssertionError("unreachable")

    # ============================================================
    # Helpers
    # ============================================================

    async def _get_in_tenant(self, prompt_id: UUID, auth: "AuthContext") -> Prompt:
        prompt = await self.prompts.get_by_id(prompt_id, auth.tenant_id)
        if not prompt:
            raise NotFoundError(
                "Prompt not found",
                resource="prompt",
                resource_id=str(prompt_id),
            )
        return prompt

    def _is_visible(self, prompt: Prompt, auth: "AuthContext") -> bool:
        if auth.is_manager_or_admin() or isinstance(prompt.ownership, SystemWide):
            return True
        return is_owned_by(prompt.ownership, auth.technician_id)

    def _can_edit(self, prompt: Prompt, auth: "AuthContext") -> bool:
        return may_edit(
            prompt.ownership,
            auth.technician_id,
            is_manager_or_admin=auth.is_manager_or_admin(),
        )


# Type alias for dependency injection
PromptSvc = Annotated[PromptService, Depends(PromptService)]
