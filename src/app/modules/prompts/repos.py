"""Prompt and active-binding repositories."""

from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, or_, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from app.api.dependencies import DBSession
from app.modules.prompts.exceptions import ActivationConflictError
from app.modules.prompts.models import ActivePromptBinding, Prompt, PromptPurpose


class PromptRepository:
    """Repository for Prompt database operations.

    Every query is scoped to one tenant.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def get_by_id(self, prompt_id: UUID, tenant_id: UUID) -> Prompt | None:
        """Get a prompt by ID within a tenant.

        Args:
            prompt_id: The prompt's UUID
            tenant_id: The tenant the prompt must belong to

        Returns:
            Prompt if found in that tenant, None otherwise
        """
        stmt = select(Prompt).where(
            Prompt.id == prompt_id,
            Prompt.tenant_id == tenant_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_tenant(
        self,
        tenant_id: UUID,
        purpose: PromptPurpose | None = None,
        owner_technician_id: UUID | None = None,
    ) -> list[Prompt]:
        """List prompts of a tenant.

        Args:
            tenant_id: The tenant's UUID
            purpose: Optional purpose filter
            owner_technician_id: When set, only system prompts and this
                technician's personal prompts are returned

        Returns:
            Prompts, system prompts first, then by name
        """
        stmt = select(Prompt).where(Prompt.tenant_id == tenant_id)
        if purpose:
            stmt = stmt.where(Prompt.purpose == purpose)
        if owner_technician_id:
            stmt = stmt.where(
                or_(
                    Prompt.owner_technician_id.is_(None),
                    Prompt.owner_technician_id == owner_technician_id,
                )
            )
        stmt = stmt.order_by(
            Prompt.owner_technician_id.is_not(None),
            Prompt.name,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, prompt: Prompt) -> Prompt:
        """Create a new prompt.

        Args:
            prompt: Prompt instance to create

        Returns:
            The created prompt with ID populated
        """
        self.session.add(prompt)
        await self.session.flush()
        await self.session.refresh(prompt)
        return prompt

    async def update(self, prompt: Prompt) -> Prompt:
        """Flush pending changes on a prompt.

        Args:
            prompt: Prompt instance with updated fields

        Returns:
            The updated prompt
        """
        await self.session.flush()
        await self.session.refresh(prompt)
        return prompt


class ActiveBindingRepository:
    """Repository for ActivePromptBinding database operations.

    At most one binding per (technician, purpose) is active. The partial
    unique index enforces it; `activate` is the only writer.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def get_active(
        self, technician_id: UUID, purpose: PromptPurpose
    ) -> ActivePromptBinding | None:
        """Get the active binding of a (technician, purpose) pair."""
        stmt = select(ActivePromptBinding).where(
            ActivePromptBinding.technician_id == technician_id,
            ActivePromptBinding.purpose == purpose,
            ActivePromptBinding.is_active == True,  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_prompt_id(
        self, technician_id: UUID, purpose: PromptPurpose
    ) -> UUID | None:
        """Get the prompt a technician has active for a purpose, if any."""
        stmt = select(ActivePromptBinding.prompt_id).where(
            ActivePromptBinding.technician_id == technician_id,
            ActivePromptBinding.purpose == purpose,
            ActivePromptBinding.is_active == True,  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def activate(
        self,
        technician_id: UUID,
        purpose: PromptPurpose,
        prompt_id: UUID,
    ) -> ActivePromptBinding:
        """Make a prompt the active one for a (technician, purpose) pair.

        Deactivates the pair's other active binding and upserts the target
        binding inside one savepoint. Re-activating the current prompt
        leaves the state as it is.

        Args:
            technician_id: The acting technician
            purpose: The purpose being bound
            prompt_id: The prompt to activate

        Returns:
            The now-active binding

        Raises:
            ActivationConflictError: If a concurrent activation for the same
                pair committed first
        """
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    update(ActivePromptBinding)
                    .where(
                        ActivePromptBinding.technician_id == technician_id,
                        ActivePromptBinding.purpose == purpose,
                        ActivePromptBinding.is_active == True,  # noqa: E712
                        ActivePromptBinding.prompt_id != prompt_id,
                    )
                    .values(is_active=False, updated_at=func.now())
                    .execution_options(synchronize_session=False)
                )

                insert = self._insert()
                stmt = insert(ActivePromptBinding).values(
                    technician_id=technician_id,
                    purpose=purpose,
                    prompt_id=prompt_id,
                    is_active=True,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=["technician_id", "purpose", "prompt_id"],
                    set_={"is_active": True, "updated_at": func.now()},
                )
                await self.session.execute(stmt)
        except IntegrityError as exc:
            raise ActivationConflictError(
                details={"technician_id": str(technician_id), "purpose": purpose.value}
            ) from exc

        stmt = (
            select(ActivePromptBinding)
            .where(
                ActivePromptBinding.technician_id == technician_id,
                ActivePromptBinding.purpose == purpose,
                ActivePromptBinding.prompt_id == prompt_id,
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    def _insert(self) -> Any:
        # Upserts are dialect specific
        if self.session.get_bind().dialect.name == "sqlite":
            return sqlite.insert
        return postgresql.insert


# Type aliases for dependency injection
PromptRepo = Annotated[PromptRepository, Depends(PromptRepository)]
ActiveBindingRepo = Annotated[ActiveBindingRepository, Depends(ActiveBindingRepository)]
