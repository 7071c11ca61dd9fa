"""Prompt API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import Body, Query, status

from app.core.auth.dependencies import CurrentAuth
from app.core.schemas import DataResponse
from app.modules.prompts import router
from app.modules.prompts.models import PromptPurpose
from app.modules.prompts.schemas import (
    ActivatePromptRequest,
    ActivationResultResponse,
    ActiveBindingResponse,
    PromptCreate,
    PromptListItem,
    PromptResponse,
    PromptUpdate,
)
from app.modules.prompts.services import AnnotatedPrompt, PromptSvc


def _list_item(item: AnnotatedPrompt) -> PromptListItem:
    return PromptListItem(
        **PromptResponse.model_validate(item.prompt).model_dump(),
        is_system=item.is_system,
        is_active=item.is_active,
        can_edit=item.can_edit,
    )


@router.get(
    "",
    response_model=DataResponse[list[PromptListItem]],
    summary="List prompts",
    description=(
        "System prompts plus the personal prompts visible to the caller, "
        "each flagged with whether it is active for the given technician."
    ),
)
async def list_prompts(
    auth: CurrentAuth,
    service: PromptSvc,
    purpose: Annotated[PromptPurpose | None, Query()] = None,
    technician_id: Annotated[UUID | None, Query()] = None,
) -> DataResponse[list[PromptListItem]]:
    items = await service.list_prompts(
        auth, purpose=purpose, technician_id=technician_id
    )
    return DataResponse(data=[_list_item(item) for item in items])


@router.get(
    "/active/{purpose}",
    response_model=DataResponse[PromptResponse],
    summary="Get the active prompt",
    description="The caller's active prompt for a purpose.",
)
async def get_active_prompt(
    purpose: PromptPurpose,
    auth: CurrentAuth,
    service: PromptSvc,
) -> DataResponse[PromptResponse]:
    prompt = await service.get_active(auth, purpose)
    return DataResponse(data=PromptResponse.model_validate(prompt))


@router.get(
    "/{prompt_id}",
    response_model=DataResponse[PromptResponse],
    summary="Get a prompt",
)
async def get_prompt(
    prompt_id: UUID,
    auth: CurrentAuth,
    service: PromptSvc,
) -> DataResponse[PromptResponse]:
    prompt = await service.get_prompt(prompt_id, auth)
    return DataResponse(data=PromptResponse.model_validate(prompt))


@router.post(
    "",
    response_model=DataResponse[PromptResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a prompt",
)
async def create_prompt(
    data: PromptCreate,
    auth: CurrentAuth,
    service: PromptSvc,
) -> DataResponse[PromptResponse]:
    prompt = await service.create(data, auth)
    return DataResponse(
        data=PromptResponse.model_validate(prompt),
        message="Prompt created",
    )


@router.put(
    "/{prompt_id}",
    response_model=DataResponse[PromptResponse],
    summary="Edit a prompt",
    description="Owners edit their own prompts; managers and admins edit any.",
)
async def update_prompt(
    prompt_id: UUID,
    data: PromptUpdate,
    auth: CurrentAuth,
    service: PromptSvc,
) -> DataResponse[PromptResponse]:
    prompt = await service.edit(prompt_id, auth, data)
    return DataResponse(
        data=PromptResponse.model_validate(prompt),
        message="Prompt updated",
    )


@router.post(
    "/{prompt_id}/activate",
    response_model=DataResponse[ActivationResultResponse],
    summary="Activate a prompt",
    description=(
        "Make the prompt the caller's active one for its purpose. System "
        "prompts can be activated by anyone, personal prompts only by "
        "their owner."
    ),
)
async def activate_prompt(
    prompt_id: UUID,
    auth: CurrentAuth,
    service: PromptSvc,
    data: Annotated[ActivatePromptRequest | None, Body()] = None,
) -> DataResponse[ActivationResultResponse]:
    data = data or ActivatePromptRequest()
    result = await service.activate(
        prompt_id,
        auth,
        purpose=data.purpose,
        technician_id=data.technician_id,
    )
    return DataResponse(
        data=ActivationResultResponse(
            active_binding=ActiveBindingResponse.model_validate(result.binding),
            config_content=result.prompt.content,
        ),
        message="Prompt activated",
    )
