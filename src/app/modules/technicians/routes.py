"""Technician API routes."""

from uuid import UUID

from app.core.auth.dependencies import CurrentAuth
from app.core.schemas import DataResponse
from app.modules.technicians import router
from app.modules.technicians.schemas import TechnicianResponse
from app.modules.technicians.services import TechnicianSvc


@router.get(
    "",
    response_model=DataResponse[list[TechnicianResponse]],
    summary="List technicians",
    description=(
        "Managers and admins get every active technician of their tenant; "
        "technicians get only themselves."
    ),
)
async def list_technicians(
    auth: CurrentAuth,
    service: TechnicianSvc,
) -> DataResponse[list[TechnicianResponse]]:
    technicians = await service.list_visible(auth)
    return DataResponse(
        data=[TechnicianResponse.model_validate(t) for t in technicians]
    )


@router.get(
    "/{technician_id}",
    response_model=DataResponse[TechnicianResponse],
    summary="Get a technician",
)
async def get_technician(
    technician_id: UUID,
    auth: CurrentAuth,
    service: TechnicianSvc,
) -> DataResponse[TechnicianResponse]:
    technician = await service.get_visible(technician_id, auth)
    return DataResponse(data=TechnicianResponse.model_validate(technician))
