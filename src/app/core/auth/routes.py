"""Launch authentication API routes."""

from fastapi import APIRouter

from app.core.auth.dependencies import CurrentAuth
from app.core.auth.schemas import AuthContextResponse
from app.core.schemas import DataResponse


router = APIRouter(prefix="/auth", tags=["auth"])


@router.get(
    "/verify-launch",
    response_model=DataResponse[AuthContextResponse],
    summary="Verify an embedded launch",
    description=(
        "Resolves the launch identifiers (and token, if sent) and returns "
        "the technician, tenant, role and permissions the dashboard runs as."
    ),
)
async def verify_launch(auth: CurrentAuth) -> DataResponse[AuthContextResponse]:
    """Return the resolved launch context."""
    return DataResponse(data=AuthContextResponse.from_context(auth))
