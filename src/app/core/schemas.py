"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel


DataT = TypeVar("DataT")


class DataResponse(BaseModel, Generic[DataT]):
    """Successful response wrapper: `{"success": true, "data": ...}`."""

    success: bool = True
    data: DataT
    message: str | None = None
