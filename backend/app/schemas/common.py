"""
Response envelope shared by every endpoint.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    status: str = "success"
    message: Optional[str] = None
    data: Optional[DataT] = None


class ErrorResponse(BaseModel):
    status: str = "error"
    message: str
    errors: Optional[list[Any]] = None
