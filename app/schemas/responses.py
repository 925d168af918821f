from typing import Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope for every successful response"""
    success: bool = True
    message: str
    data: T | None = None


class ErrorResponse(BaseModel):
    """Envelope for every failure; errors is keyed by dotted field path"""
    success: bool = False
    message: str
    errors: dict[str, list[str]] | None = None
