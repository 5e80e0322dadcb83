"""Result envelopes returned by repository operations"""
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class RepositoryError(BaseModel):
    """Error reported by the repository client; carried as a value, never raised."""
    message: str

    model_config = {"frozen": True}


class RepositoryResult(BaseModel, Generic[T]):
    """`{data, error}` envelope. `data` is None (or empty) when `error` is set."""
    data: Optional[T] = None
    error: Optional[RepositoryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: Optional[T] = None) -> "RepositoryResult[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, message: str, data: Optional[T] = None) -> "RepositoryResult[T]":
        return cls(data=data, error=RepositoryError(message=message))
