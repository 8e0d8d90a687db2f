from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ErrorKind(str, Enum):
    BACKEND_UNAVAILABLE = "backend_unavailable"
    MALFORMED_BACKEND_RESPONSE = "malformed_backend_response"
    STORE_UNAVAILABLE = "store_unavailable"


class Result(BaseModel, Generic[T]):
    """Outcome of a store or backend call: either a value or an error kind."""

    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value=None) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind, detail: str | None = None) -> "Result":
        return cls(error=error, detail=detail)
