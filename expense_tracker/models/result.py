"""
Service Results

Service methods never raise for expected outcomes. They return a
ServiceResult carrying either the success payload or a tagged error kind,
and the transport layer translates the tag into a status code.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ErrorKind(str, Enum):
    """Why an operation failed."""
    VALIDATION = "validation_error"  # Bad input shape or range
    NOT_FOUND = "not_found"          # Referenced user/expense absent
    CONFLICT = "conflict"            # Duplicate user id
    INTERNAL = "internal_error"      # Unexpected store failure


class ServiceResult(BaseModel):
    """Outcome of a service operation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    data: Any = None
    message: Optional[str] = None

    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None) -> "ServiceResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "ServiceResult":
        return cls(success=False, error_kind=kind, error_message=message)

    @property
    def is_error(self) -> bool:
        return not self.success
