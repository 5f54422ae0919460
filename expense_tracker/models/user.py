"""User Models"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from expense_tracker.models.record import StoredRecord


class User(StoredRecord):
    """
    A user profile.

    ``id`` is chosen by the caller, unique across users and never changed
    after creation.
    """

    id: int = Field(
        ...,
        description="Externally assigned numeric identifier"
    )
    first_name: str
    last_name: str
    birthday: date
    marital_status: str = Field(
        ...,
        description="Free-form marital status"
    )


class UserUpdate(BaseModel):
    """Partial update for a user. ``id`` is immutable and therefore ignored."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="ignore",
    )

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    birthday: Optional[date] = None
    marital_status: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)
