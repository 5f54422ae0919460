"""
Expense Models

An expense is one recorded monetary outlay belonging to exactly one user.

The record model only enforces types. The business rules (non-empty
description, positive amount, positive user id) live in the validator and
are applied on creation.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from expense_tracker.models.record import StoredRecord, ensure_utc, utcnow


class ExpenseCategory(str, Enum):
    """
    The closed set of spending categories.

    Declaration order is the order categories appear in monthly reports.
    """
    FOOD = "food"
    HEALTH = "health"
    HOUSING = "housing"
    SPORT = "sport"
    EDUCATION = "education"

    @classmethod
    def values(cls) -> list[str]:
        """Category values in report order."""
        return [category.value for category in cls]


class Expense(StoredRecord):
    """
    A persisted expense.

    ``userid`` is the owning user's numeric id and ``user`` is that user's
    storage identity, both captured when the expense is created. Neither is
    kept in sync afterwards: deleting the user leaves the expense in place.
    """

    description: str = Field(
        ...,
        description="What the money was spent on"
    )
    category: ExpenseCategory = Field(
        ...,
        description="Spending category"
    )
    userid: int = Field(
        ...,
        description="Numeric id of the owning user"
    )
    user: str = Field(
        ...,
        description="Storage identity of the owning user"
    )
    sum: float = Field(
        ...,
        description="Amount spent"
    )
    date: datetime = Field(
        default_factory=utcnow,
        description="When the expense happened (UTC)"
    )

    @field_validator('date')
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class ExpenseUpdate(BaseModel):
    """
    Partial update for an expense.

    Only casts the known fields to their stored types; unknown keys are
    dropped. No business rules are applied here.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="ignore",
    )

    description: Optional[str] = None
    category: Optional[ExpenseCategory] = None
    userid: Optional[int] = None
    sum: Optional[float] = None
    date: Optional[datetime] = None

    @field_validator('date')
    @classmethod
    def normalize_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else v

    def changes(self) -> dict:
        """Fields the caller actually supplied with a value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)
