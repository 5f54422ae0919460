"""
Response Models

Shapes returned to callers. These never expose storage identities,
except where the full stored record is returned on purpose (updates).
"""

from datetime import datetime
from typing import Union

from pydantic import BaseModel, Field, field_serializer

from expense_tracker.models.expense import Expense, ExpenseCategory


def compact_amount(value: float) -> Union[int, float]:
    """Integral amounts as ints, so 8.0 is written as 8."""
    return int(value) if float(value).is_integer() else value


class ExpenseSummary(BaseModel):
    """The semantic fields of a newly created expense."""

    description: str
    category: ExpenseCategory
    userid: int
    sum: float
    date: datetime

    @field_serializer('sum')
    def serialize_sum(self, v: float) -> Union[int, float]:
        return compact_amount(v)

    @classmethod
    def from_expense(cls, expense: Expense) -> "ExpenseSummary":
        return cls(
            description=expense.description,
            category=expense.category,
            userid=expense.userid,
            sum=expense.sum,
            date=expense.date,
        )


class ReportEntry(BaseModel):
    """One expense as it appears inside a monthly report."""

    sum: float
    description: str
    day: int = Field(
        ...,
        ge=1,
        le=31,
        description="Day of month the expense happened on"
    )

    @field_serializer('sum')
    def serialize_sum(self, v: float) -> Union[int, float]:
        return compact_amount(v)


class MonthlyReport(BaseModel):
    """
    A user's expenses for one calendar month, partitioned by category.

    ``costs`` holds one single-key dict per category, in category order,
    and always contains every category.
    """

    userid: int
    year: int
    month: int = Field(..., ge=1, le=12)
    costs: list[dict[str, list[ReportEntry]]] = Field(default_factory=list)

    def entries_for(self, category: ExpenseCategory) -> list[ReportEntry]:
        """Get the entries recorded under a category."""
        for group in self.costs:
            if category.value in group:
                return group[category.value]
        return []


class UserDetails(BaseModel):
    """A user's names together with their lifetime expense total."""

    first_name: str
    last_name: str
    id: int
    total: float = 0

    @field_serializer('total')
    def serialize_total(self, v: float) -> Union[int, float]:
        return compact_amount(v)
