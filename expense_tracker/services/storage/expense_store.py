"""Expense records on top of the durable store."""

from datetime import datetime
from typing import Optional

from expense_tracker.models.expense import Expense
from expense_tracker.models.record import utcnow
from expense_tracker.services.storage.interface import (
    EXPENSES_COLLECTION,
    DocumentStoreInterface,
)


class ExpenseStore:
    """
    Typed access to the expenses collection.

    Expenses are addressed by their storage identity and queried by the
    owning user's numeric ``userid``.
    """

    def __init__(self, store: DocumentStoreInterface):
        self._collection = store.collection(EXPENSES_COLLECTION)

    async def get(self, expense_id: str) -> Optional[Expense]:
        record = await self._collection.find_one({"_id": expense_id})
        return Expense.model_validate(record) if record else None

    async def create(self, expense: Expense) -> Expense:
        record = await self._collection.insert(expense.to_record())
        return Expense.model_validate(record)

    async def update(self, expense_id: str, changes: dict) -> Optional[Expense]:
        record = await self._collection.update_by_id(
            expense_id,
            {**changes, "updated_at": utcnow()},
        )
        return Expense.model_validate(record) if record else None

    async def delete(self, expense_id: str) -> Optional[Expense]:
        record = await self._collection.delete_by_id(expense_id)
        return Expense.model_validate(record) if record else None

    async def list_for_user(
        self,
        user_id: int,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> list[Expense]:
        """
        List a user's expenses, optionally limited to a date range.

        Both ends of the range are inclusive. Results keep store order.
        """
        filter: dict = {"userid": user_id}
        date_range = {}
        if date_from is not None:
            date_range["$gte"] = date_from
        if date_to is not None:
            date_range["$lte"] = date_to
        if date_range:
            filter["date"] = date_range

        records = await self._collection.find(filter)
        return [Expense.model_validate(record) for record in records]

    async def total_for_user(self, user_id: int) -> float:
        """Sum of all of a user's expense amounts, 0 when there are none."""
        return await self._collection.sum("sum", {"userid": user_id})
