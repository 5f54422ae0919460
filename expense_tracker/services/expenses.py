"""
Expense Service

Creates, updates and deletes expenses.

Creation order is fixed: validate the fields, parse the date, confirm the
owning user exists, then insert. Validation failures never reach the
store. The user check and the insert are two independent store
operations; a user deleted between them still ends up owning the new
expense.

Updates only cast the supplied fields to their stored types. The
create-time rules (non-empty description, positive sum, positive user
id) are not re-applied.
"""

from datetime import datetime
from typing import Any, Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import Expense, ExpenseUpdate
from expense_tracker.models.record import ensure_utc, utcnow
from expense_tracker.models.report import ExpenseSummary
from expense_tracker.models.result import ErrorKind, ServiceResult
from expense_tracker.services.storage import ExpenseStore, UserStore
from expense_tracker.validation import describe_validation_error, validate_expense_input


logger = structlog.get_logger(__name__)

USER_NOT_FOUND = "User not found. Cannot add cost."
COST_NOT_FOUND = "Cost not found."
COST_DELETED = "Cost deleted successfully."
DATE_INVALID = "Date must be a valid date."

_datetime_adapter = TypeAdapter(datetime)


class ExpenseService:
    """Orchestrates expense writes and enforces the user-existence rule."""

    def __init__(
        self,
        user_store: UserStore,
        expense_store: ExpenseStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._users = user_store
        self._expenses = expense_store
        self._audit_logger = audit_logger

    async def create(
        self,
        description: Any,
        category: Any,
        userid: Any,
        sum: Any,
        date: Any = None,
    ) -> ServiceResult:
        """
        Record a new expense for an existing user.

        Returns:
            ServiceResult with an ExpenseSummary, or VALIDATION / NOT_FOUND /
            INTERNAL on failure
        """
        error = validate_expense_input(description, category, userid, sum)
        if error:
            return await self._reject("create_expense", error)

        if date is None:
            expense_date = utcnow()
        else:
            try:
                expense_date = ensure_utc(_datetime_adapter.validate_python(date))
            except ValidationError:
                return await self._reject("create_expense", DATE_INVALID)

        try:
            user = await self._users.get_by_id(userid)
            if user is None:
                logger.info("expense_rejected_unknown_user", userid=userid)
                return ServiceResult.fail(ErrorKind.NOT_FOUND, USER_NOT_FOUND)

            saved = await self._expenses.create(
                Expense(
                    description=description,
                    category=category,
                    userid=userid,
                    user=user.storage_id,
                    sum=sum,
                    date=expense_date,
                )
            )
        except Exception as e:
            return await self._internal_error("create_expense", e)

        if self._audit_logger:
            await self._audit_logger.log_expense_created(
                expense_id=saved.storage_id,
                user_id=saved.userid,
                category=saved.category.value,
                amount=saved.sum,
            )

        return ServiceResult.ok(ExpenseSummary.from_expense(saved))

    async def update(self, expense_id: str, changes: Any) -> ServiceResult:
        """
        Merge caller-supplied fields into an expense.

        Returns:
            ServiceResult with the full updated Expense, or VALIDATION (a
            field could not be cast) / NOT_FOUND / INTERNAL
        """
        try:
            fields = ExpenseUpdate.model_validate(changes or {}).changes()
        except ValidationError as e:
            return await self._reject("update_expense", describe_validation_error(e))

        try:
            updated = await self._expenses.update(expense_id, fields)
        except Exception as e:
            return await self._internal_error("update_expense", e)

        if updated is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, COST_NOT_FOUND)

        if self._audit_logger:
            await self._audit_logger.log_expense_updated(expense_id, sorted(fields))

        return ServiceResult.ok(updated)

    async def delete(self, expense_id: str) -> ServiceResult:
        """Delete an expense by its storage identity."""
        try:
            deleted = await self._expenses.delete(expense_id)
        except Exception as e:
            return await self._internal_error("delete_expense", e)

        if deleted is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, COST_NOT_FOUND)

        if self._audit_logger:
            await self._audit_logger.log_expense_deleted(expense_id)

        return ServiceResult.ok(message=COST_DELETED)

    async def _reject(self, operation: str, message: str) -> ServiceResult:
        if self._audit_logger:
            await self._audit_logger.log_validation_failed(
                operation=operation,
                message=message,
                entity_type="expense",
            )
        return ServiceResult.fail(ErrorKind.VALIDATION, message)

    async def _internal_error(self, operation: str, error: Exception) -> ServiceResult:
        logger.exception("operation_failed", operation=operation)
        if self._audit_logger:
            await self._audit_logger.log_operation_failed(operation, str(error))
        return ServiceResult.fail(ErrorKind.INTERNAL, str(error))
