"""
Report Aggregation

Read-only computations over stored expenses: the monthly report grouped
by category and the lifetime total per user.

Aggregation is deterministic. Reports only contain what the store returns
for the requested window; nothing is estimated or re-sorted.
"""

import calendar
from datetime import datetime, time, timezone
from typing import Any, Optional

import structlog

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import ExpenseCategory
from expense_tracker.models.report import MonthlyReport, ReportEntry
from expense_tracker.models.result import ErrorKind, ServiceResult
from expense_tracker.services.storage import ExpenseStore
from expense_tracker.validation import parse_int
from expense_tracker.validation.validator import (
    MONTH_INVALID,
    USER_ID_PARAM_INVALID,
    YEAR_INVALID,
)


logger = structlog.get_logger(__name__)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """
    Inclusive UTC bounds of a calendar month.

    Returns:
        (first day at 00:00:00, last day at 23:59:59.999999)
    """
    _, last_day = calendar.monthrange(year, month)
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end = datetime.combine(
        start.date().replace(day=last_day),
        time.max,
        tzinfo=timezone.utc,
    )
    return start, end


class ReportAggregator:
    """
    Builds per-user expense reports.

    Depends on ExpenseStore only and never writes to it.
    """

    def __init__(
        self,
        expense_store: ExpenseStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._expenses = expense_store
        self._audit_logger = audit_logger

    async def monthly_report(self, user_id: Any, year: Any, month: Any) -> ServiceResult:
        """
        Group a user's expenses for one month by category.

        Every category is present in the result, in ExpenseCategory order,
        even when it has no entries. Entries keep store order.

        Args:
            user_id, year, month: ints or numeric-looking strings

        Returns:
            ServiceResult with a MonthlyReport, VALIDATION when a parameter
            is not an integer or the month is outside 1-12, or INTERNAL on
            store failure
        """
        user_id, year, month = parse_int(user_id), parse_int(year), parse_int(month)
        if user_id is None:
            return ServiceResult.fail(ErrorKind.VALIDATION, USER_ID_PARAM_INVALID)
        if year is None or not 1 <= year <= 9999:
            return ServiceResult.fail(ErrorKind.VALIDATION, YEAR_INVALID)
        if month is None or not 1 <= month <= 12:
            return ServiceResult.fail(ErrorKind.VALIDATION, MONTH_INVALID)

        date_from, date_to = month_bounds(year, month)

        try:
            expenses = await self._expenses.list_for_user(user_id, date_from, date_to)
        except Exception as e:
            logger.exception("operation_failed", operation="monthly_report")
            if self._audit_logger:
                await self._audit_logger.log_operation_failed(
                    "monthly_report",
                    str(e),
                    details={"userid": user_id, "year": year, "month": month},
                )
            return ServiceResult.fail(ErrorKind.INTERNAL, str(e))

        grouped: dict[ExpenseCategory, list[ReportEntry]] = {
            category: [] for category in ExpenseCategory
        }
        for expense in expenses:
            grouped[expense.category].append(
                ReportEntry(
                    sum=expense.sum,
                    description=expense.description,
                    day=expense.date.day,
                )
            )

        report = MonthlyReport(
            userid=user_id,
            year=year,
            month=month,
            costs=[{category.value: entries} for category, entries in grouped.items()],
        )

        logger.info(
            "monthly_report_built",
            userid=user_id,
            year=year,
            month=month,
            expense_count=len(expenses),
        )
        if self._audit_logger:
            await self._audit_logger.log_report_generated(
                user_id=user_id,
                year=year,
                month=month,
                expense_count=len(expenses),
            )

        return ServiceResult.ok(report)

    async def lifetime_total(self, user_id: int) -> float:
        """Sum of every expense the user owns; 0 when there are none. Store errors propagate."""
        return await self._expenses.total_for_user(user_id)
