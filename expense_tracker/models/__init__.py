"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from expense_tracker.models.expense import Expense, ExpenseCategory, ExpenseUpdate
from expense_tracker.models.record import StoredRecord, ensure_utc, utcnow
from expense_tracker.models.report import (
    ExpenseSummary,
    MonthlyReport,
    ReportEntry,
    UserDetails,
)
from expense_tracker.models.result import ErrorKind, ServiceResult
from expense_tracker.models.user import User, UserUpdate

__all__ = [
    # Records
    "Expense",
    "ExpenseCategory",
    "ExpenseUpdate",
    "StoredRecord",
    "User",
    "UserUpdate",
    "ensure_utc",
    "utcnow",
    # Responses
    "ExpenseSummary",
    "MonthlyReport",
    "ReportEntry",
    "UserDetails",
    # Results
    "ErrorKind",
    "ServiceResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
