"""
Audit Models for the Expense Tracker

Every mutation of users and expenses, every rejected request and every
internal failure is recorded as an audit event. Audit events are
append-only: they are never updated or deleted.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from expense_tracker.models.record import utcnow


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Users
    USER_CREATED = "user_created"
    USER_UPDATED = "user_updated"
    USER_DELETED = "user_deleted"

    # Expenses
    EXPENSE_CREATED = "expense_created"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"

    # Reads
    REPORT_GENERATED = "report_generated"

    # Rejections and failures
    VALIDATION_FAILED = "validation_failed"
    OPERATION_FAILED = "operation_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'user', 'expense', 'report')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Domain id or storage identity of the entity"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }

    def to_record(self) -> dict:
        """Convert to a record for the audit collection."""
        record = self.to_log_dict()
        record["timestamp"] = self.timestamp
        return record


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.user_created(user_id=1001)
        event = AuditEventBuilder.expense_deleted(expense_id="...")
    """

    @staticmethod
    def user_created(user_id: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_CREATED,
            entity_type="user",
            entity_id=str(user_id),
            description=f"User created: {user_id}",
        )

    @staticmethod
    def user_updated(user_id: int, fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_UPDATED,
            entity_type="user",
            entity_id=str(user_id),
            description=f"User updated: {user_id}",
            details={"fields": fields},
        )

    @staticmethod
    def user_deleted(user_id: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_DELETED,
            entity_type="user",
            entity_id=str(user_id),
            description=f"User deleted: {user_id}",
        )

    @staticmethod
    def expense_created(
        expense_id: Optional[str],
        user_id: int,
        category: str,
        amount: float,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_CREATED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense created for user {user_id}: {category} {amount}",
            details={
                "userid": user_id,
                "category": category,
                "sum": amount,
            },
        )

    @staticmethod
    def expense_updated(expense_id: str, fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense updated: {expense_id}",
            details={"fields": fields},
        )

    @staticmethod
    def expense_deleted(expense_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense deleted: {expense_id}",
        )

    @staticmethod
    def report_generated(
        user_id: int,
        year: int,
        month: int,
        expense_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_GENERATED,
            severity=AuditSeverity.DEBUG,
            entity_type="report",
            entity_id=str(user_id),
            description=f"Monthly report {year}-{month:02d} for user {user_id}",
            details={
                "year": year,
                "month": month,
                "expense_count": expense_count,
            },
        )

    @staticmethod
    def validation_failed(
        operation: str,
        message: str,
        entity_type: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            description=f"{operation} rejected: {message}",
            details={"operation": operation},
        )

    @staticmethod
    def operation_failed(
        operation: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"{operation} failed",
            error_message=error_message,
            details={"operation": operation, **(details or {})},
        )
