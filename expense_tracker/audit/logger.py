"""
Audit Logger

Every mutation, rejection and internal failure passes through here.

The audit logger:
- Always writes a structured local log line
- Appends the event to the audit collection when one is configured
- Never lets a failed audit write break the operation being audited
"""

from typing import Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from expense_tracker.services.storage.interface import CollectionInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The audit collection of the durable store (when configured)
    """

    def __init__(
        self,
        collection: Optional[CollectionInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            collection: Audit collection for persistence.
                        If None, only logs locally.
        """
        self._collection = collection
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the collection write succeeded (or no collection
        is configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._collection is not None:
            try:
                await self._collection.insert(event.to_record())
            except Exception as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_user_created(self, user_id: int) -> None:
        await self.log(AuditEventBuilder.user_created(user_id))

    async def log_user_updated(self, user_id: int, fields: list[str]) -> None:
        await self.log(AuditEventBuilder.user_updated(user_id, fields))

    async def log_user_deleted(self, user_id: int) -> None:
        await self.log(AuditEventBuilder.user_deleted(user_id))

    async def log_expense_created(
        self,
        expense_id: Optional[str],
        user_id: int,
        category: str,
        amount: float,
    ) -> None:
        """Log expense creation."""
        event = AuditEventBuilder.expense_created(
            expense_id=expense_id,
            user_id=user_id,
            category=category,
            amount=amount,
        )
        await self.log(event)

    async def log_expense_updated(self, expense_id: str, fields: list[str]) -> None:
        await self.log(AuditEventBuilder.expense_updated(expense_id, fields))

    async def log_expense_deleted(self, expense_id: str) -> None:
        await self.log(AuditEventBuilder.expense_deleted(expense_id))

    async def log_report_generated(
        self,
        user_id: int,
        year: int,
        month: int,
        expense_count: int,
    ) -> None:
        """Log monthly report generation."""
        event = AuditEventBuilder.report_generated(
            user_id=user_id,
            year=year,
            month=month,
            expense_count=expense_count,
        )
        await self.log(event)

    async def log_validation_failed(
        self,
        operation: str,
        message: str,
        entity_type: Optional[str] = None,
    ) -> None:
        """Log a rejected request."""
        event = AuditEventBuilder.validation_failed(
            operation=operation,
            message=message,
            entity_type=entity_type,
        )
        await self.log(event)

    async def log_operation_failed(
        self,
        operation: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an unexpected failure."""
        event = AuditEventBuilder.operation_failed(
            operation=operation,
            error_message=error_message,
            details=details,
        )
        await self.log(event)
