"""
Application wiring for the Expense Tracker.

Builds one durable store handle and injects it into the typed stores,
the services, the report aggregator and the audit logger. Nothing here
holds request state; every operation reads and writes the store directly.
"""

from typing import NamedTuple, Optional

import structlog

from expense_tracker.audit import AuditLogger
from expense_tracker.config import get_settings
from expense_tracker.reports import ReportAggregator
from expense_tracker.services.expenses import ExpenseService
from expense_tracker.services.storage import (
    AUDIT_COLLECTION,
    DocumentStoreInterface,
    ExpenseStore,
    GoogleSheetsClient,
    GoogleSheetsDocumentStore,
    InMemoryDocumentStore,
    UserStore,
)
from expense_tracker.services.users import UserService


logger = structlog.get_logger(__name__)


class AppComponents(NamedTuple):
    """Everything the HTTP layer needs, built around a single store."""
    store: DocumentStoreInterface
    audit_logger: AuditLogger
    expense_service: ExpenseService
    user_service: UserService
    report_aggregator: ReportAggregator


def create_store() -> DocumentStoreInterface:
    """
    Create the durable store selected by ``AppSettings.storage_backend``.

    Google Sheets is connected to up front. A missing configuration or a
    failed connection is raised, never replaced by the in-memory store.
    """
    backend = get_settings().app.storage_backend
    if backend == "google_sheets":
        try:
            client = GoogleSheetsClient()
            client.get_spreadsheet()
        except Exception as e:
            logger.error("storage_unavailable", backend=backend, error=str(e))
            raise
        return GoogleSheetsDocumentStore(client)
    return InMemoryDocumentStore()


def create_app_components(
    store: Optional[DocumentStoreInterface] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        store: Durable store to use. If None, one is created from settings.
    """
    store = store or create_store()

    audit_logger = AuditLogger(store.collection(AUDIT_COLLECTION))
    user_store = UserStore(store)
    expense_store = ExpenseStore(store)

    report_aggregator = ReportAggregator(expense_store, audit_logger=audit_logger)

    return AppComponents(
        store=store,
        audit_logger=audit_logger,
        expense_service=ExpenseService(user_store, expense_store, audit_logger=audit_logger),
        user_service=UserService(user_store, report_aggregator, audit_logger=audit_logger),
        report_aggregator=report_aggregator,
    )
