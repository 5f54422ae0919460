"""
Storage Services Package

Provides the abstract durable-store interface, its in-memory and
Google Sheets implementations, and the typed user/expense stores
built on top of it.
"""

from expense_tracker.services.storage.expense_store import ExpenseStore
from expense_tracker.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsCollection,
    GoogleSheetsDocumentStore,
)
from expense_tracker.services.storage.interface import (
    AUDIT_COLLECTION,
    EXPENSES_COLLECTION,
    USERS_COLLECTION,
    CollectionInterface,
    ConnectionError,
    DocumentStoreInterface,
    DuplicateError,
    StorageError,
)
from expense_tracker.services.storage.memory import (
    InMemoryCollection,
    InMemoryDocumentStore,
)
from expense_tracker.services.storage.user_store import UserStore

__all__ = [
    # Interfaces
    "CollectionInterface",
    "DocumentStoreInterface",
    # Collection names
    "AUDIT_COLLECTION",
    "EXPENSES_COLLECTION",
    "USERS_COLLECTION",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsCollection",
    "GoogleSheetsDocumentStore",
    "InMemoryCollection",
    "InMemoryDocumentStore",
    # Typed stores
    "ExpenseStore",
    "UserStore",
]
