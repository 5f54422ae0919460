"""
Services package.

ExpenseService and UserService live in ``services.expenses`` and
``services.users``; the durable store and typed stores in ``services.storage``.
"""

from expense_tracker.services.storage import (
    CollectionInterface,
    ConnectionError,
    DocumentStoreInterface,
    DuplicateError,
    ExpenseStore,
    GoogleSheetsDocumentStore,
    InMemoryDocumentStore,
    StorageError,
    UserStore,
)

__all__ = [
    # Storage services
    "CollectionInterface",
    "ConnectionError",
    "DocumentStoreInterface",
    "DuplicateError",
    "ExpenseStore",
    "GoogleSheetsDocumentStore",
    "InMemoryDocumentStore",
    "StorageError",
    "UserStore",
]
