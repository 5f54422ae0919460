"""
Abstract Storage Interface

The durable store is modelled as a set of named collections of plain dict
records. Each record gets an opaque string identity under the ``_id`` key
when inserted; that identity is independent of any domain id a record
carries (a user's numeric ``id``, an expense's ``userid``).

Filters are dicts mapping a field to either a value (equality) or an
operator dict: ``{"date": {"$gte": start, "$lte": end}}``. Supported
operators are listed in ``filters.OPERATORS``.

Implementations:
- InMemoryDocumentStore (memory.py) for development and tests
- GoogleSheetsDocumentStore (google_sheets.py) for persistent storage

Business logic only ever sees these interfaces.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


RECORD_ID_FIELD = "_id"

# Collection names used by the stores
USERS_COLLECTION = "users"
EXPENSES_COLLECTION = "expenses"
AUDIT_COLLECTION = "audit_events"


class CollectionInterface(ABC):
    """
    Abstract interface for one collection of records.

    Records returned by any method are copies: mutating them never
    changes what is stored.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Collection name."""
        pass

    @abstractmethod
    async def find_one(self, filter: dict[str, Any]) -> Optional[dict]:
        """
        Find the first record matching a filter.

        Args:
            filter: Field filter (see module docstring)

        Returns:
            The first matching record in insertion order, None if no match
        """
        pass

    @abstractmethod
    async def find(self, filter: Optional[dict[str, Any]] = None) -> list[dict]:
        """
        Find all records matching a filter.

        Args:
            filter: Field filter; None or {} matches everything

        Returns:
            Matching records in insertion order
        """
        pass

    @abstractmethod
    async def insert(self, record: dict) -> dict:
        """
        Insert a new record.

        Args:
            record: The record to store. An ``_id`` is generated when absent.

        Returns:
            The stored record including its ``_id``

        Raises:
            DuplicateError: If a record with the same ``_id`` exists
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def update_by_id(self, record_id: str, partial: dict) -> Optional[dict]:
        """
        Merge fields into the record with the given identity.

        Args:
            record_id: The record's ``_id``
            partial: Fields to overwrite; ``_id`` is never changed

        Returns:
            The updated record, None if no record has that identity
        """
        pass

    @abstractmethod
    async def delete_by_id(self, record_id: str) -> Optional[dict]:
        """
        Delete the record with the given identity.

        Returns:
            The deleted record, None if no record has that identity
        """
        pass

    @abstractmethod
    async def sum(self, field: str, filter: Optional[dict[str, Any]] = None) -> float:
        """
        Sum a numeric field over the records matching a filter.

        Returns:
            The total, 0 when nothing matches
        """
        pass


class DocumentStoreInterface(ABC):
    """Abstract interface for a durable store made of named collections."""

    @abstractmethod
    def collection(self, name: str) -> CollectionInterface:
        """
        Get a collection by name, creating it on first use.

        Raises:
            StorageError: If the collection cannot be opened
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
