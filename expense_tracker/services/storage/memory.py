"""
In-Memory Storage Implementation

Keeps every collection in an insertion-ordered dict keyed by ``_id``.
Nothing survives a restart. Used as the default development backend
and as the store for tests.
"""

import copy
from typing import Any, Optional
from uuid import uuid4

from expense_tracker.services.storage.filters import matches
from expense_tracker.services.storage.interface import (
    RECORD_ID_FIELD,
    CollectionInterface,
    DocumentStoreInterface,
    DuplicateError,
)


def new_record_id() -> str:
    """Generate an opaque storage identity."""
    return uuid4().hex


class InMemoryCollection(CollectionInterface):
    """A single collection held in process memory."""

    def __init__(self, name: str):
        self._name = name
        self._records: dict[str, dict] = {}

    @property
    def name(self) -> str:
        return self._name

    def __len__(self) -> int:
        return len(self._records)

    async def find_one(self, filter: dict[str, Any]) -> Optional[dict]:
        for record in self._records.values():
            if matches(record, filter):
                return copy.deepcopy(record)
        return None

    async def find(self, filter: Optional[dict[str, Any]] = None) -> list[dict]:
        return [
            copy.deepcopy(record)
            for record in self._records.values()
            if matches(record, filter)
        ]

    async def insert(self, record: dict) -> dict:
        stored = copy.deepcopy(record)
        record_id = stored.get(RECORD_ID_FIELD) or new_record_id()
        if record_id in self._records:
            raise DuplicateError(
                f"Record {record_id} already exists in {self._name}"
            )
        stored[RECORD_ID_FIELD] = record_id
        self._records[record_id] = stored
        return copy.deepcopy(stored)

    async def update_by_id(self, record_id: str, partial: dict) -> Optional[dict]:
        stored = self._records.get(record_id)
        if stored is None:
            return None
        changes = {
            key: copy.deepcopy(value)
            for key, value in partial.items()
            if key != RECORD_ID_FIELD
        }
        stored.update(changes)
        return copy.deepcopy(stored)

    async def delete_by_id(self, record_id: str) -> Optional[dict]:
        return self._records.pop(record_id, None)

    async def sum(self, field: str, filter: Optional[dict[str, Any]] = None) -> float:
        return sum(
            record[field]
            for record in self._records.values()
            if matches(record, filter) and record.get(field) is not None
        )


class InMemoryDocumentStore(DocumentStoreInterface):
    """A store whose collections live in process memory."""

    def __init__(self):
        self._collections: dict[str, InMemoryCollection] = {}

    def collection(self, name: str) -> InMemoryCollection:
        if name not in self._collections:
            self._collections[name] = InMemoryCollection(name)
        return self._collections[name]
