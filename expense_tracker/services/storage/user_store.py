"""User records on top of the durable store, keyed by the numeric user id."""

from typing import Optional

from expense_tracker.models.record import utcnow
from expense_tracker.models.user import User
from expense_tracker.services.storage.interface import (
    USERS_COLLECTION,
    DocumentStoreInterface,
)


class UserStore:
    """
    Typed access to the users collection.

    Lookups go through the numeric ``id``; the storage identity is only
    used internally to address the record for updates and deletes.
    """

    def __init__(self, store: DocumentStoreInterface):
        self._collection = store.collection(USERS_COLLECTION)

    async def get_by_id(self, user_id: int) -> Optional[User]:
        record = await self._collection.find_one({"id": user_id})
        return User.model_validate(record) if record else None

    async def exists(self, user_id: int) -> bool:
        return await self.get_by_id(user_id) is not None

    async def create(self, user: User) -> User:
        record = await self._collection.insert(user.to_record())
        return User.model_validate(record)

    async def update(self, user_id: int, changes: dict) -> Optional[User]:
        """Merge changes into the user; None when no user has that id."""
        current = await self.get_by_id(user_id)
        if current is None:
            return None
        record = await self._collection.update_by_id(
            current.storage_id,
            {**changes, "updated_at": utcnow()},
        )
        return User.model_validate(record) if record else None

    async def delete(self, user_id: int) -> Optional[User]:
        """Delete the user; None when no user has that id."""
        current = await self.get_by_id(user_id)
        if current is None:
            return None
        record = await self._collection.delete_by_id(current.storage_id)
        return User.model_validate(record) if record else None
