"""
Tests for ExpenseService and UserService

Test strategy:
1. Validation failures never reach the store
2. Referential and uniqueness checks
3. Store failures surface as INTERNAL results, not exceptions
"""

import pytest
from datetime import date, datetime, timezone

from expense_tracker.audit import AuditLogger
from expense_tracker.models.audit import AuditEventType
from expense_tracker.models.expense import ExpenseCategory
from expense_tracker.models.report import ExpenseSummary, UserDetails
from expense_tracker.models.result import ErrorKind
from expense_tracker.models.user import User
from expense_tracker.reports import ReportAggregator
from expense_tracker.services.expenses import (
    COST_DELETED,
    COST_NOT_FOUND,
    DATE_INVALID,
    USER_NOT_FOUND as COST_USER_NOT_FOUND,
    ExpenseService,
)
from expense_tracker.services.storage import (
    AUDIT_COLLECTION,
    EXPENSES_COLLECTION,
    USERS_COLLECTION,
    ExpenseStore,
    InMemoryDocumentStore,
    StorageError,
    UserStore,
)
from expense_tracker.services.users import (
    USER_ALREADY_EXISTS,
    USER_DELETED,
    USER_NOT_FOUND,
    UserService,
)
from expense_tracker.validation.validator import (
    ALL_USER_FIELDS_REQUIRED,
    CATEGORY_INVALID,
    DESCRIPTION_REQUIRED,
    SUM_NOT_POSITIVE,
)


class SpyStore(InMemoryDocumentStore):
    """In-memory store that records every collection access."""

    def __init__(self):
        super().__init__()
        self.accessed: list[str] = []

    def collection(self, name):
        collection = super().collection(name)
        return _SpyCollection(collection, self.accessed)


class _SpyCollection:
    def __init__(self, inner, accessed):
        self._inner = inner
        self._accessed = accessed

    def __getattr__(self, attr):
        target = getattr(self._inner, attr)
        if callable(target):
            def recorded(*args, **kwargs):
                self._accessed.append(f"{self._inner.name}.{attr}")
                return target(*args, **kwargs)
            return recorded
        return target


class FailingStore(InMemoryDocumentStore):
    """In-memory store whose expense writes fail."""

    def collection(self, name):
        collection = super().collection(name)
        if name == EXPENSES_COLLECTION:
            async def fail(*args, **kwargs):
                raise StorageError("disk full")
            collection.insert = fail
            collection.update_by_id = fail
            collection.delete_by_id = fail
            collection.sum = fail
        return collection


async def add_user(user_store: UserStore, user_id: int = 1001):
    return await user_store.create(User(
        id=user_id,
        first_name="A",
        last_name="B",
        birthday=date(1990, 1, 1),
        marital_status="single",
    ))


class TestExpenseServiceCreate:
    """Tests for ExpenseService.create."""

    @pytest.mark.asyncio
    async def test_create_returns_summary(self, expense_service, user_store, expense_store):
        """Test that a created expense echoes only its semantic fields."""
        await add_user(user_store)
        result = await expense_service.create("milk", "food", 1001, 8)

        assert result.success
        assert isinstance(result.data, ExpenseSummary)
        assert result.data.category == ExpenseCategory.FOOD
        assert result.data.date.tzinfo is not None
        assert len(await expense_store.list_for_user(1001)) == 1

    @pytest.mark.asyncio
    async def test_create_links_owner_storage_id(self, expense_service, user_store, expense_store):
        """Test that both the numeric id and the owner's storage id are kept."""
        user = await add_user(user_store)
        await expense_service.create("milk", "food", 1001, 8)
        [expense] = await expense_store.list_for_user(1001)
        assert expense.user == user.storage_id

    @pytest.mark.asyncio
    async def test_create_with_explicit_date(self, expense_service, user_store):
        """Test that an ISO date string is accepted and normalized to UTC."""
        await add_user(user_store)
        result = await expense_service.create("rent", "housing", 1001, 500, date="2024-02-29")
        assert result.data.date == datetime(2024, 2, 29, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_create_rejects_bad_date(self, expense_service, user_store):
        """Test that an unparseable date is a validation error."""
        await add_user(user_store)
        result = await expense_service.create("rent", "housing", 1001, 500, date="someday")
        assert result.error_kind == ErrorKind.VALIDATION
        assert result.error_message == DATE_INVALID

    @pytest.mark.asyncio
    async def test_unknown_user_is_not_found(self, expense_service, expense_store):
        """Test that an expense for user 999999 is rejected and not stored."""
        result = await expense_service.create("milk", "food", 999999, 8)
        assert result.error_kind == ErrorKind.NOT_FOUND
        assert result.error_message == COST_USER_NOT_FOUND
        assert await expense_store.list_for_user(999999) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fields, message", [
        ({"sum": 0}, SUM_NOT_POSITIVE),
        ({"sum": -5}, SUM_NOT_POSITIVE),
        ({"category": "travel"}, CATEGORY_INVALID),
        ({"description": ""}, DESCRIPTION_REQUIRED),
    ])
    async def test_validation_happens_before_store_access(self, fields, message):
        """Test that invalid input is rejected without touching the store."""
        store = SpyStore()
        service = ExpenseService(UserStore(store), ExpenseStore(store))
        payload = {"description": "milk", "category": "food", "userid": 1001, "sum": 8}
        payload.update(fields)

        result = await service.create(**payload)

        assert result.error_kind == ErrorKind.VALIDATION
        assert result.error_message == message
        assert store.accessed == []

    @pytest.mark.asyncio
    async def test_user_lookup_precedes_insert(self):
        """Test that the owner is read before the expense is written."""
        store = SpyStore()
        users = UserStore(store)
        await add_user(users)
        store.accessed.clear()

        await ExpenseService(users, ExpenseStore(store)).create("milk", "food", 1001, 8)

        assert store.accessed == [
            f"{USERS_COLLECTION}.find_one",
            f"{EXPENSES_COLLECTION}.insert",
        ]

    @pytest.mark.asyncio
    async def test_store_failure_is_internal(self):
        """Test that a failing insert becomes an INTERNAL result."""
        store = FailingStore()
        users = UserStore(store)
        await add_user(users)
        result = await ExpenseService(users, ExpenseStore(store)).create("milk", "food", 1001, 8)
        assert result.error_kind == ErrorKind.INTERNAL
        assert result.error_message == "disk full"


class TestExpenseServiceUpdateDelete:
    """Tests for ExpenseService.update and ExpenseService.delete."""

    async def _create(self, expense_service, user_store, expense_store):
        await add_user(user_store)
        await expense_service.create("milk", "food", 1001, 8)
        [expense] = await expense_store.list_for_user(1001)
        return expense

    @pytest.mark.asyncio
    async def test_update_merges_fields(self, expense_service, user_store, expense_store):
        """Test that only the supplied fields change."""
        expense = await self._create(expense_service, user_store, expense_store)
        result = await expense_service.update(expense.storage_id, {"sum": "9.5", "extra": 1})

        assert result.success
        assert result.data.sum == 9.5
        assert result.data.description == "milk"
        assert result.data.storage_id == expense.storage_id

    @pytest.mark.asyncio
    async def test_update_skips_create_rules(self, expense_service, user_store, expense_store):
        """Test that update casts types but does not apply create-time rules."""
        expense = await self._create(expense_service, user_store, expense_store)
        result = await expense_service.update(expense.storage_id, {"sum": -1})
        assert result.success
        assert result.data.sum == -1

    @pytest.mark.asyncio
    async def test_update_rejects_uncastable_fields(self, expense_service, user_store, expense_store):
        """Test that a value that cannot be cast is a validation error."""
        expense = await self._create(expense_service, user_store, expense_store)
        result = await expense_service.update(expense.storage_id, {"category": "travel"})
        assert result.error_kind == ErrorKind.VALIDATION
        assert "category" in result.error_message

    @pytest.mark.asyncio
    async def test_update_missing(self, expense_service):
        """Test updating an unknown expense."""
        result = await expense_service.update("missing", {"sum": 1})
        assert result.error_kind == ErrorKind.NOT_FOUND
        assert result.error_message == COST_NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete(self, expense_service, user_store, expense_store):
        """Test deleting an expense, then deleting it again."""
        expense = await self._create(expense_service, user_store, expense_store)

        result = await expense_service.delete(expense.storage_id)
        assert result.success
        assert result.message == COST_DELETED

        again = await expense_service.delete(expense.storage_id)
        assert again.error_kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_store_failure(self):
        """Test that a failing delete becomes an INTERNAL result."""
        store = FailingStore()
        result = await ExpenseService(UserStore(store), ExpenseStore(store)).delete("x")
        assert result.error_kind == ErrorKind.INTERNAL


class TestUserService:
    """Tests for UserService."""

    @pytest.mark.asyncio
    async def test_create(self, user_service):
        """Test creating a user from request-shaped values."""
        result = await user_service.create("1001", "A", "B", "1990-01-01", "single")
        assert result.success
        assert result.data.id == 1001
        assert result.data.birthday == date(1990, 1, 1)

    @pytest.mark.asyncio
    async def test_create_missing_field(self, user_service):
        """Test that every field is required."""
        result = await user_service.create(1001, "A", "B", None, "single")
        assert result.error_kind == ErrorKind.VALIDATION
        assert result.error_message == ALL_USER_FIELDS_REQUIRED

    @pytest.mark.asyncio
    async def test_create_bad_birthday(self, user_service):
        """Test that an unparseable birthday is a validation error."""
        result = await user_service.create(1001, "A", "B", "not-a-date", "single")
        assert result.error_kind == ErrorKind.VALIDATION
        assert "birthday" in result.error_message

    @pytest.mark.asyncio
    async def test_duplicate_id_is_conflict(self, user_service, user_store):
        """Test that an existing id yields CONFLICT and is not overwritten."""
        await user_service.create(1001, "A", "B", "1990-01-01", "single")
        result = await user_service.create(1001, "X", "Y", "2000-01-01", "married")

        assert result.error_kind == ErrorKind.CONFLICT
        assert result.error_message == USER_ALREADY_EXISTS
        user = await user_store.get_by_id(1001)
        assert (user.first_name, user.last_name) == ("A", "B")

    @pytest.mark.asyncio
    async def test_update(self, user_service):
        """Test a partial update; the id is never changed."""
        await user_service.create(1001, "A", "B", "1990-01-01", "single")
        result = await user_service.update("1001", {"id": 7, "marital_status": "married"})
        assert result.success
        assert result.data.id == 1001
        assert result.data.marital_status == "married"
        assert result.data.first_name == "A"

    @pytest.mark.asyncio
    async def test_update_missing(self, user_service):
        """Test updating an unknown user."""
        result = await user_service.update(42, {"first_name": "Z"})
        assert result.error_kind == ErrorKind.NOT_FOUND
        assert result.error_message == USER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_update_bad_id(self, user_service):
        """Test that a non-numeric id is a validation error."""
        result = await user_service.update("abc", {"first_name": "Z"})
        assert result.error_kind == ErrorKind.VALIDATION

    @pytest.mark.asyncio
    async def test_delete_leaves_expenses(self, user_service, expense_service, expense_store):
        """Test that deleting a user does not cascade to their expenses."""
        await user_service.create(1001, "A", "B", "1990-01-01", "single")
        await expense_service.create("milk", "food", 1001, 8)

        result = await user_service.delete(1001)
        assert result.message == USER_DELETED
        assert len(await expense_store.list_for_user(1001)) == 1

        again = await user_service.delete(1001)
        assert again.error_kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_get_details_total(self, user_service, expense_service):
        """Test that details carry the lifetime total."""
        await user_service.create(1001, "A", "B", "1990-01-01", "single")
        for amount in (8, 12.5, 3):
            await expense_service.create("x", "food", 1001, amount)

        result = await user_service.get_details(1001)
        assert result.data == UserDetails(first_name="A", last_name="B", id=1001, total=23.5)

    @pytest.mark.asyncio
    async def test_get_details_zero_total(self, user_service):
        """Test that a user without expenses has total 0."""
        await user_service.create(1001, "A", "B", "1990-01-01", "single")
        result = await user_service.get_details("1001")
        assert result.data.total == 0

    @pytest.mark.asyncio
    async def test_get_details_missing(self, user_service):
        """Test details for an unknown user."""
        result = await user_service.get_details(5)
        assert result.error_kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_get_details_store_failure(self):
        """Test that a failing total becomes an INTERNAL result."""
        store = FailingStore()
        users = UserStore(store)
        await add_user(users)
        service = UserService(users, ReportAggregator(ExpenseStore(store)))
        result = await service.get_details(1001)
        assert result.error_kind == ErrorKind.INTERNAL
        assert result.error_message == "disk full"


class TestAuditTrail:
    """Tests for audit events written by the services."""

    @pytest.mark.asyncio
    async def test_events_are_stored(self):
        """Test that mutations and rejections land in the audit collection."""
        store = InMemoryDocumentStore()
        audit = AuditLogger(store.collection(AUDIT_COLLECTION))
        users = UserStore(store)
        service = UserService(users, ReportAggregator(ExpenseStore(store)), audit_logger=audit)

        await service.create(1001, "A", "B", "1990-01-01", "single")
        await service.create(1001, "A", "B", "1990-01-01", "single")
        await service.create(None, "A", "B", "1990-01-01", "single")

        events = await store.collection(AUDIT_COLLECTION).find()
        assert [e["event_type"] for e in events] == [
            AuditEventType.USER_CREATED.value,
            AuditEventType.VALIDATION_FAILED.value,
        ]

    @pytest.mark.asyncio
    async def test_audit_failure_does_not_break_operation(self, user_store, expense_store):
        """Test that a failing audit write is swallowed and reported."""
        class BrokenCollection:
            name = "audit_events"

            async def insert(self, record):
                raise StorageError("audit sheet missing")

        audit = AuditLogger(BrokenCollection())
        service = ExpenseService(user_store, expense_store, audit_logger=audit)
        await add_user(user_store)

        result = await service.create("milk", "food", 1001, 8)
        assert result.success
