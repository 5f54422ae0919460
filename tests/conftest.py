"""Shared fixtures. Everything runs against the in-memory store."""

import pytest
from fastapi.testclient import TestClient

from expense_tracker.api import create_app
from expense_tracker.audit import AuditLogger
from expense_tracker.orchestrator import create_app_components
from expense_tracker.reports import ReportAggregator
from expense_tracker.services.expenses import ExpenseService
from expense_tracker.services.storage import (
    ExpenseStore,
    InMemoryDocumentStore,
    UserStore,
)
from expense_tracker.services.users import UserService


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def user_store(store):
    return UserStore(store)


@pytest.fixture
def expense_store(store):
    return ExpenseStore(store)


@pytest.fixture
def aggregator(expense_store):
    return ReportAggregator(expense_store)


@pytest.fixture
def expense_service(user_store, expense_store):
    return ExpenseService(user_store, expense_store, audit_logger=AuditLogger())


@pytest.fixture
def user_service(user_store, aggregator):
    return UserService(user_store, aggregator, audit_logger=AuditLogger())


@pytest.fixture
def components(store):
    return create_app_components(store)


@pytest.fixture
def client(components):
    return TestClient(create_app(components))
