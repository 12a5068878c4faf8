"""Shared fixtures: in-memory storage, a controllable clock, audit capture."""

from datetime import datetime, timedelta, timezone

import pytest

from orcamentos.audit import AuditLogger
from orcamentos.models.budget import BudgetFields
from orcamentos.orchestrator import BudgetFlow
from orcamentos.repository import BudgetRepository
from orcamentos.services.storage import (
    DEFAULT_STORAGE_KEY,
    InMemoryKeyValueStore,
    KeyValueBudgetStorage,
)


class StepClock:
    """Clock that moves forward one second every time it is read."""

    def __init__(self, start=datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        moment = self.current
        self.current = self.current + timedelta(seconds=1)
        return moment


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def audit_events():
    return []


@pytest.fixture
def audit_logger(audit_events):
    return AuditLogger(sink=audit_events.append)


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def storage(store, audit_logger):
    return KeyValueBudgetStorage(store, key=DEFAULT_STORAGE_KEY, audit_logger=audit_logger)


@pytest.fixture
def repository(storage, audit_logger, clock):
    return BudgetRepository(storage, audit_logger=audit_logger, clock=clock)


@pytest.fixture
def flow(repository, audit_logger):
    return BudgetFlow(repository=repository, audit_logger=audit_logger)


def make_fields(**overrides) -> BudgetFields:
    values = {
        "titulo": "Cadeiras de escritório",
        "descricao": "6 unidades",
        "fornecedor": "Acme",
        "valor": 1500.0,
        "data": "2024-06-10",
        "categoria": "Móveis",
    }
    values.update(overrides)
    return BudgetFields(**values)


@pytest.fixture
def fields_factory():
    return make_fields
