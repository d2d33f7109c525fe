"""Pytest configuration and fixtures for unit tests."""

from datetime import datetime

import pytest

from easyclean.domain.task import Task
from tests.unit.factories import make_task
from tests.unit.mocks import InMemoryDBClient


@pytest.fixture
def in_memory_db():
    """Provides a fresh InMemoryDBClient for each test."""
    return InMemoryDBClient()


@pytest.fixture
def patched_db(monkeypatch, in_memory_db):
    """Patches easyclean.core.db_client functions to use InMemoryDBClient.

    Services call ``db_client.<function>`` through the module, so patching the
    module attributes is enough.
    """
    monkeypatch.setattr("easyclean.core.db_client.create_record", in_memory_db.create_record)
    monkeypatch.setattr("easyclean.core.db_client.get_record", in_memory_db.get_record)
    monkeypatch.setattr("easyclean.core.db_client.update_record", in_memory_db.update_record)
    monkeypatch.setattr("easyclean.core.db_client.delete_record", in_memory_db.delete_record)
    monkeypatch.setattr("easyclean.core.db_client.list_records", in_memory_db.list_records)
    return in_memory_db


@pytest.fixture
def kitchen_pool() -> list[Task]:
    """Small mixed pool across three zones."""
    return [
        make_task("k1", label="Unload Dishwasher", duration=5, priority=2, recurrence=1),
        make_task("k2", label="Load Dishwasher", duration=10, priority=1, dependency="k1", recurrence=1),
        make_task("k3", label="Clear Countertops", duration=15, priority=2),
        make_task("lr1", zone="Living Room", label="Vacuum Carpet", duration=15, priority=3, recurrence=7),
        make_task("b1", zone="Bathroom", label="Clean Toilet", duration=10, priority=1, recurrence=7),
    ]


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed local evaluation time."""
    return datetime(2026, 3, 10, 12, 0)
