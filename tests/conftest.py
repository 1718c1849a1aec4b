"""Shared pytest fixtures for fitschedule tests."""

import os
import tempfile
from itertools import count

import pytest

from fitschedule.domain.schedule import ScheduleService
from fitschedule.storage.factories import create_sqlite_store

from builders import MemoryStore


@pytest.fixture
def temp_store():
    """Create a temporary SQLite store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path

    yield store

    store.close()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def service(memory_store):
    """Create a ScheduleService over an in-memory store."""
    return ScheduleService(memory_store)


@pytest.fixture
def id_factory():
    """Deterministic id generator: id-1, id-2, ..."""
    counter = count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
