"""Tests for the SQLAlchemy snapshot store."""

import logging

import pytest
from sqlalchemy.exc import OperationalError

from fitschedule.domain.entities import Snapshot
from fitschedule.storage.base import StoreReadError
from fitschedule.storage.factories import create_sqlite_store
from fitschedule.storage.models import AppData
from fitschedule.storage.sqlalchemy_store import STORAGE_KEY, SQLAlchemyStore

from builders import batch, member, person_event


def sample_snapshot():
    return Snapshot(
        members=(member("alice"),),
        events=(person_event("e1", "alice"),),
        sessions=(batch("s1", "alice", 5),),
    )


class TestSQLAlchemyStore:
    """Tests for load/save/clear."""

    def test_load_without_data_is_empty(self, temp_store):
        assert temp_store.load() == Snapshot()

    def test_save_then_load(self, temp_store):
        snapshot = sample_snapshot()
        assert temp_store.save(snapshot) is True
        assert temp_store.load() == snapshot

    def test_saved_data_visible_to_new_store(self, temp_store):
        snapshot = sample_snapshot()
        temp_store.save(snapshot)

        other = create_sqlite_store(database_path=temp_store.database_path)
        try:
            assert other.load() == snapshot
        finally:
            other.close()

    def test_save_replaces_single_blob(self, temp_store):
        temp_store.save(sample_snapshot())
        temp_store.save(Snapshot())

        session = temp_store._get_session()
        assert session.query(AppData).count() == 1
        assert temp_store.load() == Snapshot()

    def test_clear(self, temp_store):
        temp_store.save(sample_snapshot())
        temp_store.clear()
        assert temp_store.load() == Snapshot()

    def test_unreadable_blob_raises(self, temp_store, caplog):
        session = temp_store._get_session()
        session.add(AppData(key=STORAGE_KEY, value="{not json"))
        session.commit()

        with caplog.at_level(logging.ERROR):
            with pytest.raises(StoreReadError, match="unreadable"):
                temp_store.load()
        assert "unreadable" in caplog.text
        assert session.get(AppData, STORAGE_KEY).value == "{not json"

    def test_read_failure_raises(self, temp_store, monkeypatch, caplog):
        temp_store.save(sample_snapshot())
        session = temp_store._get_session()

        def failing_get(*args, **kwargs):
            raise OperationalError("SELECT app_data", {}, Exception("database is locked"))

        monkeypatch.setattr(session, "get", failing_get)
        with caplog.at_level(logging.ERROR):
            with pytest.raises(StoreReadError):
                temp_store.load()
        assert "Error loading app data" in caplog.text

        monkeypatch.undo()
        assert temp_store.load() == sample_snapshot()

    def test_save_failure_is_logged(self, temp_store, monkeypatch, caplog):
        session = temp_store._get_session()

        def failing_commit():
            raise OperationalError("UPDATE app_data", {}, Exception("disk I/O error"))

        monkeypatch.setattr(session, "commit", failing_commit)
        with caplog.at_level(logging.ERROR):
            assert temp_store.save(sample_snapshot()) is False
        assert "Error saving app data" in caplog.text

    def test_custom_key(self, temp_store):
        other = SQLAlchemyStore(temp_store.database_url, key="backup")
        try:
            other.save(sample_snapshot())
            assert temp_store.load() == Snapshot()
            assert other.load() == sample_snapshot()
        finally:
            other.close()


def test_factory_uses_environment(tmp_path, monkeypatch):
    db_path = tmp_path / "env.db"
    monkeypatch.setenv("FITSCHEDULE_DB_PATH", str(db_path))

    store = create_sqlite_store()
    try:
        assert store.database_url == f"sqlite:///{db_path}"
    finally:
        store.close()


def test_factory_defaults_to_home(tmp_path, monkeypatch):
    monkeypatch.delenv("FITSCHEDULE_DB_PATH", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    store = create_sqlite_store()
    try:
        assert store.database_url == f"sqlite:///{tmp_path / '.fitschedule' / 'fitschedule.db'}"
    finally:
        store.close()
