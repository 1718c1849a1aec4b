"""Persistence layer for fitschedule."""

from fitschedule.storage.base import SnapshotStore, StoreReadError
from fitschedule.storage.factories import create_sqlite_store

__all__ = ["SnapshotStore", "StoreReadError", "create_sqlite_store"]
