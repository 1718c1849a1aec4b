"""Store factory functions."""

import os
from pathlib import Path
from typing import Optional

from fitschedule.storage.sqlalchemy_store import SQLAlchemyStore


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyStore:
    """Create a SQLite-backed snapshot store.

    Args:
        database_path: Path to SQLite database file. If None, checks
            FITSCHEDULE_DB_PATH environment variable, then defaults to
            ~/.fitschedule/fitschedule.db

    Returns:
        SQLAlchemyStore instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("FITSCHEDULE_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".fitschedule"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "fitschedule.db")

    return SQLAlchemyStore(f"sqlite:///{database_path}")
