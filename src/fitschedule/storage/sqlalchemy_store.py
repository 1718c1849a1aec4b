"""SQLAlchemy-backed snapshot store."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fitschedule.domain.entities import Snapshot
from fitschedule.storage import codec
from fitschedule.storage.base import SnapshotStore, StoreReadError
from fitschedule.storage.models import AppData, create_session_factory

logger = logging.getLogger(__name__)

STORAGE_KEY = "fitschedule_data"


class SQLAlchemyStore(SnapshotStore):
    """Keeps the whole snapshot as one JSON blob under a single key."""

    def __init__(self, database_url: str, key: str = STORAGE_KEY):
        """Initialize the store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
            key: Row key the snapshot is stored under
        """
        self.database_url = database_url
        self.key = key
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def load(self) -> Snapshot:
        """Return the stored snapshot.

        Returns an empty snapshot only when nothing is stored yet.

        Raises:
            StoreReadError: If the database cannot be read or the stored blob
                cannot be decoded; the stored row is left as it is
        """
        session = self._get_session()
        try:
            row = session.get(AppData, self.key)
        except SQLAlchemyError as e:
            logger.exception("Error loading app data from %s", self.database_url)
            session.rollback()
            raise StoreReadError(f"Could not read app data from {self.database_url}") from e

        if row is None:
            return Snapshot()
        try:
            return codec.loads(row.value)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.exception("Stored app data under '%s' is unreadable", self.key)
            raise StoreReadError(
                f"Stored app data under '{self.key}' is unreadable; "
                "repair or clear it before making changes"
            ) from e

    def save(self, snapshot: Snapshot) -> bool:
        """Write the snapshot, replacing what was stored.

        Failures are logged and reported through the return value; the
        in-memory snapshot stays authoritative.
        """
        session = self._get_session()
        try:
            row = session.get(AppData, self.key)
            blob = codec.dumps(snapshot)
            if row is None:
                session.add(AppData(key=self.key, value=blob))
            else:
                row.value = blob
            session.commit()
        except SQLAlchemyError:
            logger.exception("Error saving app data to %s", self.database_url)
            session.rollback()
            return False
        return True

    def clear(self) -> None:
        """Remove the stored snapshot."""
        session = self._get_session()
        row = session.get(AppData, self.key)
        if row is not None:
            session.delete(row)
            session.commit()

    def close(self) -> None:
        """Close the current session."""
        if self._session is not None:
            self._session.close()
            self._session = None
