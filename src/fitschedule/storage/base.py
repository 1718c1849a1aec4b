"""Abstract snapshot store interface."""

from abc import ABC, abstractmethod

# Import entities directly to avoid circular import through domain/__init__.py
from fitschedule.domain.entities import Snapshot


class StoreReadError(Exception):
    """Stored data exists but could not be read.

    Raised instead of returning an empty snapshot so that nothing is written
    over the unread data.
    """


class SnapshotStore(ABC):
    """Durable home of the whole application snapshot."""

    @abstractmethod
    def load(self) -> Snapshot:
        """Return the stored snapshot, or an empty one if nothing is stored.

        Raises:
            StoreReadError: If stored data exists but cannot be read
        """
        pass

    @abstractmethod
    def save(self, snapshot: Snapshot) -> bool:
        """Replace the stored snapshot. Returns False if the write failed."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored snapshot."""
        pass

    def close(self) -> None:
        """Release any held resources."""
        pass
