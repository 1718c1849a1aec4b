"""Schedule service: owns the current snapshot and keeps the store in step."""

from __future__ import annotations

import logging
import threading
import time as _time
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from fitschedule.domain import calendar, integrity, roster, sweeper
from fitschedule.domain.entities import (
    CompletionResult,
    Event,
    Group,
    Member,
    Series,
    Session,
    Snapshot,
)
from fitschedule.domain.recurrence import RecurrenceRule

if TYPE_CHECKING:
    from fitschedule.storage.base import SnapshotStore

logger = logging.getLogger(__name__)

SWEEP_INTERVAL_SECONDS = 60


class ScheduleService:
    """Service applying domain operations to the stored snapshot.

    Every operation reads the current snapshot, runs the matching pure
    function and writes the result back. Access is serialized with a lock so
    a timer-driven sweep and user edits never interleave.
    """

    def __init__(
        self,
        store: SnapshotStore,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize schedule service.

        Args:
            store: Snapshot store
            clock: Source of the current local time for sweeps
        """
        self.store = store
        self.clock = clock
        self._lock = threading.RLock()
        self._snapshot: Optional[Snapshot] = None

    @property
    def snapshot(self) -> Snapshot:
        """Current snapshot, loaded from the store on first use."""
        with self._lock:
            if self._snapshot is None:
                self._snapshot = self.store.load()
            return self._snapshot

    def _commit(self, snapshot: Snapshot) -> Snapshot:
        if snapshot is self._snapshot:
            return snapshot
        self._snapshot = snapshot
        if not self.store.save(snapshot):
            logger.warning("Changes are kept in memory but were not persisted")
        return snapshot

    def apply(self, operation: Callable[..., Snapshot], *args, **kwargs) -> Snapshot:
        """Run a snapshot -> snapshot operation and persist its result."""
        with self._lock:
            return self._commit(operation(self.snapshot, *args, **kwargs))

    # Completion

    def sweep(self, now: Optional[datetime] = None) -> CompletionResult:
        """Complete elapsed events; the store is only written if something changed."""
        with self._lock:
            result = sweeper.apply_completion_sweep(self.snapshot, now or self.clock())
            if result.changed:
                self._commit(result.snapshot)
            return result

    def watch(
        self,
        interval: float = SWEEP_INTERVAL_SECONDS,
        iterations: Optional[int] = None,
        sleep: Callable[[float], None] = _time.sleep,
        on_result: Optional[Callable[[CompletionResult], None]] = None,
    ) -> None:
        """Sweep now and then every ``interval`` seconds.

        Runs until interrupted, or ``iterations`` sweeps when given. A failed
        sweep is logged and the loop carries on with the next interval.
        """
        count = 0
        while iterations is None or count < iterations:
            try:
                result = self.sweep()
            except Exception:
                logger.exception("Sweep failed; trying again in %s seconds", interval)
            else:
                if on_result is not None:
                    on_result(result)
            count += 1
            if iterations is not None and count >= iterations:
                break
            sleep(interval)

    def mark_completed(self, event_id: str) -> CompletionResult:
        with self._lock:
            result = sweeper.mark_completed(self.snapshot, event_id)
            self._commit(result.snapshot)
            return result

    def mark_skipped(self, event_id: str) -> Snapshot:
        return self.apply(sweeper.mark_skipped, event_id)

    # Members

    def add_member(self, name: str, whatsapp: str = "") -> Member:
        with self._lock:
            snapshot, member = roster.add_member(self.snapshot, name, whatsapp)
            self._commit(snapshot)
            return member

    def add_members(self, contacts: Iterable[tuple[str, str]]) -> list[Member]:
        with self._lock:
            snapshot, members = roster.add_members(self.snapshot, contacts)
            self._commit(snapshot)
            return members

    def update_member(self, member_id: str, name: Optional[str] = None, whatsapp: Optional[str] = None) -> None:
        self.apply(roster.update_member, member_id, name=name, whatsapp=whatsapp)

    def delete_member(self, member_id: str) -> None:
        self.apply(integrity.delete_member, member_id)

    # Groups

    def add_group(
        self, name: str, member_ids: Iterable[str], color: str = "", sessions_total: int = 0
    ) -> Group:
        with self._lock:
            snapshot, group = roster.add_group(
                self.snapshot, name, member_ids, color=color, sessions_total=sessions_total
            )
            self._commit(snapshot)
            return group

    def update_group(self, group_id: str, **changes) -> None:
        self.apply(roster.update_group, group_id, **changes)

    def delete_group(self, group_id: str) -> None:
        self.apply(integrity.delete_group, group_id)

    # Session batches

    def add_session(self, member_id: str, total: int, remaining: Optional[int] = None) -> Session:
        with self._lock:
            snapshot, session = roster.add_session(self.snapshot, member_id, total, remaining)
            self._commit(snapshot)
            return session

    def update_session(self, session_id: str, total: Optional[int] = None, remaining: Optional[int] = None) -> None:
        self.apply(roster.update_session, session_id, total=total, remaining=remaining)

    def delete_session(self, session_id: str) -> None:
        self.apply(roster.delete_session, session_id)

    # Events and series

    def add_event(
        self,
        type: str,
        date: date,
        time: time,
        duration: int,
        member_id: Optional[str] = None,
        group_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Event:
        with self._lock:
            snapshot, event = calendar.add_event(
                self.snapshot, type, date, time, duration,
                member_id=member_id, group_id=group_id, notes=notes,
            )
            self._commit(snapshot)
            return event

    def update_event(self, event_id: str, **changes) -> None:
        self.apply(calendar.update_event, event_id, **changes)

    def delete_event(self, event_id: str) -> None:
        self.apply(calendar.delete_event, event_id)

    def create_series(self, rule: RecurrenceRule) -> tuple[Series, list[Event]]:
        with self._lock:
            snapshot, series, events = calendar.create_series(self.snapshot, rule)
            self._commit(snapshot)
            return series, events

    def delete_series(self, series_id: str) -> None:
        self.apply(calendar.delete_series, series_id)

    def create_group_event(self, name: str, member_ids: Iterable[str], date: date, time: time, duration: int, **options) -> tuple[Group, Event]:
        with self._lock:
            snapshot, group, event = calendar.create_group_event(
                self.snapshot, name, member_ids, date, time, duration, **options
            )
            self._commit(snapshot)
            return group, event

    def create_group_series(
        self,
        name: str,
        member_ids: Iterable[str],
        weekdays: Iterable[int],
        start_date: date,
        time: time,
        duration: int,
        sessions_total: int,
        **options,
    ) -> tuple[Group, Series, list[Event]]:
        with self._lock:
            snapshot, group, series, events = calendar.create_group_series(
                self.snapshot, name, member_ids, weekdays, start_date, time, duration, sessions_total, **options
            )
            self._commit(snapshot)
            return group, series, events

    # Profile and settings

    def update_profile(self, **changes) -> None:
        self.apply(roster.update_profile, **changes)

    def update_settings(self, **changes) -> None:
        self.apply(roster.update_settings, **changes)
