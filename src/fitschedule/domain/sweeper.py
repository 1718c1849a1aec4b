"""Event completion.

The sweep marks every scheduled event whose end time has passed as completed
and charges the ledger for it. It is meant to run once at start-up and then
about once a minute; running it again with the same or a later ``now`` only
touches events that are still scheduled, so no event is ever charged twice.
"""

import logging
from dataclasses import replace
from datetime import datetime, timedelta

from fitschedule.domain.entities import CompletionResult, Event, EventStatus, Snapshot
from fitschedule.domain.errors import (
    InvalidTransitionError,
    NotFoundError,
    event_not_found,
    invalid_transition,
)
from fitschedule.domain.ledger import apply_debits

logger = logging.getLogger(__name__)


def event_end(event: Event) -> datetime:
    """Naive local wall-clock time at which an event finishes."""
    return event.starts_at + timedelta(minutes=event.duration)


def _local_naive(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def _has_ended(event: Event, now: datetime) -> bool:
    # Same as event_end(event) <= now, without overflowing at the end of the calendar.
    return event.starts_at <= now - timedelta(minutes=event.duration)


def _complete(snapshot: Snapshot, event_ids: list[str]) -> CompletionResult:
    done = set(event_ids)
    events = tuple(
        replace(e, status=EventStatus.COMPLETED) if e.id in done else e
        for e in snapshot.events
    )
    sessions, debits = apply_debits(snapshot, event_ids)
    return CompletionResult(
        snapshot=snapshot.evolve(events=events, sessions=sessions),
        completed_event_ids=tuple(event_ids),
        debits=debits,
    )


def apply_completion_sweep(snapshot: Snapshot, now: datetime) -> CompletionResult:
    """Complete every scheduled event that ended at or before ``now``.

    Args:
        snapshot: Current state
        now: Reference instant, as naive local time (aware values are
            converted to local time)

    Returns:
        CompletionResult; when nothing qualifies its snapshot is the same
        object that was passed in and ``changed`` is False
    """
    now = _local_naive(now)
    elapsed = [
        e.id
        for e in snapshot.events
        if e.status == EventStatus.SCHEDULED and _has_ended(e, now)
    ]
    if not elapsed:
        return CompletionResult(snapshot=snapshot)

    result = _complete(snapshot, elapsed)
    logger.info(
        "Sweep at %s completed %d event(s), %d credit(s) debited",
        now.isoformat(timespec="minutes"),
        len(elapsed),
        sum(1 for d in result.debits if d.applied),
    )
    return result


def mark_completed(snapshot: Snapshot, event_id: str) -> CompletionResult:
    """Complete one event by hand, charging the ledger as a sweep would.

    Raises:
        NotFoundError: If the event does not exist
        InvalidTransitionError: If the event was skipped
    """
    event = snapshot.get_event(event_id)
    if event is None:
        raise NotFoundError(event_not_found(event_id))
    if event.status == EventStatus.COMPLETED:
        return CompletionResult(snapshot=snapshot)
    if event.status == EventStatus.SKIPPED:
        raise InvalidTransitionError(invalid_transition(event_id, event.status.value, "completed"))
    return _complete(snapshot, [event_id])


def mark_skipped(snapshot: Snapshot, event_id: str) -> Snapshot:
    """Skip one event. No credit is charged.

    Raises:
        NotFoundError: If the event does not exist
        InvalidTransitionError: If the event was already completed
    """
    event = snapshot.get_event(event_id)
    if event is None:
        raise NotFoundError(event_not_found(event_id))
    if event.status == EventStatus.SKIPPED:
        return snapshot
    if event.status == EventStatus.COMPLETED:
        raise InvalidTransitionError(invalid_transition(event_id, event.status.value, "skipped"))
    return snapshot.evolve(
        events=tuple(
            replace(e, status=EventStatus.SKIPPED) if e.id == event_id else e
            for e in snapshot.events
        )
    )
