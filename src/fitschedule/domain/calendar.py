"""Record-level operations for events and series."""

from dataclasses import replace
from datetime import date, time
from typing import Callable, Iterable, Optional

from fitschedule.domain.entities import (
    Event,
    EventStatus,
    EventType,
    Group,
    Series,
    Snapshot,
)
from fitschedule.domain.errors import (
    NotFoundError,
    event_not_found,
    group_not_found,
    member_not_found,
    series_not_found,
)
from fitschedule.domain.identifiers import generate_id
from fitschedule.domain.recurrence import RecurrenceRule, expand_series
from fitschedule.domain.roster import add_group
from fitschedule.domain.validation import check_duration, check_target, coerce_event_type


def _check_target_exists(
    snapshot: Snapshot, event_type: EventType, member_id: Optional[str], group_id: Optional[str]
) -> None:
    check_target(event_type, member_id, group_id)
    if event_type == EventType.PERSON:
        if snapshot.get_member(member_id) is None:
            raise NotFoundError(member_not_found(member_id))
    elif snapshot.get_group(group_id) is None:
        raise NotFoundError(group_not_found(group_id))


def add_event(
    snapshot: Snapshot,
    type: EventType | str,
    date: date,
    time: time,
    duration: int,
    member_id: Optional[str] = None,
    group_id: Optional[str] = None,
    notes: Optional[str] = None,
    id_factory: Callable[[], str] = generate_id,
) -> tuple[Snapshot, Event]:
    """Schedule a single event for a member or a group.

    Raises:
        ValidationError: If the type tag or duration is invalid
        NotFoundError: If the member or group does not exist
    """
    event_type = coerce_event_type(type)
    _check_target_exists(snapshot, event_type, member_id, group_id)
    check_duration(duration)

    event = Event(
        id=id_factory(),
        type=event_type,
        date=date,
        time=time,
        duration=duration,
        member_id=member_id,
        group_id=group_id,
        notes=notes or None,
        status=EventStatus.SCHEDULED,
    )
    return snapshot.evolve(events=snapshot.events + (event,)), event


def update_event(
    snapshot: Snapshot,
    event_id: str,
    date: Optional[date] = None,
    time: Optional[time] = None,
    duration: Optional[int] = None,
    notes: Optional[str] = None,
    clear_notes: bool = False,
) -> Snapshot:
    """Reschedule or annotate an event. None leaves a field unchanged.

    Status is not editable here; use ``mark_completed`` or ``mark_skipped``.
    """
    event = snapshot.get_event(event_id)
    if event is None:
        raise NotFoundError(event_not_found(event_id))

    changes = {}
    if date is not None:
        changes["date"] = date
    if time is not None:
        changes["time"] = time
    if duration is not None:
        check_duration(duration)
        changes["duration"] = duration
    if clear_notes:
        changes["notes"] = None
    elif notes is not None:
        changes["notes"] = notes or None
    updated = replace(event, **changes)
    return snapshot.evolve(
        events=tuple(updated if e.id == event_id else e for e in snapshot.events)
    )


def delete_event(snapshot: Snapshot, event_id: str) -> Snapshot:
    if snapshot.get_event(event_id) is None:
        raise NotFoundError(event_not_found(event_id))
    return snapshot.evolve(events=tuple(e for e in snapshot.events if e.id != event_id))


def create_series(
    snapshot: Snapshot,
    rule: RecurrenceRule,
    id_factory: Callable[[], str] = generate_id,
) -> tuple[Snapshot, Series, list[Event]]:
    """Expand a recurrence rule and add the series and its events.

    Raises:
        ValidationError: If the rule is invalid
        NotFoundError: If the member or group does not exist
        RecurrenceLimitError: If the occurrences do not fit in the date ceiling
    """
    _check_target_exists(snapshot, coerce_event_type(rule.type), rule.member_id, rule.group_id)
    series, events = expand_series(rule, id_factory=id_factory)
    return (
        snapshot.evolve(
            series=snapshot.series + (series,),
            events=snapshot.events + tuple(events),
        ),
        series,
        events,
    )


def delete_series(snapshot: Snapshot, series_id: str) -> Snapshot:
    """Delete a series record.

    Its events stay on the calendar and keep their ``series_id``.
    """
    if snapshot.get_series(series_id) is None:
        raise NotFoundError(series_not_found(series_id))
    return snapshot.evolve(series=tuple(s for s in snapshot.series if s.id != series_id))


def create_group_event(
    snapshot: Snapshot,
    name: str,
    member_ids: Iterable[str],
    date: date,
    time: time,
    duration: int,
    color: str = "",
    sessions_total: int = 1,
    notes: Optional[str] = None,
    id_factory: Callable[[], str] = generate_id,
) -> tuple[Snapshot, Group, Event]:
    """Create a new group and its single event in one update."""
    check_duration(duration)
    staged, group = add_group(
        snapshot, name, member_ids, color=color, sessions_total=sessions_total, id_factory=id_factory
    )
    staged, event = add_event(
        staged,
        EventType.GROUP,
        date,
        time,
        duration,
        group_id=group.id,
        notes=notes,
        id_factory=id_factory,
    )
    return staged, group, event


def create_group_series(
    snapshot: Snapshot,
    name: str,
    member_ids: Iterable[str],
    weekdays: Iterable[int],
    start_date: date,
    time: time,
    duration: int,
    sessions_total: int,
    color: str = "",
    notes: Optional[str] = None,
    id_factory: Callable[[], str] = generate_id,
) -> tuple[Snapshot, Group, Series, list[Event]]:
    """Create a new group and its recurring schedule in one update.

    The group's ``sessions_total`` doubles as the number of occurrences.
    Nothing is added unless both the group and the series are valid.
    """
    staged, group = add_group(
        snapshot, name, member_ids, color=color, sessions_total=sessions_total, id_factory=id_factory
    )
    rule = RecurrenceRule(
        type=EventType.GROUP,
        weekdays=tuple(weekdays),
        start_date=start_date,
        time=time,
        duration=duration,
        sessions_total=sessions_total,
        group_id=group.id,
        notes=notes,
    )
    staged, series, events = create_series(staged, rule, id_factory=id_factory)
    return staged, group, series, events


def events_on(snapshot: Snapshot, day: date) -> list[Event]:
    """Events falling on ``day``, earliest first."""
    return sorted((e for e in snapshot.events if e.date == day), key=lambda e: e.time)


def events_between(snapshot: Snapshot, start: Optional[date], end: Optional[date]) -> list[Event]:
    """Events within an inclusive date range, in chronological order."""
    return sorted(
        (
            e
            for e in snapshot.events
            if (start is None or e.date >= start) and (end is None or e.date <= end)
        ),
        key=lambda e: e.starts_at,
    )
