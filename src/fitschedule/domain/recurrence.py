"""Recurring series expansion.

A series is described by a set of weekdays, a start date and the exact
number of occurrences wanted. Expansion walks forward one day at a time from
the start date (inclusive) and emits an event for every day whose weekday is
in the set, until enough events exist.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, Iterator, Optional

from dateutil.rrule import DAILY, rrule

from fitschedule.domain.entities import Event, EventStatus, EventType, Series
from fitschedule.domain.errors import RecurrenceLimitError, ValidationError
from fitschedule.domain.identifiers import generate_id
from fitschedule.domain.validation import check_duration, check_target, coerce_event_type

# Ten years of calendar days.
MAX_EXPANSION_DAYS = 3653

WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True)
class RecurrenceRule:
    """Parameters for a new series."""

    type: EventType
    weekdays: Iterable[int]
    start_date: date
    time: time
    duration: int
    sessions_total: int
    member_id: Optional[str] = None
    group_id: Optional[str] = None
    notes: Optional[str] = None


def sunday_ordinal(day: date) -> int:
    """Weekday of ``day`` with Sunday as 0 and Saturday as 6."""
    return (day.weekday() + 1) % 7


def normalize_weekdays(weekdays: Iterable[int]) -> tuple[int, ...]:
    """Return the weekday set sorted and deduplicated.

    Raises:
        ValidationError: If the set is empty or holds values outside 0-6
    """
    days = set()
    for day in weekdays:
        if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
            raise ValidationError(f"Weekday must be between 0 (Sunday) and 6 (Saturday), got {day!r}")
        days.add(day)
    if not days:
        raise ValidationError("A series needs at least one weekday")
    return tuple(sorted(days))


def iter_candidate_dates(start_date: date, max_days: int = MAX_EXPANSION_DAYS) -> Iterator[date]:
    """Yield every calendar day from ``start_date`` for ``max_days`` days.

    The walk stops early at the last representable date.
    """
    if (date.max - start_date).days < max_days - 1:
        last = date.max
    else:
        last = start_date + timedelta(days=max_days - 1)
    until = datetime.combine(last, time.min)
    for moment in rrule(DAILY, dtstart=datetime.combine(start_date, time.min), until=until):
        yield moment.date()


def occurrence_dates(
    start_date: date,
    weekdays: Iterable[int],
    count: int,
    max_days: int = MAX_EXPANSION_DAYS,
) -> list[date]:
    """Return the first ``count`` days on or after ``start_date`` falling on ``weekdays``.

    Raises:
        ValidationError: If the weekday set is invalid or ``count`` is not positive
        RecurrenceLimitError: If ``count`` days are not found within ``max_days``
    """
    days = set(normalize_weekdays(weekdays))
    if count <= 0:
        raise ValidationError(f"A series must generate at least one session, got {count}")

    dates: list[date] = []
    for candidate in iter_candidate_dates(start_date, max_days):
        if sunday_ordinal(candidate) in days:
            dates.append(candidate)
            if len(dates) == count:
                return dates

    raise RecurrenceLimitError(
        f"Only {len(dates)} of {count} sessions fit within {max_days} days of {start_date.isoformat()}"
    )


def expand_series(
    rule: RecurrenceRule, id_factory: Callable[[], str] = generate_id
) -> tuple[Series, list[Event]]:
    """Expand a recurrence rule into its Series record and scheduled events.

    Events come back in ascending date order and all carry the new series id.
    Nothing is generated when the rule is invalid.

    Args:
        rule: Recurrence parameters
        id_factory: Callable producing fresh ids

    Returns:
        Tuple of (series, events)

    Raises:
        ValidationError: On an empty or out-of-range weekday set, a
            non-positive session count or duration, or a bad member/group tag
        RecurrenceLimitError: If the occurrences do not fit in the date ceiling
    """
    event_type = coerce_event_type(rule.type)
    check_target(event_type, rule.member_id, rule.group_id)
    check_duration(rule.duration)
    weekdays = normalize_weekdays(rule.weekdays)
    dates = occurrence_dates(rule.start_date, weekdays, rule.sessions_total)

    series = Series(
        id=id_factory(),
        type=event_type,
        weekdays=weekdays,
        start_date=rule.start_date,
        time=rule.time,
        duration=rule.duration,
        sessions_total=rule.sessions_total,
        member_id=rule.member_id,
        group_id=rule.group_id,
        notes=rule.notes,
    )
    events = [
        Event(
            id=id_factory(),
            type=event_type,
            date=day,
            time=rule.time,
            duration=rule.duration,
            member_id=rule.member_id,
            group_id=rule.group_id,
            notes=rule.notes,
            status=EventStatus.SCHEDULED,
            series_id=series.id,
        )
        for day in dates
    ]
    return series, events


def describe_weekdays(weekdays: Iterable[int]) -> str:
    """Short display form, e.g. ``Mon, Wed``."""
    return ", ".join(WEEKDAY_NAMES[d] for d in sorted(set(weekdays)))
