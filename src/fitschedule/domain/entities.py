"""Domain model entities for fitschedule.

These are pure data classes representing the trainer's world: members,
groups, calendar events, recurring series and prepaid session credits.
A ``Snapshot`` bundles all of them; every domain operation takes a snapshot
and returns a new one, so nothing here is ever mutated in place.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from enum import Enum
from typing import Optional


class EventType(str, Enum):
    """Who an event or series is scheduled for."""

    PERSON = "person"
    GROUP = "group"


class EventStatus(str, Enum):
    """Lifecycle of a single occurrence.

    Only ``SCHEDULED`` moves forward; ``COMPLETED`` and ``SKIPPED`` are terminal.
    """

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class CalendarView(str, Enum):
    """Calendar layout preference."""

    DAY = "day"
    THREE_DAY = "3day"
    WEEK = "week"


@dataclass(frozen=True)
class Member:
    """Training client."""

    id: str
    name: str
    whatsapp: str
    created_at: datetime


@dataclass(frozen=True)
class Group:
    """Named set of members trained together."""

    id: str
    name: str
    color: str
    member_ids: tuple[str, ...]
    sessions_total: int = 0


@dataclass(frozen=True)
class Event:
    """Single calendar occurrence.

    ``member_id`` is set for person events and ``group_id`` for group events;
    the other one is always None.
    """

    id: str
    type: EventType
    date: date
    time: time
    duration: int
    member_id: Optional[str] = None
    group_id: Optional[str] = None
    notes: Optional[str] = None
    status: EventStatus = EventStatus.SCHEDULED
    series_id: Optional[str] = None

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.date, self.time)

    @property
    def target_id(self) -> Optional[str]:
        return self.member_id if self.type == EventType.PERSON else self.group_id


@dataclass(frozen=True)
class Series:
    """Recurrence rule kept for record-keeping after its events were generated.

    ``weekdays`` holds Sunday-based ordinals (Sunday=0 ... Saturday=6).
    ``sessions_total`` is the number of events generated, not a running counter.
    """

    id: str
    type: EventType
    weekdays: tuple[int, ...]
    start_date: date
    time: time
    duration: int
    sessions_total: int
    member_id: Optional[str] = None
    group_id: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class Session:
    """Batch of prepaid session credits bought by one member."""

    id: str
    member_id: str
    total: int
    remaining: int
    created_at: datetime


@dataclass(frozen=True)
class Profile:
    """Trainer profile."""

    name: str = ""
    avatar_uri: Optional[str] = None
    onboarding_complete: bool = False


@dataclass(frozen=True)
class Settings:
    """Application preferences."""

    calendar_view: CalendarView = CalendarView.DAY


@dataclass(frozen=True)
class Snapshot:
    """Complete application state at one point in time."""

    profile: Profile = field(default_factory=Profile)
    settings: Settings = field(default_factory=Settings)
    members: tuple[Member, ...] = ()
    groups: tuple[Group, ...] = ()
    events: tuple[Event, ...] = ()
    series: tuple[Series, ...] = ()
    sessions: tuple[Session, ...] = ()

    def get_member(self, member_id: str) -> Optional[Member]:
        return next((m for m in self.members if m.id == member_id), None)

    def get_group(self, group_id: str) -> Optional[Group]:
        return next((g for g in self.groups if g.id == group_id), None)

    def get_event(self, event_id: str) -> Optional[Event]:
        return next((e for e in self.events if e.id == event_id), None)

    def get_series(self, series_id: str) -> Optional[Series]:
        return next((s for s in self.series if s.id == series_id), None)

    def get_session(self, session_id: str) -> Optional[Session]:
        return next((s for s in self.sessions if s.id == session_id), None)

    def sessions_for(self, member_id: str) -> list[Session]:
        return [s for s in self.sessions if s.member_id == member_id]

    def evolve(self, **changes) -> "Snapshot":
        """Return a copy with the given sections replaced."""
        return replace(self, **changes)


@dataclass(frozen=True)
class Debit:
    """One credit taken (or not) from a member for a completed event.

    ``session_id`` is None when the member had no batch with credit left.
    """

    event_id: str
    member_id: str
    session_id: Optional[str]

    @property
    def applied(self) -> bool:
        return self.session_id is not None


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of completing events, either by sweep or by hand."""

    snapshot: Snapshot
    completed_event_ids: tuple[str, ...] = ()
    debits: tuple[Debit, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.completed_event_ids)


@dataclass(frozen=True)
class CreditLine:
    """Session batch joined with its member, for balance listings."""

    session: Session
    member_name: str
    member_whatsapp: str
    status: str
