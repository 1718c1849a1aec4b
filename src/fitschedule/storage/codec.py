"""Conversion between domain snapshots and their stored JSON form.

Field names follow the camelCase layout of earlier exports (``memberId``,
``sessionsTotal``, ``createdAt``) so existing data loads unchanged. Dates are
ISO ``YYYY-MM-DD`` strings and times ``HH:MM``.
"""

import json
from datetime import datetime, time, UTC
from typing import Any, Optional

from dateutil import parser as date_parser

from fitschedule.domain import entities as domain


def default_data() -> dict[str, Any]:
    """Stored form of an empty snapshot."""
    return {
        "profile": {"name": "", "avatarUri": None, "onboardingComplete": False},
        "settings": {"calendarViewType": domain.CalendarView.DAY.value},
        "members": [],
        "groups": [],
        "events": [],
        "series": [],
        "sessions": [],
    }


def _timestamp(value: str) -> datetime:
    parsed = date_parser.isoparse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _time(value: str) -> time:
    return datetime.strptime(value[:5], "%H:%M").time()


def _date(value: str):
    return date_parser.isoparse(value).date()


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


# To stored form

def member_to_dict(member: domain.Member) -> dict[str, Any]:
    return {
        "id": member.id,
        "name": member.name,
        "whatsapp": member.whatsapp,
        "createdAt": member.created_at.isoformat(),
    }


def group_to_dict(group: domain.Group) -> dict[str, Any]:
    return {
        "id": group.id,
        "name": group.name,
        "color": group.color,
        "memberIds": list(group.member_ids),
        "sessionsTotal": group.sessions_total,
    }


def event_to_dict(event: domain.Event) -> dict[str, Any]:
    return _drop_none(
        {
            "id": event.id,
            "type": event.type.value,
            "memberId": event.member_id,
            "groupId": event.group_id,
            "date": event.date.isoformat(),
            "time": event.time.strftime("%H:%M"),
            "duration": event.duration,
            "notes": event.notes,
            "status": event.status.value,
            "seriesId": event.series_id,
        }
    )


def series_to_dict(series: domain.Series) -> dict[str, Any]:
    return _drop_none(
        {
            "id": series.id,
            "type": series.type.value,
            "memberId": series.member_id,
            "groupId": series.group_id,
            "weekdays": list(series.weekdays),
            "startDate": series.start_date.isoformat(),
            "time": series.time.strftime("%H:%M"),
            "duration": series.duration,
            "sessionsTotal": series.sessions_total,
            "notes": series.notes,
        }
    )


def session_to_dict(session: domain.Session) -> dict[str, Any]:
    return {
        "id": session.id,
        "memberId": session.member_id,
        "total": session.total,
        "remaining": session.remaining,
        "createdAt": session.created_at.isoformat(),
    }


def snapshot_to_dict(snapshot: domain.Snapshot) -> dict[str, Any]:
    """Convert a snapshot to its stored form."""
    return {
        "profile": {
            "name": snapshot.profile.name,
            "avatarUri": snapshot.profile.avatar_uri,
            "onboardingComplete": snapshot.profile.onboarding_complete,
        },
        "settings": {"calendarViewType": snapshot.settings.calendar_view.value},
        "members": [member_to_dict(m) for m in snapshot.members],
        "groups": [group_to_dict(g) for g in snapshot.groups],
        "events": [event_to_dict(e) for e in snapshot.events],
        "series": [series_to_dict(s) for s in snapshot.series],
        "sessions": [session_to_dict(s) for s in snapshot.sessions],
    }


# From stored form

def member_from_dict(data: dict[str, Any]) -> domain.Member:
    return domain.Member(
        id=data["id"],
        name=data["name"],
        whatsapp=data.get("whatsapp", ""),
        created_at=_timestamp(data["createdAt"]),
    )


def group_from_dict(data: dict[str, Any]) -> domain.Group:
    return domain.Group(
        id=data["id"],
        name=data["name"],
        color=data.get("color", ""),
        member_ids=tuple(dict.fromkeys(data.get("memberIds", []))),
        sessions_total=int(data.get("sessionsTotal", 0)),
    )


def event_from_dict(data: dict[str, Any]) -> domain.Event:
    return domain.Event(
        id=data["id"],
        type=domain.EventType(data["type"]),
        date=_date(data["date"]),
        time=_time(data["time"]),
        duration=int(data["duration"]),
        member_id=data.get("memberId"),
        group_id=data.get("groupId"),
        notes=data.get("notes"),
        status=domain.EventStatus(data.get("status", "scheduled")),
        series_id=data.get("seriesId"),
    )


def series_from_dict(data: dict[str, Any]) -> domain.Series:
    return domain.Series(
        id=data["id"],
        type=domain.EventType(data["type"]),
        weekdays=tuple(sorted(set(data["weekdays"]))),
        start_date=_date(data["startDate"]),
        time=_time(data["time"]),
        duration=int(data["duration"]),
        sessions_total=int(data["sessionsTotal"]),
        member_id=data.get("memberId"),
        group_id=data.get("groupId"),
        notes=data.get("notes"),
    )


def session_from_dict(data: dict[str, Any]) -> domain.Session:
    return domain.Session(
        id=data["id"],
        member_id=data["memberId"],
        total=int(data["total"]),
        remaining=int(data["remaining"]),
        created_at=_timestamp(data["createdAt"]),
    )


def snapshot_from_dict(data: Optional[dict[str, Any]]) -> domain.Snapshot:
    """Build a snapshot from stored data, filling missing sections with defaults."""
    merged = {**default_data(), **(data or {})}
    profile = {**default_data()["profile"], **(merged["profile"] or {})}
    settings = {**default_data()["settings"], **(merged["settings"] or {})}
    return domain.Snapshot(
        profile=domain.Profile(
            name=profile["name"],
            avatar_uri=profile.get("avatarUri"),
            onboarding_complete=bool(profile["onboardingComplete"]),
        ),
        settings=domain.Settings(calendar_view=domain.CalendarView(settings["calendarViewType"])),
        members=tuple(member_from_dict(m) for m in merged["members"]),
        groups=tuple(group_from_dict(g) for g in merged["groups"]),
        events=tuple(event_from_dict(e) for e in merged["events"]),
        series=tuple(series_from_dict(s) for s in merged["series"]),
        sessions=tuple(session_from_dict(s) for s in merged["sessions"]),
    )


def dumps(snapshot: domain.Snapshot) -> str:
    return json.dumps(snapshot_to_dict(snapshot))


def loads(blob: str) -> domain.Snapshot:
    return snapshot_from_dict(json.loads(blob))
