"""Input checks shared by the domain operations."""

from typing import Optional

from fitschedule.domain.entities import EventType
from fitschedule.domain.errors import ValidationError


def coerce_event_type(value) -> EventType:
    """Return ``value`` as an EventType, accepting its string form."""
    try:
        return EventType(value)
    except ValueError:
        raise ValidationError(f"Unknown event type '{value}' (expected person or group)")


def check_target(
    event_type: EventType, member_id: Optional[str], group_id: Optional[str]
) -> None:
    """Check that exactly the id matching ``event_type`` is populated."""
    if event_type == EventType.PERSON:
        if not member_id:
            raise ValidationError("A person event needs a member")
        if group_id:
            raise ValidationError("A person event cannot reference a group")
    else:
        if not group_id:
            raise ValidationError("A group event needs a group")
        if member_id:
            raise ValidationError("A group event cannot reference a member")


def check_duration(duration: int) -> None:
    if duration <= 0:
        raise ValidationError(f"Duration must be a positive number of minutes, got {duration}")


def check_name(name: str, what: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError(f"{what} name cannot be empty")
    return name


def check_credits(total: int, remaining: int) -> None:
    """Check a credit batch's counters."""
    if total <= 0:
        raise ValidationError("Total sessions must be a positive number")
    if remaining < 0:
        raise ValidationError("Remaining sessions must be a non-negative number")
    if remaining > total:
        raise ValidationError("Remaining sessions cannot exceed total sessions")
