"""Record-level operations for members, groups, session batches and preferences.

Each function takes a snapshot and returns a new one (plus the created
record where there is one). Bad input raises before anything is built.
"""

from dataclasses import replace
from datetime import datetime, UTC
from typing import Callable, Iterable, Optional

from fitschedule.domain.entities import (
    CalendarView,
    Group,
    Member,
    Profile,
    Session,
    Snapshot,
)
from fitschedule.domain.errors import (
    NotFoundError,
    ValidationError,
    group_not_found,
    member_not_found,
    session_not_found,
)
from fitschedule.domain.identifiers import generate_id
from fitschedule.domain.validation import check_credits, check_name


def _now() -> datetime:
    return datetime.now(UTC)


# Members

def add_member(
    snapshot: Snapshot,
    name: str,
    whatsapp: str = "",
    id_factory: Callable[[], str] = generate_id,
) -> tuple[Snapshot, Member]:
    """Add a member.

    Raises:
        ValidationError: If the name is blank
    """
    member = Member(
        id=id_factory(),
        name=check_name(name, "Member"),
        whatsapp=(whatsapp or "").strip(),
        created_at=_now(),
    )
    return snapshot.evolve(members=snapshot.members + (member,)), member


def add_members(
    snapshot: Snapshot,
    contacts: Iterable[tuple[str, str]],
    id_factory: Callable[[], str] = generate_id,
) -> tuple[Snapshot, list[Member]]:
    """Add several members at once from (name, whatsapp) pairs.

    All names are checked before any member is added.
    """
    created_at = _now()
    members = [
        Member(
            id=id_factory(),
            name=check_name(name, "Member"),
            whatsapp=(whatsapp or "").strip(),
            created_at=created_at,
        )
        for name, whatsapp in contacts
    ]
    return snapshot.evolve(members=snapshot.members + tuple(members)), members


def update_member(
    snapshot: Snapshot,
    member_id: str,
    name: Optional[str] = None,
    whatsapp: Optional[str] = None,
) -> Snapshot:
    """Update member fields. None leaves a field unchanged."""
    member = snapshot.get_member(member_id)
    if member is None:
        raise NotFoundError(member_not_found(member_id))

    changes = {}
    if name is not None:
        changes["name"] = check_name(name, "Member")
    if whatsapp is not None:
        changes["whatsapp"] = whatsapp.strip()
    updated = replace(member, **changes)
    return snapshot.evolve(
        members=tuple(updated if m.id == member_id else m for m in snapshot.members)
    )


# Groups

def _check_group_members(snapshot: Snapshot, member_ids: Iterable[str]) -> tuple[str, ...]:
    unique_ids = tuple(dict.fromkeys(member_ids))
    if not unique_ids:
        raise ValidationError("A group needs at least one member")
    for member_id in unique_ids:
        if snapshot.get_member(member_id) is None:
            raise NotFoundError(member_not_found(member_id))
    return unique_ids


def add_group(
    snapshot: Snapshot,
    name: str,
    member_ids: Iterable[str],
    color: str = "",
    sessions_total: int = 0,
    id_factory: Callable[[], str] = generate_id,
) -> tuple[Snapshot, Group]:
    """Add a group of existing members.

    Raises:
        ValidationError: If the name is blank, the member set is empty or
            sessions_total is negative
        NotFoundError: If a member id does not exist
    """
    if sessions_total < 0:
        raise ValidationError("Group session count cannot be negative")
    group = Group(
        id=id_factory(),
        name=check_name(name, "Group"),
        color=color,
        member_ids=_check_group_members(snapshot, member_ids),
        sessions_total=sessions_total,
    )
    return snapshot.evolve(groups=snapshot.groups + (group,)), group


def update_group(
    snapshot: Snapshot,
    group_id: str,
    name: Optional[str] = None,
    color: Optional[str] = None,
    member_ids: Optional[Iterable[str]] = None,
    sessions_total: Optional[int] = None,
) -> Snapshot:
    """Update group fields. None leaves a field unchanged.

    An update can never leave the group empty; delete the group instead.
    """
    group = snapshot.get_group(group_id)
    if group is None:
        raise NotFoundError(group_not_found(group_id))

    changes = {}
    if name is not None:
        changes["name"] = check_name(name, "Group")
    if color is not None:
        changes["color"] = color
    if member_ids is not None:
        changes["member_ids"] = _check_group_members(snapshot, member_ids)
    if sessions_total is not None:
        if sessions_total < 0:
            raise ValidationError("Group session count cannot be negative")
        changes["sessions_total"] = sessions_total
    updated = replace(group, **changes)
    return snapshot.evolve(
        groups=tuple(updated if g.id == group_id else g for g in snapshot.groups)
    )


# Session batches

def add_session(
    snapshot: Snapshot,
    member_id: str,
    total: int,
    remaining: Optional[int] = None,
    id_factory: Callable[[], str] = generate_id,
) -> tuple[Snapshot, Session]:
    """Record a purchased batch of session credits.

    ``remaining`` defaults to ``total`` for a freshly bought batch.

    Raises:
        NotFoundError: If the member does not exist
        ValidationError: If the counters are out of range
    """
    if snapshot.get_member(member_id) is None:
        raise NotFoundError(member_not_found(member_id))
    if remaining is None:
        remaining = total
    check_credits(total, remaining)

    session = Session(
        id=id_factory(),
        member_id=member_id,
        total=total,
        remaining=remaining,
        created_at=_now(),
    )
    return snapshot.evolve(sessions=snapshot.sessions + (session,)), session


def update_session(
    snapshot: Snapshot,
    session_id: str,
    total: Optional[int] = None,
    remaining: Optional[int] = None,
) -> Snapshot:
    """Correct a batch's counters."""
    session = snapshot.get_session(session_id)
    if session is None:
        raise NotFoundError(session_not_found(session_id))

    updated = replace(
        session,
        total=session.total if total is None else total,
        remaining=session.remaining if remaining is None else remaining,
    )
    check_credits(updated.total, updated.remaining)
    return snapshot.evolve(
        sessions=tuple(updated if s.id == session_id else s for s in snapshot.sessions)
    )


def delete_session(snapshot: Snapshot, session_id: str) -> Snapshot:
    if snapshot.get_session(session_id) is None:
        raise NotFoundError(session_not_found(session_id))
    return snapshot.evolve(sessions=tuple(s for s in snapshot.sessions if s.id != session_id))


# Profile and settings

def update_profile(
    snapshot: Snapshot,
    name: Optional[str] = None,
    avatar_uri: Optional[str] = None,
    onboarding_complete: Optional[bool] = None,
) -> Snapshot:
    profile: Profile = snapshot.profile
    if name is not None:
        profile = replace(profile, name=name.strip())
    if avatar_uri is not None:
        profile = replace(profile, avatar_uri=avatar_uri or None)
    if onboarding_complete is not None:
        profile = replace(profile, onboarding_complete=onboarding_complete)
    return snapshot.evolve(profile=profile)


def update_settings(snapshot: Snapshot, calendar_view: Optional[str] = None) -> Snapshot:
    settings = snapshot.settings
    if calendar_view is not None:
        try:
            settings = replace(settings, calendar_view=CalendarView(calendar_view))
        except ValueError:
            raise ValidationError(
                f"Unknown calendar view '{calendar_view}' (expected day, 3day or week)"
            )
    return snapshot.evolve(settings=settings)
