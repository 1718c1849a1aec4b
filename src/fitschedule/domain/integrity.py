"""Cascading deletes that keep references between records consistent."""

import logging
from dataclasses import replace

from fitschedule.domain.entities import Snapshot
from fitschedule.domain.errors import NotFoundError, group_not_found, member_not_found

logger = logging.getLogger(__name__)


def delete_member(snapshot: Snapshot, member_id: str) -> Snapshot:
    """Delete a member and everything that only makes sense with them.

    Removes the member's own events, series and session batches, takes the
    member out of every group, drops groups left with no members and finally
    removes the events and series of those dropped groups.

    Raises:
        NotFoundError: If the member does not exist
    """
    if snapshot.get_member(member_id) is None:
        raise NotFoundError(member_not_found(member_id))

    members = tuple(m for m in snapshot.members if m.id != member_id)
    events = [e for e in snapshot.events if e.member_id != member_id]
    series = [s for s in snapshot.series if s.member_id != member_id]
    sessions = tuple(s for s in snapshot.sessions if s.member_id != member_id)

    groups = []
    for group in snapshot.groups:
        remaining_ids = tuple(mid for mid in group.member_ids if mid != member_id)
        if remaining_ids:
            groups.append(group if remaining_ids == group.member_ids else replace(group, member_ids=remaining_ids))

    # Must run after the group pass: it depends on which groups survived.
    live_group_ids = {g.id for g in groups}
    events = tuple(e for e in events if not e.group_id or e.group_id in live_group_ids)
    series = tuple(s for s in series if not s.group_id or s.group_id in live_group_ids)

    logger.info(
        "Deleted member %s: %d event(s), %d series, %d session batch(es), %d group(s) removed",
        member_id,
        len(snapshot.events) - len(events),
        len(snapshot.series) - len(series),
        len(snapshot.sessions) - len(sessions),
        len(snapshot.groups) - len(groups),
    )
    return snapshot.evolve(
        members=members,
        groups=tuple(groups),
        events=events,
        series=series,
        sessions=sessions,
    )


def delete_group(snapshot: Snapshot, group_id: str) -> Snapshot:
    """Delete a group along with its events and series.

    Raises:
        NotFoundError: If the group does not exist
    """
    if snapshot.get_group(group_id) is None:
        raise NotFoundError(group_not_found(group_id))

    events = tuple(e for e in snapshot.events if e.group_id != group_id)
    series = tuple(s for s in snapshot.series if s.group_id != group_id)
    logger.info(
        "Deleted group %s: %d event(s), %d series removed",
        group_id,
        len(snapshot.events) - len(events),
        len(snapshot.series) - len(series),
    )
    return snapshot.evolve(
        groups=tuple(g for g in snapshot.groups if g.id != group_id),
        events=events,
        series=series,
    )
