"""Session credit ledger.

Each completed event costs every member attending it one credit. A member's
credits are spread over one or more purchased batches (``Session`` records);
debits always come out of the oldest batch that still has credit left. A
member with no credit left is simply not charged.
"""

import logging
from dataclasses import replace
from typing import Iterable

from fitschedule.domain.entities import Debit, Event, EventType, Session, Snapshot

logger = logging.getLogger(__name__)


def members_for_event(snapshot: Snapshot, event: Event) -> list[str]:
    """Return the ids of the members an event charges.

    A group event charges every member of its group, once each. Missing
    members or groups yield nothing.
    """
    if event.type == EventType.PERSON:
        if event.member_id and snapshot.get_member(event.member_id) is not None:
            return [event.member_id]
        logger.debug("Event %s references missing member %s", event.id, event.member_id)
        return []

    group = snapshot.get_group(event.group_id) if event.group_id else None
    if group is None:
        logger.debug("Event %s references missing group %s", event.id, event.group_id)
        return []
    return list(dict.fromkeys(group.member_ids))


def apply_debits(
    snapshot: Snapshot, event_ids: Iterable[str]
) -> tuple[tuple[Session, ...], tuple[Debit, ...]]:
    """Charge one credit per member for each of the given completed events.

    The caller is responsible for passing only events that just moved from
    scheduled to completed; every id given here is charged.

    Args:
        snapshot: State the events and batches are read from
        event_ids: Ids of the newly completed events

    Returns:
        Tuple of (updated session batches in their original order, debits).
        Unknown event ids are ignored.
    """
    sessions = list(snapshot.sessions)
    # Oldest first; list position breaks ties between equal timestamps.
    fifo_order = sorted(range(len(sessions)), key=lambda i: (sessions[i].created_at, i))
    debits: list[Debit] = []

    for event_id in event_ids:
        event = snapshot.get_event(event_id)
        if event is None:
            logger.debug("Skipping debit for unknown event %s", event_id)
            continue

        for member_id in members_for_event(snapshot, event):
            target = next(
                (
                    i
                    for i in fifo_order
                    if sessions[i].member_id == member_id and sessions[i].remaining > 0
                ),
                None,
            )
            if target is None:
                logger.info("Member %s has no session credit left for event %s", member_id, event_id)
                debits.append(Debit(event_id=event_id, member_id=member_id, session_id=None))
                continue

            batch = sessions[target]
            sessions[target] = replace(batch, remaining=batch.remaining - 1)
            debits.append(Debit(event_id=event_id, member_id=member_id, session_id=batch.id))
            logger.debug(
                "Debited session %s of member %s for event %s (%d left)",
                batch.id,
                member_id,
                event_id,
                batch.remaining - 1,
            )

    return tuple(sessions), tuple(debits)

