"""Read-only views over a snapshot."""

from fitschedule.domain.entities import CreditLine, Snapshot

LOW_CREDIT_THRESHOLD = 3


def credit_status(remaining: int) -> str:
    """Classify a batch balance as ``exhausted``, ``low`` or ``ok``."""
    if remaining <= 0:
        return "exhausted"
    if remaining <= LOW_CREDIT_THRESHOLD:
        return "low"
    return "ok"


def credit_overview(snapshot: Snapshot) -> list[CreditLine]:
    """Session batches with their member, lowest balance first.

    Batches whose member no longer exists are left out.
    """
    lines = []
    for session in snapshot.sessions:
        member = snapshot.get_member(session.member_id)
        if member is None:
            continue
        lines.append(
            CreditLine(
                session=session,
                member_name=member.name,
                member_whatsapp=member.whatsapp,
                status=credit_status(session.remaining),
            )
        )
    return sorted(lines, key=lambda line: line.session.remaining)


def target_name(snapshot: Snapshot, event) -> str:
    """Display name of whoever an event or series is for; empty if gone."""
    if event.member_id:
        member = snapshot.get_member(event.member_id)
        return member.name if member else ""
    group = snapshot.get_group(event.group_id) if event.group_id else None
    return group.name if group else ""


def member_balance(snapshot: Snapshot, member_id: str) -> int:
    """Total credits a member has left across all batches."""
    return sum(s.remaining for s in snapshot.sessions_for(member_id))
