"""Utilities for resolving member and group names to IDs."""

from fitschedule.domain.entities import Snapshot


def resolve_member(snapshot: Snapshot, member: str) -> str:
    """Resolve member name or ID to member ID.

    Args:
        snapshot: Snapshot to search
        member: Member ID or name (case-insensitive)

    Returns:
        Member ID

    Raises:
        ValueError: If no member matches, or a name matches several members
    """
    if snapshot.get_member(member) is not None:
        return member

    matches = [m for m in snapshot.members if m.name.lower() == member.strip().lower()]
    if len(matches) > 1:
        raise ValueError(f"Several members are named '{member}'; use the member ID instead")
    if not matches:
        raise ValueError(f"Member '{member}' not found")
    return matches[0].id


def resolve_group(snapshot: Snapshot, group: str) -> str:
    """Resolve group name or ID to group ID.

    Raises:
        ValueError: If no group matches, or a name matches several groups
    """
    if snapshot.get_group(group) is not None:
        return group

    matches = [g for g in snapshot.groups if g.name.lower() == group.strip().lower()]
    if len(matches) > 1:
        raise ValueError(f"Several groups are named '{group}'; use the group ID instead")
    if not matches:
        raise ValueError(f"Group '{group}' not found")
    return matches[0].id
