"""CLI helpers for member and group resolution."""

from __future__ import annotations

import click

from fitschedule.cli.error_handling import exit_with_error
from fitschedule.domain.schedule import ScheduleService
from fitschedule.utils.resolver import resolve_group, resolve_member


def resolve_member_or_exit(ctx: click.Context, service: ScheduleService, member: str) -> str:
    """Resolve member name or ID, or exit with a CLI error."""
    try:
        return resolve_member(service.snapshot, member)
    except ValueError as exc:
        exit_with_error(ctx, exc)


def resolve_group_or_exit(ctx: click.Context, service: ScheduleService, group: str) -> str:
    """Resolve group name or ID, or exit with a CLI error."""
    try:
        return resolve_group(service.snapshot, group)
    except ValueError as exc:
        exit_with_error(ctx, exc)
