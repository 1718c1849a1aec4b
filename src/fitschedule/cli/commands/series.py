"""Recurring series commands."""

from datetime import date

import click

from fitschedule.cli.error_handling import exit_with_error
from fitschedule.cli.params import DATE, TIME, WEEKDAYS
from fitschedule.cli.resolution import resolve_group_or_exit, resolve_member_or_exit
from fitschedule.domain.entities import EventType
from fitschedule.domain.recurrence import RecurrenceRule, describe_weekdays
from fitschedule.domain.reports import target_name


@click.group()
def series_group():
    """Manage recurring series."""
    pass


@series_group.command("create")
@click.option("--member", help="Member name or ID")
@click.option("--group", help="Group name or ID")
@click.option("--weekdays", type=WEEKDAYS, required=True, help="Weekdays, e.g. mon,wed or 1,3 (Sunday is 0)")
@click.option("--start", "start_date", type=DATE, help="First day to consider (defaults to today)")
@click.option("--time", "start_time", type=TIME, required=True, help="Start time (e.g. 09:00)")
@click.option("--duration", type=int, default=60, show_default=True, help="Length in minutes")
@click.option("--count", "sessions_total", type=int, required=True, help="Number of sessions to schedule")
@click.option("--notes", help="Notes copied to every session")
@click.pass_context
def create_series(ctx, member, group, weekdays, start_date, start_time, duration, sessions_total, notes):
    """Schedule a recurring series of sessions.

    Examples:
        fitschedule series create --member Dana --weekdays mon,wed --start 2024-01-01 --time 09:00 --count 8
    """
    service = ctx.obj["service"]
    if bool(member) == bool(group):
        exit_with_error(ctx, ValueError("Specify exactly one of --member or --group"))

    rule = RecurrenceRule(
        type=EventType.PERSON if member else EventType.GROUP,
        weekdays=weekdays,
        start_date=start_date or date.today(),
        time=start_time,
        duration=duration,
        sessions_total=sessions_total,
        member_id=resolve_member_or_exit(ctx, service, member) if member else None,
        group_id=resolve_group_or_exit(ctx, service, group) if group else None,
        notes=notes,
    )
    try:
        series, events = service.create_series(rule)
    except ValueError as e:
        exit_with_error(ctx, e)
        return

    click.echo(
        f"Created series (ID: {series.id}) with {len(events)} sessions on "
        f"{describe_weekdays(series.weekdays)} from {events[0].date.isoformat()} "
        f"to {events[-1].date.isoformat()}"
    )


@series_group.command("list")
@click.pass_context
def list_series(ctx):
    """List recurring series."""
    service = ctx.obj["service"]
    snapshot = service.snapshot

    if not snapshot.series:
        click.echo("No series found.")
        return

    click.echo("\nSeries:")
    click.echo("-" * 90)
    for s in snapshot.series:
        name = target_name(snapshot, s) or "(unknown)"
        click.echo(
            f"{s.id:24s} | {name:20s} | {describe_weekdays(s.weekdays):15s} "
            f"| {s.time.strftime('%H:%M')} | from {s.start_date.isoformat()} | {s.sessions_total} sessions"
        )


@series_group.command("delete")
@click.argument("series_id")
@click.pass_context
def delete_series(ctx, series_id: str):
    """Delete a series record. Its events stay on the calendar."""
    service = ctx.obj["service"]
    try:
        service.delete_series(series_id)
        click.echo(f"Deleted series {series_id}")
    except ValueError as e:
        exit_with_error(ctx, e)


def register_commands(cli):
    """Register series commands with main CLI."""
    cli.add_command(series_group, name="series")
