"""Event commands."""

import click

from fitschedule.cli.error_handling import exit_with_error
from fitschedule.cli.params import DATE, TIME
from fitschedule.cli.resolution import resolve_group_or_exit, resolve_member_or_exit
from fitschedule.domain.calendar import events_between, events_on
from fitschedule.domain.entities import EventType
from fitschedule.domain.reports import target_name


def format_event(snapshot, event) -> str:
    """One-line display of an event."""
    name = target_name(snapshot, event) or "(unknown)"
    kind = "group" if event.type == EventType.GROUP else "person"
    line = (
        f"{event.id:24s} | {event.date.isoformat()} {event.time.strftime('%H:%M')} "
        f"| {event.duration:3d} min | {kind:6s} | {name:20s} | {event.status.value}"
    )
    if event.notes:
        line += f" | {event.notes}"
    return line


@click.group()
def event_group():
    """Manage calendar events."""
    pass


@event_group.command("add")
@click.option("--member", help="Member name or ID")
@click.option("--group", help="Group name or ID")
@click.option("--date", "event_date", type=DATE, required=True, help="Date (e.g. 2024-01-15, tomorrow, next monday)")
@click.option("--time", "event_time", type=TIME, required=True, help="Start time (e.g. 09:00)")
@click.option("--duration", type=int, default=60, show_default=True, help="Length in minutes")
@click.option("--notes", help="Notes")
@click.pass_context
def add_event(ctx, member, group, event_date, event_time, duration, notes):
    """Schedule a single session for a member or a group.

    Examples:
        fitschedule event add --member Dana --date tomorrow --time 09:00
        fitschedule event add --group "Morning crew" --date 2024-01-15 --time 07:00 --duration 45
    """
    service = ctx.obj["service"]
    if bool(member) == bool(group):
        exit_with_error(ctx, ValueError("Specify exactly one of --member or --group"))

    try:
        if member:
            event = service.add_event(
                EventType.PERSON, event_date, event_time, duration,
                member_id=resolve_member_or_exit(ctx, service, member), notes=notes,
            )
        else:
            event = service.add_event(
                EventType.GROUP, event_date, event_time, duration,
                group_id=resolve_group_or_exit(ctx, service, group), notes=notes,
            )
        click.echo(f"Scheduled event on {event.date.isoformat()} at {event.time.strftime('%H:%M')} (ID: {event.id})")
    except ValueError as e:
        exit_with_error(ctx, e)


@event_group.command("list")
@click.option("--date", "on_date", type=DATE, help="Only events on this date")
@click.option("--from", "start_date", type=DATE, help="Start date (inclusive)")
@click.option("--to", "end_date", type=DATE, help="End date (inclusive)")
@click.option("--status", type=click.Choice(["scheduled", "completed", "skipped"]), help="Filter by status")
@click.pass_context
def list_events(ctx, on_date, start_date, end_date, status):
    """List events in chronological order."""
    service = ctx.obj["service"]
    snapshot = service.snapshot

    if on_date is not None and (start_date or end_date):
        exit_with_error(ctx, ValueError("--date cannot be combined with --from or --to"))

    if on_date is not None:
        events = events_on(snapshot, on_date)
    else:
        events = events_between(snapshot, start_date, end_date)
    if status:
        events = [e for e in events if e.status.value == status]

    if not events:
        click.echo("No events found.")
        return

    click.echo("\nEvents:")
    click.echo("-" * 100)
    for event in events:
        click.echo(format_event(snapshot, event))


@event_group.command("complete")
@click.argument("event_id")
@click.pass_context
def complete_event(ctx, event_id: str):
    """Mark an event as completed and charge session credits."""
    service = ctx.obj["service"]
    try:
        result = service.mark_completed(event_id)
    except ValueError as e:
        exit_with_error(ctx, e)
        return

    if not result.changed:
        click.echo(f"Event {event_id} was already completed")
        return
    click.echo(f"Completed event {event_id}")
    for debit in result.debits:
        member = result.snapshot.get_member(debit.member_id)
        name = member.name if member else debit.member_id
        if debit.applied:
            click.echo(f"  Charged one session to {name}")
        else:
            click.echo(f"  {name} has no sessions left")


@event_group.command("skip")
@click.argument("event_id")
@click.pass_context
def skip_event(ctx, event_id: str):
    """Mark an event as skipped. No credits are charged."""
    service = ctx.obj["service"]
    try:
        service.mark_skipped(event_id)
        click.echo(f"Skipped event {event_id}")
    except ValueError as e:
        exit_with_error(ctx, e)


@event_group.command("edit")
@click.argument("event_id")
@click.option("--date", "event_date", type=DATE, help="New date")
@click.option("--time", "event_time", type=TIME, help="New start time")
@click.option("--duration", type=int, help="New length in minutes")
@click.option("--notes", help="New notes")
@click.option("--clear-notes", is_flag=True, help="Remove the notes")
@click.pass_context
def edit_event(ctx, event_id, event_date, event_time, duration, notes, clear_notes):
    """Reschedule or annotate an event."""
    service = ctx.obj["service"]
    if notes is not None and clear_notes:
        exit_with_error(ctx, ValueError("Cannot use --notes together with --clear-notes"))
    try:
        service.update_event(
            event_id, date=event_date, time=event_time, duration=duration,
            notes=notes, clear_notes=clear_notes,
        )
        click.echo(f"Updated event {event_id}")
    except ValueError as e:
        exit_with_error(ctx, e)


@event_group.command("delete")
@click.argument("event_id")
@click.pass_context
def delete_event(ctx, event_id: str):
    """Delete an event."""
    service = ctx.obj["service"]
    try:
        service.delete_event(event_id)
        click.echo(f"Deleted event {event_id}")
    except ValueError as e:
        exit_with_error(ctx, e)


def register_commands(cli):
    """Register event commands with main CLI."""
    cli.add_command(event_group, name="event")
