"""Group management commands."""

from datetime import date

import click

from fitschedule.cli.error_handling import exit_with_error
from fitschedule.cli.params import DATE, TIME, WEEKDAYS
from fitschedule.cli.resolution import resolve_group_or_exit, resolve_member_or_exit
from fitschedule.domain.recurrence import describe_weekdays


@click.group()
def group_group():
    """Manage groups."""
    pass


@group_group.command("create")
@click.argument("name")
@click.option("-m", "--member", "members", multiple=True, required=True, help="Member name or ID (repeatable)")
@click.option("--color", default="", help="Display color")
@click.option("--sessions", "sessions_total", type=int, default=1, show_default=True, help="Number of group sessions")
@click.option("--on", "on_date", type=DATE, help="Schedule a single group session on this date")
@click.option("--weekdays", type=WEEKDAYS, help="Schedule recurring sessions on these weekdays (e.g. mon,wed)")
@click.option("--from", "start_date", type=DATE, help="First day of the recurring schedule")
@click.option("--at", "at_time", type=TIME, help="Session start time")
@click.option("--duration", type=int, default=60, show_default=True, help="Session length in minutes")
@click.option("--notes", help="Session notes")
@click.pass_context
def create_group(ctx, name, members, color, sessions_total, on_date, weekdays, start_date, at_time, duration, notes):
    """Create a group, optionally with its schedule.

    Examples:
        fitschedule group create "Morning crew" -m Dana -m Avi
        fitschedule group create "Bootcamp" -m Dana -m Avi --on tomorrow --at 07:00
        fitschedule group create "Pilates" -m Dana --weekdays mon,thu --from 2024-01-01 --at 18:00 --sessions 10
    """
    service = ctx.obj["service"]
    member_ids = [resolve_member_or_exit(ctx, service, m) for m in members]

    if on_date is not None and weekdays is not None:
        exit_with_error(ctx, ValueError("Use either --on or --weekdays, not both"))
    if (on_date is not None or weekdays is not None) and at_time is None:
        exit_with_error(ctx, ValueError("--at is required when scheduling sessions"))

    try:
        if on_date is not None:
            group, event = service.create_group_event(
                name, member_ids, on_date, at_time, duration,
                color=color, sessions_total=sessions_total, notes=notes,
            )
            click.echo(f"Created group '{group.name}' (ID: {group.id}) with a session on {event.date.isoformat()}")
        elif weekdays is not None:
            group, series, events = service.create_group_series(
                name, member_ids, weekdays, start_date or date.today(),
                at_time, duration, sessions_total, color=color, notes=notes,
            )
            click.echo(
                f"Created group '{group.name}' (ID: {group.id}) with {len(events)} sessions "
                f"on {describe_weekdays(series.weekdays)} from {events[0].date.isoformat()} "
                f"to {events[-1].date.isoformat()}"
            )
        else:
            group = service.add_group(name, member_ids, color=color, sessions_total=sessions_total)
            click.echo(f"Created group '{group.name}' (ID: {group.id})")
    except ValueError as e:
        exit_with_error(ctx, e)


@group_group.command("list")
@click.pass_context
def list_groups(ctx):
    """List all groups."""
    service = ctx.obj["service"]
    snapshot = service.snapshot

    if not snapshot.groups:
        click.echo("No groups found.")
        return

    click.echo("\nGroups:")
    click.echo("-" * 70)
    for g in snapshot.groups:
        names = [
            m.name for m in (snapshot.get_member(mid) for mid in g.member_ids) if m is not None
        ]
        click.echo(f"{g.id:24s} | {g.name:20s} | Sessions: {g.sessions_total:3d} | {', '.join(names)}")


@group_group.command("edit")
@click.argument("group", metavar="GROUP")
@click.option("--name", help="New name")
@click.option("--color", help="New display color")
@click.option("-m", "--member", "members", multiple=True, help="Replace the member list (repeatable)")
@click.option("--sessions", "sessions_total", type=int, help="New number of group sessions")
@click.pass_context
def edit_group(ctx, group, name, color, members, sessions_total):
    """Edit a group.

    GROUP can be a group name or ID.
    """
    service = ctx.obj["service"]
    group_id = resolve_group_or_exit(ctx, service, group)
    member_ids = [resolve_member_or_exit(ctx, service, m) for m in members] if members else None
    try:
        service.update_group(
            group_id, name=name, color=color, member_ids=member_ids, sessions_total=sessions_total
        )
        click.echo(f"Updated group {group_id}")
    except ValueError as e:
        exit_with_error(ctx, e)


@group_group.command("delete")
@click.argument("group", metavar="GROUP")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_group(ctx, group: str, yes: bool):
    """Delete a group together with its events and series.

    GROUP can be a group name or ID.
    """
    service = ctx.obj["service"]
    group_id = resolve_group_or_exit(ctx, service, group)
    group_obj = service.snapshot.get_group(group_id)

    if not yes and not click.confirm(f"Are you sure you want to delete group '{group_obj.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_group(group_id)
        click.echo(f"Deleted group '{group_obj.name}'")
    except ValueError as e:
        exit_with_error(ctx, e)


def register_commands(cli):
    """Register group commands with main CLI."""
    cli.add_command(group_group, name="group")
