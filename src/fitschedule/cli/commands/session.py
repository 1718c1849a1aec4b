"""Session credit commands."""

import click

from fitschedule.cli.error_handling import exit_with_error
from fitschedule.cli.resolution import resolve_member_or_exit
from fitschedule.domain.reports import credit_overview

STATUS_COLORS = {"exhausted": "red", "low": "yellow", "ok": "green"}


@click.group()
def session_group():
    """Manage prepaid session credits."""
    pass


@session_group.command("add")
@click.argument("member", metavar="MEMBER")
@click.argument("total", type=int)
@click.option("--remaining", type=int, help="Credits left (defaults to TOTAL)")
@click.pass_context
def add_session(ctx, member: str, total: int, remaining: int | None):
    """Record a batch of TOTAL sessions bought by MEMBER.

    Examples:
        fitschedule session add Dana 10
        fitschedule session add Avi 12 --remaining 4
    """
    service = ctx.obj["service"]
    member_id = resolve_member_or_exit(ctx, service, member)
    try:
        batch = service.add_session(member_id, total, remaining)
        click.echo(f"Added {batch.remaining}/{batch.total} sessions (ID: {batch.id})")
    except ValueError as e:
        exit_with_error(ctx, e)


@session_group.command("list")
@click.pass_context
def list_sessions(ctx):
    """List session credits, lowest balance first."""
    service = ctx.obj["service"]
    lines = credit_overview(service.snapshot)

    if not lines:
        click.echo("No sessions yet.")
        return

    click.echo("\nSession credits:")
    click.echo("-" * 70)
    for line in lines:
        balance = click.style(
            f"{line.session.remaining} / {line.session.total} sessions",
            fg=STATUS_COLORS[line.status],
        )
        click.echo(f"{line.session.id:24s} | {line.member_name:20s} | {balance}")


@session_group.command("edit")
@click.argument("session_id")
@click.option("--total", type=int, help="New total")
@click.option("--remaining", type=int, help="New remaining count")
@click.pass_context
def edit_session(ctx, session_id: str, total: int | None, remaining: int | None):
    """Correct a session batch."""
    service = ctx.obj["service"]
    try:
        service.update_session(session_id, total=total, remaining=remaining)
        click.echo(f"Updated session {session_id}")
    except ValueError as e:
        exit_with_error(ctx, e)


@session_group.command("delete")
@click.argument("session_id")
@click.pass_context
def delete_session(ctx, session_id: str):
    """Delete a session batch."""
    service = ctx.obj["service"]
    try:
        service.delete_session(session_id)
        click.echo(f"Deleted session {session_id}")
    except ValueError as e:
        exit_with_error(ctx, e)


def register_commands(cli):
    """Register session commands with main CLI."""
    cli.add_command(session_group, name="session")
