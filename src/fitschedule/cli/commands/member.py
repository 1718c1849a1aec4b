"""Member management commands."""

import click

from fitschedule.cli.error_handling import exit_with_error
from fitschedule.cli.resolution import resolve_member_or_exit
from fitschedule.domain.reports import member_balance


@click.group()
def member_group():
    """Manage members."""
    pass


@member_group.command("add")
@click.argument("name", metavar="NAME")
@click.option("--whatsapp", default="", help="WhatsApp number")
@click.pass_context
def add_member(ctx, name: str, whatsapp: str):
    """Add a member.

    Examples:
        fitschedule member add "Dana Levi" --whatsapp "+972501234567"
    """
    service = ctx.obj["service"]
    try:
        member = service.add_member(name=name, whatsapp=whatsapp)
        click.echo(f"Added member '{member.name}' (ID: {member.id})")
    except ValueError as e:
        exit_with_error(ctx, e)


@member_group.command("list")
@click.pass_context
def list_members(ctx):
    """List all members with their remaining session credits."""
    service = ctx.obj["service"]
    snapshot = service.snapshot

    if not snapshot.members:
        click.echo("No members found.")
        return

    click.echo("\nMembers:")
    click.echo("-" * 70)
    for m in sorted(snapshot.members, key=lambda m: m.name.lower()):
        balance = member_balance(snapshot, m.id)
        click.echo(f"{m.id:24s} | {m.name:20s} | {m.whatsapp:15s} | Credits: {balance}")


@member_group.command("edit")
@click.argument("member", metavar="MEMBER")
@click.option("--name", help="New name")
@click.option("--whatsapp", help="New WhatsApp number")
@click.pass_context
def edit_member(ctx, member: str, name: str | None, whatsapp: str | None):
    """Edit a member.

    MEMBER can be a member name or ID.
    """
    service = ctx.obj["service"]
    member_id = resolve_member_or_exit(ctx, service, member)
    try:
        service.update_member(member_id, name=name, whatsapp=whatsapp)
        click.echo(f"Updated member {member_id}")
    except ValueError as e:
        exit_with_error(ctx, e)


@member_group.command("delete")
@click.argument("member", metavar="MEMBER")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_member(ctx, member: str, yes: bool):
    """Delete a member.

    MEMBER can be a member name or ID.

    This also deletes the member's events, series and session credits, removes
    them from their groups, and deletes groups left without members together
    with those groups' events.
    """
    service = ctx.obj["service"]
    member_id = resolve_member_or_exit(ctx, service, member)
    member_obj = service.snapshot.get_member(member_id)

    if not yes and not click.confirm(
        f"Are you sure you want to remove {member_obj.name}? "
        "This will also delete all their scheduled sessions."
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_member(member_id)
        click.echo(f"Deleted member '{member_obj.name}'")
    except ValueError as e:
        exit_with_error(ctx, e)


def register_commands(cli):
    """Register member commands with main CLI."""
    cli.add_command(member_group, name="member")
