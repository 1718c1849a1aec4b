"""Profile and settings commands."""

import click

from fitschedule.cli.error_handling import exit_with_error


@click.group()
def profile_group():
    """Show or change the trainer profile and preferences."""
    pass


@profile_group.command("show")
@click.pass_context
def show_profile(ctx):
    """Show profile and settings."""
    snapshot = ctx.obj["service"].snapshot
    click.echo(f"Name: {snapshot.profile.name or '(not set)'}")
    if snapshot.profile.avatar_uri:
        click.echo(f"Avatar: {snapshot.profile.avatar_uri}")
    click.echo(f"Onboarding complete: {'yes' if snapshot.profile.onboarding_complete else 'no'}")
    click.echo(f"Calendar view: {snapshot.settings.calendar_view.value}")


@profile_group.command("set")
@click.option("--name", help="Trainer name")
@click.option("--avatar", help="Avatar image URI")
@click.option("--onboarded/--not-onboarded", default=None, help="Onboarding state")
@click.option("--view", type=click.Choice(["day", "3day", "week"]), help="Calendar view")
@click.pass_context
def set_profile(ctx, name, avatar, onboarded, view):
    """Update profile and settings."""
    service = ctx.obj["service"]
    try:
        service.update_profile(name=name, avatar_uri=avatar, onboarding_complete=onboarded)
        if view is not None:
            service.update_settings(calendar_view=view)
        click.echo("Profile updated")
    except ValueError as e:
        exit_with_error(ctx, e)


def register_commands(cli):
    """Register profile commands with main CLI."""
    cli.add_command(profile_group, name="profile")
