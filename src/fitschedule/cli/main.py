"""Main CLI entry point."""

import logging

import click

from fitschedule.cli.error_handling import exit_with_error
from fitschedule.domain.schedule import ScheduleService
from fitschedule.storage.base import StoreReadError
from fitschedule.storage.factories import create_sqlite_store

# Import and register all commands at module level
from fitschedule.cli.commands import (
    event,
    group,
    member,
    profile,
    series,
    session,
    sweep,
)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FITSCHEDULE_DB_PATH environment variable)",
    envvar="FITSCHEDULE_DB_PATH",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """FitSchedule - training schedule and session credits for personal trainers.

    Keep track of members, one-off and recurring sessions, attendance and the
    prepaid session credits each member has left.
    """
    ctx.ensure_object(dict)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Open the store only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path)
        ctx.call_on_close(store.close)
        service = ScheduleService(store)
        try:
            service.snapshot
        except StoreReadError as e:
            exit_with_error(ctx, e)
        ctx.obj["service"] = service


# Register all commands
member.register_commands(cli)
group.register_commands(cli)
session.register_commands(cli)
event.register_commands(cli)
series.register_commands(cli)
sweep.register_commands(cli)
profile.register_commands(cli)


def main():
    """Main entry point for CLI."""
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    cli()


if __name__ == "__main__":
    main()
