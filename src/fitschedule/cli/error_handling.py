"""CLI error output."""

from typing import NoReturn

import click


def exit_with_error(ctx: click.Context, error: Exception) -> NoReturn:
    """Print ``error`` to stderr as ``Error: ...`` and exit with status 1.

    Used for domain errors, name resolution failures and unreadable stores.
    """
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
