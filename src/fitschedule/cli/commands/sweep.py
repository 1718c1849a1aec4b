"""Completion sweep command."""

import click

from fitschedule.cli.error_handling import exit_with_error
from fitschedule.cli.params import DATETIME
from fitschedule.domain.entities import CompletionResult
from fitschedule.domain.schedule import SWEEP_INTERVAL_SECONDS


def report(result: CompletionResult) -> None:
    """Print a sweep outcome."""
    if not result.changed:
        click.echo("No events to complete.")
        return
    charged = sum(1 for d in result.debits if d.applied)
    missed = len(result.debits) - charged
    click.echo(f"Completed {len(result.completed_event_ids)} event(s), charged {charged} session(s)")
    if missed:
        click.echo(f"{missed} attendee(s) had no sessions left")


@click.command("sweep")
@click.option("--now", type=DATETIME, help="Reference time (defaults to the current local time)")
@click.option("--watch", is_flag=True, help="Keep sweeping at a fixed interval")
@click.option("--interval", type=float, default=SWEEP_INTERVAL_SECONDS, show_default=True, help="Seconds between sweeps")
@click.option("--iterations", type=int, help="Stop after this many sweeps (with --watch)")
@click.pass_context
def sweep(ctx, now, watch: bool, interval: float, iterations: int | None):
    """Complete events whose end time has passed and charge session credits.

    Examples:
        fitschedule sweep
        fitschedule sweep --now "2024-01-08 10:00"
        fitschedule sweep --watch
    """
    service = ctx.obj["service"]
    if watch:
        if now is not None:
            exit_with_error(ctx, ValueError("--now cannot be combined with --watch"))
        try:
            service.watch(interval=interval, iterations=iterations, on_result=report)
        except KeyboardInterrupt:
            click.echo("Stopped.")
        return

    report(service.sweep(now))


def register_commands(cli):
    """Register sweep command with main CLI."""
    cli.add_command(sweep)
