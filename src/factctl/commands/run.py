"""Command: print a random fact every N seconds."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import click

from factctl.commands._base import FactCommand
from factctl.domain.lifecycle import OverlapPolicy
from factctl.output.formatters import format_result

if TYPE_CHECKING:
    from factctl.commands._context import AppContext
    from factctl.services.invoker import CommandInvoker


async def _run_schedule(invoker: CommandInvoker, duration: float | None) -> None:
    """Start *invoker*, wait for *duration* (or forever), then drain it."""
    async with invoker.start():
        if duration is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(duration)


@click.command(
    cls=FactCommand,
    examples="""\
  # A fact every 5 seconds until Ctrl-C
  factctl run

  # Every 3 seconds for one minute
  factctl run --interval 3 --duration 60

  # Never let a slow fetch overlap the next tick
  factctl run --overlap skip

  # JSON lines, one per tick
  factctl --json run --interval 10""",
)
@click.option(
    "--interval",
    type=click.IntRange(min=1),
    default=None,
    help="Seconds between ticks [default: schedule.interval, 5].",
)
@click.option(
    "--duration",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Stop after this many seconds (default: run until interrupted).",
)
@click.option(
    "--overlap",
    type=click.Choice([p.value for p in OverlapPolicy]),
    default=None,
    help="Let ticks overlap, or skip a tick while the previous one runs.",
)
@click.option("--url", default=None, help="Override the fact endpoint.")
@click.pass_obj
def run(
    app: AppContext,
    interval: int | None,
    duration: float | None,
    overlap: str | None,
    url: str | None,
) -> None:
    """Print a random fact every N seconds."""
    from factctl.services.invoker import CommandInvoker

    invoker = CommandInvoker(
        app.build_command(url=url),
        interval or app.settings.schedule.interval,
        overlap=overlap or app.settings.schedule.overlap,
        plugin_manager=app.plugin_manager,
    )

    try:
        asyncio.run(_run_schedule(invoker, duration))
    except KeyboardInterrupt:
        pass

    if invoker.task is None:
        return
    summary = invoker.task.summary()
    if not app.settings.quiet:
        click.echo(format_result(summary, settings=app.output_settings), err=True)
    if not summary.ok:
        raise SystemExit(1)
