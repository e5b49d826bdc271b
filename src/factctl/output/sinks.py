"""Report sinks: where command outcomes are written.

Successes go to stdout, failures to stderr, so ``factctl run | tee``
captures facts only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from factctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from factctl.services.result import ServiceResult


class ConsoleSink:
    """Echo every result as it arrives, one JSON line per result in --json mode."""

    def __init__(self, settings: OutputSettings | None = None) -> None:
        self.settings = settings or OutputSettings()

    def report(self, result: ServiceResult) -> None:
        output = format_result(result, settings=self.settings, compact=True)
        click.echo(output, err=not result.ok)
        if result.ok and not self.settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
