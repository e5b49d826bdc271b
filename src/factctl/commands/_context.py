"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Builds the receiver/command/sink wiring from
settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from factctl.output.formatters import OutputSettings

if TYPE_CHECKING:
    import httpx

    from factctl.config.settings import FactSettings
    from factctl.plugins.manager import PluginManager
    from factctl.services.command import PrintRandomFactCommand


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  Plugins are loaded
    lazily so ``--help`` and ``--version`` never touch entry points.
    """

    # Transport handed to every receiver; tests swap in httpx.MockTransport.
    transport: httpx.AsyncBaseTransport | None = None

    def __init__(self, settings: FactSettings) -> None:
        self.settings = settings
        self._plugin_manager: PluginManager | None = None

        from factctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    @property
    def plugin_manager(self) -> PluginManager:
        """Plugin manager with entry-point plugins loaded on first access."""
        if self._plugin_manager is None:
            from factctl.plugins.manager import PluginManager

            self._plugin_manager = PluginManager()
            self._plugin_manager.discover_and_load()
        return self._plugin_manager

    def build_command(self, *, url: str | None = None) -> PrintRandomFactCommand:
        """Wire receiver -> command -> console sink from settings."""
        from factctl.infrastructure.receivers import RandomFactReceiver
        from factctl.output.sinks import ConsoleSink
        from factctl.services.command import PrintRandomFactCommand

        receiver = RandomFactReceiver(
            url or self.settings.fetch.url,
            timeout=self.settings.fetch.timeout,
            transport=self.transport,
        )
        return PrintRandomFactCommand(
            receiver,
            ConsoleSink(self.output_settings),
            plugin_manager=self.plugin_manager,
        )
