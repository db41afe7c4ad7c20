"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy engine construction against in-memory
backends and centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from platstate.domain.types import ConfigurationError
from platstate.infrastructure.backends import MemoryGeneralBackend, MemoryRoutingBackend
from platstate.output.formatters import format_result

if TYPE_CHECKING:
    from platstate.config.settings import PlatSettings
    from platstate.services.engine import PlatformStateEngine
    from platstate.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The engine is built lazily on first use so ``--help`` and ``--version``
    never read the criterion configuration.
    """

    def __init__(self, settings: PlatSettings, *, conf: str | None = None) -> None:
        self.settings = settings
        self.conf = Path(conf) if conf else None
        self.general = MemoryGeneralBackend()
        self.routing = MemoryRoutingBackend()
        self._engine: PlatformStateEngine | None = None

        from platstate.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def engine(self) -> PlatformStateEngine:
        """The engine instance (created lazily on first access)."""
        if self._engine is None:
            from platstate.plugins.manager import PluginManager
            from platstate.services.engine import PlatformStateEngine

            plugins = PluginManager()
            plugins.discover_and_load()
            try:
                self._engine = PlatformStateEngine(
                    self.settings,
                    self.general,
                    self.routing,
                    plugin_manager=plugins,
                    conf_paths=[self.conf] if self.conf else None,
                )
            except ConfigurationError as exc:
                msg = f"Invalid criterion configuration: {exc}"
                raise click.ClickException(msg) from exc
        return self._engine

    def sync_engine(self) -> list[str]:
        """Sync the engine to its defaults; failures come back as warnings."""
        synced = self.engine.sync()
        warnings = list(synced.warnings)
        if synced.error is not None:
            warnings.append(f"{synced.op}: {synced.error.message}")
        return warnings

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_result(result, json_output=self.settings.json_output)
        if result.ok:
            click.echo(output)
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
