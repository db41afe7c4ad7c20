"""Command: resolve parameter keys after applying preset assignments."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from platstate.commands._base import PlatCommand

if TYPE_CHECKING:
    from platstate.commands._context import AppContext


@click.command(
    cls=PlatCommand,
    examples="""\
  platstate get "mode;band"
  platstate get mode --preset "mode=in_call"
  platstate get "" --preset "mode=in_call" --preset "band=wide\"""",
)
@click.argument("keys", default="")
@click.option(
    "--preset",
    multiple=True,
    help="key=value;... string applied before reading (repeatable).",
)
@click.pass_obj
def get(app: AppContext, keys: str, preset: tuple[str, ...]) -> None:
    """Print ``key=value;...`` for KEYS (every configured key when empty)."""
    from platstate.services.result import ServiceResult

    engine = app.engine
    warnings = app.sync_engine()
    for text in preset:
        result = engine.set_parameters(text)
        if not result.ok:
            app.emit(result)
            return
        warnings.extend(result.warnings)

    requested = keys or ";".join(engine.parameter_keys())
    app.emit(
        ServiceResult(
            ok=True,
            op="get",
            data={"values": engine.get_parameters(requested)},
            warnings=warnings,
        )
    )
