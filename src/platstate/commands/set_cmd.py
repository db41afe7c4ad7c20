"""Command: apply key=value strings and report commits and notifications."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from platstate.commands._base import PlatCommand

if TYPE_CHECKING:
    from platstate.commands._context import AppContext


@click.command(
    "set",
    cls=PlatCommand,
    examples="""\
  platstate set "mode=in_call"
  platstate set "mode=in_call;band=wide" "mic_mute=on"
  platstate set --synchronous "mode=normal\"""",
)
@click.argument("texts", nargs=-1, required=True)
@click.option(
    "--synchronous", is_flag=True, help="Request synchronous routing reconsideration."
)
@click.pass_obj
def set_cmd(app: AppContext, texts: tuple[str, ...], synchronous: bool) -> None:
    """Apply each TEXT as a ``key=value;...`` update, in order."""
    from platstate.domain.types import Status
    from platstate.services.result import ServiceError, ServiceResult

    engine = app.engine
    started = engine.start()
    if not started.ok:
        app.emit(started)
        return
    sync_warnings = app.sync_engine()

    results = [engine.set_parameters(text, synchronous=synchronous) for text in texts]
    data = {
        "results": [
            {"input": text, "status": r.status.value, "changed": r.data.get("changed", [])}
            for text, r in zip(texts, results, strict=True)
        ],
        "commits": app.routing.apply_count,
        "notifications": len(app.general.reconsider_calls),
        "values": engine.get_parameters(";".join(engine.parameter_keys())),
    }
    warnings = sync_warnings + [w for r in results for w in r.warnings]
    failed = [text for text, r in zip(texts, results, strict=True) if not r.ok]
    if failed:
        app.emit(
            ServiceResult(
                ok=False,
                op="set",
                data=data,
                warnings=warnings,
                error=ServiceError(
                    code=Status.BAD_VALUE,
                    message=f"{len(failed)} update(s) rejected",
                    detail={"inputs": failed},
                ),
            )
        )
        return
    app.emit(ServiceResult(ok=True, op="set", data=data, warnings=warnings))
