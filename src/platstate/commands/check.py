"""Command: load the criterion configuration and summarize it."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from platstate.commands._base import PlatCommand

if TYPE_CHECKING:
    from platstate.commands._context import AppContext


@click.command(
    cls=PlatCommand,
    examples="""\
  platstate check
  platstate --conf ./audio_criteria.conf check
  platstate --json check""",
)
@click.pass_obj
def check(app: AppContext) -> None:
    """Load the criterion configuration and report what it declares."""
    from platstate.domain.types import Status
    from platstate.services.result import ServiceError, ServiceResult

    summary = app.engine.describe()
    if summary["conf_path"] is None:
        app.emit(
            ServiceResult(
                ok=False,
                op="check",
                error=ServiceError(
                    code=Status.NO_INIT,
                    message="no criterion configuration found",
                ),
            )
        )
        return
    app.emit(ServiceResult(ok=True, op="check", data=summary))
