"""Root CLI group for platstate with global flags and command registration."""

from __future__ import annotations

import click

from platstate import __version__
from platstate.commands import register_commands
from platstate.commands._base import PlatGroup
from platstate.commands._context import AppContext
from platstate.config.settings import PlatSettings


@click.group(
    cls=PlatGroup,
    invoke_without_command=True,
    examples="""\
  platstate check
  platstate --conf ./audio_criteria.conf set "mode=in_call"
  platstate -v get mode --preset "mode=in_call\"""",
)
@click.version_option(version=__version__, prog_name="platstate")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--conf",
    default=None,
    type=click.Path(dir_okay=False),
    help="Criterion configuration file (skips the vendor/system search).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    conf: str | None,
) -> None:
    """platstate — audio platform-state synchronization tool."""
    ctx.ensure_object(dict)
    settings = PlatSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings, conf=conf)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
