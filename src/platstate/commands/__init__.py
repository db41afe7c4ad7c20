"""Subcommand modules for platstate.

Provides register_commands() which uses deferred imports to keep
``platstate --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from platstate.commands.check import check
    from platstate.commands.get import get
    from platstate.commands.set_cmd import set_cmd

    cli.add_command(check)
    cli.add_command(set_cmd)
    cli.add_command(get)
