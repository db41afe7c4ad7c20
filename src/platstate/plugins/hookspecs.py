"""Pluggy hook specifications for platstate lifecycle events.

Hooks are dispatched synchronously by the engine, always after the state
lock has been released, so implementations may read state back through
``get_value`` or ``get_parameters``.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("platstate")
hookimpl = pluggy.HookimplMarker("platstate")


class PlatstateHookSpec:
    """Hook specifications for the platstate plugin system."""

    @hookspec
    def post_load(self, path: str, loaded: bool) -> None:
        """Called after each attempt to load a criterion configuration file."""

    @hookspec
    def post_commit(self, changed: list[str], synchronous: bool) -> None:
        """Called after pending state was committed and routing reconsidered.

        *changed* lists the criterion and parameter names modified since the
        previous commit.
        """
