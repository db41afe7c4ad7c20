"""Plugin registration and best-effort hook dispatch."""

from __future__ import annotations

import inspect
import logging
from typing import Any

import pluggy

from platstate.plugins.hookspecs import PlatstateHookSpec

PROJECT_NAME = "platstate"
ENTRY_POINT_GROUP = "platstate.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Thin wrapper over :class:`pluggy.PluginManager` for platstate hooks."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PlatstateHookSpec)
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        """Whether entry-point discovery has run."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def discover_and_load(self) -> list[str]:
        """Register plugins from the ``platstate.plugins`` entry point group."""
        count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        logger.debug("Loaded %d plugin(s) from %s", count, ENTRY_POINT_GROUP)
        self._instantiate_plugin_classes()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        plugin_name = name or type(plugin).__name__
        self._pm.register(plugin, name=plugin_name)
        logger.debug("Registered plugin: %s", plugin_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    def dispatch(self, hook_name: str, **payload: Any) -> bool:
        """Call *hook_name* on every plugin. Returns False if a plugin raised.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        try:
            getattr(self._pm.hook, hook_name)(**payload)
        except Exception:
            logger.warning("Plugin dispatch failed for %s", hook_name, exc_info=True)
            return False
        return True

    def _instantiate_plugin_classes(self) -> None:
        """Swap plugin classes registered by entry points for instances.

        Hook implementations on a bare class would be called without ``self``.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not _declares_hooks(plugin):
                continue
            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Cannot instantiate plugin %s", plugin_name, exc_info=True)
                continue
            self._pm.register(instance, name=plugin_name)


def _declares_hooks(cls: type) -> bool:
    marker = f"{PROJECT_NAME}_impl"
    return any(
        hasattr(getattr(cls, attr, None), marker) for attr in dir(cls) if not attr.startswith("_")
    )
