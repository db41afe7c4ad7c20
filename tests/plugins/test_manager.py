"""Tests for PluginManager — registration, hook relay, and best-effort dispatch."""

from __future__ import annotations

import logging

import pytest

from platstate.plugins.hookspecs import hookimpl
from platstate.plugins.manager import PluginManager


class _DummyPlugin:
    """Minimal plugin for registration tests."""

    def __init__(self) -> None:
        self.commits: list[list[str]] = []

    @hookimpl
    def post_commit(self, changed: list[str], synchronous: bool) -> None:
        self.commits.append(changed)


class _BrokenPlugin:
    @hookimpl
    def post_load(self, path: str, loaded: bool) -> None:
        raise ValueError("broken")


class _EntryPointPlugin:
    instances = 0

    def __init__(self) -> None:
        type(self).instances += 1

    @hookimpl
    def post_load(self, path: str, loaded: bool) -> None:
        pass


class TestPluginManager:
    def test_hook_relay_accessible(self) -> None:
        pm = PluginManager()
        assert hasattr(pm.hook, "post_load")
        assert hasattr(pm.hook, "post_commit")

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin())
        assert "_DummyPlugin" in pm.list_plugin_names()

    def test_unregister_plugin(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="dummy")
        pm.unregister(plugin)
        assert "dummy" not in pm.list_plugin_names()

    def test_discover_marks_loaded(self) -> None:
        pm = PluginManager()
        assert pm.is_loaded is False
        pm.discover_and_load()
        assert pm.is_loaded is True

    def test_class_registration_is_instantiated(self) -> None:
        pm = PluginManager()
        pm._pm.register(_EntryPointPlugin, name="entry")
        pm._instantiate_plugin_classes()
        assert _EntryPointPlugin.instances == 1
        assert pm.dispatch("post_load", path="x", loaded=True) is True


class TestDispatch:
    def test_dispatch_calls_plugins(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin)
        assert pm.dispatch("post_commit", changed=["AndroidMode"], synchronous=False)
        assert plugin.commits == [["AndroidMode"]]

    def test_failure_is_a_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_BrokenPlugin())
        with caplog.at_level(logging.WARNING, logger="platstate"):
            assert pm.dispatch("post_load", path="x", loaded=False) is False
        assert "Plugin dispatch failed for post_load" in caplog.text
