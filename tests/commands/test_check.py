"""Tests for the check CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from platstate.cli import cli


@pytest.mark.usefixtures("_isolated_cwd")
class TestCheckCommand:
    def test_check_human(self, cli_runner: CliRunner, conf_file: Path) -> None:
        result = cli_runner.invoke(cli, ["--conf", str(conf_file), "check"])
        assert result.exit_code == 0
        assert result.stdout.startswith("OK: check")

    def test_check_json(self, cli_runner: CliRunner, conf_file: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "--conf", str(conf_file), "check"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["data"]["conf_path"] == str(conf_file)
        assert data["data"]["tracked"]["AndroidMode"] == 1
        assert "BandType" in data["data"]["domains"]["route"]["types"]

    def test_check_without_configuration(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "--conf", str(tmp_path / "none.conf"), "check"])
        assert result.exit_code == 1
        assert result.stdout == ""
        assert '"code": "NO_INIT"' in result.stderr

    def test_check_invalid_configuration(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.conf"
        bad.write_text("route { criterion { Mode { type Missing } } }")
        result = cli_runner.invoke(cli, ["--conf", str(bad), "check"])
        assert result.exit_code == 1
        assert "Invalid criterion configuration" in result.output
