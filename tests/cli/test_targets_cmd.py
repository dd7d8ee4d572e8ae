"""Tests for ``agentradar targets`` and top-level CLI wiring."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from agentradar import __version__
from agentradar.cli.main import cli
from agentradar.discovery.targets import AGENT_TARGETS


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestTargetsCommand:

    def test_table(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["targets"])
        assert result.exit_code == 0
        assert "Known Agents" in result.output
        assert "cursor" in result.output

    def test_json(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["targets", "--json"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert [item["id"] for item in payload] == [t.id for t in AGENT_TARGETS]

    def test_json_categories(self, runner: CliRunner) -> None:
        payload = json.loads(runner.invoke(cli, ["targets", "--json"]).output)
        by_id = {item["id"]: item["signals"] for item in payload}
        assert by_id["cline"] == ["filesystem"]
        assert by_id["ollama"] == ["env", "binary", "process"]
        assert "app" in by_id["cursor"]


class TestGroup:

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert "scan" in result.output
        assert "targets" in result.output
