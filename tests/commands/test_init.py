"""Tests for the init command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from logicem.cli import cli
from logicem.infrastructure.database.engine import DATA_DIRNAME, DB_FILENAME


@pytest.mark.usefixtures("_isolated_data_dir")
class TestInit:
    def test_creates_config_and_store(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "oficina"
        result = cli_runner.invoke(cli, ["--json", "init", str(target), "--timeout", "600"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["config_created"] is True
        assert "credentials" in data["seeded"]
        assert (target / DATA_DIRNAME / DB_FILENAME).is_file()
        assert "timeout_seconds = 600" in (target / "logicem.toml").read_text()

    def test_second_run_keeps_config_and_data(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        cli_runner.invoke(cli, ["init", str(tmp_path)])
        result = cli_runner.invoke(cli, ["--json", "init", str(tmp_path)])
        data = json.loads(result.stdout)["data"]
        assert data["config_created"] is False
        assert data["seeded"] == []

    def test_no_demo(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "init", str(tmp_path), "--no-demo"])
        data = json.loads(result.stdout)["data"]
        assert data["seeded"] == []
        assert "seed_demo = false" in (tmp_path / "logicem.toml").read_text()

    def test_config_is_picked_up(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        cli_runner.invoke(cli, ["init", ".", "--timeout", "90"])
        result = cli_runner.invoke(
            cli,
            [
                "--json",
                "--email",
                "admin@logicem.com",
                "--password",
                "LogicemAdmin2024!",
                "auth",
                "whoami",
            ],
        )
        assert json.loads(result.stdout)["data"]["time_remaining"] == 90
