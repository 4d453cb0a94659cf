"""Tests for the root CLI group and global flags."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from logicem import __version__
from logicem.cli import cli


class TestRootGroup:
    def test_help_lists_groups(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("auth", "users", "lists", "operations", "campaigns", "calls", "tasks"):
            assert name in result.output
        assert "shell" in result.output
        assert "init" in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    @pytest.mark.usefixtures("_isolated_data_dir")
    def test_no_subcommand_prints_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "Usage" in result.output


class TestExamples:
    @pytest.mark.parametrize(
        "args",
        [
            ["auth", "--examples"],
            ["tasks", "close", "--examples"],
            ["campaigns", "create", "--examples"],
            ["init", "--examples"],
            ["shell", "--examples"],
        ],
    )
    def test_examples_flag(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0
        assert "Examples for" in result.output
        assert "logicem" in result.output

    def test_help_does_not_open_store(self, cli_runner: CliRunner) -> None:
        with cli_runner.isolated_filesystem() as cwd:
            result = cli_runner.invoke(cli, ["tasks", "list", "--help"])
            assert result.exit_code == 0
            assert not (Path(cwd) / ".logicem").exists()
