"""Unit tests for the CLI entry point and root options."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from kubevault.cli.main import cli, main


class TestRootGroup:
    """Tests for the kubevault group."""

    def test_help_lists_commands(self, cli_runner: CliRunner) -> None:
        """Test that every command is registered."""
        result = cli_runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("generate", "new", "can-read", "completion"):
            assert command in result.output

    def test_short_help_option(self, cli_runner: CliRunner) -> None:
        """Test that -h is accepted."""
        result = cli_runner.invoke(cli, ["generate", "-h"])

        assert result.exit_code == 0
        assert "--output-dir" in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        """Test the version output."""
        result = cli_runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert result.output.startswith("kubevault ")

    def test_json_logs(self, cli_runner: CliRunner, vault_args: list[str]) -> None:
        """Test that --log-level and --log-format configure structured logs."""
        result = cli_runner.invoke(
            cli,
            ["--log-level", "debug", "--log-format", "json", *vault_args, "can-read", "alice"],
        )

        assert result.exit_code == 0, result.output
        events = [
            json.loads(line)["event"] for line in result.output.splitlines() if line.startswith("{")
        ]
        assert "access.resolved" in events

    def test_invalid_log_level(self, cli_runner: CliRunner) -> None:
        """Test that unknown levels are rejected."""
        result = cli_runner.invoke(cli, ["--log-level", "verbose", "new"])

        assert result.exit_code == 2


class TestMain:
    """Tests for main()."""

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that main runs the CLI with the given arguments."""
        main(["--version"])

        assert capsys.readouterr().out.startswith("kubevault ")

    def test_usage_error_exits(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that usage errors are printed and exit with code 2."""
        with pytest.raises(SystemExit) as exc_info:
            main(["can-read"])

        assert exc_info.value.code == 2
        assert "Missing argument 'USER'" in capsys.readouterr().err
