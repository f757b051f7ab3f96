"""Unit tests for the new command."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from kubevault.cli.main import cli
from kubevault.cli.utils import ExitCode


class TestNew:
    """Tests for new."""

    def test_creates_vault_at_path(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        """Test that new creates the layout at the given path."""
        vault_dir = temp_dir / "vault"

        result = cli_runner.invoke(cli, ["new", str(vault_dir)])

        assert result.exit_code == 0, result.output
        assert (vault_dir / "kvstore").is_dir()
        assert (vault_dir / "access_control").is_dir()
        assert f"Vault initialized in {vault_dir}" in result.output

    def test_defaults_to_vault_dir(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        """Test that new uses --vault-dir without a path."""
        vault_dir = temp_dir / "nested" / "vault"

        result = cli_runner.invoke(cli, ["--vault-dir", str(vault_dir), "new"])

        assert result.exit_code == 0, result.output
        assert (vault_dir / "kvstore").is_dir()

    def test_keeps_existing_content(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        """Test that new can be run on an existing vault."""
        secret = temp_dir / "kvstore" / "db"
        secret.parent.mkdir()
        secret.write_text("k: v")

        result = cli_runner.invoke(cli, ["new", str(temp_dir)])

        assert result.exit_code == 0, result.output
        assert secret.read_text() == "k: v"
        assert f"Created: {temp_dir / 'access_control'}" in result.output
        assert f"Created: {temp_dir / 'kvstore'}" not in result.output

    def test_path_is_a_file(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        """Test that an existing file is rejected."""
        path = temp_dir / "vault"
        path.write_text("")

        result = cli_runner.invoke(cli, ["new", str(path)])

        assert result.exit_code == ExitCode.USAGE_ERROR
