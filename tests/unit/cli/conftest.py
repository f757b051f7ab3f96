"""Unit test fixtures for the CLI module.

CLI unit tests run the commands through Click's test runner against the
example vault or vaults built in a temporary directory.
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from kubevault.vault import VaultDirectory


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner.

    Returns:
        CliRunner instance for testing Click commands.
    """
    return CliRunner()


@pytest.fixture
def temp_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Provide a temporary directory for test files.

    Args:
        tmp_path: pytest built-in fixture for temporary paths.

    Yields:
        Path to temporary directory.
    """
    yield tmp_path


@pytest.fixture
def vault_args(example_vault: VaultDirectory) -> list[str]:
    """Root options selecting the example vault."""
    return ["--vault-dir", str(example_vault.root)]
