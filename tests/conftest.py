"""Shared fixtures for kubevault tests.

Provides:
- ``example_vault``: the vault under tests/fixtures/vault (alice, bob, charlie)
- ``expected_manifests``: the access control manifests it must produce
- ``make_vault``: a factory building small vaults in a temporary directory
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import structlog
import yaml

from kubevault.vault import VaultDirectory

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def reset_structlog() -> None:
    """Restore the default structlog configuration between tests."""
    structlog.reset_defaults()


@pytest.fixture
def example_vault() -> VaultDirectory:
    """The example vault shipped with the tests."""
    return VaultDirectory(FIXTURES_DIR / "vault")


@pytest.fixture
def expected_manifests() -> Callable[[str], list[dict[str, Any]]]:
    """Load the expected access control manifests of a user."""

    def _load(user: str) -> list[dict[str, Any]]:
        path = FIXTURES_DIR / "manifests" / f"access-control-{user}.yaml"
        return [doc for doc in yaml.safe_load_all(path.read_text()) if doc is not None]

    return _load


@pytest.fixture
def make_vault(tmp_path: Path) -> Callable[..., VaultDirectory]:
    """Build a vault from secret and rule contents.

    Example:
        vault = make_vault(
            secrets={"production/aws": "key: value"},
            users={"alice": "production/**"},
        )
    """

    def _make(
        secrets: dict[str, str] | None = None,
        users: dict[str, str] | None = None,
    ) -> VaultDirectory:
        vault = VaultDirectory(tmp_path / "vault")
        vault.init()
        for relative, content in (secrets or {}).items():
            path = vault.kvstore_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        for relative, content in (users or {}).items():
            path = vault.access_control_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return vault

    return _make
