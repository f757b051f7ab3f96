"""Vault directory layout and access.

A vault directory contains two trees::

    vault/
    ├── kvstore/           # one YAML ``key: value`` file per secret
    │   └── production/applicationA/aws
    └── access_control/    # one rules file per user
        └── alice

Example:
    >>> from kubevault.vault import VaultDirectory
    >>> vault = VaultDirectory(Path("vault"))
    >>> vault.list_secrets()
    ['production/applicationA/aws']
    >>> vault.read_access_rules("alice")
    ['production/**', '!production/**/aws']
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog
import yaml

from kubevault.access.rules import parse_access_rules
from kubevault.errors import (
    AccessRulesFileError,
    SecretFileError,
    UserNotFoundError,
    VaultLayoutError,
    VaultNotFoundError,
)

logger = structlog.get_logger(__name__)

KVSTORE_DIRECTORY = "kvstore"
ACCESS_CONTROL_DIRECTORY = "access_control"


@dataclass(frozen=True)
class VaultDirectory:
    """A vault directory on disk.

    Attributes:
        root: Path of the vault directory.
    """

    root: Path

    @property
    def kvstore_dir(self) -> Path:
        """Directory holding the secret files."""
        return self.root / KVSTORE_DIRECTORY

    @property
    def access_control_dir(self) -> Path:
        """Directory holding the per-user rules files."""
        return self.root / ACCESS_CONTROL_DIRECTORY

    def ensure_exists(self) -> None:
        """Check that the vault directory exists.

        Raises:
            VaultNotFoundError: If the root is not an existing directory.
        """
        if not self.root.is_dir():
            raise VaultNotFoundError(self.root)

    def init(self) -> list[Path]:
        """Create the vault layout, leaving existing content untouched.

        Returns:
            The directories that were created.
        """
        created: list[Path] = []
        for directory in (self.kvstore_dir, self.access_control_dir):
            if not directory.exists():
                directory.mkdir(parents=True)
                created.append(directory)

        logger.info("vault.initialized", root=str(self.root), created=len(created))
        return created

    def list_secrets(self) -> list[str]:
        """List every secret of the kvstore.

        Returns:
            Sorted ``/``-separated paths relative to the kvstore directory.
            Empty if the kvstore directory does not exist.
        """
        secrets = sorted(
            path.relative_to(self.kvstore_dir).as_posix()
            for path in _walk_files(self.kvstore_dir)
        )
        logger.debug("vault.secrets_listed", count=len(secrets))
        return secrets

    def secret_file(self, secret: str) -> Path:
        """Path of the file holding ``secret``."""
        return self.kvstore_dir.joinpath(*secret.split("/"))

    def read_secret(self, secret: str) -> dict[str, str]:
        """Load the key-value content of a secret.

        Args:
            secret: Secret path relative to the kvstore directory.

        Returns:
            The secret data. Empty for an empty file.

        Raises:
            SecretFileError: If the file cannot be read, is not valid YAML,
                or is not a mapping of strings to strings.
        """
        path = self.secret_file(secret)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SecretFileError(path, reason=str(e), action="read") from e

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise SecretFileError(path, reason=f"invalid YAML ({e})") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SecretFileError(path, reason=f"expected a mapping, got {type(data).__name__}")

        for key, value in data.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise SecretFileError(
                    path,
                    reason=f"key {key!r} must map a string to a string",
                )
        return data

    def list_users(self) -> dict[str, Path]:
        """List every user with an access control file.

        Files may be nested; the user name is the file name.

        Returns:
            Mapping of user name to rules file, sorted by user name.

        Raises:
            VaultLayoutError: If two files define the same user.
        """
        users: dict[str, Path] = {}
        for path in sorted(_walk_files(self.access_control_dir)):
            if path.name in users:
                msg = (
                    f"User '{path.name}' is defined twice: "
                    f"'{users[path.name]}' and '{path}'"
                )
                raise VaultLayoutError(msg)
            users[path.name] = path

        logger.debug("vault.users_listed", count=len(users))
        return dict(sorted(users.items()))

    def read_access_rules(self, user: str) -> list[str]:
        """Load the access rules of a user.

        Args:
            user: User name, as listed by ``list_users``.

        Returns:
            Rule strings in file order.

        Raises:
            UserNotFoundError: If the user has no access control file.
            AccessRulesFileError: If the file cannot be read as UTF-8 text.
        """
        rules_file = self.list_users().get(user)
        if rules_file is None:
            raise UserNotFoundError(user, path=self.access_control_dir / user)

        try:
            content = rules_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise AccessRulesFileError(user, path=rules_file, reason=str(e)) from e

        return parse_access_rules(content)


def _walk_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return [path for path in directory.rglob("*") if path.is_file()]


__all__ = ["ACCESS_CONTROL_DIRECTORY", "KVSTORE_DIRECTORY", "VaultDirectory"]
