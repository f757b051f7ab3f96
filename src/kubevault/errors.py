"""Custom exceptions for kubevault.

Exception Hierarchy:
    KubeVaultError (base)
    ├── InvalidNameError (also ValueError)
    ├── NameCollisionError (also ValueError)
    ├── VaultNotFoundError (also FileNotFoundError)
    ├── UserNotFoundError (also FileNotFoundError)
    ├── VaultLayoutError
    ├── SecretFileError
    └── AccessRulesFileError

Example:
    >>> from kubevault.errors import InvalidNameError
    >>> raise InvalidNameError("1nvalid-name")
    InvalidNameError: Invalid DNS1035 name "1nvalid-name": must validate '^[a-z][a-z0-9-]*[a-z0-9]$'
"""

from __future__ import annotations

from pathlib import Path

DNS1035_PATTERN = "^[a-z][a-z0-9-]*[a-z0-9]$"


class KubeVaultError(Exception):
    """Base exception for all kubevault errors.

    Attributes:
        message: Human-readable error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidNameError(KubeVaultError, ValueError):
    """Raised when a string cannot be turned into a DNS-1035 label.

    Attributes:
        name: The offending name, already lowercased.
        pattern: The pattern the name was expected to satisfy.

    Example:
        >>> err = InvalidNameError("invalid-name-")
        >>> err.pattern
        '^[a-z][a-z0-9-]*[a-z0-9]$'
    """

    def __init__(self, name: str, *, pattern: str = DNS1035_PATTERN) -> None:
        self.name = name
        self.pattern = pattern
        KubeVaultError.__init__(
            self,
            f'Invalid DNS1035 name "{name}": must validate \'{pattern}\'',
        )


class NameCollisionError(KubeVaultError, ValueError):
    """Raised when two distinct sources normalize to the same resource name.

    Attributes:
        name: The shared normalized name.
        sources: The raw values that collided.
    """

    def __init__(self, name: str, *, sources: list[str]) -> None:
        self.name = name
        self.sources = sources
        joined = ", ".join(repr(source) for source in sources)
        KubeVaultError.__init__(
            self,
            f"Resource name '{name}' is produced by more than one source: {joined}",
        )


class VaultNotFoundError(KubeVaultError, FileNotFoundError):
    """Raised when the vault directory does not exist.

    Attributes:
        vault_dir: The directory that was expected.
    """

    def __init__(self, vault_dir: Path) -> None:
        self.vault_dir = vault_dir
        KubeVaultError.__init__(self, f"The Vault directory '{vault_dir}' does not exist")


class UserNotFoundError(KubeVaultError, FileNotFoundError):
    """Raised when a user has no access control file.

    Attributes:
        user: The requested user name.
        path: Where the access control file was expected.
    """

    def __init__(self, user: str, *, path: Path) -> None:
        self.user = user
        self.path = path
        KubeVaultError.__init__(
            self,
            f"User '{user}' does not exist (file '{path}' not found)",
        )


class VaultLayoutError(KubeVaultError):
    """Raised when the vault directory content is inconsistent."""


class SecretFileError(KubeVaultError):
    """Raised when a kvstore file cannot be read or parsed.

    Attributes:
        path: The kvstore file.
        reason: Why the file was rejected.

    Example:
        >>> raise SecretFileError(Path("vault/kvstore/db"), reason="not a mapping")
        SecretFileError: Unable to parse YAML content from secret 'vault/kvstore/db': not a mapping
    """

    def __init__(self, path: Path, *, reason: str, action: str = "parse YAML content from") -> None:
        self.path = path
        self.reason = reason
        KubeVaultError.__init__(self, f"Unable to {action} secret '{path}': {reason}")


class AccessRulesFileError(KubeVaultError):
    """Raised when the access control file of a user cannot be read.

    Attributes:
        user: The user whose rules were requested.
        path: The access control file.
        reason: Why the file could not be read.
    """

    def __init__(self, user: str, *, path: Path, reason: str) -> None:
        self.user = user
        self.path = path
        self.reason = reason
        KubeVaultError.__init__(
            self,
            f"Unable to read access control rules for '{user}' on '{path}': {reason}",
        )


__all__ = [
    "DNS1035_PATTERN",
    "AccessRulesFileError",
    "InvalidNameError",
    "KubeVaultError",
    "NameCollisionError",
    "SecretFileError",
    "UserNotFoundError",
    "VaultLayoutError",
    "VaultNotFoundError",
]
