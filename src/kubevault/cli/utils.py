"""CLI utility functions and error handling.

Errors go to stderr as plain text with a non-zero exit code; informational
messages also go to stderr so that stdout only carries command output
(manifests, listings).

Example:
    from kubevault.cli.utils import error_exit, ExitCode

    if not path.exists():
        error_exit("File not found", exit_code=ExitCode.FILE_NOT_FOUND, path=str(path))
"""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TYPE_CHECKING

import click

from kubevault.errors import VaultNotFoundError
from kubevault.vault import VaultDirectory

if TYPE_CHECKING:
    from typing import NoReturn

    from pydantic import ValidationError


class ExitCode(IntEnum):
    """Standard exit codes for CLI commands."""

    SUCCESS = 0
    """Command completed successfully."""

    GENERAL_ERROR = 1
    """General error (catch-all for failures)."""

    USAGE_ERROR = 2
    """Invalid usage (bad arguments, missing required options)."""

    FILE_NOT_FOUND = 3
    """Required file or directory not found."""

    PERMISSION_ERROR = 4
    """Permission denied accessing file or resource."""

    VALIDATION_ERROR = 5
    """Vault content failed validation."""


def error(message: str, **context: str | int | bool | None) -> None:
    """Print an error message to stderr.

    Args:
        message: Error message to display.
        **context: Optional context key-value pairs to include.

    Example:
        error("File not found", path="/path/to/file")
        # Output: Error: File not found (path=/path/to/file)
    """
    click.echo(_format("Error", message, context), err=True)


def error_exit(
    message: str,
    exit_code: ExitCode = ExitCode.GENERAL_ERROR,
    **context: str | int | bool | None,
) -> NoReturn:
    """Print an error message to stderr and exit with a code.

    Raises:
        SystemExit: Always exits with the specified code.
    """
    error(message, **context)
    sys.exit(exit_code)


def warn(message: str, **context: str | int | bool | None) -> None:
    """Print a warning message to stderr."""
    click.echo(_format("Warning", message, context), err=True)


def success(message: str) -> None:
    """Print a success message to stdout."""
    click.echo(message)


def info(message: str) -> None:
    """Print an informational message to stderr."""
    click.echo(message, err=True)


def _format(prefix: str, message: str, context: dict[str, str | int | bool | None]) -> str:
    context_str = ", ".join(f"{k}={v}" for k, v in context.items() if v is not None)
    if context_str:
        return f"{prefix}: {message} ({context_str})"
    return f"{prefix}: {message}"


def format_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into a single line.

    Example:
        >>> format_validation_error(exc)
        "namespace: String should match pattern '^[a-z0-9]...'"
    """
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


def get_vault(ctx: click.Context) -> VaultDirectory:
    """Get the vault selected by the root ``--vault-dir`` option.

    Raises:
        SystemExit: With FILE_NOT_FOUND if the vault directory does not exist.
    """
    vault = VaultDirectory(ctx.find_root().obj["vault_dir"])
    try:
        vault.ensure_exists()
    except VaultNotFoundError as e:
        error_exit(e.message, exit_code=ExitCode.FILE_NOT_FOUND)
    return vault


__all__ = [
    "ExitCode",
    "error",
    "error_exit",
    "format_validation_error",
    "get_vault",
    "info",
    "success",
    "warn",
]
