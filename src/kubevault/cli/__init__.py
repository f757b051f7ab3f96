"""Command-line interface for kubevault.

Commands:
    kubevault generate: Render the Kubernetes manifests of the vault
    kubevault new: Initialize a vault directory
    kubevault can-read: List the secrets a user can read
    kubevault completion: Print a shell completion script

Example:
    $ kubevault --help
    $ kubevault --version
    $ kubevault --vault-dir ./vault generate --output-dir manifests/

Exit Codes:
    0: Success
    1: General error
    2: Usage error (invalid arguments)
    3: File not found (vault directory, user)
    4: Permission error
    5: Validation error (invalid names, unreadable secrets)
"""

from __future__ import annotations

from kubevault.cli.main import cli, main
from kubevault.cli.utils import ExitCode, error, error_exit, success, warn

__all__: list[str] = [
    # Entry points
    "main",
    "cli",
    # Utilities
    "ExitCode",
    "error",
    "error_exit",
    "warn",
    "success",
]
