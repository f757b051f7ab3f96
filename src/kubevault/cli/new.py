"""The ``kubevault new`` command.

Creates the vault layout (``kvstore/`` and ``access_control/``).

Example:
    $ kubevault new
    $ kubevault new ~/vault
"""

from __future__ import annotations

from pathlib import Path

import click

from kubevault.cli.utils import ExitCode, error_exit, info, success
from kubevault.vault import VaultDirectory


@click.command(
    name="new",
    help="Initialize the kubevault configuration.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument(
    "path",
    required=False,
    type=click.Path(file_okay=False, path_type=Path),
    metavar="[PATH]",
)
@click.pass_context
def new_command(ctx: click.Context, path: Path | None) -> None:
    """Initialize a vault directory.

    Args:
        ctx: Click context, carrying the root ``--vault-dir``.
        path: Vault directory to initialize. Defaults to ``--vault-dir``.
    """
    vault = VaultDirectory(path if path is not None else ctx.find_root().obj["vault_dir"])

    try:
        created = vault.init()
    except PermissionError:
        error_exit(
            "Cannot create the vault directory",
            exit_code=ExitCode.PERMISSION_ERROR,
            path=str(vault.root),
        )
    except OSError as e:
        error_exit(f"Cannot create the vault directory: {e}", exit_code=ExitCode.GENERAL_ERROR)

    for directory in created:
        info(f"Created: {directory}")
    success(f"Vault initialized in {vault.root}")


__all__: list[str] = ["new_command"]
