"""Main entry point for the kubevault CLI.

Commands:
    kubevault generate: Render the Kubernetes manifests of the vault
    kubevault new: Initialize a vault directory
    kubevault can-read: List the secrets a user can read
    kubevault completion: Print a shell completion script

Example:
    $ kubevault --help
    $ kubevault --vault-dir ./vault generate --namespace default
    $ kubevault can-read alice --show-only-allowed
"""

from __future__ import annotations

import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path

import click

from kubevault import __version__
from kubevault.cli.can_read import can_read_command
from kubevault.cli.completion import completion_command
from kubevault.cli.generate import generate_command
from kubevault.cli.new import new_command
from kubevault.config import DEFAULT_VAULT_DIR
from kubevault.telemetry import configure_logging
from kubevault.telemetry.logging import LOG_LEVELS


def _get_version() -> str:
    """Get the kubevault package version.

    Returns:
        Version string from package metadata, or the module version if not installed.
    """
    try:
        return get_version("kubevault")
    except PackageNotFoundError:
        return __version__


@click.group(
    name="kubevault",
    help="kubevault - Render a directory-based vault into Kubernetes Secrets and RBAC.",
    epilog="Use 'kubevault <command> --help' for command-specific help.",
    context_settings={
        "help_option_names": ["-h", "--help"],
    },
)
@click.version_option(
    version=_get_version(),
    prog_name="kubevault",
    message="%(prog)s %(version)s",
)
@click.option(
    "--vault-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_VAULT_DIR,
    envvar="KUBEVAULT_DIR",
    show_default=True,
    show_envvar=True,
    help="Vault directory containing kvstore/ and access_control/.",
    metavar="PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    envvar="KUBEVAULT_LOG_LEVEL",
    show_default=True,
    show_envvar=True,
    help="Minimum level of the logs written to stderr.",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default="console",
    envvar="KUBEVAULT_LOG_FORMAT",
    show_default=True,
    show_envvar=True,
    help="Format of the logs written to stderr.",
)
@click.pass_context
def cli(ctx: click.Context, vault_dir: Path, log_level: str, log_format: str) -> None:
    """Root command group for the kubevault CLI."""
    ctx.ensure_object(dict)
    ctx.obj["vault_dir"] = vault_dir.expanduser()
    configure_logging(log_level=log_level.upper(), json_output=log_format == "json")


cli.add_command(generate_command)
cli.add_command(new_command)
cli.add_command(can_read_command)
cli.add_command(completion_command)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the kubevault CLI.

    Args:
        argv: Command-line arguments (uses sys.argv if None).
    """
    try:
        cli(args=argv, standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
