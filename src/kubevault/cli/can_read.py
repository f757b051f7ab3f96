"""The ``kubevault can-read`` command.

Lists the secrets of the kvstore with the access decision of a user.

Example:
    $ kubevault can-read alice
    $ kubevault can-read alice --show-only-allowed
"""

from __future__ import annotations

import click

from kubevault.access import resolve_access
from kubevault.cli.utils import ExitCode, error_exit, get_vault
from kubevault.errors import InvalidNameError, KubeVaultError, UserNotFoundError
from kubevault.naming import normalize

ALLOWED_MARKER = "●"
DENIED_MARKER = "○"


@click.command(
    name="can-read",
    help="List all accessible secrets for a given user.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "--show-only-allowed",
    is_flag=True,
    default=False,
    help="Only show secrets that the user is allowed to read.",
)
@click.argument("user", metavar="USER")
@click.pass_context
def can_read_command(ctx: click.Context, show_only_allowed: bool, user: str) -> None:
    """List all accessible secrets for a given user."""
    if not user:
        error_exit("A value is required for 'USER' but none was supplied", ExitCode.USAGE_ERROR)

    vault = get_vault(ctx)

    try:
        rules = vault.read_access_rules(user)
    except UserNotFoundError as e:
        error_exit(e.message, exit_code=ExitCode.FILE_NOT_FOUND)
    except KubeVaultError as e:
        error_exit(e.message, exit_code=ExitCode.VALIDATION_ERROR)

    decisions = resolve_access(rules, vault.list_secrets())

    click.echo(f"List of secrets accessible by user '{user}':")
    for decision in decisions:
        try:
            label = f"{normalize(decision.path)} ({decision.path})"
        except InvalidNameError as e:
            error_exit(e.message, exit_code=ExitCode.VALIDATION_ERROR)

        if decision.allowed:
            click.echo(f"{ALLOWED_MARKER} {click.style(label, fg='white')}")
        elif not show_only_allowed:
            click.echo(
                f"{DENIED_MARKER} {click.style(label, fg='bright_black', strikethrough=True)}"
            )


__all__: list[str] = ["can_read_command"]
