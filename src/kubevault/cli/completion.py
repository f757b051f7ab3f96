"""The ``kubevault completion`` command.

Prints the shell completion script for kubevault.

Example:
    $ eval "$(kubevault completion bash)"
    $ kubevault completion fish > ~/.config/fish/completions/kubevault.fish
"""

from __future__ import annotations

import click
from click.shell_completion import get_completion_class

from kubevault.cli.utils import ExitCode, error_exit

SHELLS = ("bash", "zsh", "fish")


@click.command(
    name="completion",
    help="Generate shell completion scripts.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument("shell", type=click.Choice(SHELLS), metavar="SHELL")
@click.pass_context
def completion_command(ctx: click.Context, shell: str) -> None:
    """Print the completion script of ``shell``."""
    root = ctx.find_root()
    prog_name = root.info_name or "kubevault"
    complete_var = f"_{prog_name.replace('-', '_').upper()}_COMPLETE"

    completion_class = get_completion_class(shell)
    if completion_class is None:
        error_exit(f"Unsupported shell {shell!r}", exit_code=ExitCode.USAGE_ERROR)

    completion = completion_class(root.command, {}, prog_name, complete_var)
    click.echo(completion.source())


__all__: list[str] = ["completion_command"]
