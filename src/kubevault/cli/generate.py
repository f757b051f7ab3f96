"""The ``kubevault generate`` command.

Reads the vault directory and renders every Kubernetes manifest:
one Secret per kvstore file, plus a ServiceAccount, token Secret, Role and
RoleBinding per user. Manifests go to stdout unless an output directory is
given.

Example:
    $ kubevault generate
    $ kubevault --vault-dir ./vault generate --namespace default
    $ kubevault generate --output-dir manifests/
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
import structlog
from pydantic import ValidationError

from kubevault.cli.utils import (
    ExitCode,
    error_exit,
    format_validation_error,
    get_vault,
    info,
    success,
)
from kubevault.config import DEFAULT_NAMESPACE, GenerateConfig
from kubevault.errors import KubeVaultError
from kubevault.generator import (
    dump_manifests,
    generate_rbac_manifests,
    generate_secret_manifests,
    write_manifests,
)

logger = structlog.get_logger(__name__)


@click.command(
    name="generate",
    help="""\b
Generate all Kubernetes manifests.

Renders one Secret per kvstore file, and a ServiceAccount, token Secret,
Role and RoleBinding per user of the access control directory.

Examples:
    $ kubevault generate
    $ kubevault generate --namespace default
    $ kubevault generate --output-dir manifests/
""",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "--namespace",
    "-n",
    default=DEFAULT_NAMESPACE,
    envvar="KUBEVAULT_NAMESPACE",
    show_default=True,
    show_envvar=True,
    help="Namespace where the kvstore will be created.",
    metavar="NAMESPACE",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    envvar="KUBEVAULT_OUTPUT_DIR",
    show_envvar=True,
    help="Output directory where all manifests will be generated (default: stdout).",
    metavar="PATH",
)
@click.pass_context
def generate_command(ctx: click.Context, namespace: str, output_dir: Path | None) -> None:
    """Generate all Kubernetes manifests.

    Args:
        ctx: Click context, carrying the root ``--vault-dir``.
        namespace: Namespace where the kvstore will be created.
        output_dir: Output directory. None writes to stdout.
    """
    if not namespace:
        error_exit(
            "A value is required for '--namespace' but none was supplied",
            exit_code=ExitCode.USAGE_ERROR,
        )

    vault = get_vault(ctx)

    try:
        config = GenerateConfig(vault_dir=vault.root, namespace=namespace, output_dir=output_dir)
    except ValidationError as e:
        error_exit(
            f"Invalid configuration: {format_validation_error(e)}",
            exit_code=ExitCode.USAGE_ERROR,
        )

    try:
        secrets = generate_secret_manifests(vault, config.namespace)
        bundles = generate_rbac_manifests(vault, config.namespace)
    except KubeVaultError as e:
        logger.debug("generate.failed", error=e.message)
        error_exit(e.message, exit_code=ExitCode.VALIDATION_ERROR)

    if config.output_dir is None:
        dump_manifests(sys.stdout, secrets, bundles)
        return

    try:
        result = write_manifests(config.output_dir, secrets, bundles)
    except PermissionError as e:
        error_exit(
            "Cannot write manifests",
            exit_code=ExitCode.PERMISSION_ERROR,
            path=str(e.filename or config.output_dir),
        )
    except OSError as e:
        error_exit(f"Cannot write manifests: {e}", exit_code=ExitCode.GENERAL_ERROR)

    info("Files written:")
    for file_path in result.files_generated:
        info(f"  {file_path}")
    success(
        f"Generated {result.secrets} Secrets and {result.service_accounts} access controls "
        f"in {config.output_dir}"
    )


__all__: list[str] = ["generate_command"]
