"""Kubernetes manifest generation from a vault directory.

Two families of manifests are produced:

- one Opaque Secret per kvstore file, named after its normalized path
- one access control bundle per user: a ServiceAccount, its token Secret,
  a Role granting ``get``/``list`` on the secrets the user's rules allow,
  and the RoleBinding tying both together

Manifests are either streamed as a single YAML document stream or written
to a directory, one file per secret and one per user.

Example:
    >>> from kubevault.generator import generate_rbac_manifests, generate_secret_manifests
    >>> vault = VaultDirectory(Path("vault"))
    >>> secrets = generate_secret_manifests(vault, "kubevault-kvstore")
    >>> bundles = generate_rbac_manifests(vault, "kubevault-kvstore")
    >>> result = write_manifests(Path("manifests"), secrets, bundles)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any

import structlog
import yaml

from kubevault.access import allowed_paths, resolve_access
from kubevault.errors import NameCollisionError
from kubevault.manifests import (
    RoleBindingConfig,
    RoleBindingSubject,
    RoleConfig,
    RoleRule,
    SecretConfig,
    ServiceAccountConfig,
    ServiceAccountTokenConfig,
)
from kubevault.naming import normalize
from kubevault.telemetry.tracing import ATTR_RESOURCE_COUNT, get_tracer, manifest_span

if TYPE_CHECKING:
    from kubevault.vault import VaultDirectory

logger = structlog.get_logger(__name__)

SECRET_FILE_TEMPLATE = "secret-{name}.yaml"
ACCESS_CONTROL_FILE_TEMPLATE = "access-control-{name}.yaml"


def role_name(account: str) -> str:
    """Name of the Role and RoleBinding of an account."""
    return f"kubevault:{account}:access"


@dataclass(frozen=True)
class AccessControlBundle:
    """The RBAC manifests of a single user.

    Attributes:
        account: Normalized account name.
        service_account: ServiceAccount manifest.
        token: Service account token Secret manifest.
        role: Role manifest.
        role_binding: RoleBinding manifest.
    """

    account: str
    service_account: dict[str, Any]
    token: dict[str, Any]
    role: dict[str, Any]
    role_binding: dict[str, Any]

    def documents(self) -> list[dict[str, Any]]:
        """Manifests in apply order."""
        return [self.service_account, self.token, self.role, self.role_binding]


@dataclass
class GenerationResult:
    """Result of writing manifests.

    Attributes:
        files_generated: Files written, empty when streaming.
        secrets: Number of kvstore Secret manifests.
        service_accounts: Number of ServiceAccount manifests.
        roles: Number of Role manifests.
        role_bindings: Number of RoleBinding manifests.
    """

    files_generated: list[Path] = field(default_factory=lambda: list[Path]())
    secrets: int = 0
    service_accounts: int = 0
    roles: int = 0
    role_bindings: int = 0

    def __str__(self) -> str:
        """Return human-readable summary of the generation."""
        lines = [
            f"Secrets: {self.secrets}",
            f"ServiceAccounts: {self.service_accounts}",
            f"Roles: {self.roles}",
            f"RoleBindings: {self.role_bindings}",
        ]
        if self.files_generated:
            lines.append(f"Files: {len(self.files_generated)}")
        return "\n".join(lines)


def normalize_all(sources: Iterable[str]) -> dict[str, str]:
    """Normalize many sources, rejecting names shared by distinct sources.

    Args:
        sources: Raw paths or names.

    Returns:
        Mapping of source to normalized name, in input order.

    Raises:
        InvalidNameError: If a source cannot be normalized.
        NameCollisionError: If two sources normalize to the same name.
    """
    names: dict[str, str] = {}
    owners: dict[str, str] = {}
    for source in sources:
        name = normalize(source)
        if name in owners and owners[name] != source:
            raise NameCollisionError(name, sources=[owners[name], source])
        owners[name] = source
        names[source] = name
    return names


def generate_secret_manifests(vault: VaultDirectory, namespace: str) -> list[dict[str, Any]]:
    """Generate one Secret manifest per kvstore file.

    Args:
        vault: Vault to read secrets from.
        namespace: Namespace of the kvstore.

    Returns:
        Secret manifests sorted by name.

    Raises:
        InvalidNameError: If a secret path cannot be normalized.
        NameCollisionError: If two secret paths share a normalized name.
        SecretFileError: If a secret file is unreadable or invalid.
    """
    with manifest_span(
        get_tracer(), "generate_secrets", resource_kind="Secret", namespace=namespace
    ) as span:
        names = normalize_all(vault.list_secrets())
        configs = [
            SecretConfig(
                name=name,
                namespace=namespace,
                source=source,
                data=vault.read_secret(source),
            )
            for source, name in names.items()
        ]
        manifests = [config.to_k8s_manifest() for config in sorted(configs, key=lambda c: c.name)]

        span.set_attribute(ATTR_RESOURCE_COUNT, len(manifests))
        logger.info("generator.secrets_generated", namespace=namespace, count=len(manifests))
        return manifests


def generate_rbac_manifests(
    vault: VaultDirectory,
    namespace: str,
    secrets: Sequence[str] | None = None,
) -> list[AccessControlBundle]:
    """Generate the RBAC manifests of every user of the vault.

    Args:
        vault: Vault to read users and secrets from.
        namespace: Namespace of the kvstore.
        secrets: Secret paths to resolve rules against. Defaults to the
            content of the kvstore.

    Returns:
        One bundle per user, sorted by account name.

    Raises:
        InvalidNameError: If a user or secret name cannot be normalized.
        NameCollisionError: If two users or two secrets share a normalized name.
    """
    with manifest_span(
        get_tracer(), "generate_rbac", resource_kind="Role", namespace=namespace
    ) as span:
        secret_paths = list(vault.list_secrets() if secrets is None else secrets)
        secret_names = normalize_all(secret_paths)
        users = vault.list_users()
        accounts = normalize_all(users)

        bundles: list[AccessControlBundle] = []
        for user, account in accounts.items():
            access_rules = vault.read_access_rules(user)
            decisions = resolve_access(access_rules, secret_paths)
            granted = [secret_names[path] for path in allowed_paths(decisions)]

            bundles.append(_build_bundle(account, namespace, access_rules, granted))
            logger.debug(
                "generator.user_resolved",
                user=user,
                rules=len(access_rules),
                granted=len(granted),
            )

        bundles.sort(key=lambda bundle: bundle.account)
        span.set_attribute(ATTR_RESOURCE_COUNT, len(bundles))
        logger.info("generator.rbac_generated", namespace=namespace, users=len(bundles))
        return bundles


def _build_bundle(
    account: str,
    namespace: str,
    access_rules: list[str],
    granted: list[str],
) -> AccessControlBundle:
    name = role_name(account)
    rules = [
        RoleRule(
            api_groups=["authorization.k8s.io"],
            resources=["selfsubjectaccessreviews"],
            verbs=["create"],
        ),
    ]
    # an empty resourceNames list would grant every secret of the namespace
    if granted:
        rules.append(
            RoleRule(
                api_groups=[""],
                resources=["secrets"],
                verbs=["get", "list"],
                resource_names=granted,
            )
        )
    role = RoleConfig(
        name=name,
        namespace=namespace,
        access_rules=access_rules,
        rules=rules,
    )
    binding = RoleBindingConfig(
        name=name,
        namespace=namespace,
        role_name=name,
        subjects=[RoleBindingSubject(name=account, namespace=namespace)],
    )

    return AccessControlBundle(
        account=account,
        service_account=ServiceAccountConfig(name=account, namespace=namespace).to_k8s_manifest(),
        token=ServiceAccountTokenConfig(
            service_account=account, namespace=namespace
        ).to_k8s_manifest(),
        role=role.to_k8s_manifest(),
        role_binding=binding.to_k8s_manifest(),
    )


def _dump(document: dict[str, Any]) -> str:
    return yaml.safe_dump(
        document,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )


def dump_manifests(
    stream: IO[str],
    secrets: Sequence[dict[str, Any]],
    bundles: Sequence[AccessControlBundle],
) -> GenerationResult:
    """Write every manifest to a text stream, each preceded by ``---``.

    Args:
        stream: Destination stream.
        secrets: Secret manifests.
        bundles: Access control bundles.

    Returns:
        Counts of the written manifests.
    """
    for document in [*secrets, *(doc for bundle in bundles for doc in bundle.documents())]:
        stream.write("---\n")
        stream.write(_dump(document))

    return _result(secrets, bundles)


def write_manifests(
    output_dir: Path,
    secrets: Sequence[dict[str, Any]],
    bundles: Sequence[AccessControlBundle],
) -> GenerationResult:
    """Write manifests to a directory, one file per secret and per user.

    Existing files are overwritten; the directory is created if needed.

    Args:
        output_dir: Destination directory.
        secrets: Secret manifests.
        bundles: Access control bundles.

    Returns:
        Counts of the written manifests and the generated files.
    """
    with manifest_span(get_tracer(), "write_manifests") as span:
        output_dir.mkdir(parents=True, exist_ok=True)
        result = _result(secrets, bundles)

        for secret in secrets:
            path = output_dir / SECRET_FILE_TEMPLATE.format(name=secret["metadata"]["name"])
            path.write_text(_dump(secret), encoding="utf-8")
            result.files_generated.append(path)

        for bundle in bundles:
            path = output_dir / ACCESS_CONTROL_FILE_TEMPLATE.format(name=bundle.account)
            path.write_text(
                yaml.safe_dump_all(
                    bundle.documents(),
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False,
                ),
                encoding="utf-8",
            )
            result.files_generated.append(path)

        span.set_attribute(ATTR_RESOURCE_COUNT, len(result.files_generated))
        logger.info(
            "generator.manifests_written",
            output_dir=str(output_dir),
            files=len(result.files_generated),
        )
        return result


def _result(
    secrets: Sequence[dict[str, Any]],
    bundles: Sequence[AccessControlBundle],
) -> GenerationResult:
    return GenerationResult(
        secrets=len(secrets),
        service_accounts=len(bundles),
        roles=len(bundles),
        role_bindings=len(bundles),
    )


__all__ = [
    "AccessControlBundle",
    "GenerationResult",
    "dump_manifests",
    "generate_rbac_manifests",
    "generate_secret_manifests",
    "normalize_all",
    "role_name",
    "write_manifests",
]
