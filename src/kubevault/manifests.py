"""Kubernetes resource models for kubevault manifests.

Each model renders a Kubernetes manifest dictionary through
``to_k8s_manifest()``, ready to be dumped as YAML.

Example:
    >>> from kubevault.manifests import ServiceAccountConfig
    >>> config = ServiceAccountConfig(name="alice", namespace="kubevault-kvstore")
    >>> config.to_k8s_manifest()["kind"]
    'ServiceAccount'
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

SOURCE_ANNOTATION = "kubevault.chezmoi.sh/source"
RULES_ANNOTATION = "kubevault.chezmoi.sh/rules"
SERVICE_ACCOUNT_ANNOTATION = "kubernetes.io/service-account.name"

RBAC_API_GROUP = "rbac.authorization.k8s.io"
RBAC_API_VERSION = f"{RBAC_API_GROUP}/v1"

NAMESPACE_PATTERN = r"^[a-z0-9][a-z0-9-]*[a-z0-9]$|^[a-z0-9]$"
NAME_PATTERN = r"^[a-z][a-z0-9-]*[a-z0-9]$|^[a-z]$"


def _namespace_field() -> Any:
    return Field(
        ...,
        min_length=1,
        max_length=63,
        pattern=NAMESPACE_PATTERN,
        description="Namespace of the resource",
    )


# =============================================================================
# Secrets
# =============================================================================


class SecretConfig(BaseModel):
    """An Opaque Secret holding one kvstore file.

    Attributes:
        name: Normalized secret name.
        namespace: Namespace of the kvstore.
        source: Path of the kvstore file, relative to the kvstore directory.
        data: Key-value content of the file.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., pattern=NAME_PATTERN, description="Secret name")
    namespace: str = _namespace_field()
    source: str = Field(..., min_length=1, description="kvstore path of the secret")
    data: dict[str, str] = Field(default_factory=dict, description="Secret content")

    def to_k8s_manifest(self) -> dict[str, Any]:
        """Convert to K8s Secret manifest dict."""
        return {
            "apiVersion": "v1",
            "kind": "Secret",
            "metadata": {
                "annotations": {SOURCE_ANNOTATION: self.source},
                "name": self.name,
                "namespace": self.namespace,
            },
            "stringData": dict(sorted(self.data.items())),
            "type": "Opaque",
        }


class ServiceAccountTokenConfig(BaseModel):
    """A long-lived token Secret bound to a ServiceAccount."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_account: str = Field(..., pattern=NAME_PATTERN)
    namespace: str = _namespace_field()

    def to_k8s_manifest(self) -> dict[str, Any]:
        """Convert to K8s service-account-token Secret manifest dict."""
        return {
            "apiVersion": "v1",
            "kind": "Secret",
            "metadata": {
                "annotations": {SERVICE_ACCOUNT_ANNOTATION: self.service_account},
                "name": self.service_account,
                "namespace": self.namespace,
            },
            "type": "kubernetes.io/service-account-token",
        }


# =============================================================================
# RBAC
# =============================================================================


class ServiceAccountConfig(BaseModel):
    """A ServiceAccount representing one vault user."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., pattern=NAME_PATTERN, description="ServiceAccount name")
    namespace: str = _namespace_field()

    def to_k8s_manifest(self) -> dict[str, Any]:
        """Convert to K8s ServiceAccount manifest dict."""
        return {
            "apiVersion": "v1",
            "kind": "ServiceAccount",
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
            },
        }


class RoleRule(BaseModel):
    """A single RBAC rule within a Role.

    Attributes:
        api_groups: API groups the rule applies to ([""] for core).
        resources: Resource types.
        verbs: Allowed operations.
        resource_names: Names the rule is restricted to. Kubernetes treats both
            None and an empty list as unrestricted.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_groups: list[str] = Field(default_factory=lambda: [""])
    resources: list[str] = Field(..., min_length=1)
    verbs: list[str] = Field(..., min_length=1)
    resource_names: list[str] | None = None

    def to_k8s(self) -> dict[str, Any]:
        """Convert to the K8s PolicyRule dict."""
        rule: dict[str, Any] = {"apiGroups": self.api_groups}
        if self.resource_names is not None:
            rule["resourceNames"] = self.resource_names
        rule["resources"] = self.resources
        rule["verbs"] = self.verbs
        return rule


class RoleConfig(BaseModel):
    """A Role granting a user read access to its secrets.

    Attributes:
        name: Role name, ``kubevault:<account>:access``.
        namespace: Namespace of the kvstore.
        rules: RBAC rules.
        access_rules: The user's access rules, recorded as an annotation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    namespace: str = _namespace_field()
    rules: list[RoleRule] = Field(..., min_length=1)
    access_rules: list[str] = Field(default_factory=list)

    def to_k8s_manifest(self) -> dict[str, Any]:
        """Convert to K8s Role manifest dict."""
        return {
            "apiVersion": RBAC_API_VERSION,
            "kind": "Role",
            "metadata": {
                "annotations": {RULES_ANNOTATION: "\n".join(self.access_rules)},
                "name": self.name,
                "namespace": self.namespace,
            },
            "rules": [rule.to_k8s() for rule in self.rules],
        }


class RoleBindingSubject(BaseModel):
    """Subject (ServiceAccount) in a RoleBinding."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["ServiceAccount"] = "ServiceAccount"
    name: str
    namespace: str


class RoleBindingConfig(BaseModel):
    """A RoleBinding attaching a Role to ServiceAccounts."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    namespace: str = _namespace_field()
    subjects: list[RoleBindingSubject] = Field(..., min_length=1)
    role_name: str = Field(..., min_length=1)

    def to_k8s_manifest(self) -> dict[str, Any]:
        """Convert to K8s RoleBinding manifest dict."""
        return {
            "apiVersion": RBAC_API_VERSION,
            "kind": "RoleBinding",
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
            },
            "roleRef": {
                "apiGroup": RBAC_API_GROUP,
                "kind": "Role",
                "name": self.role_name,
            },
            "subjects": [
                {"kind": s.kind, "name": s.name, "namespace": s.namespace}
                for s in self.subjects
            ],
        }


__all__ = [
    "RULES_ANNOTATION",
    "SERVICE_ACCOUNT_ANNOTATION",
    "SOURCE_ANNOTATION",
    "RoleBindingConfig",
    "RoleBindingSubject",
    "RoleConfig",
    "RoleRule",
    "SecretConfig",
    "ServiceAccountConfig",
    "ServiceAccountTokenConfig",
]
