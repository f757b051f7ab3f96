"""Configuration models for kubevault commands.

Example:
    >>> from kubevault.config import GenerateConfig
    >>> config = GenerateConfig(vault_dir="vault", namespace="kubevault-kvstore")
    >>> config.output_dir is None
    True
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_VAULT_DIR = "vault"
DEFAULT_NAMESPACE = "kubevault-kvstore"


class GenerateConfig(BaseModel):
    """Configuration of a manifest generation run.

    Attributes:
        vault_dir: Vault directory to read from.
        namespace: Namespace the kvstore is deployed in.
        output_dir: Directory to write manifest files to. None writes to stdout.

    Example:
        >>> GenerateConfig(vault_dir="vault", namespace="")
        Traceback (most recent call last):
        ...
        pydantic_core._pydantic_core.ValidationError: 1 validation error for GenerateConfig
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "examples": [
                {"vault_dir": "vault", "namespace": "kubevault-kvstore"},
                {"vault_dir": "vault", "namespace": "default", "output_dir": "manifests"},
            ]
        },
    )

    vault_dir: Path = Field(
        default=Path(DEFAULT_VAULT_DIR),
        description="Vault directory containing kvstore/ and access_control/",
    )
    namespace: str = Field(
        default=DEFAULT_NAMESPACE,
        min_length=1,
        max_length=63,
        pattern=r"^[a-z0-9][a-z0-9-]*[a-z0-9]$|^[a-z0-9]$",
        description="Kubernetes namespace of the kvstore",
        examples=["kubevault-kvstore", "default"],
    )
    output_dir: Path | None = Field(
        default=None,
        description="Directory for generated manifests. None writes to stdout.",
    )

    @field_validator("vault_dir", "output_dir")
    @classmethod
    def expand_user(cls, v: Path | None) -> Path | None:
        """Expand ~ in directory paths."""
        if v is None:
            return None
        return v.expanduser()


__all__ = ["DEFAULT_NAMESPACE", "DEFAULT_VAULT_DIR", "GenerateConfig"]
