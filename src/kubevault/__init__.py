"""kubevault - Kubernetes secrets and RBAC from a vault directory.

kubevault turns a directory tree of key-value files and per-user access rules
into Kubernetes manifests:

- one Secret per kvstore file (``generate_secret_manifests``)
- one ServiceAccount, token Secret, Role and RoleBinding per user
  (``generate_rbac_manifests``)

Example:
    $ kubevault new
    $ kubevault generate --namespace kubevault-kvstore
    $ kubevault can-read alice
"""

from __future__ import annotations

__version__ = "1.1.0"
