"""Access control resolution for kubevault users.

Example:
    >>> from kubevault.access import parse_access_rules, resolve_access
    >>> rules = parse_access_rules(path.read_text())
    >>> decisions = resolve_access(rules, vault.list_secrets())
"""

from __future__ import annotations

from kubevault.access.glob import GlobPattern, compile_glob, expand_braces
from kubevault.access.resolver import AccessDecision, allowed_paths, resolve_access
from kubevault.access.rules import AccessRule, parse_access_rules

__all__ = [
    "AccessDecision",
    "AccessRule",
    "GlobPattern",
    "allowed_paths",
    "compile_glob",
    "expand_braces",
    "parse_access_rules",
    "resolve_access",
]
