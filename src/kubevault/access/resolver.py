"""Resolution of access control rules against secret paths.

Every path starts denied. Rules are then applied one at a time, in order,
across the whole path set:

- an allow rule grants the paths it matches (``allowed or match``)
- a deny rule revokes the paths it matches (``allowed and not match``)

The decision for a path therefore comes from the last rule matching it,
not from the most specific one.

Example:
    >>> from kubevault.access.resolver import resolve_access
    >>> decisions = resolve_access(["a/**", "!a/b/**"], ["a/b/c", "a/d"])
    >>> [(d.path, d.allowed) for d in decisions]
    [('a/b/c', False), ('a/d', True)]
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import PurePath

import structlog

from kubevault.access.glob import compile_glob
from kubevault.access.rules import AccessRule

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, order=True)
class AccessDecision:
    """Resolved visibility of one secret path.

    Attributes:
        path: Secret path, ``/``-separated.
        allowed: Whether the rules grant access to the path.
    """

    path: str
    allowed: bool


def resolve_access(
    rules: Sequence[str],
    paths: Iterable[str | os.PathLike[str]],
) -> list[AccessDecision]:
    """Compute the access decision of every path under an ordered rule list.

    Args:
        rules: Rule strings in evaluation order, without blanks or comments.
        paths: Secret paths relative to the kvstore root. Path objects are
            converted to their ``/``-separated form; duplicates are merged.

    Returns:
        One decision per distinct path, sorted by path.
    """
    state = dict.fromkeys(sorted({_as_posix(path) for path in paths}), False)

    for rule in (AccessRule.parse(text) for text in rules):
        pattern = compile_glob(rule.pattern)
        if rule.negated:
            state = {path: allowed and not pattern.matches(path) for path, allowed in state.items()}
        else:
            state = {path: allowed or pattern.matches(path) for path, allowed in state.items()}

    decisions = [AccessDecision(path=path, allowed=allowed) for path, allowed in state.items()]
    logger.debug(
        "access.resolved",
        rules=len(rules),
        paths=len(decisions),
        allowed=sum(decision.allowed for decision in decisions),
    )
    return decisions


def allowed_paths(decisions: Iterable[AccessDecision]) -> list[str]:
    """Keep the paths of the allowed decisions, preserving order."""
    return [decision.path for decision in decisions if decision.allowed]


def _as_posix(path: str | os.PathLike[str]) -> str:
    if isinstance(path, str):
        return path
    return PurePath(path).as_posix()


__all__ = ["AccessDecision", "allowed_paths", "resolve_access"]
