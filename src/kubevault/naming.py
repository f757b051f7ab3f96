"""Kubernetes-safe name derivation for vault paths.

Secret files and user files are identified by filesystem paths, while
Kubernetes resources need DNS-1035 labels. ``normalize`` bridges the two.

Example:
    >>> from kubevault.naming import normalize
    >>> normalize("production/applicationA/aws")
    'production-applicationa-aws'
"""

from __future__ import annotations

import re

from kubevault.errors import InvalidNameError

_VALID_HEAD = re.compile(r"\A[a-z]")
_VALID_TAIL = re.compile(r"[a-z0-9]\Z")
_INVALID_CHARS = re.compile(r"[^-a-z0-9]")


def normalize(raw: str) -> str:
    """Convert a path-like string into a DNS-1035 label.

    Only the first and last characters of the lowercased input are checked;
    every other character outside ``[a-z0-9-]`` is replaced by ``-``.

    Args:
        raw: Path or name to convert.

    Returns:
        The normalized name.

    Raises:
        InvalidNameError: If the lowercased input does not start with a letter
            or does not end with a letter or digit.

    Example:
        >>> normalize("name_with#special!characters")
        'name-with-special-characters'
    """
    name = raw.lower()

    if not _VALID_HEAD.search(name) or not _VALID_TAIL.search(name):
        raise InvalidNameError(name)

    return _INVALID_CHARS.sub("-", name)


__all__ = ["normalize"]
