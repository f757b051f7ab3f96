"""Shell-style glob matching for access control rules.

Patterns are matched against ``/``-separated secret paths:

- ``*``, ``?`` and ``[...]`` match within a single path segment (``fnmatch``),
  ``[^...]`` negates like ``[!...]``
- ``**`` as a whole segment matches zero or more segments
- ``{a,b,c}`` expands to literal alternatives, nesting allowed
- ``\\`` escapes the next character

A pattern with unbalanced braces, or expanding to more than
``MAX_ALTERNATIVES`` alternatives, is malformed: it is kept, logged, and never
matches anything, so one bad rule cannot break the evaluation of the others.

Example:
    >>> from kubevault.access.glob import compile_glob
    >>> compile_glob("**/*{b,c}/file-b").matches("a/b/c/file-b")
    True
    >>> compile_glob("{y,z}/*").matches("z/folder-a/file-a")
    False
"""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase

import structlog

logger = structlog.get_logger(__name__)

SEPARATOR = "/"
GLOBSTAR = "**"
MAX_ALTERNATIVES = 1024

# fnmatch has no escape character; escaped metacharacters become one-char classes
_FNMATCH_ESCAPES = {"*": "[*]", "?": "[?]", "[": "[[]"}


class MalformedPatternError(ValueError):
    """Raised when a glob pattern cannot be compiled."""


@dataclass(frozen=True)
class GlobPattern:
    """A compiled glob pattern.

    Attributes:
        pattern: The source pattern.
        alternatives: Brace-expanded alternatives, each split into segments.
        error: Why the pattern is malformed, None when it compiled.
    """

    pattern: str
    alternatives: tuple[tuple[str, ...], ...] = ()
    error: str | None = None

    @property
    def malformed(self) -> bool:
        """Whether the pattern failed to compile."""
        return self.error is not None

    def matches(self, path: str) -> bool:
        """Check whether ``path`` matches any alternative of this pattern.

        Args:
            path: ``/``-separated path, compared case-sensitively.

        Returns:
            True if the path matches. Always False for malformed patterns.
        """
        if self.malformed:
            return False

        segments = tuple(path.split(SEPARATOR))
        return any(_match_segments(alternative, segments) for alternative in self.alternatives)


def compile_glob(pattern: str) -> GlobPattern:
    """Compile a glob pattern, degrading malformed ones to never-matching.

    Args:
        pattern: Glob pattern to compile.

    Returns:
        The compiled pattern.
    """
    try:
        expanded = expand_braces(pattern)
    except MalformedPatternError as e:
        logger.warning("access.malformed_pattern", pattern=pattern, reason=str(e))
        return GlobPattern(pattern=pattern, error=str(e))

    alternatives = tuple(
        tuple(_to_fnmatch(segment) for segment in _split_unescaped(alternative, SEPARATOR))
        for alternative in expanded
    )
    return GlobPattern(pattern=pattern, alternatives=alternatives)


def expand_braces(pattern: str) -> list[str]:
    """Expand brace alternatives into a list of brace-free patterns.

    Duplicates are removed, first occurrence wins. They still count towards
    ``MAX_ALTERNATIVES``.

    Args:
        pattern: Pattern that may contain ``{a,b}`` groups.

    Returns:
        The expanded patterns, in expansion order.

    Raises:
        MalformedPatternError: If braces are unbalanced or expand to more than
            ``MAX_ALTERNATIVES`` patterns.

    Example:
        >>> expand_braces("{a,b}/{c,d{e,f}}")
        ['a/c', 'a/de', 'a/df', 'b/c', 'b/de', 'b/df']
    """
    _check_balanced(pattern)
    return list(dict.fromkeys(_expand(pattern)))


def _check_balanced(pattern: str) -> None:
    depth = 0
    escaped = False
    for index, char in enumerate(pattern):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                msg = f"unexpected '}}' at position {index}"
                raise MalformedPatternError(msg)

    if depth:
        msg = f"{depth} unclosed '{{'"
        raise MalformedPatternError(msg)


def _expand(pattern: str) -> list[str]:
    start = _find_unescaped(pattern, "{")
    if start is None:
        return [pattern]

    # Braces are balanced, so the matching '}' always exists
    depth = 0
    escaped = False
    bounds = [start]
    end = start
    for index in range(start, len(pattern)):
        char = pattern[index]
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                end = index
                break
        elif char == "," and depth == 1:
            bounds.append(index)
    bounds.append(end)

    prefix, suffix = pattern[:start], pattern[end + 1 :]
    expanded: list[str] = []
    for left, right in zip(bounds, bounds[1:]):
        expanded.extend(_expand(prefix + pattern[left + 1 : right] + suffix))
        if len(expanded) > MAX_ALTERNATIVES:
            msg = f"expands to more than {MAX_ALTERNATIVES} alternatives"
            raise MalformedPatternError(msg)
    return expanded


def _find_unescaped(pattern: str, target: str) -> int | None:
    escaped = False
    for index, char in enumerate(pattern):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == target:
            return index
    return None


def _split_unescaped(pattern: str, separator: str) -> list[str]:
    parts: list[str] = []
    current: list[str] = []
    escaped = False
    for char in pattern:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            current.append(char)
            escaped = True
        elif char == separator:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def _to_fnmatch(segment: str) -> str:
    if segment == GLOBSTAR:
        return segment

    translated: list[str] = []
    escaped = False
    class_start = False
    for char in segment:
        if escaped:
            translated.append(_FNMATCH_ESCAPES.get(char, char))
            escaped = False
        elif char == "\\":
            escaped = True
        elif class_start and char == "^":
            # fnmatch only negates with "!"
            translated.append("!")
        else:
            translated.append(char)
        class_start = char == "[" and translated[-1] == "["
    if escaped:
        translated.append("\\")
    return "".join(translated)


def _match_segments(pattern: tuple[str, ...], path: tuple[str, ...]) -> bool:
    if not pattern:
        return not path

    head, rest = pattern[0], pattern[1:]
    if head == GLOBSTAR:
        return any(_match_segments(rest, path[skip:]) for skip in range(len(path) + 1))

    return bool(path) and fnmatchcase(path[0], head) and _match_segments(rest, path[1:])


__all__ = [
    "GlobPattern",
    "MalformedPatternError",
    "compile_glob",
    "expand_braces",
]
