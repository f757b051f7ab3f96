"""Unit tests for kubevault.access.resolver.

Tests cover:
- Default deny
- Sequential application of allow and deny rules
- Deterministic, path-sorted output
- Malformed rules degrading to non-matching
"""

from __future__ import annotations

import random
from pathlib import PurePosixPath

import pytest

from kubevault.access.resolver import AccessDecision, allowed_paths, resolve_access

PATHS = [
    "x/file-a",
    "x/file-b",
    "y/file-a",
    "y/file-b",
    "z/file-a",
    "z/folder-a/file-a",
    "z/folder-b/file-a",
    "z/folder-b/file-b",
    "a/b/c/file-a",
    "a/b/c/file-b",
    "a/b/d/file-a",
    "a/b/d/file-b",
]


def _as_pairs(decisions: list[AccessDecision]) -> list[tuple[str, bool]]:
    return [(decision.path, decision.allowed) for decision in decisions]


class TestResolveAccess:
    """Tests for resolve_access()."""

    def test_empty_rules_deny_everything(self) -> None:
        """Test default deny without rules."""
        decisions = resolve_access([], PATHS)

        assert len(decisions) == len(PATHS)
        assert not any(decision.allowed for decision in decisions)

    def test_unmatched_paths_are_denied(self) -> None:
        """Test default deny for paths no rule matches."""
        decisions = resolve_access(["x/*"], ["x/file-a", "y/file-a"])

        assert _as_pairs(decisions) == [("x/file-a", True), ("y/file-a", False)]

    def test_empty_paths(self) -> None:
        """Test that no paths means no decisions."""
        assert resolve_access(["**"], []) == []

    def test_reference_scenario(self) -> None:
        """Test a mix of alternatives, globstars and denials."""
        rules = ["{y,z}/*", "a/**", "!a/b/c/**", "**/*{b,c}/file-b", "!z/folder-b/file-b"]

        assert _as_pairs(resolve_access(rules, PATHS)) == [
            ("a/b/c/file-a", False),
            ("a/b/c/file-b", True),
            ("a/b/d/file-a", True),
            ("a/b/d/file-b", True),
            ("x/file-a", False),
            ("x/file-b", False),
            ("y/file-a", True),
            ("y/file-b", True),
            ("z/file-a", True),
            ("z/folder-a/file-a", False),
            ("z/folder-b/file-a", False),
            ("z/folder-b/file-b", False),
        ]

    def test_reordered_rules_change_decisions(self) -> None:
        """Test the reference scenario with its rules in another order."""
        rules = ["a/**", "!z/folder-b/file-b", "{y,z}/*", "**/*{b,c}/file-b", "!a/b/c/**"]

        assert _as_pairs(resolve_access(rules, PATHS)) == [
            ("a/b/c/file-a", False),
            ("a/b/c/file-b", False),
            ("a/b/d/file-a", True),
            ("a/b/d/file-b", True),
            ("x/file-a", False),
            ("x/file-b", False),
            ("y/file-a", True),
            ("y/file-b", True),
            ("z/file-a", True),
            ("z/folder-a/file-a", False),
            ("z/folder-b/file-a", False),
            ("z/folder-b/file-b", True),
        ]

    @pytest.mark.parametrize(
        ("rules", "expected"),
        [
            (["a/**", "!a/b/**"], False),
            (["!a/b/**", "a/**"], True),
            (["a/**", "!a/b/**", "a/b/c"], True),
        ],
    )
    def test_last_matching_rule_wins(self, rules: list[str], expected: bool) -> None:
        """Test that the last rule matching a path decides, not the most specific."""
        assert resolve_access(rules, ["a/b/c"]) == [AccessDecision(path="a/b/c", allowed=expected)]

    def test_deny_rule_never_grants(self) -> None:
        """Test that a deny rule alone leaves everything denied."""
        decisions = resolve_access(["!x/*"], ["x/file-a", "y/file-a"])

        assert not any(decision.allowed for decision in decisions)

    def test_output_is_sorted(self) -> None:
        """Test that decisions are sorted by path."""
        decisions = resolve_access(["**"], ["b", "a/c", "a"])

        assert [decision.path for decision in decisions] == ["a", "a/c", "b"]

    def test_path_order_does_not_matter(self) -> None:
        """Test that permuting the paths yields the same decisions."""
        rules = ["{y,z}/*", "a/**", "!a/b/c/**"]
        shuffled = PATHS.copy()
        random.Random(42).shuffle(shuffled)

        assert resolve_access(rules, shuffled) == resolve_access(rules, PATHS)

    def test_is_deterministic(self) -> None:
        """Test that repeated calls return identical results."""
        rules = ["**/*{b,c}/file-b", "!z/**"]

        assert resolve_access(rules, PATHS) == resolve_access(rules, PATHS)

    def test_duplicate_paths_are_merged(self) -> None:
        """Test that each distinct path yields one decision."""
        decisions = resolve_access(["x/*"], ["x/file-a", "x/file-a"])

        assert decisions == [AccessDecision(path="x/file-a", allowed=True)]

    def test_accepts_path_objects(self) -> None:
        """Test that path objects are compared in their ``/`` form."""
        decisions = resolve_access(["x/*"], [PurePosixPath("x/file-a"), PurePosixPath("y/file-a")])

        assert _as_pairs(decisions) == [("x/file-a", True), ("y/file-a", False)]

    def test_malformed_rule_is_ignored(self) -> None:
        """Test that a rule with unbalanced braces does not break the others."""
        decisions = resolve_access(["{x,y/*", "x/*", "!{x"], ["x/file-a", "y/file-a"])

        assert _as_pairs(decisions) == [("x/file-a", True), ("y/file-a", False)]


class TestAllowedPaths:
    """Tests for allowed_paths()."""

    def test_keeps_allowed_in_order(self) -> None:
        """Test that only allowed paths are kept, in order."""
        decisions = [
            AccessDecision(path="a", allowed=True),
            AccessDecision(path="b", allowed=False),
            AccessDecision(path="c", allowed=True),
        ]

        assert allowed_paths(decisions) == ["a", "c"]
