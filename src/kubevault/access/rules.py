"""Access control rules.

A user's access control file holds one rule per line. A rule is a glob
pattern granting access to the secrets it matches, or, when prefixed with
``!``, revoking it. Blank lines and ``#`` comments are ignored.

Example:
    >>> from kubevault.access.rules import AccessRule, parse_access_rules
    >>> parse_access_rules("# team\\nproduction/**\\n\\n!production/**/aws\\n")
    ['production/**', '!production/**/aws']
    >>> AccessRule.parse("!production/**/aws").negated
    True
"""

from __future__ import annotations

from dataclasses import dataclass

NEGATION_PREFIX = "!"
COMMENT_PREFIX = "#"


@dataclass(frozen=True)
class AccessRule:
    """A single allow or deny rule.

    Attributes:
        text: The rule as written.
        pattern: The glob pattern, without the negation prefix.
        negated: True for deny rules.
    """

    text: str
    pattern: str
    negated: bool = False

    @classmethod
    def parse(cls, text: str) -> AccessRule:
        """Parse a rule string.

        Args:
            text: Rule text, already stripped.

        Returns:
            The parsed rule.
        """
        if text.startswith(NEGATION_PREFIX):
            return cls(text=text, pattern=text[len(NEGATION_PREFIX) :], negated=True)
        return cls(text=text, pattern=text)


def parse_access_rules(content: str) -> list[str]:
    """Extract rule strings from the content of an access control file.

    Args:
        content: Raw file content.

    Returns:
        Stripped rule strings in file order, without blanks and comments.
    """
    rules: list[str] = []
    for line in content.splitlines():
        rule = line.strip()
        if rule and not rule.startswith(COMMENT_PREFIX):
            rules.append(rule)
    return rules


__all__ = ["AccessRule", "parse_access_rules"]
