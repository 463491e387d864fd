"""Wildcard schema name selection.

`*` matches any run of characters, everything else matches literally. A
pattern prefixed with `!` excludes the names it matches.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

NamePredicate = Callable[[str], bool]


def wildcard_matcher(pattern: str) -> NamePredicate:
    """Return a predicate testing one name against one wildcard pattern."""
    if pattern == "*":
        return lambda name: True
    if "*" not in pattern:
        return lambda name: name == pattern
    regex = re.compile(".*".join(re.escape(part) for part in pattern.split("*")))
    return lambda name: regex.fullmatch(name) is not None


def matches_any(name: str, patterns: Iterable[str]) -> bool:
    return any(wildcard_matcher(pattern)(name) for pattern in patterns)


def build_name_filter(patterns: Iterable[str]) -> NamePredicate | None:
    """Combine positive and `!`-negated patterns into one predicate.

    Returns None when no pattern is given. With only negated patterns every
    other name is accepted.
    """
    positive: list[str] = []
    negative: list[str] = []
    for raw in patterns:
        if raw.startswith("!"):
            negative.append(raw[1:].strip())
        else:
            positive.append(raw.strip())
    if not positive and not negative:
        return None

    def _accepts(name: str) -> bool:
        if positive and not matches_any(name, positive):
            return False
        return not matches_any(name, negative)

    return _accepts
