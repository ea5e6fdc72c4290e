"""
Change categories for release sections.

classify() maps a section title onto a canonical group with an ordered list
of keyword rules (first match wins). Titles that match nothing become their
own group, so every section lands somewhere.

group_priority() / compare_groups_by_priority() order groups for display.
Groups without a fixed rank share one rank just above "chore"; sort them with
a stable sort to keep first-seen order.
"""

import string
from functools import cmp_to_key
from typing import Callable, List, Sequence, Tuple

BREAKING_CHANGES = "breaking changes"
FEATURES = "features"
BUG_FIXES = "bug fixes"
REVERTS = "reverts"
THANKS = "thanks"
ARTIFACTS = "artifacts"
CREDITS = "credits"
CHORE = "chore"

Rule = Tuple[Callable[[str], bool], str]


def contains(*keywords: str) -> Callable[[str], bool]:
    """Predicate: the normalized title contains any of the keywords."""
    return lambda title: any(keyword in title for keyword in keywords)


# Semver bump words come last so "Major Features" reads as features while
# changesets headings like "Major Changes" still land in breaking changes.
CLASSIFICATION_RULES: List[Rule] = [
    (contains("break"), BREAKING_CHANGES),
    (contains("feature"), FEATURES),
    (contains("bug", "fix"), BUG_FIXES),
    (contains("revert"), REVERTS),
    (contains("thank"), THANKS),
    (contains("artifact"), ARTIFACTS),
    (contains("credit"), CREDITS),
    (contains("chore"), CHORE),
    (contains("major"), BREAKING_CHANGES),
    (contains("minor"), FEATURES),
    (contains("patch"), BUG_FIXES),
]

_TRIM = string.whitespace + string.punctuation


def _normalize(title: str) -> str:
    return title.lower().strip(_TRIM)


def classify(title: str, rules: Sequence[Rule] = CLASSIFICATION_RULES) -> str:
    """
    Canonical group for a section title.

    Examples:
        classify("Breaking Changes")  -> "breaking changes"
        classify("🐞 Bug fixes")       -> "bug fixes"
        classify("Core changes:")     -> "core changes"
    """
    normalized = _normalize(title or "")
    for predicate, group in rules:
        if predicate(normalized):
            return group

    return (title or "").strip().lower().rstrip(':').strip()


# =============================================================================
# PRIORITY
# =============================================================================

FIXED_RANKS = {
    BREAKING_CHANGES: 0,
    FEATURES: 1,
    BUG_FIXES: 2,
    REVERTS: 3,
    CHORE: 6,
    CREDITS: 7,
    THANKS: 8,
    ARTIFACTS: 9,
}
DOCUMENTATION_RANK = 4
UNRANKED = 5


def is_documentation_group(group: str) -> bool:
    return "doc" in group


def group_priority(group: str) -> int:
    """Rank of a group; lower ranks are shown first."""
    if group in FIXED_RANKS:
        return FIXED_RANKS[group]
    if is_documentation_group(group):
        return DOCUMENTATION_RANK
    return UNRANKED


def compare_groups_by_priority(a: str, b: str) -> int:
    """Compare two groups by rank: -1, 0 or 1."""
    rank_a, rank_b = group_priority(a), group_priority(b)
    if rank_a == rank_b:
        return 0
    return -1 if rank_a < rank_b else 1


def sort_groups(groups: Sequence[str]) -> List[str]:
    """Stable sort of group names by priority."""
    return sorted(groups, key=cmp_to_key(compare_groups_by_priority))
