"""
Version comparison for release tags.

Tags are read as ``[prefix]major.minor.patch[-prerelease]`` where the prefix
is any run of leading non-digit characters (usually ``v``). Anything else is
not a version and raises InvalidVersionError.

Ordering:
    - major, then minor, then patch, numerically
    - at equal major.minor.patch a stable release is newer than a pre-release
    - two pre-releases compare lexicographically
"""

import re
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Iterable, List, Optional, Union

from ..exit_codes import InvalidVersionError
from .release import Release

LATEST_TAG = "latest"

DESCENDING = "desc"
ASCENDING = "asc"

VERSION_PATTERN = re.compile(
    r'^(?:\D+)?'
    r'(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)'
    r'(?:-(?P<prerelease>[0-9A-Za-z][0-9A-Za-z.\-]*))?$'
)

TagLike = Union[str, Release]


@dataclass(frozen=True)
class VersionKey:
    """Ordered semantic key derived from a tag."""
    major: int
    minor: int
    patch: int
    prerelease: Optional[str] = None

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        return f"{base}-{self.prerelease}" if self.prerelease else base


def _tag_of(value: TagLike) -> str:
    return value.tag if isinstance(value, Release) else value


def parse_version_key(tag: TagLike) -> VersionKey:
    """
    Parse a tag into a VersionKey.

    Raises:
        InvalidVersionError: tag is not major.minor.patch[-prerelease]
    """
    literal = _tag_of(tag)
    match = VERSION_PATTERN.match(literal.strip()) if literal else None
    if not match:
        raise InvalidVersionError(literal)

    return VersionKey(
        major=int(match.group('major')),
        minor=int(match.group('minor')),
        patch=int(match.group('patch')),
        prerelease=match.group('prerelease'),
    )


def _compare_keys(a: VersionKey, b: VersionKey) -> int:
    for left, right in ((a.major, b.major), (a.minor, b.minor), (a.patch, b.patch)):
        if left != right:
            return 1 if left > right else -1

    if a.prerelease == b.prerelease:
        return 0
    # Stable ranks above any pre-release
    if a.prerelease is None:
        return 1
    if b.prerelease is None:
        return -1
    return 1 if a.prerelease > b.prerelease else -1


def compare_versions(a: TagLike, b: TagLike, direction: str = DESCENDING) -> int:
    """
    Compare two tags (or releases).

    With the default descending direction the newer version sorts first,
    so the result is -1 when ``a`` is newer than ``b``.

    Returns:
        -1, 0 or 1
    """
    if direction not in (DESCENDING, ASCENDING):
        raise ValueError(f"Unknown sort direction: {direction!r}")

    ascending = _compare_keys(parse_version_key(a), parse_version_key(b))
    return -ascending if direction == DESCENDING else ascending


def version_sort_key(direction: str = DESCENDING):
    """Key function for sorted()/list.sort() built on compare_versions."""
    return cmp_to_key(lambda a, b: compare_versions(a, b, direction))


def sort_releases(releases: Iterable[TagLike], direction: str = DESCENDING) -> List[TagLike]:
    """Stable sort of releases (or tags) by version."""
    return sorted(releases, key=version_sort_key(direction))


def is_version(tag: TagLike) -> bool:
    """True when the tag parses as a version."""
    try:
        parse_version_key(tag)
    except InvalidVersionError:
        return False
    return True


def is_stable_release(release: TagLike) -> bool:
    """
    True iff the tag is a version without a pre-release component.

    Unparsable tags are reported as not stable rather than raising.
    """
    try:
        key = parse_version_key(release)
    except InvalidVersionError:
        return False
    return not key.is_prerelease


def get_display_version(release: Release) -> str:
    """
    Version label to show for a release.

    The synthetic "latest" release carries the real version in its name,
    e.g. "Latest (v8.17.1)".
    """
    if release.tag == LATEST_TAG:
        return release.display_name or LATEST_TAG
    return release.tag
