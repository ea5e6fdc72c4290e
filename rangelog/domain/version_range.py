"""
Version ranges and range filtering.

A range reads as "changes since ``from_tag`` up to and including ``to_tag``":
the ``to`` endpoint is included and the ``from`` endpoint is excluded.
``to_tag`` may be the sentinel "latest", meaning the newest known release.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Dict, List, Sequence, Tuple

from ..exit_codes import InvalidVersionError
from .release import Release
from .version import (
    ASCENDING,
    LATEST_TAG,
    compare_versions,
    get_display_version,
    is_version,
    parse_version_key,
    sort_releases,
)

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class VersionRange:
    """Requested range of release tags."""
    from_tag: str
    to_tag: str = LATEST_TAG

    @property
    def to_latest(self) -> bool:
        return self.to_tag == LATEST_TAG

    def validate(self) -> None:
        """
        Check both endpoints parse as versions.

        Raises:
            InvalidVersionError: ``from_tag`` first, then ``to_tag``
        """
        parse_version_key(self.from_tag)
        if not self.to_latest:
            parse_version_key(self.to_tag)

    def to_dict(self) -> Dict[str, str]:
        return {'from': self.from_tag, 'to': self.to_tag}

    def __str__(self) -> str:
        return f"{self.from_tag}...{self.to_tag}"


def _dedupe_by_tag(releases: Sequence[Release]) -> List[Release]:
    """Keep one release per tag, preferring the later-published record."""
    by_tag: Dict[str, Release] = {}
    for release in releases:
        current = by_tag.get(release.tag)
        if current is None:
            by_tag[release.tag] = release
            continue
        if (release.published_datetime or _OLDEST) > (current.published_datetime or _OLDEST):
            by_tag[release.tag] = release
    return list(by_tag.values())


def _upper_index(ordered: Sequence[Release], to_tag: str) -> int:
    """Index of the newest release at or below ``to_tag`` in a descending list.

    A tag that is not present is placed by version: above everything it is
    0 (open-ended), below everything it is ``len(ordered)``.
    """
    if to_tag == LATEST_TAG:
        return 0
    tags = [release.tag for release in ordered]
    if to_tag in tags:
        return tags.index(to_tag)
    for index, release in enumerate(ordered):
        if compare_versions(release, to_tag, ASCENDING) <= 0:
            return index
    return len(ordered)


def filter_by_range(
    releases: Sequence[Release],
    from_tag: str,
    to_tag: str = LATEST_TAG,
) -> List[Release]:
    """
    Slice releases down to the requested range, newest first.

    Args:
        releases: Releases in any order
        from_tag: Exclusive lower endpoint; must be present in ``releases``
        to_tag: Inclusive upper endpoint or "latest". A valid tag that is not
            present is placed by version, so one newer than every release
            leaves the range open-ended and one older than ``from_tag``
            gives an empty range.

    Returns:
        Releases newer than ``from_tag`` up to and including ``to_tag``.
        Empty when ``to_tag`` is not newer than ``from_tag``.

    Raises:
        InvalidVersionError: an endpoint is not a version, or ``from_tag``
            is not among the releases
    """
    VersionRange(from_tag, to_tag).validate()

    candidates = []
    for release in _dedupe_by_tag(releases):
        if is_version(release):
            candidates.append(release)
        else:
            logger.debug(f"Ignoring release with non-version tag {release.tag!r}")

    ordered = sort_releases(candidates)
    tags = [release.tag for release in ordered]
    to_index = _upper_index(ordered, to_tag)

    if from_tag not in tags:
        raise InvalidVersionError(from_tag)
    from_index = tags.index(from_tag)

    if to_index >= from_index:
        return []

    return ordered[to_index:from_index]


def map_releases_range(releases: Sequence[Release]) -> Tuple[List[Release], List[Release]]:
    """
    Build the choices offered for each end of a range.

    Returns:
        (from_options, to_options). ``from_options`` leaves out the newest
        release so at least one release separates the two ends (unless there
        is only one). ``to_options`` starts with a synthetic "latest" release
        named after the newest version.
    """
    ordered = sort_releases([r for r in releases if is_version(r)])
    if not ordered:
        return [], []

    from_options = ordered if len(ordered) == 1 else ordered[1:]

    newest = ordered[0]
    latest = replace(
        newest,
        tag=LATEST_TAG,
        display_name=f"Latest ({get_display_version(newest)})",
        id=-1,
    )
    return from_options, [latest] + ordered
