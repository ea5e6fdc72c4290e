"""
Domain layer for rangelog.

Contains pure domain objects with no I/O or side effects:
- RepositoryRef: owner/name of a GitHub repository
- Release / ReleasePage: what the release feed returns
- VersionKey and version comparison helpers
- VersionRange and range filtering
- SectionNode / CombinedDocument: parsed and merged changelog content

These objects are immutable and provide serialization methods for
JSONL output.
"""

from .repository import RepositoryRef
from .release import Release, ReleasePage
from .version import (
    LATEST_TAG,
    VersionKey,
    compare_versions,
    get_display_version,
    is_stable_release,
    parse_version_key,
    sort_releases,
)
from .version_range import VersionRange, filter_by_range, map_releases_range
from .changelog import SectionNode, CombinedEntry, CombinedGroup, CombinedDocument

__all__ = [
    'RepositoryRef',
    'Release',
    'ReleasePage',
    'LATEST_TAG',
    'VersionKey',
    'compare_versions',
    'get_display_version',
    'is_stable_release',
    'parse_version_key',
    'sort_releases',
    'VersionRange',
    'filter_by_range',
    'map_releases_range',
    'SectionNode',
    'CombinedEntry',
    'CombinedGroup',
    'CombinedDocument',
]
