"""
rangelog - Combined changelogs across a range of GitHub releases.

Pick a repository and two release tags; rangelog fetches only the release
pages it needs, keeps the releases after ``from`` up to and including ``to``,
and merges their notes into one document grouped by category.

Quick Start:
    import rangelog

    service = rangelog.ComparatorService(rangelog.GitHubClient())
    result = service.resolve(
        rangelog.RepositoryRef.parse("testing-library/dom-testing-library"),
        rangelog.VersionRange("v6.16.0", "v8.1.0"),
    )

    print(result.heading)                 # Changes from v6.16.0 to v8.1.0
    for group in result.document:
        print(group.group)                # breaking changes, features, ...
        for release in group.releases:
            print("  ", release.tag)

Domain Objects:
    RepositoryRef - owner/name of a repository
    Release / ReleasePage - release feed records
    VersionRange - from (excluded) / to (included, or "latest")
    CombinedDocument - category-major merged changelog

Services:
    ReleaseFetcher - range-aware pagination
    ComparatorService - one resolution end to end
    ComparatorSession - keeps only the newest resolution
"""

__version__ = "0.3.0"

# Domain objects
from .domain import (
    RepositoryRef,
    Release,
    ReleasePage,
    VersionRange,
    CombinedDocument,
    LATEST_TAG,
    compare_versions,
    filter_by_range,
    get_display_version,
    is_stable_release,
    parse_version_key,
)

# Classification
from .categories import classify, compare_groups_by_priority
from .markdown import parse_sections, get_section_title
from .pager import paginate

# Release feeds
from .infra import GitHubClient, StaticReleaseFeed

# Services
from .services import (
    ReleaseFetcher,
    ComparatorService,
    ComparatorSession,
    aggregate_releases,
)

# Errors
from .exit_codes import (
    CommandError,
    InvalidVersionError,
    FetchFailure,
    RangeUnresolvedError,
)

# Configuration
from .config import load_config

__all__ = [
    "__version__",
    # Domain objects
    "RepositoryRef",
    "Release",
    "ReleasePage",
    "VersionRange",
    "CombinedDocument",
    "LATEST_TAG",
    "compare_versions",
    "filter_by_range",
    "get_display_version",
    "is_stable_release",
    "parse_version_key",
    # Classification
    "classify",
    "compare_groups_by_priority",
    "parse_sections",
    "get_section_title",
    "paginate",
    # Release feeds
    "GitHubClient",
    "StaticReleaseFeed",
    # Services
    "ReleaseFetcher",
    "ComparatorService",
    "ComparatorSession",
    "aggregate_releases",
    # Errors
    "CommandError",
    "InvalidVersionError",
    "FetchFailure",
    "RangeUnresolvedError",
    # Configuration
    "load_config",
]
