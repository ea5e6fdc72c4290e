"""
Comparator service for rangelog.

Orchestrates one changelog resolution: fetch enough releases, cut the
range, merge the release notes. ComparatorSession adds "which resolution is
current" bookkeeping so a slow, superseded resolution can never overwrite
a newer one.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import load_config
from ..domain import (
    CombinedDocument,
    Release,
    RepositoryRef,
    VersionRange,
    filter_by_range,
    get_display_version,
    map_releases_range,
)
from ..exit_codes import CommandError
from ..markdown import blocks_to_markdown
from ..query import build_comparator_query
from .aggregator import aggregate_releases
from .fetch_controller import ReleaseFeed, ReleaseFetcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangelogResult:
    """Outcome of a successful resolution (possibly an empty range)."""
    repository: RepositoryRef
    version_range: VersionRange
    releases: Tuple[Release, ...]
    document: CombinedDocument
    from_label: str
    to_label: str
    pages_fetched: int = 0

    @property
    def is_empty(self) -> bool:
        return self.document.is_empty

    @property
    def heading(self) -> str:
        return f"Changes from {self.from_label} to {self.to_label}"

    @property
    def share_query(self) -> str:
        """Query string that reproduces this comparison with --query."""
        return build_comparator_query(self.repository, self.version_range)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'repository': self.repository.full_name,
            'html_url': self.repository.html_url,
            'from': self.from_label,
            'to': self.to_label,
            'releases': [r.tag for r in self.releases],
            'pages_fetched': self.pages_fetched,
            'query': self.share_query,
            **self.document.to_dict(content_to_text=blocks_to_markdown),
        }


def _label(tag: str, releases: Sequence[Release]) -> str:
    for release in releases:
        if release.tag == tag:
            return get_display_version(release)
    return get_display_version(Release(tag=tag))


class ComparatorService:
    """
    Resolves changelogs for version ranges.

    Example:
        service = ComparatorService(GitHubClient())
        result = service.resolve(
            RepositoryRef.parse("testing-library/dom-testing-library"),
            VersionRange("v6.16.0", "v8.1.0"),
        )
        for group in result.document:
            print(group.group, len(group.entries))
    """

    def __init__(
        self,
        feed: ReleaseFeed,
        config: Optional[Dict[str, Any]] = None,
        fetcher: Optional[ReleaseFetcher] = None
    ):
        """
        Initialize ComparatorService.

        Args:
            feed: Release feed (GitHubClient, StaticReleaseFeed, ...)
            config: Configuration dict (loads default if None)
            fetcher: ReleaseFetcher (built from config if None)
        """
        self.config = config or load_config()
        self.feed = feed
        self.fetcher = fetcher or ReleaseFetcher.from_config(feed, self.config)
        self.max_workers = self.config.get('aggregation', {}).get('max_workers', 1)

    def list_releases(self, repository: RepositoryRef) -> List[Release]:
        """Releases from the first pages of the feed, newest first."""
        return list(self.fetcher.fetch(repository).releases)

    def release_options(self, repository: RepositoryRef) -> Tuple[List[Release], List[Release]]:
        """Choices for the two range ends, see map_releases_range()."""
        return map_releases_range(self.list_releases(repository))

    def resolve(self, repository: RepositoryRef, version_range: VersionRange) -> ChangelogResult:
        """
        Build the combined changelog for a range.

        Raises:
            InvalidVersionError: bad endpoint, or ``from`` not among releases
            RangeUnresolvedError: page bound hit before the range was covered
            FetchFailure: the feed failed; no partial document is produced
        """
        fetched = self.fetcher.fetch(repository, version_range)
        if fetched.unresolved:
            logger.info(f"{repository}: feed exhausted before {version_range} was fully seen")

        releases = filter_by_range(fetched.releases, version_range.from_tag, version_range.to_tag)
        document = aggregate_releases(releases, max_workers=self.max_workers)

        logger.debug(
            f"{repository} {version_range}: {len(releases)} releases, "
            f"groups {document.group_names}"
        )
        return ChangelogResult(
            repository=repository,
            version_range=version_range,
            releases=tuple(releases),
            document=document,
            from_label=_label(version_range.from_tag, fetched.releases),
            to_label=_label(version_range.to_tag, fetched.releases),
            pages_fetched=fetched.pages_fetched,
        )


@dataclass(frozen=True)
class SessionState:
    """Last committed outcome of a session."""
    generation: int
    repository: RepositoryRef
    version_range: VersionRange
    result: Optional[ChangelogResult] = None
    error: Optional[CommandError] = None


class ComparatorSession:
    """
    Keeps only the outcome of the newest resolution.

    Every resolution is tagged with a generation number when it starts. Its
    outcome is committed only if no newer resolution has started since, so
    stale results never replace current ones.
    """

    def __init__(self, service: ComparatorService):
        self.service = service
        self._lock = threading.Lock()
        self._generation = 0
        self.state: Optional[SessionState] = None

    def begin(self) -> int:
        """Start a resolution and invalidate any in flight."""
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def commit(self, generation: int, state: SessionState) -> bool:
        """Store ``state`` if ``generation`` is still the newest one."""
        with self._lock:
            if generation != self._generation:
                logger.debug(f"Discarding stale resolution {generation} (current {self._generation})")
                return False
            self.state = state
            return True

    def resolve(
        self,
        repository: RepositoryRef,
        version_range: VersionRange
    ) -> Optional[ChangelogResult]:
        """
        Resolve and commit.

        Returns:
            The result, or None when a newer resolution superseded this one

        Raises:
            CommandError: the resolution failed and is still current
        """
        generation = self.begin()
        try:
            result = self.service.resolve(repository, version_range)
        except CommandError as e:
            committed = self.commit(generation, SessionState(
                generation, repository, version_range, error=e
            ))
            if committed:
                raise
            return None

        if self.commit(generation, SessionState(generation, repository, version_range, result=result)):
            return result
        return None
