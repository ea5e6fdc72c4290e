"""
Range-aware release fetching.

The release feed only pages forward, newest first. To resolve a range we
keep requesting pages until both endpoints have been seen, the feed runs
out, or a page bound is hit. Each decision depends on what the previous
pages contained, so requests are strictly sequential.

The stopping rules live in the pure ``step()`` function; ReleaseFetcher
only does the I/O around it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Tuple

from ..domain import Release, ReleasePage, RepositoryRef, VersionRange
from ..exit_codes import RangeUnresolvedError
from ..pager import DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)

DEFAULT_PAGES = 10
MAX_PAGES = 100


class ReleaseFeed(Protocol):
    """Anything that serves newest-first release pages."""

    def fetch_release_page(
        self,
        repository: RepositoryRef,
        page_index: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE
    ) -> ReleasePage:
        ...


@dataclass(frozen=True)
class FetchState:
    """Progress of one range resolution."""
    pages_fetched: int = 0
    found_from: bool = False
    found_to: bool = False
    exhausted: bool = False

    @property
    def resolved(self) -> bool:
        return self.found_from and self.found_to


def initial_state(version_range: Optional[VersionRange]) -> FetchState:
    """State before any page; a "latest" upper end is satisfied up front."""
    return FetchState(found_to=bool(version_range and version_range.to_latest))


def step(
    state: FetchState,
    page: ReleasePage,
    version_range: Optional[VersionRange] = None
) -> Tuple[FetchState, bool]:
    """
    Fold one page into the fetch state.

    Args:
        state: State before this page
        page: The page just received
        version_range: Range being resolved (None to just read pages)

    Returns:
        (new state, whether another page should be requested)
    """
    tags = set(page.tags)
    found_from = state.found_from
    found_to = state.found_to

    if version_range is not None:
        found_from = found_from or version_range.from_tag in tags
        found_to = found_to or version_range.to_latest or version_range.to_tag in tags

    new_state = FetchState(
        pages_fetched=state.pages_fetched + 1,
        found_from=found_from,
        found_to=found_to,
        exhausted=not page.has_more,
    )

    if new_state.exhausted:
        return new_state, False
    if version_range is not None and new_state.resolved:
        return new_state, False
    return new_state, True


@dataclass(frozen=True)
class FetchResult:
    """Releases gathered for one resolution, newest first, unique by tag."""
    releases: Tuple[Release, ...]
    state: FetchState
    version_range: Optional[VersionRange] = None

    @property
    def unresolved(self) -> bool:
        """True when the feed ran out before both endpoints were seen."""
        return self.version_range is not None and not self.state.resolved

    @property
    def pages_fetched(self) -> int:
        return self.state.pages_fetched


class ReleaseFetcher:
    """
    Fetches just enough release pages to cover a version range.

    Example:
        fetcher = ReleaseFetcher(GitHubClient(), max_pages=50)
        result = fetcher.fetch(repo, VersionRange("26.9.0", "32.172.2"))
        print(result.pages_fetched, len(result.releases))
    """

    def __init__(
        self,
        feed: ReleaseFeed,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_pages: int = MAX_PAGES,
        default_pages: int = DEFAULT_PAGES,
    ):
        """
        Initialize ReleaseFetcher.

        Args:
            feed: Release feed to page through
            page_size: Releases per request
            max_pages: Page bound when resolving a range
            default_pages: Pages read when no range is given
        """
        if max_pages < 1 or default_pages < 1:
            raise ValueError("Page bounds must be positive")
        self.feed = feed
        self.page_size = page_size
        self.max_pages = max_pages
        self.default_pages = default_pages

    @classmethod
    def from_config(cls, feed: ReleaseFeed, config: Dict[str, Any]) -> 'ReleaseFetcher':
        """Create from the "releases" section of the rangelog config."""
        releases = config.get('releases', {})
        return cls(
            feed,
            page_size=releases.get('page_size', DEFAULT_PAGE_SIZE),
            max_pages=releases.get('max_pages', MAX_PAGES),
            default_pages=releases.get('default_pages', DEFAULT_PAGES),
        )

    def fetch(
        self,
        repository: RepositoryRef,
        version_range: Optional[VersionRange] = None
    ) -> FetchResult:
        """
        Page through the feed for a repository.

        With a range, stops as soon as both endpoints have been seen. Without
        one, reads up to ``default_pages`` pages.

        Raises:
            InvalidVersionError: a range endpoint is not a version
            RangeUnresolvedError: ``max_pages`` pages were read, more exist,
                and the range is still not covered
            FetchFailure: propagated unchanged from the feed
        """
        if version_range is not None:
            version_range.validate()

        limit = self.max_pages if version_range is not None else self.default_pages
        state = initial_state(version_range)
        releases: List[Release] = []
        seen = set()
        page_index = 1

        while True:
            page = self.feed.fetch_release_page(repository, page_index, self.page_size)
            logger.debug(f"{repository}: page {page_index} has {len(page)} releases")

            for release in page:
                if release.tag in seen:
                    logger.debug(f"{repository}: skipping repeated release {release.tag}")
                    continue
                seen.add(release.tag)
                releases.append(release)

            state, more = step(state, page, version_range)
            if not more:
                break

            if state.pages_fetched >= limit:
                if version_range is not None:
                    raise RangeUnresolvedError(
                        f"Range {version_range} not found in the first "
                        f"{state.pages_fetched} pages of {repository} releases",
                        pages_fetched=state.pages_fetched,
                    )
                break

            page_index += 1

        logger.info(
            f"{repository}: fetched {len(releases)} releases "
            f"in {state.pages_fetched} page(s)"
        )
        return FetchResult(releases=tuple(releases), state=state, version_range=version_range)
