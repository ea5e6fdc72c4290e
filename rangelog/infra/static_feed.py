"""
In-memory release feed for rangelog.

Serves a fixed release list in pages, the way the GitHub API would. Used
for offline runs (``rangelog compare --fixture releases.json``) and tests.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

import yaml

from ..domain import Release, ReleasePage, RepositoryRef
from ..exit_codes import FetchFailure
from ..pager import DEFAULT_PAGE_SIZE, paginate

logger = logging.getLogger(__name__)


class StaticReleaseFeed:
    """
    Release feed over a fixed, newest-first list.

    Example:
        feed = StaticReleaseFeed.from_file("fixtures/renovate.json")
        page = feed.fetch_release_page(RepositoryRef("renovatebot", "renovate"), 2)
        feed.requested_pages  # [2]
    """

    def __init__(
        self,
        releases: Sequence[Release],
        repository: Optional[RepositoryRef] = None,
        fail_on_pages: Iterable[int] = (),
    ):
        """
        Initialize StaticReleaseFeed.

        Args:
            releases: Releases, newest first
            repository: Only answer for this repository (any when None)
            fail_on_pages: Page indexes that raise FetchFailure when requested
        """
        self.releases = list(releases)
        self.repository = repository
        self.fail_on_pages = set(fail_on_pages)
        self.requested_pages: List[int] = []

    @classmethod
    def from_records(cls, records: Iterable[dict], **kwargs) -> 'StaticReleaseFeed':
        """Create from GitHub API release records."""
        return cls([Release.from_api_response(r) for r in records], **kwargs)

    @classmethod
    def from_file(cls, path: Union[str, Path], **kwargs) -> 'StaticReleaseFeed':
        """
        Load release records from a JSON or YAML file.

        The file holds a list of GitHub release records, or a mapping with
        a "releases" list.

        Raises:
            OSError: the file cannot be read
            ValueError: the file does not parse or holds something other
                than release records (json.JSONDecodeError is a ValueError)
        """
        path = Path(path).expanduser()
        with open(path, 'r') as f:
            if path.suffix.lower() in ['.yaml', '.yml']:
                try:
                    data = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ValueError(f"Invalid YAML in {path}: {e}")
            else:
                data = json.load(f)

        if isinstance(data, dict):
            data = data.get('releases', [])
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of releases in {path}")
        bad = [i for i, record in enumerate(data) if not isinstance(record, dict)]
        if bad:
            raise ValueError(f"Release record {bad[0]} in {path} is not a mapping")

        logger.debug(f"Loaded {len(data)} releases from {path}")
        return cls.from_records(data, **kwargs)

    def fetch_release_page(
        self,
        repository: RepositoryRef,
        page_index: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE
    ) -> ReleasePage:
        """Serve one page; same contract as GitHubClient.fetch_release_page."""
        self.requested_pages.append(page_index)

        if page_index in self.fail_on_pages:
            raise FetchFailure(f"Request page not available: {page_index}")
        if self.repository is not None and repository != self.repository:
            raise FetchFailure(f"Not Found: {repository.full_name}", status_code=404)

        page = paginate(self.releases, page_size, page_index)
        return ReleasePage(releases=tuple(page.data), has_more=page.has_next, page_index=page_index)

    @property
    def request_count(self) -> int:
        return len(self.requested_pages)
