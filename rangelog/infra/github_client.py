"""
GitHub release feed for rangelog.

Provides newest-first pages of repository releases from the GitHub REST API:
- Token from argument, environment, or the `gh` CLI
- Pagination driven by the Link header (rel="next")
- Retries on network errors and exhausted quota, backing off exponentially
"""

import logging
import os
import subprocess
import time
from dataclasses import dataclass
from typing import Optional, Dict, Any

import requests

from ..domain import Release, ReleasePage, RepositoryRef
from ..exit_codes import FetchFailure
from ..pager import DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


# Below this many remaining calls a paged walk may not finish
LOW_QUOTA = 100


@dataclass
class RateLimitStatus:
    """Snapshot of the X-RateLimit-* headers of one response."""
    remaining: int
    limit: int
    reset_time: int  # epoch seconds
    used: int

    @classmethod
    def from_headers(cls, headers) -> Optional['RateLimitStatus']:
        """Read the quota headers; None when they are absent or garbled."""
        try:
            status = cls(
                remaining=int(headers.get('X-RateLimit-Remaining', -1)),
                limit=int(headers.get('X-RateLimit-Limit', -1)),
                reset_time=int(headers.get('X-RateLimit-Reset', 0)),
                used=int(headers.get('X-RateLimit-Used', 0)),
            )
        except (ValueError, TypeError):
            return None
        if status.remaining < 0 or status.limit < 0:
            return None
        return status

    @property
    def seconds_until_reset(self) -> int:
        return max(0, self.reset_time - int(time.time()))

    @property
    def minutes_until_reset(self) -> int:
        return self.seconds_until_reset // 60

    @property
    def is_low(self) -> bool:
        return self.remaining < LOW_QUOTA


def _token_from_gh_cli() -> Optional[str]:
    """Ask an authenticated `gh` CLI for its token."""
    try:
        result = subprocess.run(
            ['gh', 'auth', 'token'],
            capture_output=True,
            text=True,
            timeout=10
        )
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return None
    if result.returncode == 0 and result.stdout.strip():
        return result.stdout.strip()
    return None


class GitHubClient:
    """
    Release feed backed by the GitHub REST API.

    Example:
        client = GitHubClient()
        page = client.fetch_release_page(RepositoryRef("renovatebot", "renovate"), 1)
        for release in page:
            print(release.tag)
        if page.has_more:
            ...
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = GITHUB_API_URL,
        timeout: float = 30,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        session: Optional[requests.Session] = None,
        use_gh_cli: bool = True,
    ):
        """
        Set up the client; nothing is requested until the first page.

        Args:
            token: GitHub token (defaults to RANGELOG_GITHUB_TOKEN, GITHUB_TOKEN,
                then `gh auth token`)
            api_url: API base URL (GitHub Enterprise installs differ)
            timeout: Per-request timeout in seconds
            max_retries: Attempts per page before giving up with FetchFailure
            base_delay: First backoff delay; doubles on every retry
            max_delay: Cap on any single wait
            session: Injected requests session (tests pass a mock)
            use_gh_cli: Whether to ask the `gh` CLI for a token
        """
        self.token = (
            token
            or os.environ.get('RANGELOG_GITHUB_TOKEN')
            or os.environ.get('GITHUB_TOKEN')
            or (_token_from_gh_cli() if use_gh_cli else None)
        )
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.session = session or requests.Session()
        self._rate_limit_status: Optional[RateLimitStatus] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any], **kwargs) -> 'GitHubClient':
        """Create from the "github" section of the rangelog config."""
        github = config.get('github', {})
        rate_limit = github.get('rate_limit', {})
        return cls(
            token=github.get('token') or None,
            api_url=github.get('api_url', GITHUB_API_URL),
            timeout=github.get('timeout_seconds', 30),
            max_retries=rate_limit.get('max_retries', 3),
            base_delay=rate_limit.get('base_delay_seconds', 1.0),
            max_delay=rate_limit.get('max_delay_seconds', 60.0),
            **kwargs
        )

    def _headers(self) -> Dict[str, str]:
        headers = {
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'rangelog'
        }
        if self.token:
            headers['Authorization'] = f'token {self.token}'
        return headers

    def _record_quota(self, headers) -> None:
        status = RateLimitStatus.from_headers(headers)
        if status is None:
            return
        self._rate_limit_status = status
        if status.is_low:
            logger.warning(
                f"{status.remaining}/{status.limit} GitHub API calls left, "
                f"quota resets in {status.minutes_until_reset} min"
            )

    @property
    def rate_limit_status(self) -> Optional[RateLimitStatus]:
        """Rate limit status seen on the last response, if any."""
        return self._rate_limit_status

    def _backoff(self, attempt: int) -> float:
        return min(self.base_delay * (2 ** attempt), self.max_delay)

    def _quota_wait(self, response: requests.Response, attempt: int) -> float:
        """Sleep until the advertised reset when it is near, else back off."""
        reset_at = response.headers.get('X-RateLimit-Reset')
        until_reset = int(reset_at) - int(time.time()) if reset_at else 0
        if 0 < until_reset < self.max_delay:
            return until_reset
        return self._backoff(attempt)

    @staticmethod
    def _quota_exhausted(response: requests.Response) -> bool:
        return (
            response.status_code in (403, 429)
            and response.headers.get('X-RateLimit-Remaining') == '0'
        )

    def _get(self, endpoint: str, params: Dict[str, Any]) -> requests.Response:
        """GET with rate-limit backoff; raises FetchFailure when out of attempts."""
        url = f"{self.api_url}/{endpoint}"
        last_error = "no attempts made"

        for attempt in range(self.max_retries):
            final = attempt == self.max_retries - 1
            try:
                response = self.session.get(
                    url, params=params, headers=self._headers(), timeout=self.timeout
                )
            except requests.RequestException as e:
                last_error = str(e)
                logger.warning(f"Request to {endpoint} failed: {e}")
                if not final:
                    time.sleep(self._backoff(attempt))
                continue

            self._record_quota(response.headers)

            if response.status_code == 200:
                return response

            if self._quota_exhausted(response):
                last_error = f"rate limited ({response.status_code})"
                if final:
                    break
                delay = self._quota_wait(response, attempt)
                logger.info(f"Out of API quota, retrying {endpoint} in {delay}s")
                time.sleep(delay)
                continue

            if response.status_code == 404:
                raise FetchFailure(f"GitHub resource not found: {endpoint}", status_code=404)

            raise FetchFailure(
                f"GitHub API error {response.status_code} for {endpoint}",
                status_code=response.status_code
            )

        raise FetchFailure(f"GitHub API request failed for {endpoint}: {last_error}")

    def fetch_release_page(
        self,
        repository: RepositoryRef,
        page_index: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE
    ) -> ReleasePage:
        """
        Get one page of releases, newest first.

        Args:
            repository: Repository to read
            page_index: 1-based page number
            page_size: Releases per page (GitHub caps this at 100)

        Returns:
            ReleasePage; ``has_more`` follows the Link header

        Raises:
            FetchFailure: the request failed or returned something that is
                not a list of releases
        """
        if not repository.is_complete:
            raise FetchFailure(f"Incomplete repository name: {repository.full_name!r}")

        endpoint = f"repos/{repository.owner}/{repository.name}/releases"
        logger.debug(f"Fetching {endpoint} page {page_index} (per_page={page_size})")
        response = self._get(endpoint, {'per_page': page_size, 'page': page_index})

        try:
            data = response.json()
        except ValueError as e:
            raise FetchFailure(f"GitHub API returned invalid JSON for {endpoint}: {e}")

        if not isinstance(data, list):
            message = data.get('message') if isinstance(data, dict) else None
            raise FetchFailure(f"Unexpected releases payload for {endpoint}: {message or type(data).__name__}")

        return ReleasePage(
            releases=tuple(Release.from_api_response(item) for item in data),
            has_more='next' in response.links,
            page_index=page_index,
        )
