"""
Infrastructure layer for rangelog.

Release feeds the fetch controller can page through:
- GitHubClient: GitHub REST API
- StaticReleaseFeed: fixed in-memory or on-disk release list

Both implement ``fetch_release_page(repository, page_index, page_size)``
and can be swapped freely, which keeps the services testable offline.
"""

from .github_client import GitHubClient, RateLimitStatus
from .static_feed import StaticReleaseFeed

__all__ = [
    'GitHubClient',
    'RateLimitStatus',
    'StaticReleaseFeed',
]
