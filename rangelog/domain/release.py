"""
Release domain objects for rangelog.

Releases are what the release feed hands back, one ReleasePage per request.
Both are immutable once fetched.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Tuple


@dataclass(frozen=True)
class Release:
    """
    A published release.

    Identity is the tag; tags are unique within one repository's feed.

    Attributes:
        tag: Release tag (e.g. "v8.1.0")
        display_name: Human title of the release (GitHub "name")
        published_at: ISO 8601 publish timestamp, if known
        html_url: Link to the release page
        body_markdown: Raw markdown release notes
    """
    tag: str
    display_name: str = ""
    published_at: Optional[str] = None
    html_url: str = ""
    body_markdown: str = ""
    id: Optional[int] = None
    prerelease: bool = False
    draft: bool = False

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'Release':
        """Create from a GitHub API release record."""
        return cls(
            tag=data.get('tag_name') or '',
            display_name=data.get('name') or '',
            published_at=data.get('published_at'),
            html_url=data.get('html_url') or '',
            body_markdown=data.get('body') or '',
            id=data.get('id'),
            prerelease=bool(data.get('prerelease', False)),
            draft=bool(data.get('draft', False)),
        )

    @property
    def published_datetime(self) -> Optional[datetime]:
        """Publish time as datetime, or None when missing or malformed."""
        if not self.published_at:
            return None
        try:
            value = datetime.fromisoformat(self.published_at.replace('Z', '+00:00'))
        except ValueError:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'tag': self.tag,
            'display_name': self.display_name,
            'published_at': self.published_at,
            'html_url': self.html_url,
            'body_markdown': self.body_markdown,
        }

    def __str__(self) -> str:
        return self.tag


@dataclass(frozen=True)
class ReleasePage:
    """One page of the newest-first release feed."""
    releases: Tuple[Release, ...] = ()
    has_more: bool = False
    page_index: int = 1

    def __iter__(self):
        return iter(self.releases)

    def __len__(self) -> int:
        return len(self.releases)

    @property
    def tags(self) -> Tuple[str, ...]:
        return tuple(r.tag for r in self.releases)
