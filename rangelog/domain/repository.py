"""
Repository reference for rangelog.

A RepositoryRef names the GitHub repository whose releases are compared.
Construction is deliberately lenient: malformed input degrades to empty
owner/name fields instead of raising.
"""

import re
from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class RepositoryRef:
    """
    Immutable owner/name pair.

    Examples:
        RepositoryRef.parse("testing-library/dom-testing-library")
        RepositoryRef.parse("https://github.com/renovatebot/renovate")
        RepositoryRef.from_api_response({"owner": {"login": "foo"}, "name": "bar"})
    """
    owner: str = ""
    name: str = ""

    @classmethod
    def from_api_response(cls, data: Optional[Dict[str, Any]]) -> 'RepositoryRef':
        """Create from a GitHub repository record (or None)."""
        if not data:
            return cls()

        owner = data.get('owner') or {}
        if isinstance(owner, dict):
            login = owner.get('login') or ''
        else:
            login = str(owner)

        return cls(owner=login, name=data.get('name') or '')

    @classmethod
    def parse(cls, text: Optional[str]) -> 'RepositoryRef':
        """
        Parse an "owner/name" string.

        GitHub URLs (https, ssh, with or without .git) are reduced to their
        owner/name path first. A string without a slash becomes the owner.
        """
        if not text:
            return cls()

        text = text.strip()
        text = re.sub(r'^git@github\.com:', '', text)
        text = re.sub(r'^(?:https?://)?(?:www\.)?github\.com/', '', text)
        text = re.sub(r'\.git$', '', text)

        parts = text.split('/')
        owner = parts[0].strip()
        name = parts[1].strip() if len(parts) > 1 else ''
        return cls(owner=owner, name=name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.name}"

    @property
    def is_complete(self) -> bool:
        """True when both owner and name are present."""
        return bool(self.owner and self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'owner': self.owner,
            'name': self.name,
        }

    def __str__(self) -> str:
        return self.full_name
