"""
Comparator input parsing.

A comparison can be shared as a URL or query string:

    https://example.com/comparator?repo=testing-library%2Fdom-testing-library&from=v6.16.0&to=v8.1.0
    repo=renovatebot/renovate&from=26.9.0&to=latest

Repository text is parsed leniently (missing parts become ""). Version
literals are passed through untouched; they are validated when the range
is resolved.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, urlencode, urlsplit

from .domain import LATEST_TAG, RepositoryRef, VersionRange


@dataclass(frozen=True)
class ComparatorQuery:
    """Repository plus optional range taken from user input."""
    repository: RepositoryRef
    version_range: Optional[VersionRange] = None


def _first(values: dict, key: str) -> str:
    items = values.get(key) or ['']
    return items[0].strip()


def parse_comparator_query(text: str) -> ComparatorQuery:
    """
    Parse a comparator URL or query string.

    ``to`` defaults to "latest" when only ``from`` is given; without
    ``from`` there is no range.
    """
    text = (text or '').strip()
    if '://' in text or text.startswith('/'):
        text = urlsplit(text).query
    text = text.lstrip('?')

    values = parse_qs(text, keep_blank_values=True)
    repository = RepositoryRef.parse(_first(values, 'repo'))

    from_tag = _first(values, 'from')
    to_tag = _first(values, 'to') or LATEST_TAG
    version_range = VersionRange(from_tag, to_tag) if from_tag else None

    return ComparatorQuery(repository=repository, version_range=version_range)


def build_comparator_query(repository: RepositoryRef, version_range: VersionRange) -> str:
    """Inverse of parse_comparator_query() for sharing a comparison."""
    return urlencode({
        'repo': repository.full_name,
        'from': version_range.from_tag,
        'to': version_range.to_tag,
    })
