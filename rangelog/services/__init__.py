"""
Service layer for rangelog.

Contains the logic that orchestrates domain objects and release feeds:
- ReleaseFetcher: range-aware, early-stopping pagination
- aggregate_releases: cross-release, category-major merge
- ComparatorService / ComparatorSession: one resolution end to end

Services are the primary API for commands to use.
"""

from .fetch_controller import FetchResult, FetchState, ReleaseFetcher, step
from .aggregator import aggregate_releases, classified_sections
from .comparator_service import ChangelogResult, ComparatorService, ComparatorSession

__all__ = [
    'FetchResult',
    'FetchState',
    'ReleaseFetcher',
    'step',
    'aggregate_releases',
    'classified_sections',
    'ChangelogResult',
    'ComparatorService',
    'ComparatorSession',
]
