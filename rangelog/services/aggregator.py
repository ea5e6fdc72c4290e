"""
Cross-release changelog aggregation.

Turns the releases of a range into one category-major CombinedDocument:
every release body is split into sections, each section is classified, and
sections are regrouped by category across releases.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Sequence

from ..categories import classify, sort_groups
from ..domain import (
    CombinedDocument,
    CombinedEntry,
    CombinedGroup,
    Release,
    SectionNode,
)
from ..markdown import parse_sections

logger = logging.getLogger(__name__)

SectionReader = Callable[[Release], List[SectionNode]]


def classified_sections(release: Release) -> List[SectionNode]:
    """Parse a release body and classify each section."""
    return [
        section.with_group(classify(section.title))
        for section in parse_sections(release.body_markdown)
    ]


def aggregate_releases(
    releases: Sequence[Release],
    max_workers: int = 1,
    read_sections: SectionReader = classified_sections,
) -> CombinedDocument:
    """
    Merge the classified sections of releases into one document.

    Args:
        releases: Releases in display order (newest first)
        max_workers: Threads used to parse bodies; results are always
            merged in ``releases`` order
        read_sections: Release -> classified sections

    Returns:
        CombinedDocument with groups in priority order. Within a group,
        entries follow release order, then section order in the body.
    """
    releases = list(releases)
    if max_workers > 1 and len(releases) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            per_release = list(executor.map(read_sections, releases))
    else:
        per_release = [read_sections(release) for release in releases]

    grouped: Dict[str, List[CombinedEntry]] = {}
    for release, sections in zip(releases, per_release):
        if not sections:
            logger.debug(f"{release.tag}: no sections in release body")
        for section in sections:
            group = section.group or classify(section.title)
            grouped.setdefault(group, []).append(
                CombinedEntry(release=release, content=section.content, title=section.title)
            )

    # dict order is first-seen order, which the stable sort keeps for ties
    ordered = sort_groups(list(grouped))
    return CombinedDocument(groups=tuple(
        CombinedGroup(group=name, entries=tuple(grouped[name])) for name in ordered
    ))
