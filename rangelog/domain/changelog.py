"""
Changelog document objects for rangelog.

SectionNode is one heading-delimited unit of a release body. CombinedDocument
is the category-major merge of every section across a range of releases.

Section content is an opaque payload: the engine carries it from the parser
to the renderer without looking inside.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar

from .release import Release

ContentT = TypeVar('ContentT')


@dataclass(frozen=True)
class SectionNode(Generic[ContentT]):
    """A titled section of a release body; ``group`` is set by classification."""
    title: str
    content: ContentT
    group: Optional[str] = None

    def with_group(self, group: str) -> 'SectionNode[ContentT]':
        return replace(self, group=group)


@dataclass(frozen=True)
class CombinedEntry(Generic[ContentT]):
    """One release's contribution to a group."""
    release: Release
    content: ContentT
    title: str = ""


@dataclass(frozen=True)
class CombinedGroup(Generic[ContentT]):
    """A change category and its entries, newest release first."""
    group: str
    entries: Tuple[CombinedEntry[ContentT], ...] = ()

    @property
    def releases(self) -> List[Release]:
        """Releases contributing to this group, in entry order, without repeats."""
        seen = set()
        result = []
        for entry in self.entries:
            if entry.release.tag not in seen:
                seen.add(entry.release.tag)
                result.append(entry.release)
        return result


@dataclass(frozen=True)
class CombinedDocument(Generic[ContentT]):
    """
    Category-major changelog for a range of releases.

    Groups are ordered by category priority. Within a group entries keep
    release order (newest first), then section order within a release.
    """
    groups: Tuple[CombinedGroup[ContentT], ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.groups

    @property
    def group_names(self) -> List[str]:
        return [g.group for g in self.groups]

    def get(self, group: str) -> Optional[CombinedGroup[ContentT]]:
        for combined in self.groups:
            if combined.group == group:
                return combined
        return None

    def releases_for(self, group: str) -> List[Release]:
        combined = self.get(group)
        return combined.releases if combined else []

    def to_dict(self, content_to_text: Callable[[Any], Any] = str) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Args:
            content_to_text: Turns an opaque content payload into something
                JSON can hold
        """
        return {
            'groups': [
                {
                    'group': combined.group,
                    'entries': [
                        {
                            'release': entry.release.tag,
                            'html_url': entry.release.html_url,
                            'title': entry.title,
                            'content': content_to_text(entry.content),
                        }
                        for entry in combined.entries
                    ],
                }
                for combined in self.groups
            ]
        }

    def __len__(self) -> int:
        return len(self.groups)

    def __iter__(self):
        return iter(self.groups)
