"""
Fixed-size paging over an ordered list.

Page indexes are 1-based, like the GitHub REST API.
"""

from dataclasses import dataclass
from typing import Generic, List, Sequence, TypeVar

T = TypeVar('T')

DEFAULT_PAGE_SIZE = 30


@dataclass(frozen=True)
class Page(Generic[T]):
    data: List[T]
    has_next: bool


def paginate(items: Sequence[T], page_size: int = DEFAULT_PAGE_SIZE, page_index: int = 1) -> Page[T]:
    """
    Slice one page out of ``items``.

    Args:
        items: Ordered items
        page_size: Items per page (must be positive)
        page_index: 1-based page number

    Returns:
        Page with the items and whether a later page has anything in it
    """
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if page_index < 1:
        raise ValueError(f"page_index must be 1 or more, got {page_index}")

    start = (page_index - 1) * page_size
    end = start + page_size
    return Page(data=list(items[start:end]), has_next=end < len(items))
