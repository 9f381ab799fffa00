"""
Pagination bookkeeping and page-number display.
"""

import math
from typing import List, Sequence, TypeVar, Union

T = TypeVar("T")

ELLIPSIS = "ellipsis"

# Above this many pages the page list collapses with ellipsis markers.
MAX_UNCOLLAPSED_PAGES = 7

PageItem = Union[int, str]


def total_pages(total_count: int, page_size: int) -> int:
    """Number of pages needed for ``total_count`` items, never less than 1."""
    if page_size <= 0:
        raise ValueError(f"Page size must be positive, got {page_size}")
    return max(1, math.ceil(total_count / page_size))


def offset_for(page: int, page_size: int) -> int:
    return (max(page, 1) - 1) * page_size


def page_slice(items: Sequence[T], page: int, page_size: int) -> List[T]:
    """Items on 1-based ``page``; empty past the end."""
    start = offset_for(page, page_size)
    return list(items[start : start + page_size])


def page_numbers(current_page: int, total: int) -> List[PageItem]:
    """
    Page links to display, collapsing long ranges.

    The first and last pages are always shown. With more than seven pages,
    runs of hidden pages are replaced by ``ELLIPSIS``:

    - near the start: 1 2 3 4 5 ... N
    - near the end:   1 ... N-4 N-3 N-2 N-1 N
    - otherwise:      1 ... c-1 c c+1 ... N
    """
    if total <= MAX_UNCOLLAPSED_PAGES:
        return list(range(1, total + 1))

    pages: List[PageItem] = [1]
    if current_page <= 4:
        pages.extend(range(2, min(5, total - 1) + 1))
        if total > 6:
            pages.append(ELLIPSIS)
    elif current_page >= total - 3:
        pages.append(ELLIPSIS)
        pages.extend(range(max(total - 4, 2), total))
    else:
        pages.append(ELLIPSIS)
        pages.extend(range(current_page - 1, current_page + 2))
        pages.append(ELLIPSIS)
    pages.append(total)
    return pages
