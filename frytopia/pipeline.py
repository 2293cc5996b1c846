"""
Search, sort and pagination for recipe listings.

This module is the single place where recipe listings are filtered, sorted and
split into pages. Every listing page (catalog, favorites, profile) feeds the
collection it fetched into query() on every interaction; nothing here touches
the network.

Key functions:
- filter_items: Case-insensitive substring search plus optional difficulty filter
- sort_items: Stable sort by one of the SortKey modes
- query: filter -> sort -> paginate, with page-count metadata
- go_to_page: Page navigation that rejects out-of-range requests
- page_numbers: The (at most three) page buttons to display
"""

import locale
import math
from dataclasses import dataclass
from enum import Enum
from typing import Collection, Iterable, List, Optional, Sequence

from frytopia.models import Difficulty, ViewItem

DEFAULT_PAGE_SIZE = 6
MAX_PAGE_BUTTONS = 3

NAME = "name"
DESCRIPTION = "description"
DEFAULT_SEARCH_FIELDS = (NAME, DESCRIPTION)


class SortKey(str, Enum):
    """Sort modes offered by the listing pages."""

    POPULAR = "popular"
    NEWEST = "newest"
    COOK_TIME_ASC = "cookTimeAsc"
    COOK_TIME_DESC = "cookTimeDesc"
    NAME_ASC = "nameAsc"
    NAME_DESC = "nameDesc"
    RATING_ASC = "ratingAsc"
    RATING_DESC = "ratingDesc"

    @property
    def label(self) -> str:
        return SORT_LABELS[self]


SORT_LABELS = {
    SortKey.POPULAR: "Most popular",
    SortKey.NEWEST: "Newest",
    SortKey.COOK_TIME_ASC: "Cooking time (shortest)",
    SortKey.COOK_TIME_DESC: "Cooking time (longest)",
    SortKey.NAME_ASC: "Name (A-Z)",
    SortKey.NAME_DESC: "Name (Z-A)",
    SortKey.RATING_ASC: "Rating (lowest)",
    SortKey.RATING_DESC: "Rating (highest)",
}


@dataclass(frozen=True)
class QueryResult:
    """
    One page of a filtered, sorted listing.

    Attributes:
        page_items: Items on the returned page, in display order
        total_count: Number of items that matched the filter
        total_pages: ceil(total_count / page_size), never less than 1
        clamped_page: The page actually returned, within [1, total_pages]
    """
    page_items: List[ViewItem]
    total_count: int
    total_pages: int
    clamped_page: int


def _name_key(name: str):
    """Locale-aware collation key, falling back to casefolded text."""
    folded = (name or "").casefold()
    try:
        return (locale.strxfrm(folded), name or "")
    except ValueError:
        # strxfrm rejects embedded NUL characters
        return (folded, name or "")


def _rating_key(item: ViewItem) -> float:
    return item.average_rating if item.average_rating is not None else 0.0


# key function and whether the order is descending
_SORTS = {
    SortKey.NEWEST: (lambda item: item.id, True),
    SortKey.COOK_TIME_ASC: (lambda item: item.cooking_time_minutes, False),
    SortKey.COOK_TIME_DESC: (lambda item: item.cooking_time_minutes, True),
    SortKey.NAME_ASC: (lambda item: _name_key(item.name), False),
    SortKey.NAME_DESC: (lambda item: _name_key(item.name), True),
    SortKey.RATING_ASC: (_rating_key, False),
    SortKey.RATING_DESC: (_rating_key, True),
}


def parse_sort_key(value: Optional[str]) -> SortKey:
    """
    Map a raw sort value to a SortKey.

    Unknown or empty values fall back to SortKey.POPULAR (identity order).
    """
    if isinstance(value, SortKey):
        return value
    try:
        return SortKey(value)
    except ValueError:
        return SortKey.POPULAR


def matches_search(item: ViewItem, search_text: str, fields: Sequence[str] = DEFAULT_SEARCH_FIELDS) -> bool:
    """
    Check whether search_text occurs (case-insensitively) in any of the fields.

    An empty search matches every item.
    """
    needle = (search_text or "").casefold()
    if not needle:
        return True
    for field in fields:
        value = getattr(item, field, None) or ""
        if needle in value.casefold():
            return True
    return False


def filter_items(
    items: Iterable[ViewItem],
    search_text: str = "",
    fields: Sequence[str] = DEFAULT_SEARCH_FIELDS,
    difficulties: Optional[Collection[Difficulty]] = None,
) -> List[ViewItem]:
    """
    Keep items matching the search text and, if given, the difficulty set.

    Args:
        items: Listing to filter (not mutated)
        search_text: Free text, matched as a substring
        fields: Item attributes the text is matched against
        difficulties: Allowed difficulties; None or empty keeps everything

    Returns:
        New list in the original relative order.
    """
    allowed = set(difficulties or ())
    result = []
    for item in items:
        if allowed and item.difficulty not in allowed:
            continue
        if matches_search(item, search_text, fields):
            result.append(item)
    return result


def sort_items(items: Iterable[ViewItem], sort_key: SortKey = SortKey.POPULAR) -> List[ViewItem]:
    """
    Sort items by the given mode.

    All modes are stable: items with equal keys keep their input order, also for
    the descending modes (list.sort keeps stability with reverse=True).
    SortKey.POPULAR has no backing metric and returns the input order.

    Returns:
        New sorted list. Input is not mutated.
    """
    sorted_items = list(items)
    sort_key = parse_sort_key(sort_key)
    if sort_key in _SORTS:
        key, descending = _SORTS[sort_key]
        sorted_items.sort(key=key, reverse=descending)
    return sorted_items


def total_pages_for(count: int, page_size: int) -> int:
    """Number of pages for count items; at least 1 even for an empty listing."""
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    return max(1, math.ceil(count / page_size))


def paginate(items: Sequence[ViewItem], page: int, page_size: int) -> List[ViewItem]:
    """Slice out 1-indexed page `page` of `items`."""
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


def query(
    items: Iterable[ViewItem],
    search_text: str = "",
    sort_key: SortKey = SortKey.POPULAR,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    search_fields: Sequence[str] = DEFAULT_SEARCH_FIELDS,
    difficulties: Optional[Collection[Difficulty]] = None,
) -> QueryResult:
    """
    Run the listing pipeline: filter, sort, paginate.

    Pure function over its inputs. Callers must reset `page` to 1 whenever
    search_text, sort_key or difficulties change.

    Args:
        items: Full fetched collection
        search_text: Free-text search (case-insensitive substring)
        sort_key: One of SortKey
        page: Requested 1-indexed page; brought into [1, total_pages]
        page_size: Items per page (6 on every page of the app)
        search_fields: Item attributes searched; the favorites page uses name only
        difficulties: Optional difficulty filter

    Returns:
        QueryResult with the page slice and page-count metadata.

    Examples:
        >>> items = [ViewItem(id=i, name=f"Recipe {i}") for i in range(1, 8)]
        >>> result = query(items, "", SortKey.NEWEST, page=1, page_size=6)
        >>> result.total_pages
        2
        >>> [item.id for item in result.page_items]
        [7, 6, 5, 4, 3, 2]
    """
    filtered = filter_items(items, search_text, search_fields, difficulties)
    ordered = sort_items(filtered, sort_key)
    total_pages = total_pages_for(len(ordered), page_size)
    clamped_page = min(max(page, 1), total_pages)
    return QueryResult(
        page_items=paginate(ordered, clamped_page, page_size),
        total_count=len(ordered),
        total_pages=total_pages,
        clamped_page=clamped_page,
    )


def go_to_page(current_page: int, requested_page: int, total_pages: int) -> int:
    """
    Navigate to requested_page, refusing to move past either boundary.

    Returns:
        requested_page if it lies in [1, total_pages], else current_page unchanged.
    """
    if requested_page < 1 or requested_page > total_pages:
        return current_page
    return requested_page


def page_numbers(current_page: int, total_pages: int) -> List[int]:
    """
    Page numbers to show in the pagination bar (at most three).

    - total_pages <= 3: all pages
    - on the first page: [1, 2, 3]
    - on the last page: the last three pages
    - otherwise: the current page and its two neighbours
    """
    if total_pages <= MAX_PAGE_BUTTONS:
        return list(range(1, total_pages + 1))
    if current_page <= 1:
        return [1, 2, 3]
    if current_page >= total_pages:
        return [total_pages - 2, total_pages - 1, total_pages]
    return [current_page - 1, current_page, current_page + 1]


