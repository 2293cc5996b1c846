"""
Listing State Management Module.

This module wraps Streamlit's session_state to keep, per listing page:

- the ListingState: search text, sort key, difficulty filter and current page
- the ViewSlot: the last fetched ViewResult plus the generation token used to
  drop stale builds
- cached page data such as a RecipeDetail, dropped together with the slots

Changing the search text, sort key or difficulty filter always resets the page
to 1. Pagination, sorting and search only re-run frytopia.pipeline.query() on
the stored result; they never trigger a fetch.

# NOTE: This module uses session_state, so listings persist only for the current
    Streamlit session. A browser refresh starts over with fresh fetches.
"""

from dataclasses import dataclass, field, replace
from typing import Any, FrozenSet, Iterable, Optional

import streamlit as st

from frytopia.models import Difficulty
from frytopia.pipeline import SortKey, go_to_page
from frytopia.views import ViewSlot, WriteResult

LISTING_KEY_PREFIX = "listing_"
VIEW_KEY_PREFIX = "view_"
CACHE_KEY_PREFIX = "cached_"


@dataclass(frozen=True)
class ListingState:
    """Search/sort/filter/page controls of one listing page."""
    search_text: str = ""
    sort_key: SortKey = SortKey.POPULAR
    difficulties: FrozenSet[Difficulty] = field(default_factory=frozenset)
    page: int = 1

    def with_controls(
        self,
        search_text: Optional[str] = None,
        sort_key: Optional[SortKey] = None,
        difficulties: Optional[Iterable[Difficulty]] = None,
    ) -> "ListingState":
        """
        Apply control changes; any actual change resets the page to 1.
        """
        updated = replace(
            self,
            search_text=self.search_text if search_text is None else search_text,
            sort_key=self.sort_key if sort_key is None else sort_key,
            difficulties=self.difficulties if difficulties is None else frozenset(difficulties),
        )
        if (updated.search_text, updated.sort_key, updated.difficulties) != (
            self.search_text, self.sort_key, self.difficulties
        ):
            updated = replace(updated, page=1)
        return updated

    def with_page(self, requested: int, total_pages: int) -> "ListingState":
        """Move to requested if it is a valid page; otherwise stay put."""
        return replace(self, page=go_to_page(self.page, requested, total_pages))


def get_listing_state(page_key: str, default_sort: SortKey = SortKey.POPULAR) -> ListingState:
    """
    Get the ListingState of a page, creating it on first visit.

    Args:
        page_key: Unique key of the listing (e.g., "catalog", "favorites")
        default_sort: Sort key a fresh listing starts with
    """
    key = LISTING_KEY_PREFIX + page_key
    if key not in st.session_state:
        st.session_state[key] = ListingState(sort_key=default_sort)
    return st.session_state[key]


def set_listing_state(page_key: str, state: ListingState) -> None:
    st.session_state[LISTING_KEY_PREFIX + page_key] = state


def get_view_slot(page_key: str) -> ViewSlot:
    """
    Get the ViewSlot holding a page's fetched result, creating it on first use.
    """
    key = VIEW_KEY_PREFIX + page_key
    if key not in st.session_state:
        st.session_state[key] = ViewSlot()
    return st.session_state[key]


def invalidate_views() -> None:
    """
    Mark every page's listing stale and drop cached detail data so the next
    render re-fetches.

    Called after sign-in, sign-out and after every write.
    """
    for key in list(st.session_state.keys()):
        if str(key).startswith(VIEW_KEY_PREFIX):
            st.session_state[key].invalidate()
        elif str(key).startswith(CACHE_KEY_PREFIX):
            del st.session_state[key]


def get_cached(name: str) -> Any:
    """Fetched page data that is not a listing (recipe detail, user record)."""
    return st.session_state.get(CACHE_KEY_PREFIX + name)


def set_cached(name: str, value: Any) -> None:
    st.session_state[CACHE_KEY_PREFIX + name] = value


FLASH_KEY = "flash_result"


def set_flash(result: WriteResult) -> None:
    """Keep a write outcome across the st.rerun() that follows the write."""
    st.session_state[FLASH_KEY] = result


def pop_flash() -> Optional[WriteResult]:
    """Take the pending write outcome, if any (shown once)."""
    return st.session_state.pop(FLASH_KEY, None)
