"""
Tests for the listing pipeline: search filter, sorting, pagination.

These tests verify that:
- The search filter keeps exactly the items containing the text in name or description
- Every sort mode is stable and idempotent
- Concatenating all pages reproduces the filtered, sorted listing exactly once
- Out-of-range page requests leave the current page unchanged
"""

import pytest

from frytopia.models import Difficulty, ViewItem
from frytopia.pipeline import (
    NAME,
    SortKey,
    filter_items,
    go_to_page,
    matches_search,
    page_numbers,
    paginate,
    parse_sort_key,
    query,
    sort_items,
    total_pages_for,
)


def make_item(recipe_id, name="Recipe", description="", cooking_time=0, difficulty=None, rating=None):
    return ViewItem(
        id=recipe_id,
        name=name,
        description=description,
        cooking_time_minutes=cooking_time,
        difficulty=difficulty,
        average_rating=rating,
    )


@pytest.fixture
def items():
    return [
        make_item(1, "Crispy Fries", "Double-fried potato sticks", 30, Difficulty.EASY, 4.5),
        make_item(2, "Tempura Shrimp", "Light batter, hot oil", 20, Difficulty.MEDIUM, 3.0),
        make_item(3, "fried chicken", "Buttermilk brine", 45, Difficulty.HARD, None),
        make_item(4, "Onion Rings", "Beer batter FRIED rings", 20, Difficulty.EASY, 4.5),
        make_item(5, "Churros", "Cinnamon sugar", 25, None, 2.0),
        make_item(6, "Ábalo Croquettes", "Ham and bechamel", 40, Difficulty.MEDIUM, 3.0),
        make_item(7, "Falafel", None, 20, Difficulty.EASY, 0.0),
    ]


class TestSearchFilter:
    """Test free-text search over name and description."""

    @pytest.mark.parametrize("needle", ["", "fried", "FRIED", "batter", "rings", "zzz", "o", " "])
    def test_filter_keeps_exactly_matching_items(self, items, needle):
        """Every kept item contains the text, every dropped item does not."""
        kept = filter_items(items, needle)
        kept_ids = {item.id for item in kept}
        for item in items:
            contains = needle.casefold() in item.name.casefold() or needle.casefold() in (item.description or "").casefold()
            assert (item.id in kept_ids) == contains, (needle, item.name)

    def test_search_is_case_insensitive(self, items):
        """'FRIED' matches 'fried chicken' and 'Double-fried' alike."""
        ids = [item.id for item in filter_items(items, "FRIED")]
        assert ids == [1, 3, 4]

    def test_empty_search_keeps_everything_in_order(self, items):
        assert filter_items(items, "") == items

    def test_missing_description_does_not_match_or_crash(self, items):
        falafel = items[6]
        assert matches_search(falafel, "falafel")
        assert not matches_search(falafel, "batter")

    def test_name_only_search(self, items):
        """The favorites page searches names only."""
        ids = [item.id for item in filter_items(items, "batter", fields=(NAME,))]
        assert ids == []
        ids = [item.id for item in filter_items(items, "ring", fields=(NAME,))]
        assert ids == [4]

    def test_difficulty_filter_keeps_only_requested_levels(self, items):
        kept = filter_items(items, "", difficulties={Difficulty.EASY})
        assert [item.id for item in kept] == [1, 4, 7]
        assert all(item.difficulty == Difficulty.EASY for item in kept)

    def test_empty_difficulty_set_keeps_everything(self, items):
        assert filter_items(items, "", difficulties=set()) == items

    def test_filter_does_not_mutate_input(self, items):
        before = list(items)
        filter_items(items, "fried")
        assert items == before


class TestSorting:
    """Test every sort mode."""

    @pytest.mark.parametrize("sort_key", list(SortKey))
    def test_sort_is_idempotent(self, items, sort_key):
        once = sort_items(items, sort_key)
        twice = sort_items(once, sort_key)
        assert [item.id for item in once] == [item.id for item in twice]

    @pytest.mark.parametrize("sort_key", list(SortKey))
    def test_sort_is_a_permutation(self, items, sort_key):
        assert sorted(item.id for item in sort_items(items, sort_key)) == [1, 2, 3, 4, 5, 6, 7]

    def test_newest_is_descending_id(self, items):
        assert [item.id for item in sort_items(items, SortKey.NEWEST)] == [7, 6, 5, 4, 3, 2, 1]

    def test_popular_keeps_backend_order(self, items):
        assert sort_items(items, SortKey.POPULAR) == items

    def test_cook_time_ascending_is_stable(self, items):
        """Ties (20 min: ids 2, 4, 7) keep their input order."""
        ids = [item.id for item in sort_items(items, SortKey.COOK_TIME_ASC)]
        assert ids == [2, 4, 7, 5, 1, 6, 3]

    def test_cook_time_descending_is_stable(self, items):
        ids = [item.id for item in sort_items(items, SortKey.COOK_TIME_DESC)]
        assert ids == [3, 6, 1, 5, 2, 4, 7]

    def test_rating_descending_is_stable_and_treats_missing_as_zero(self, items):
        ids = [item.id for item in sort_items(items, SortKey.RATING_DESC)]
        assert ids == [1, 4, 2, 6, 5, 3, 7]

    def test_rating_ascending(self, items):
        ids = [item.id for item in sort_items(items, SortKey.RATING_ASC)]
        assert ids == [3, 7, 5, 2, 6, 1, 4]

    def test_name_sort_ignores_case(self, items):
        names = [item.name for item in sort_items(items, SortKey.NAME_ASC)]
        assert names.index("Churros") < names.index("fried chicken") < names.index("Onion Rings")

    def test_name_descending_reverses_ascending_for_distinct_names(self, items):
        ascending = [item.id for item in sort_items(items, SortKey.NAME_ASC)]
        descending = [item.id for item in sort_items(items, SortKey.NAME_DESC)]
        assert descending == list(reversed(ascending))

    def test_sort_does_not_mutate_input(self, items):
        before = [item.id for item in items]
        sort_items(items, SortKey.NEWEST)
        assert [item.id for item in items] == before

    def test_unknown_sort_value_falls_back_to_popular(self):
        assert parse_sort_key("bogus") is SortKey.POPULAR
        assert parse_sort_key(None) is SortKey.POPULAR
        assert parse_sort_key("cookTimeAsc") is SortKey.COOK_TIME_ASC


class TestPagination:
    """Test page slicing and page-count metadata."""

    @pytest.mark.parametrize("page_size", [1, 2, 3, 6, 7, 10])
    def test_pages_cover_listing_exactly_once(self, items, page_size):
        ordered = sort_items(items, SortKey.NAME_ASC)
        total = total_pages_for(len(ordered), page_size)
        collected = []
        for page in range(1, total + 1):
            collected.extend(paginate(ordered, page, page_size))
        assert [item.id for item in collected] == [item.id for item in ordered]

    def test_total_pages_is_at_least_one(self):
        assert total_pages_for(0, 6) == 1
        assert total_pages_for(6, 6) == 1
        assert total_pages_for(7, 6) == 2

    def test_page_size_below_one_is_rejected(self):
        with pytest.raises(ValueError):
            total_pages_for(3, 0)
        with pytest.raises(ValueError):
            query([], page_size=0)

    def test_query_clamps_page(self, items):
        result = query(items, page=99, page_size=6)
        assert result.clamped_page == 2
        assert [item.id for item in result.page_items] == [7]

        result = query(items, page=0, page_size=6)
        assert result.clamped_page == 1

    def test_empty_listing_has_one_empty_page(self):
        result = query([], search_text="anything")
        assert result.page_items == []
        assert result.total_count == 0
        assert result.total_pages == 1
        assert result.clamped_page == 1


class TestPageNavigation:
    """Test go_to_page and the page-number window."""

    def test_page_zero_is_rejected(self):
        assert go_to_page(1, 0, 2) == 1

    def test_page_past_end_is_rejected(self):
        assert go_to_page(2, 3, 2) == 2

    def test_valid_page_is_accepted(self):
        assert go_to_page(1, 2, 2) == 2

    def test_window_shows_all_pages_when_few(self):
        assert page_numbers(1, 1) == [1]
        assert page_numbers(2, 3) == [1, 2, 3]

    def test_window_at_edges_and_middle(self):
        assert page_numbers(1, 5) == [1, 2, 3]
        assert page_numbers(5, 5) == [3, 4, 5]
        assert page_numbers(3, 5) == [2, 3, 4]


class TestEndToEnd:
    """Whole-pipeline scenarios."""

    def test_seven_recipes_newest_first_two_pages(self, items):
        """7 recipes, page size 6, newest: page 1 has ids 7..2, page 2 has id 1."""
        first = query(items, "", SortKey.NEWEST, page=1, page_size=6)
        assert [item.id for item in first.page_items] == [7, 6, 5, 4, 3, 2]
        assert first.total_pages == 2
        assert first.total_count == 7

        second = query(items, "", SortKey.NEWEST, page=2, page_size=6)
        assert [item.id for item in second.page_items] == [1]

    def test_search_sort_and_difficulty_together(self, items):
        result = query(
            items,
            search_text="batter",
            sort_key=SortKey.RATING_DESC,
            difficulties=[Difficulty.EASY, Difficulty.MEDIUM],
        )
        assert [item.id for item in result.page_items] == [4, 2]
