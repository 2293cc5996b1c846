"""
Tests for the fetch-and-merge view builders and the write helpers.

These tests verify that:
- Favorites are merged by set membership for the signed-in viewer only
- A failing rating fetch degrades only its own recipe
- A failing primary fetch is reported instead of raised
- Writes validate first, never patch local state, and report failures as WriteResult
- Stale view builds are discarded by ViewSlot
"""

from unittest.mock import Mock

import pytest
import requests

from frytopia.client import FrytopiaClient
from frytopia.exceptions import BackendError, BackendUnavailable
from frytopia.models import Favorite, Rating, Recipe, User, UserUpdate, ViewItem
from frytopia.session import SessionContext
from frytopia.views import (
    ImageUpload,
    SIGN_IN_REQUIRED,
    ViewError,
    ViewResult,
    ViewSlot,
    build_catalog_view,
    build_favorites_view,
    build_profile_view,
    build_recipe_detail,
    fetch_average_ratings,
    fetch_favorite_ids,
    merge_favorites,
    save_profile,
    submit_rating,
    toggle_favorite,
)

MB = 1024 * 1024

RECIPES = [
    Recipe(id=1, name="Fries", description="Golden", cooking_time_minutes=30),
    Recipe(id=2, name="Tempura", description="Light", cooking_time_minutes=20),
    Recipe(id=3, name="Churros", description="Sweet", cooking_time_minutes=25),
]

RATINGS = {
    1: [Rating(recipe_id=1, user_id=7, score=5), Rating(recipe_id=1, user_id=8, score=5), Rating(recipe_id=1, user_id=9, score=4)],
    2: [Rating(recipe_id=2, user_id=7, score=4), Rating(recipe_id=2, user_id=8, score=2)],
    3: [],
}


def ratings_for(recipe_id):
    return RATINGS[recipe_id]


@pytest.fixture
def client():
    client = Mock(spec=FrytopiaClient)
    client.list_recipes.return_value = list(RECIPES)
    client.get_recipe.side_effect = lambda recipe_id: next(r for r in RECIPES if r.id == recipe_id)
    client.list_favorites.return_value = [Favorite(user_id=7, recipe_id=2)]
    client.list_ratings.side_effect = ratings_for
    return client


@pytest.fixture
def signed_in():
    return SessionContext.signed_in(7)


@pytest.fixture
def anonymous():
    return SessionContext.anonymous()


class TestMerging:
    """Test favorite and rating merges."""

    def test_merge_marks_only_favorites(self):
        items = merge_favorites(RECIPES, {2})
        assert [item.is_favorite for item in items] == [False, True, False]
        assert all(isinstance(item, ViewItem) for item in items)

    def test_merge_does_not_touch_recipes(self):
        merge_favorites(RECIPES, {1, 2, 3})
        assert not hasattr(RECIPES[0], "is_favorite")

    def test_logged_out_has_no_favorites_and_no_request(self, client):
        assert fetch_favorite_ids(client, None) == set()
        client.list_favorites.assert_not_called()

    def test_average_ratings_per_recipe(self, client):
        averages, errors = fetch_average_ratings(client, [1, 2, 3, 2])
        assert averages == {1: 4.67, 2: 3.0, 3: 0.0}
        assert errors == []
        assert client.list_ratings.call_count == 3

    def test_rating_failure_is_isolated(self, client):
        def flaky(recipe_id):
            if recipe_id == 2:
                raise BackendUnavailable("list_ratings", "request timed out")
            return RATINGS[recipe_id]

        client.list_ratings.side_effect = flaky
        averages, errors = fetch_average_ratings(client, [1, 2, 3], limit=2)
        assert averages == {1: 4.67, 2: None, 3: 0.0}
        assert len(errors) == 1
        assert errors[0].recipe_id == 2
        assert errors[0].operation == "list_ratings"


class TestCatalogView:
    """Test build_catalog_view."""

    def test_signed_in_catalog(self, client, signed_in):
        view = build_catalog_view(client, signed_in)
        assert view.primary_ok
        assert view.errors == []
        assert [item.id for item in view.items] == [1, 2, 3]
        assert [item.is_favorite for item in view.items] == [False, True, False]
        assert [item.average_rating for item in view.items] == [4.67, 3.0, 0.0]
        client.list_favorites.assert_called_once_with(7)

    def test_anonymous_catalog_skips_favorites(self, client, anonymous):
        view = build_catalog_view(client, anonymous)
        assert not any(item.is_favorite for item in view.items)
        client.list_favorites.assert_not_called()

    def test_recipe_fetch_failure(self, client, signed_in):
        client.list_recipes.side_effect = BackendUnavailable("list_recipes", "could not connect to backend")
        view = build_catalog_view(client, signed_in)
        assert view.items == []
        assert not view.primary_ok
        assert [error.operation for error in view.errors] == ["list_recipes"]
        client.list_ratings.assert_not_called()

    def test_favorite_fetch_failure_keeps_recipes(self, client, signed_in):
        client.list_favorites.side_effect = BackendError("list_favorites", "backend returned 500", 500)
        view = build_catalog_view(client, signed_in)
        assert view.primary_ok
        assert len(view.items) == 3
        assert not any(item.is_favorite for item in view.items)
        assert [error.operation for error in view.errors] == ["list_favorites"]

    def test_partial_rating_failure(self, client, signed_in):
        def flaky(recipe_id):
            if recipe_id == 3:
                raise BackendError("list_ratings", "backend returned 502", 502)
            return RATINGS[recipe_id]

        client.list_ratings.side_effect = flaky
        view = build_catalog_view(client, signed_in)
        assert [item.average_rating for item in view.items] == [4.67, 3.0, None]
        assert len(view.errors) == 1

    def test_each_build_returns_fresh_items(self, client, signed_in):
        first = build_catalog_view(client, signed_in)
        second = build_catalog_view(client, signed_in)
        assert first.items is not second.items
        assert first.items == second.items


class TestFavoritesAndProfile:
    """Test build_favorites_view and build_profile_view."""

    def test_own_favorites_are_all_marked(self, client, signed_in):
        client.list_favorites.return_value = [Favorite(user_id=7, recipe_id=3), Favorite(user_id=7, recipe_id=1)]
        view = build_favorites_view(client, signed_in)
        assert [item.id for item in view.items] == [3, 1]
        assert all(item.is_favorite for item in view.items)
        assert [item.average_rating for item in view.items] == [0.0, 4.67]
        client.list_favorites.assert_called_once_with(7)

    def test_unresolvable_favorite_is_dropped(self, client, signed_in):
        client.list_favorites.return_value = [Favorite(user_id=7, recipe_id=1), Favorite(user_id=7, recipe_id=404)]

        def get_recipe(recipe_id):
            if recipe_id == 404:
                raise BackendError("get_recipe", "backend returned 404", 404)
            return RECIPES[0]

        client.get_recipe.side_effect = get_recipe
        view = build_favorites_view(client, signed_in)
        assert [item.id for item in view.items] == [1]
        assert [(error.operation, error.recipe_id) for error in view.errors] == [("get_recipe", 404)]

    def test_anonymous_has_empty_favorites(self, client, anonymous):
        view = build_favorites_view(client, anonymous)
        assert view.items == []
        client.list_favorites.assert_not_called()

    def test_other_users_favorites_marked_by_viewer(self, client, signed_in):
        def favorites_of(user_id):
            if user_id == 8:
                return [Favorite(user_id=8, recipe_id=1), Favorite(user_id=8, recipe_id=2)]
            return [Favorite(user_id=7, recipe_id=2)]

        client.list_favorites.side_effect = favorites_of
        view = build_favorites_view(client, signed_in, owner_id=8)
        assert [(item.id, item.is_favorite) for item in view.items] == [(1, False), (2, True)]

    def test_favorites_fetch_failure(self, client, signed_in):
        client.list_favorites.side_effect = BackendUnavailable("list_favorites", "request timed out")
        view = build_favorites_view(client, signed_in)
        assert not view.primary_ok
        assert view.items == []

    def test_profile_view(self, client, signed_in):
        client.get_user.return_value = User(id=7, name="Ann", email="ann@example.com")
        profile = build_profile_view(client, signed_in, 7)
        assert profile.user.name == "Ann"
        assert [item.id for item in profile.favorites.items] == [2]
        assert profile.errors == []

    def test_profile_view_user_failure(self, client, signed_in):
        client.get_user.side_effect = BackendError("get_user", "backend returned 404", 404)
        profile = build_profile_view(client, signed_in, 7)
        assert profile.user is None
        assert [error.operation for error in profile.errors] == ["get_user"]
        assert [item.id for item in profile.favorites.items] == [2]


class TestRecipeDetail:
    """Test build_recipe_detail."""

    def test_detail(self, client, signed_in):
        detail = build_recipe_detail(client, signed_in, 2)
        assert detail.item.id == 2
        assert detail.item.is_favorite
        assert detail.item.average_rating == 3.0
        assert len(detail.ratings) == 2

    def test_detail_rating_failure(self, client, signed_in):
        client.list_ratings.side_effect = BackendUnavailable("list_ratings", "request timed out")
        detail = build_recipe_detail(client, signed_in, 1)
        assert detail.item.average_rating is None
        assert detail.ratings == []
        assert len(detail.errors) == 1

    def test_detail_recipe_failure(self, client, signed_in):
        client.get_recipe.side_effect = BackendError("get_recipe", "backend returned 404", 404)
        detail = build_recipe_detail(client, signed_in, 99)
        assert detail.item is None


class TestWrites:
    """Test toggle_favorite, submit_rating and save_profile."""

    def test_toggle_adds_when_not_favorite(self, client, signed_in):
        result = toggle_favorite(client, signed_in, 3, is_favorite=False)
        assert result.ok
        client.add_favorite.assert_called_once_with(7, 3)
        client.remove_favorite.assert_not_called()

    def test_toggle_removes_when_favorite(self, client, signed_in):
        result = toggle_favorite(client, signed_in, 2, is_favorite=True)
        assert result.ok
        client.remove_favorite.assert_called_once_with(7, 2)

    def test_toggle_then_rebuild_reflects_backend(self, client, signed_in):
        """The page re-fetches after a toggle instead of flipping the flag locally."""
        before = build_catalog_view(client, signed_in)
        toggle_favorite(client, signed_in, 1, is_favorite=False)
        assert not before.items[0].is_favorite

        client.list_favorites.return_value = [Favorite(user_id=7, recipe_id=1), Favorite(user_id=7, recipe_id=2)]
        after = build_catalog_view(client, signed_in)
        assert after.items[0].is_favorite
        assert client.list_favorites.call_count == 2

    def test_toggle_failure(self, client, signed_in):
        client.add_favorite.side_effect = BackendError("add_favorite", "backend returned 500", 500)
        result = toggle_favorite(client, signed_in, 3, is_favorite=False)
        assert not result.ok
        assert "backend returned 500" in result.message

    def test_toggle_requires_sign_in(self, client, anonymous):
        result = toggle_favorite(client, anonymous, 3, is_favorite=False)
        assert not result.ok
        assert result.message == SIGN_IN_REQUIRED
        client.add_favorite.assert_not_called()

    def test_submit_rating(self, client, signed_in):
        result = submit_rating(client, signed_in, 2, 5, "  So crispy  ")
        assert result.ok
        sent = client.create_rating.call_args.args[0]
        assert (sent.recipe_id, sent.user_id, sent.score, sent.comment) == (2, 7, 5, "So crispy")

    @pytest.mark.parametrize("score", [None, 0, 6])
    def test_invalid_rating_is_not_sent(self, client, signed_in, score):
        result = submit_rating(client, signed_in, 2, score)
        assert not result.ok
        assert "score" in result.field_errors
        client.create_rating.assert_not_called()

    def test_rating_requires_sign_in(self, client, anonymous):
        assert not submit_rating(client, anonymous, 2, 5).ok
        client.create_rating.assert_not_called()

    def test_save_profile_uploads_then_updates(self, client, signed_in):
        client.upload_profile_image.return_value = "uploads/7.png"
        upload = ImageUpload("me.png", b"x" * 100, "image/png")
        result = save_profile(client, signed_in, 7, " Ann ", "ann@example.com", "Fry cook", upload=upload)
        assert result.ok
        assert result.message == "Profile updated successfully!"
        client.upload_profile_image.assert_called_once_with(7, "me.png", upload.content, "image/png")
        client.update_user.assert_called_once_with(
            7, UserUpdate(name="Ann", email="ann@example.com", bio="Fry cook", profile_image_url="uploads/7.png")
        )

    def test_save_profile_keeps_current_image(self, client, signed_in):
        save_profile(client, signed_in, 7, "Ann", "ann@example.com", current_image_url="uploads/old.png")
        client.upload_profile_image.assert_not_called()
        assert client.update_user.call_args.args[1].profile_image_url == "uploads/old.png"

    def test_save_profile_remove_image(self, client, signed_in):
        save_profile(client, signed_in, 7, "Ann", "ann@example.com", current_image_url="uploads/old.png", remove_image=True)
        assert client.update_user.call_args.args[1].profile_image_url is None

    def test_removed_image_reaches_the_backend(self, signed_in):
        session = Mock(spec=requests.Session)
        session.request.return_value = Mock(status_code=200)
        backend = FrytopiaClient(base_url="http://backend.test", session=session)
        result = save_profile(
            backend, signed_in, 7, "Ann", "ann@example.com", current_image_url="uploads/old.png", remove_image=True
        )
        assert result.ok
        assert session.request.call_args.kwargs["json"] == {
            "name": "Ann",
            "email": "ann@example.com",
            "bio": "",
            "profile_image_url": None,
        }

    def test_invalid_profile_sends_nothing(self, client, signed_in):
        upload = ImageUpload("notes.txt", b"x" * (6 * MB), "text/plain")
        result = save_profile(client, signed_in, 7, "", "x", upload=upload)
        assert not result.ok
        assert set(result.field_errors) == {"name", "email", "image"}
        client.upload_profile_image.assert_not_called()
        client.update_user.assert_not_called()

    def test_oversized_image_sends_nothing(self, client, signed_in):
        upload = ImageUpload("big.png", b"x" * (6 * MB), "image/png")
        result = save_profile(client, signed_in, 7, "Ann", "ann@example.com", upload=upload)
        assert result.field_errors == {"image": "Image size must be less than 5MB"}
        client.upload_profile_image.assert_not_called()

    def test_cannot_edit_someone_else(self, client, signed_in):
        result = save_profile(client, signed_in, 8, "Bob", "bob@example.com")
        assert not result.ok
        client.update_user.assert_not_called()

    def test_admin_can_edit_anyone(self, client):
        admin = SessionContext.signed_in(1, role="admin")
        assert save_profile(client, admin, 8, "Bob", "bob@example.com").ok

    def test_backend_failure(self, client, signed_in):
        client.update_user.side_effect = BackendError("update_user", "backend returned 500", 500)
        result = save_profile(client, signed_in, 7, "Ann", "ann@example.com")
        assert not result.ok
        assert result.message == "Failed to update profile. Please try again."


class TestViewSlot:
    """Test stale-build discarding."""

    def test_commit_current_build(self):
        slot = ViewSlot()
        token = slot.begin()
        result = ViewResult(items=[])
        assert slot.commit(token, result)
        assert slot.result is result

    def test_stale_build_is_discarded(self):
        slot = ViewSlot()
        stale = slot.begin()
        fresh = slot.begin()
        newer = ViewResult(items=[ViewItem(id=2, name="New")])
        assert slot.commit(fresh, newer)
        assert not slot.commit(stale, ViewResult(items=[ViewItem(id=1, name="Old")]))
        assert slot.result is newer

    def test_failed_primary_keeps_previous_items(self):
        slot = ViewSlot()
        slot.commit(slot.begin(), ViewResult(items=[ViewItem(id=1, name="Fries")]))
        failed = ViewResult(items=[], errors=[], primary_ok=False)
        slot.commit(slot.begin(), failed)
        assert [item.id for item in slot.result.items] == [1]
        assert not slot.result.primary_ok

    def test_new_slot_is_stale(self):
        slot = ViewSlot()
        assert slot.stale
        assert slot.result is None

    def test_invalidate_marks_stale_and_supersedes_builds(self):
        slot = ViewSlot()
        previous = ViewResult(items=[ViewItem(id=1, name="Fries")])
        slot.commit(slot.begin(), previous)
        assert not slot.stale
        token = slot.begin()
        slot.invalidate()
        assert slot.stale
        assert slot.result is previous
        assert not slot.commit(token, ViewResult(items=[]))

    def test_failed_rebuild_after_invalidate_keeps_previous_items(self):
        slot = ViewSlot()
        slot.commit(slot.begin(), ViewResult(items=[ViewItem(id=1, name="Fries")]))
        slot.invalidate()
        error = ViewError("list_recipes", "backend returned 500")
        assert slot.commit(slot.begin(), ViewResult(items=[], errors=[error], primary_ok=False))
        assert not slot.stale
        assert [item.id for item in slot.result.items] == [1]
        assert slot.result.errors == [error]

    def test_successful_rebuild_replaces_items(self):
        slot = ViewSlot()
        slot.commit(slot.begin(), ViewResult(items=[ViewItem(id=1, name="Fries")]))
        slot.invalidate()
        slot.commit(slot.begin(), ViewResult(items=[]))
        assert slot.result.items == []
        assert slot.result.primary_ok
