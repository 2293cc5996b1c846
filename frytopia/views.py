"""
Fetch-and-merge for the recipe pages.

Every page builds its collection the same way:

1. Fetch the primary list and the viewer's favorite set concurrently
2. Mark each recipe's is_favorite by set membership
3. Fan out one rating request per recipe
4. Merge each recipe's average rating (None where its rating fetch failed)

The resulting ViewResult is kept by the page and fed into
frytopia.pipeline.query() on every interaction; pagination, sorting and search
never re-fetch.

Writes (favorite toggles, ratings, profile edits) go through the client and
return a WriteResult. They never patch a collection in place: the page rebuilds
the view afterwards, so a failed write leaves the UI on the last state the
backend confirmed.

Fetch flow: page -> build_*_view() -> FrytopiaClient -> Recipe/Favorite/Rating -> ViewItem -> ViewResult
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from frytopia.client import FrytopiaClient
from frytopia.exceptions import BackendError, ValidationError
from frytopia.models import Favorite, Rating, Recipe, User, UserUpdate, ViewItem
from frytopia.ratings import average_rating
from frytopia.session import SessionContext
from frytopia.utils.concurrency import Outcome, map_concurrent, run_concurrently
from frytopia import validation

logger = logging.getLogger(__name__)

SIGN_IN_REQUIRED = "Please sign in first."


@dataclass(frozen=True)
class ViewError:
    """
    One failed fetch inside a view build.

    Attributes:
        operation: Client operation that failed (e.g., "list_ratings")
        message: Human-readable reason
        recipe_id: Recipe the failure is scoped to, if any
    """
    operation: str
    message: str
    recipe_id: Optional[int] = None

    @classmethod
    def from_exception(cls, operation: str, error: BaseException, recipe_id: Optional[int] = None) -> "ViewError":
        if isinstance(error, BackendError):
            return cls(error.operation, error.message, recipe_id)
        return cls(operation, str(error) or type(error).__name__, recipe_id)


@dataclass(frozen=True)
class ViewResult:
    """
    A freshly built, independently owned listing.

    Attributes:
        items: Merged ViewItems in backend order
        errors: Fetch failures that degraded (but did not abort) the build
        primary_ok: False when the primary list itself could not be fetched
        fetched_at: When the build finished (UTC)
    """
    items: List[ViewItem]
    errors: List[ViewError] = field(default_factory=list)
    primary_ok: bool = True
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ProfileView:
    """User record plus the user's favorite recipes."""
    user: Optional[User]
    favorites: ViewResult
    errors: List[ViewError] = field(default_factory=list)


@dataclass(frozen=True)
class RecipeDetail:
    """One recipe with its favorite flag, rating list and average."""
    item: Optional[ViewItem]
    ratings: List[Rating]
    errors: List[ViewError] = field(default_factory=list)


@dataclass(frozen=True)
class WriteResult:
    """
    Outcome of a write.

    Attributes:
        ok: True if the backend accepted the write
        message: Text to show the user
        field_errors: Validation messages keyed by form field (nothing was sent)
    """
    ok: bool
    message: str = ""
    field_errors: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ImageUpload:
    """A profile image picked in the browser."""
    filename: str
    content: bytes
    content_type: Optional[str]

    @property
    def size(self) -> int:
        return len(self.content)


class ViewSlot:
    """
    Holds the current ViewResult of one page and discards stale builds.

    Call begin() before fetching and commit() with the returned token once the
    build is done. A result whose token was superseded by a later begin() is
    dropped on arrival. A result whose primary fetch failed keeps the previous
    items on screen.
    """

    def __init__(self) -> None:
        self._generation = 0
        self.result: Optional[ViewResult] = None
        self.stale = True

    def begin(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def commit(self, token: int, result: ViewResult) -> bool:
        """
        Store result if token is still current.

        Returns:
            True if stored, False if the build was stale and discarded.
        """
        if not self.is_current(token):
            logger.debug("Discarding stale view build %d (current %d)", token, self._generation)
            return False
        if not result.primary_ok and self.result is not None:
            result = ViewResult(
                items=self.result.items,
                errors=result.errors,
                primary_ok=False,
                fetched_at=self.result.fetched_at,
            )
        self.result = result
        self.stale = False
        return True

    def invalidate(self) -> None:
        """
        Mark the current result stale so the next render rebuilds it.

        The result itself is kept until a rebuild commits, so a failed rebuild
        still has the previous items to fall back on.
        """
        self._generation += 1
        self.stale = True


def _distinct(ids: Iterable[int]) -> List[int]:
    """Distinct ids in first-seen order."""
    return list(dict.fromkeys(ids))


def fetch_favorite_ids(client: FrytopiaClient, user_id: Optional[int]) -> Set[int]:
    """
    Recipe ids the user has favorited.

    A missing user (logged out) has no favorites and costs no request.
    """
    if user_id is None:
        return set()
    return {favorite.recipe_id for favorite in client.list_favorites(user_id)}


def merge_favorites(recipes: Iterable[Recipe], favorite_ids: Set[int]) -> List[ViewItem]:
    """
    Turn recipes into ViewItems with is_favorite set by membership in favorite_ids.

    Examples:
        >>> recipes = [Recipe(id=i, name=f"Recipe {i}") for i in (1, 2, 3)]
        >>> items = merge_favorites(recipes, {2})
        >>> [item.is_favorite for item in items]
        [False, True, False]
    """
    return [ViewItem.from_recipe(recipe, is_favorite=recipe.id in favorite_ids) for recipe in recipes]


def fetch_average_ratings(
    client: FrytopiaClient,
    recipe_ids: Sequence[int],
    limit: Optional[int] = None,
) -> Tuple[Dict[int, Optional[float]], List[ViewError]]:
    """
    Fetch every recipe's rating list concurrently and average each one.

    Args:
        client: Backend client
        recipe_ids: Recipes to rate (duplicates are fetched once)
        limit: Maximum rating requests in flight; None = one per recipe

    Returns:
        (averages, errors): averages maps recipe id to its average, or to None
        when that recipe's rating fetch failed; errors lists those failures.
    """
    ids = _distinct(recipe_ids)
    outcomes = map_concurrent(ids, client.list_ratings, limit)
    averages: Dict[int, Optional[float]] = {}
    errors: List[ViewError] = []
    for recipe_id, outcome in zip(ids, outcomes):
        if outcome.ok:
            averages[recipe_id] = average_rating(outcome.value)
        else:
            logger.warning("Rating fetch failed for recipe %d: %s", recipe_id, outcome.error)
            averages[recipe_id] = None
            errors.append(ViewError.from_exception("list_ratings", outcome.error, recipe_id))
    return averages, errors


def merge_ratings(items: Iterable[ViewItem], averages: Dict[int, Optional[float]]) -> List[ViewItem]:
    """Copy items with average_rating taken from averages (None if absent)."""
    return [item.model_copy(update={"average_rating": averages.get(item.id)}) for item in items]


def _favorite_ids_outcome(
    outcome: Outcome[Set[int]],
    errors: List[ViewError],
) -> Set[int]:
    if outcome.ok:
        return outcome.value
    logger.warning("Favorite fetch failed: %s", outcome.error)
    errors.append(ViewError.from_exception("list_favorites", outcome.error))
    return set()


def _with_ratings(
    client: FrytopiaClient,
    items: List[ViewItem],
    errors: List[ViewError],
    rating_limit: Optional[int],
) -> List[ViewItem]:
    averages, rating_errors = fetch_average_ratings(client, [item.id for item in items], rating_limit)
    errors.extend(rating_errors)
    return merge_ratings(items, averages)


def build_catalog_view(
    client: FrytopiaClient,
    session: SessionContext,
    rating_limit: Optional[int] = None,
) -> ViewResult:
    """
    Build the catalog: every recipe, marked with the viewer's favorites and rated.

    Args:
        client: Backend client
        session: Viewer; logged-out viewers see no favorites
        rating_limit: Cap on concurrent rating requests (None = unbounded)

    Returns:
        ViewResult. If the recipe list cannot be fetched, primary_ok is False and
        items is empty; a failed favorite fetch marks nothing as favorite; a
        failed rating fetch leaves that recipe's average_rating as None.
    """
    logger.info("Building catalog view for user=%r", session.user_id)
    viewer_id = session.user_id if session.can_write() else None
    recipes_outcome, favorites_outcome = run_concurrently(
        client.list_recipes,
        lambda: fetch_favorite_ids(client, viewer_id),
    )

    errors: List[ViewError] = []
    if not recipes_outcome.ok:
        logger.error("Catalog recipe fetch failed: %s", recipes_outcome.error)
        errors.append(ViewError.from_exception("list_recipes", recipes_outcome.error))
        return ViewResult(items=[], errors=errors, primary_ok=False)

    favorite_ids = _favorite_ids_outcome(favorites_outcome, errors)
    items = merge_favorites(recipes_outcome.value, favorite_ids)
    items = _with_ratings(client, items, errors, rating_limit)
    logger.info("Catalog view: %d recipes, %d favorites, %d errors", len(items), len(favorite_ids), len(errors))
    return ViewResult(items=items, errors=errors)


def build_favorites_view(
    client: FrytopiaClient,
    session: SessionContext,
    owner_id: Optional[int] = None,
    rating_limit: Optional[int] = None,
) -> ViewResult:
    """
    Build the favorites listing of owner_id (defaults to the viewer).

    The owner's favorite list and, when someone else is looking, the viewer's
    own favorite set are fetched concurrently. Each favorite is resolved with
    get_recipe (one request per recipe, concurrently); a recipe that cannot be
    resolved is left out and reported in errors.

    Returns:
        ViewResult in the owner's favorite order. is_favorite reflects the
        viewer's favorites.
    """
    viewer_id = session.user_id if session.can_write() else None
    owner_id = owner_id if owner_id is not None else viewer_id
    if owner_id is None:
        return ViewResult(items=[])

    logger.info("Building favorites view owner=%d viewer=%r", owner_id, viewer_id)
    if viewer_id == owner_id:
        owner_outcome = run_concurrently(lambda: client.list_favorites(owner_id))[0]
        viewer_outcome = None
    else:
        owner_outcome, viewer_outcome = run_concurrently(
            lambda: client.list_favorites(owner_id),
            lambda: fetch_favorite_ids(client, viewer_id),
        )

    errors: List[ViewError] = []
    if not owner_outcome.ok:
        logger.error("Favorites fetch failed for user %d: %s", owner_id, owner_outcome.error)
        errors.append(ViewError.from_exception("list_favorites", owner_outcome.error))
        return ViewResult(items=[], errors=errors, primary_ok=False)

    favorites: List[Favorite] = owner_outcome.value
    recipe_ids = _distinct(favorite.recipe_id for favorite in favorites)
    if viewer_outcome is None:
        viewer_ids = set(recipe_ids)
    else:
        viewer_ids = _favorite_ids_outcome(viewer_outcome, errors)

    recipes: List[Recipe] = []
    for recipe_id, outcome in zip(recipe_ids, map_concurrent(recipe_ids, client.get_recipe, rating_limit)):
        if outcome.ok:
            recipes.append(outcome.value)
        else:
            logger.warning("Could not resolve favorite recipe %d: %s", recipe_id, outcome.error)
            errors.append(ViewError.from_exception("get_recipe", outcome.error, recipe_id))

    items = merge_favorites(recipes, viewer_ids)
    items = _with_ratings(client, items, errors, rating_limit)
    logger.info("Favorites view: %d recipes, %d errors", len(items), len(errors))
    return ViewResult(items=items, errors=errors)


def build_profile_view(
    client: FrytopiaClient,
    session: SessionContext,
    user_id: int,
    rating_limit: Optional[int] = None,
) -> ProfileView:
    """Fetch a user's record and favorites listing concurrently."""
    user_outcome, favorites_outcome = run_concurrently(
        lambda: client.get_user(user_id),
        lambda: build_favorites_view(client, session, owner_id=user_id, rating_limit=rating_limit),
    )
    errors: List[ViewError] = []
    user = None
    if user_outcome.ok:
        user = user_outcome.value
    else:
        logger.error("User fetch failed for %d: %s", user_id, user_outcome.error)
        errors.append(ViewError.from_exception("get_user", user_outcome.error))
    if favorites_outcome.ok:
        favorites = favorites_outcome.value
    else:
        # build_favorites_view collects its own errors; this is a bug guard
        logger.error("Favorites build failed for %d: %s", user_id, favorites_outcome.error)
        errors.append(ViewError.from_exception("build_favorites_view", favorites_outcome.error))
        favorites = ViewResult(items=[], primary_ok=False)
    return ProfileView(user=user, favorites=favorites, errors=errors)


def build_recipe_detail(
    client: FrytopiaClient,
    session: SessionContext,
    recipe_id: int,
) -> RecipeDetail:
    """
    Fetch one recipe, the viewer's favorites and the recipe's ratings concurrently.

    The average shown on the page is computed from the same rating list that is
    displayed; if the ratings cannot be fetched the average is None.
    """
    viewer_id = session.user_id if session.can_write() else None
    recipe_outcome, favorites_outcome, ratings_outcome = run_concurrently(
        lambda: client.get_recipe(recipe_id),
        lambda: fetch_favorite_ids(client, viewer_id),
        lambda: client.list_ratings(recipe_id),
    )

    errors: List[ViewError] = []
    if not recipe_outcome.ok:
        logger.error("Recipe fetch failed for %d: %s", recipe_id, recipe_outcome.error)
        errors.append(ViewError.from_exception("get_recipe", recipe_outcome.error, recipe_id))
        return RecipeDetail(item=None, ratings=[], errors=errors)

    favorite_ids = _favorite_ids_outcome(favorites_outcome, errors)
    if ratings_outcome.ok:
        ratings = ratings_outcome.value
        average: Optional[float] = average_rating(ratings)
    else:
        logger.warning("Rating fetch failed for recipe %d: %s", recipe_id, ratings_outcome.error)
        errors.append(ViewError.from_exception("list_ratings", ratings_outcome.error, recipe_id))
        ratings = []
        average = None

    item = ViewItem.from_recipe(
        recipe_outcome.value,
        is_favorite=recipe_id in favorite_ids,
        average_rating=average,
    )
    return RecipeDetail(item=item, ratings=ratings, errors=errors)


def toggle_favorite(
    client: FrytopiaClient,
    session: SessionContext,
    recipe_id: int,
    is_favorite: bool,
) -> WriteResult:
    """
    Add or remove a favorite for the signed-in user.

    Args:
        is_favorite: The recipe's current state as shown; True removes it

    Returns:
        WriteResult; the caller rebuilds its view afterwards either way.
    """
    if not session.can_write():
        return WriteResult(ok=False, message=SIGN_IN_REQUIRED)
    try:
        if is_favorite:
            client.remove_favorite(session.user_id, recipe_id)
            return WriteResult(ok=True, message="Removed from favorites.")
        client.add_favorite(session.user_id, recipe_id)
        return WriteResult(ok=True, message="Added to favorites.")
    except BackendError as e:
        logger.error("Favorite toggle failed for recipe %d: %s", recipe_id, e)
        action = "remove" if is_favorite else "add"
        return WriteResult(ok=False, message=f"Could not {action} favorite: {e.message}")


def submit_rating(
    client: FrytopiaClient,
    session: SessionContext,
    recipe_id: int,
    score: Optional[int],
    comment: str = "",
) -> WriteResult:
    """Validate and post a rating for the signed-in user."""
    if not session.can_write():
        return WriteResult(ok=False, message=SIGN_IN_REQUIRED)
    try:
        validation.validate_rating(score)
    except ValidationError as e:
        return WriteResult(ok=False, message=e.first_message, field_errors=e.field_errors)

    rating = Rating(recipe_id=recipe_id, user_id=session.user_id, score=score, comment=(comment or "").strip())
    try:
        client.create_rating(rating)
    except BackendError as e:
        logger.error("Rating submit failed for recipe %d: %s", recipe_id, e)
        return WriteResult(ok=False, message=f"Could not save your rating: {e.message}")
    return WriteResult(ok=True, message="Thanks for your review!")


def save_profile(
    client: FrytopiaClient,
    session: SessionContext,
    user_id: int,
    name: str,
    email: str,
    bio: str = "",
    current_image_url: Optional[str] = None,
    upload: Optional[ImageUpload] = None,
    remove_image: bool = False,
) -> WriteResult:
    """
    Validate the profile form, upload a new image if one was picked, then save.

    Nothing is sent unless the name, email and image all pass validation. The
    image is uploaded first so the stored URL can go into the same update.

    Args:
        current_image_url: Image URL the user already has (kept if no new upload)
        upload: Newly picked image, if any
        remove_image: Drop the current image (ignored when upload is given)
    """
    if not (session.owns_profile(user_id) or session.is_admin):
        return WriteResult(ok=False, message="You can only edit your own profile.")

    field_errors = validation.profile_errors(name, email)
    if upload is not None:
        try:
            validation.validate_image(upload.size, upload.content_type)
        except ValidationError as e:
            field_errors.update(e.field_errors)
    if field_errors:
        return WriteResult(ok=False, message=next(iter(field_errors.values())), field_errors=field_errors)

    image_url = None if remove_image else current_image_url
    try:
        if upload is not None:
            image_url = client.upload_profile_image(user_id, upload.filename, upload.content, upload.content_type)
        client.update_user(
            user_id,
            UserUpdate(name=name.strip(), email=email.strip(), bio=(bio or "").strip(), profile_image_url=image_url),
        )
    except BackendError as e:
        logger.error("Profile save failed for user %d: %s", user_id, e)
        return WriteResult(ok=False, message="Failed to update profile. Please try again.")
    return WriteResult(ok=True, message="Profile updated successfully!")
