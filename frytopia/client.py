"""
Backend REST API Client.

This module is the **single source of truth** for all communication with the
Frytopia REST backend (recipes, favorites, ratings, users). Pages and view
builders never call requests directly.

Key principles:
- One requests.Session per client, one timeout for every call
- Every transport failure, non-2xx status or undecodable body raises
  BackendError (BackendUnavailable for connection errors and timeouts)
- Records that fail model validation are logged and skipped; the rest of the
  list is still returned
- No caching: every call hits the backend

# NOTE: Routes, auth headers and status codes are owned by the backend. When an
    endpoint changes, only the path constants below need to follow.
"""

import logging
from typing import Any, Iterable, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from frytopia.config import BackendConfig
from frytopia.exceptions import BackendError, BackendUnavailable
from frytopia.models import Favorite, Rating, Recipe, User, UserUpdate

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

RECIPES_PATH = "/recipes"
RECIPE_PATH = "/recipes/{recipe_id}"
FAVORITES_PATH = "/favorites"
USER_FAVORITES_PATH = "/favorites/{user_id}"
FAVORITE_PATH = "/favorites/{user_id}/{recipe_id}"
RATINGS_PATH = "/ratings"
RECIPE_RATINGS_PATH = "/ratings/recipe/{recipe_id}"
USER_PATH = "/users/{user_id}"
PROFILE_IMAGE_PATH = "/users/{user_id}/profile-image"


class FrytopiaClient:
    """
    Blocking client for the Frytopia backend.

    The client holds no per-view state and is safe to share between the worker
    threads used for concurrent fetches.

    Attributes:
        base_url: API base URL without trailing slash
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or BackendConfig.get_api_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else BackendConfig.get_timeout()
        self._session = session or requests.Session()

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def media_url(self, path: Optional[str]) -> Optional[str]:
        """
        Absolute URL for a relative media path (recipe or profile image).

        Absolute URLs are returned unchanged; empty paths give None.
        """
        if not path:
            return None
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        expected: Iterable[int] = (200, 201, 204),
        allow_not_found: bool = False,
        **kwargs: Any,
    ) -> Optional[requests.Response]:
        """
        Perform one HTTP call and translate failures into BackendError.

        Returns:
            The response, or None when allow_not_found is set and the backend
            answered 404.
        """
        try:
            response = self._session.request(method, self.url(path), timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.warning("%s timed out after %.1fs: %s", operation, self.timeout, e)
            raise BackendUnavailable(operation, "request timed out") from e
        except requests.exceptions.ConnectionError as e:
            logger.warning("%s could not connect to %s: %s", operation, self.base_url, e)
            raise BackendUnavailable(operation, "could not connect to backend") from e
        except requests.exceptions.RequestException as e:
            logger.error("%s failed: %s", operation, e)
            raise BackendError(operation, str(e)) from e

        if allow_not_found and response.status_code == 404:
            logger.debug("%s: 404 treated as empty result", operation)
            return None
        if response.status_code not in expected:
            logger.error("%s returned HTTP %d: %s", operation, response.status_code, response.text[:200])
            raise BackendError(
                operation,
                f"backend returned {response.status_code}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _json(operation: str, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.error("%s returned a non-JSON body: %s", operation, response.text[:200])
            raise BackendError(operation, "invalid JSON in response", response.status_code) from e

    @staticmethod
    def _parse_one(operation: str, model: Type[ModelT], data: Any) -> ModelT:
        try:
            return model.model_validate(data)
        except ModelValidationError as e:
            logger.error("%s returned an invalid %s: %s", operation, model.__name__, e)
            raise BackendError(operation, f"invalid {model.__name__} in response") from e

    @staticmethod
    def _parse_list(operation: str, model: Type[ModelT], data: Any) -> List[ModelT]:
        """Validate each record; skip (and log) the ones that do not fit the model."""
        if data is None:
            return []
        if not isinstance(data, list):
            logger.error("%s returned %s, expected a list", operation, type(data).__name__)
            raise BackendError(operation, "expected a list in response")
        items: List[ModelT] = []
        for raw in data:
            try:
                items.append(model.model_validate(raw))
            except ModelValidationError as e:
                logger.error("%s: skipping invalid %s %s: %s", operation, model.__name__, str(raw)[:200], e)
        return items

    # Recipes

    def list_recipes(self) -> List[Recipe]:
        """GET /recipes: every recipe in the catalog."""
        response = self._request("list_recipes", "GET", RECIPES_PATH)
        recipes = self._parse_list("list_recipes", Recipe, self._json("list_recipes", response))
        logger.info("list_recipes: %d recipes", len(recipes))
        return recipes

    def get_recipe(self, recipe_id: int) -> Recipe:
        """GET /recipes/{id}: one recipe including ingredients and steps."""
        response = self._request("get_recipe", "GET", RECIPE_PATH.format(recipe_id=recipe_id))
        return self._parse_one("get_recipe", Recipe, self._json("get_recipe", response))

    # Favorites

    def list_favorites(self, user_id: int) -> List[Favorite]:
        """GET /favorites/{user_id}: the user's favorite pairs (404 means none)."""
        response = self._request(
            "list_favorites", "GET", USER_FAVORITES_PATH.format(user_id=user_id), allow_not_found=True
        )
        if response is None:
            return []
        return self._parse_list("list_favorites", Favorite, self._json("list_favorites", response))

    def add_favorite(self, user_id: int, recipe_id: int) -> bool:
        """POST /favorites."""
        self._request(
            "add_favorite", "POST", FAVORITES_PATH,
            json={"user_id": user_id, "recipe_id": recipe_id},
        )
        logger.info("add_favorite: user=%d recipe=%d", user_id, recipe_id)
        return True

    def remove_favorite(self, user_id: int, recipe_id: int) -> bool:
        """DELETE /favorites/{user_id}/{recipe_id}."""
        self._request(
            "remove_favorite", "DELETE", FAVORITE_PATH.format(user_id=user_id, recipe_id=recipe_id)
        )
        logger.info("remove_favorite: user=%d recipe=%d", user_id, recipe_id)
        return True

    # Ratings

    def list_ratings(self, recipe_id: int) -> List[Rating]:
        """GET /ratings/recipe/{recipe_id}: every rating of one recipe (404 means none)."""
        response = self._request(
            "list_ratings", "GET", RECIPE_RATINGS_PATH.format(recipe_id=recipe_id), allow_not_found=True
        )
        if response is None:
            return []
        return self._parse_list("list_ratings", Rating, self._json("list_ratings", response))

    def create_rating(self, rating: Rating) -> Rating:
        """POST /ratings; the backend answers 201 with the stored rating."""
        payload = rating.model_dump(by_alias=True, exclude_none=True)
        response = self._request("create_rating", "POST", RATINGS_PATH, expected=(200, 201), json=payload)
        data = self._json("create_rating", response)
        logger.info("create_rating: user=%d recipe=%d score=%d", rating.user_id, rating.recipe_id, rating.score)
        return self._parse_one("create_rating", Rating, data)

    # Users

    def get_user(self, user_id: int) -> User:
        """GET /users/{id}."""
        response = self._request("get_user", "GET", USER_PATH.format(user_id=user_id))
        return self._parse_one("get_user", User, self._json("get_user", response))

    def update_user(self, user_id: int, patch: UserUpdate) -> bool:
        """
        PUT /users/{id} with the fields set on patch.

        A field set to None is sent as null, which clears it (e.g. the profile image).
        """
        payload = patch.model_dump(exclude_unset=True)
        self._request("update_user", "PUT", USER_PATH.format(user_id=user_id), json=payload)
        logger.info("update_user: user=%d fields=%s", user_id, sorted(payload))
        return True

    def upload_profile_image(
        self,
        user_id: int,
        filename: str,
        content: bytes,
        content_type: str,
    ) -> str:
        """
        POST /users/{id}/profile-image as multipart form data.

        Returns:
            Relative URL of the stored image. The backend answers either with the
            bare string or with {"profile_image_url": ...}.
        """
        operation = "upload_profile_image"
        response = self._request(
            operation, "POST", PROFILE_IMAGE_PATH.format(user_id=user_id),
            files={"file": (filename, content, content_type)},
        )
        data = self._json(operation, response)
        url: Optional[str] = None
        if isinstance(data, str):
            url = data
        elif isinstance(data, dict):
            url = data.get("profile_image_url")
        if not url:
            logger.error("%s returned no image URL: %r", operation, data)
            raise BackendError(operation, "no image URL in response", response.status_code)
        logger.info("%s: user=%d stored %s", operation, user_id, url)
        return url

    def close(self) -> None:
        self._session.close()

