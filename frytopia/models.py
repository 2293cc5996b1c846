"""
Recipe, favorite, rating and user models for the Frytopia pages.

These are the canonical schemas used between the REST client and the pages.
The backend speaks snake_case JSON with a few legacy names (recipe_id,
recipe_name, cooking_time, image_url) and camelCase for ratings; aliases map
those onto stable Python field names so the rest of the code never sees the
wire names.

# NOTE: ViewItem is derived, never sent to the backend. It is rebuilt from the
    fetched lists on every refresh and discarded afterwards.
"""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Difficulty(str, Enum):
    """Recipe difficulty level."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Ingredient(BaseModel):
    """Ingredient line of a recipe (detail endpoint only)."""

    id: Optional[int] = Field(None, alias="ingredient_id")
    name: str = Field(..., alias="ingredient_name")
    quantity: float = Field(0, ge=0)
    unit: str = ""

    model_config = ConfigDict(populate_by_name=True)


class RecipeStep(BaseModel):
    """Numbered cooking instruction (detail endpoint only)."""

    step_number: int = Field(..., ge=1)
    instruction: str

    model_config = ConfigDict(populate_by_name=True)


class Recipe(BaseModel):
    """
    Recipe as returned by the backend.

    Immutable from the pages' point of view; owned by the backend.
    """

    id: int = Field(..., alias="recipe_id", description="Stable unique recipe id (higher = newer)")
    name: str = Field(..., alias="recipe_name")
    description: Optional[str] = None
    image_path: Optional[str] = Field(None, alias="image_url", description="Image path relative to the API base URL")
    cooking_time_minutes: int = Field(0, ge=0, alias="cooking_time")
    difficulty: Optional[Difficulty] = None
    owner_user_id: Optional[int] = Field(None, alias="user_id")
    ingredients: List[Ingredient] = Field(default_factory=list)
    steps: List[RecipeStep] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _normalize_difficulty(cls, value: Any) -> Any:
        """Accept 'Easy', 'EASY' and empty strings from the backend."""
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value

    @field_validator("cooking_time_minutes", mode="before")
    @classmethod
    def _default_cooking_time(cls, value: Any) -> Any:
        return 0 if value is None else value


class ViewItem(Recipe):
    """
    A Recipe enriched with per-user, per-fetch derived fields.

    Attributes:
        is_favorite: True iff (user, recipe id) was in the favorite set fetched
            in the same refresh
        average_rating: Mean score rounded to 2 places, 0.0 for no ratings,
            None if the rating fetch for this recipe failed
    """

    is_favorite: bool = False
    average_rating: Optional[float] = None

    @classmethod
    def from_recipe(
        cls,
        recipe: Recipe,
        is_favorite: bool = False,
        average_rating: Optional[float] = None,
    ) -> "ViewItem":
        data = recipe.model_dump()
        data["is_favorite"] = is_favorite
        data["average_rating"] = average_rating
        return cls(**data)


class Favorite(BaseModel):
    """A (user, recipe) favorite pair."""

    user_id: int
    recipe_id: int

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Rating(BaseModel):
    """A single user rating of a recipe."""

    id: Optional[int] = Field(None, alias="ratingId")
    recipe_id: int = Field(..., alias="recipeId")
    user_id: int = Field(..., alias="userId")
    score: int = Field(..., ge=1, le=5)
    comment: str = ""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("comment", mode="before")
    @classmethod
    def _default_comment(cls, value: Any) -> Any:
        return "" if value is None else value


class User(BaseModel):
    """User profile as returned by the backend."""

    id: int = Field(..., alias="user_id")
    name: str = ""
    email: str = ""
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    join_date: Optional[datetime] = None
    role: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class UserUpdate(BaseModel):
    """Patch payload for updating a user's profile."""

    name: str
    email: str
    bio: str = ""
    profile_image_url: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Somchai",
                "email": "somchai@example.com",
                "bio": "Crispy or nothing.",
                "profile_image_url": "uploads/profile/7.png",
            }
        }
    )
