"""
Rating aggregation for recipes.

Average ratings are computed on every fetch from the raw rating list and are
never persisted or cached beyond the view that fetched them.
"""

import math
from typing import Dict, Iterable, Optional

from frytopia.models import Rating

MAX_STARS = 5
NO_RATING_TEXT = "No rating yet"


def average_rating(ratings: Iterable[Rating]) -> float:
    """
    Arithmetic mean of the rating scores, rounded to 2 decimal places.

    The rounded value is the one displayed and the one used for sorting.

    Returns:
        0.0 for an empty input, otherwise the rounded mean.

    Examples:
        >>> average_rating([])
        0.0
        >>> average_rating([Rating(recipe_id=1, user_id=1, score=4), Rating(recipe_id=1, user_id=2, score=2)])
        3.0
    """
    scores = [rating.score for rating in ratings]
    if not scores:
        return 0.0
    return round(sum(scores) / len(scores), 2)


def filled_stars(average: Optional[float]) -> int:
    """
    Number of filled stars to draw for an average rating.

    Halves round up (4.5 -> 5) and the result is clamped to [0, 5].
    A missing average draws no stars.
    """
    if average is None:
        return 0
    return max(0, min(MAX_STARS, math.floor(average + 0.5)))


def format_average(average: Optional[float]) -> str:
    """Display text for an average, e.g. "4.67 / 5.0"."""
    if average is None:
        return NO_RATING_TEXT
    return f"{average:.2f} / {MAX_STARS:.1f}"


def star_string(average: Optional[float]) -> str:
    """Five-character star bar, e.g. "★★★★☆"."""
    filled = filled_stars(average)
    return "★" * filled + "☆" * (MAX_STARS - filled)


def score_distribution(ratings: Iterable[Rating]) -> Dict[int, int]:
    """
    Count ratings per score.

    Returns:
        Dictionary with every score 1..5 as a key (zero counts included).
    """
    counts = {score: 0 for score in range(1, MAX_STARS + 1)}
    for rating in ratings:
        counts[rating.score] = counts.get(rating.score, 0) + 1
    return counts
