"""
Local validation for the profile form, image uploads and ratings.

Everything here runs before any network call; a failed check raises
ValidationError and nothing is submitted.
"""

import re
from typing import Dict, Optional

from frytopia.config import UploadConfig
from frytopia.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

NAME_REQUIRED = "Name is required"
EMAIL_REQUIRED = "Email is required"
EMAIL_INVALID = "Please enter a valid email address"
IMAGE_TOO_LARGE = "Image size must be less than {limit_mb}MB"
IMAGE_NOT_IMAGE = "Please upload a valid image file"
SCORE_OUT_OF_RANGE = "Please choose a rating between 1 and 5 stars"


def profile_errors(name: str, email: str) -> Dict[str, str]:
    """
    Collect field errors for the profile form.

    Returns:
        Mapping of field name to message; empty when the form is valid.
    """
    errors: Dict[str, str] = {}
    if not (name or "").strip():
        errors["name"] = NAME_REQUIRED
    email = (email or "").strip()
    if not email:
        errors["email"] = EMAIL_REQUIRED
    elif not EMAIL_PATTERN.match(email):
        errors["email"] = EMAIL_INVALID
    return errors


def validate_profile(name: str, email: str) -> None:
    """Raise ValidationError if the name or email is missing or malformed."""
    errors = profile_errors(name, email)
    if errors:
        raise ValidationError(errors)


def validate_image(
    size: int,
    content_type: Optional[str],
    max_bytes: Optional[int] = None,
) -> None:
    """
    Check a profile image before upload.

    Args:
        size: File size in bytes
        content_type: MIME type reported by the browser
        max_bytes: Size limit; defaults to UploadConfig.get_max_image_bytes()

    Raises:
        ValidationError: with an "image" field error
    """
    limit = max_bytes if max_bytes is not None else UploadConfig.get_max_image_bytes()
    if size > limit:
        limit_mb = limit // (1024 * 1024) or 1
        raise ValidationError({"image": IMAGE_TOO_LARGE.format(limit_mb=limit_mb)})
    if not (content_type or "").startswith("image/"):
        raise ValidationError({"image": IMAGE_NOT_IMAGE})


def validate_rating(score: Optional[int]) -> None:
    """Raise ValidationError unless score is a whole number of stars in 1..5."""
    if score is None or isinstance(score, bool) or not isinstance(score, int) or not 1 <= score <= 5:
        raise ValidationError({"score": SCORE_OUT_OF_RANGE})
