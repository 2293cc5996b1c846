"""
Configuration management for the Frytopia recipe pages.

This module centralizes environment variable loading from the .env file at the
project root. It is imported early by the Streamlit entry point
(streamlit_app/app.py) so that .env is loaded before any other code reads the
environment.

In deployments without a .env file, load_dotenv() is a no-op and the platform's
environment variables are used instead.

Environment Variables:
- FRYTOPIA_API_URL: Optional, backend REST API base URL (defaults to http://localhost:8000)
- FRYTOPIA_API_TIMEOUT: Optional, per-request timeout in seconds (defaults to 10)
- FRYTOPIA_PAGE_SIZE: Optional, recipes per listing page (defaults to 6)
- FRYTOPIA_RATING_FETCH_LIMIT: Optional, max concurrent rating requests (unset = one per recipe)
- FRYTOPIA_MAX_IMAGE_MB: Optional, profile image size limit in megabytes (defaults to 5)
- FRYTOPIA_LOG_LEVEL: Optional, logging level name (defaults to INFO)
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_PAGE_SIZE = 6
DEFAULT_MAX_IMAGE_MB = 5
DEFAULT_LOG_LEVEL = "INFO"


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    The project root is found by going up from this file's location
    (frytopia/config.py -> frytopia/ -> project root). Existing environment
    variables take precedence over values in the file.
    """
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


load_env_file()


def _get_int(name: str, default: Optional[int]) -> Optional[int]:
    """Read a positive integer from the environment, falling back to default."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %r", name, raw, default)
        return default
    if value < 1:
        logger.warning("Ignoring %s=%r: must be >= 1, using %r", name, raw, default)
        return default
    return value


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %r", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be > 0, using %r", name, raw, default)
        return default
    return value


class BackendConfig:
    """Configuration for the REST backend."""

    @staticmethod
    def get_api_url() -> str:
        """
        Get the backend API base URL.

        Returns:
            URL string with trailing slash removed (default: http://localhost:8000)
        """
        return os.getenv("FRYTOPIA_API_URL", DEFAULT_API_URL).rstrip("/")

    @staticmethod
    def get_timeout() -> float:
        """
        Get the per-request timeout in seconds.

        Returns:
            Timeout in seconds (default: 10)
        """
        return _get_float("FRYTOPIA_API_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)


class ListingConfig:
    """Configuration for recipe listings (catalog, favorites, profile)."""

    @staticmethod
    def get_page_size() -> int:
        """Recipes shown per page (default: 6)."""
        return _get_int("FRYTOPIA_PAGE_SIZE", DEFAULT_PAGE_SIZE)

    @staticmethod
    def get_rating_fetch_limit() -> Optional[int]:
        """
        Get the cap on concurrent per-recipe rating requests.

        Returns:
            Maximum number of in-flight rating requests, or None for one
            request per visible recipe.
        """
        return _get_int("FRYTOPIA_RATING_FETCH_LIMIT", None)


class UploadConfig:
    """Configuration for profile image uploads."""

    @staticmethod
    def get_max_image_bytes() -> int:
        """Largest accepted profile image in bytes (default: 5 MB)."""
        return _get_int("FRYTOPIA_MAX_IMAGE_MB", DEFAULT_MAX_IMAGE_MB) * 1024 * 1024


def get_log_level() -> str:
    """Logging level name from FRYTOPIA_LOG_LEVEL (default: INFO)."""
    level = os.getenv("FRYTOPIA_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(level), int):
        return DEFAULT_LOG_LEVEL
    return level


def configure_logging() -> None:
    """
    Configure root logging for the Streamlit process.

    Safe to call on every script rerun: basicConfig only installs a handler the
    first time.
    """
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
