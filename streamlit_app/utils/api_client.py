"""
Backend API Client access for the Streamlit pages.

Pages never build their own FrytopiaClient: get_client() returns one shared
client per Streamlit server process (requests.Session is thread-safe enough
for the read-mostly traffic of the pages, and reusing it keeps connections
alive across reruns).

Key principles:
- The client itself raises; view builders collect failures into ViewResult.errors
- Nothing the backend returns is cached here; every build re-fetches
- Sign-in goes through sign_in() so a failed lookup never leaves a half
  signed-in session behind
"""

import logging
from typing import Optional

import streamlit as st

from frytopia.client import FrytopiaClient
from frytopia.config import BackendConfig
from frytopia.exceptions import BackendError
from frytopia.models import User

logger = logging.getLogger(__name__)


@st.cache_resource
def get_client() -> FrytopiaClient:
    """
    Get the shared backend client.

    Returns:
        FrytopiaClient configured from FRYTOPIA_API_URL / FRYTOPIA_API_TIMEOUT
    """
    logger.info("Creating backend client for %s", BackendConfig.get_api_url())
    return FrytopiaClient()


def lookup_user(user_id: int) -> Optional[User]:
    """
    Fetch a user record for sign-in.

    Shows an error in the UI and returns None if the user cannot be found or
    the backend is unreachable.
    """
    try:
        return get_client().get_user(user_id)
    except BackendError as e:
        logger.warning("Sign-in lookup failed for user %d: %s", user_id, e)
        if e.status_code == 404:
            st.error(f"No user with id {user_id}.")
        else:
            st.error(f"Could not reach the backend: {e.message}")
        return None
