"""
Session management utilities for Streamlit pages.

The signed-in user lives in st.session_state as a frytopia.session.SessionContext
and is passed explicitly into every view builder. Signing in or out drops every
cached listing so no page shows another user's favorites.
"""

from typing import Optional

import streamlit as st

from frytopia.models import User
from frytopia.session import SessionContext
from utils.state import invalidate_views

SESSION_KEY = "frytopia_session"
USER_NAME_KEY = "frytopia_user_name"


def get_session() -> SessionContext:
    """
    Get the current SessionContext, anonymous until someone signs in.

    Returns:
        SessionContext stored in st.session_state
    """
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = SessionContext.anonymous()
    return st.session_state[SESSION_KEY]


def start_session(user: User) -> SessionContext:
    """
    Sign a user in for this browser session.

    Args:
        user: User record fetched from the backend (role is taken from it)

    Returns:
        The new SessionContext
    """
    context = SessionContext.signed_in(user.id, user.role)
    st.session_state[SESSION_KEY] = context
    st.session_state[USER_NAME_KEY] = user.name
    invalidate_views()
    return context


def end_session() -> None:
    """Sign out and forget every cached listing."""
    st.session_state[SESSION_KEY] = SessionContext.anonymous()
    st.session_state.pop(USER_NAME_KEY, None)
    invalidate_views()


def get_user_name() -> Optional[str]:
    """Display name of the signed-in user, if any."""
    return st.session_state.get(USER_NAME_KEY)
