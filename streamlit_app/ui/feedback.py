"""
Standardized feedback utilities for consistent error, empty, and loading states.

Provides reusable components for displaying errors, partial-failure notices,
write outcomes, empty states and loading indicators across all pages.
"""

from contextlib import contextmanager
from typing import Iterable, Optional

import streamlit as st

from frytopia.views import ViewError, WriteResult


def show_error(message: str, hint: Optional[str] = None) -> None:
    """
    Display a standardized error message with optional hint.

    Args:
        message: Main error message to display
        hint: Optional hint text to help users resolve the issue
    """
    st.error(f"⚠️ {message}")
    if hint:
        st.caption(f"💡 {hint}")


def show_view_errors(errors: Iterable[ViewError]) -> None:
    """
    Summarize fetch failures that degraded a page without blanking it.

    Rating failures are grouped into one notice; other failures are listed.
    """
    errors = list(errors)
    if not errors:
        return
    rating_failures = [e for e in errors if e.operation == "list_ratings"]
    others = [e for e in errors if e.operation != "list_ratings"]
    if rating_failures:
        st.warning(
            f"⭐ Ratings could not be loaded for {len(rating_failures)} recipe(s); "
            "they show without a rating for now."
        )
    for error in others:
        st.warning(f"⚠️ {error.operation}: {error.message}")


def show_write_result(result: WriteResult) -> None:
    """Show the outcome of a favorite toggle, rating or profile save."""
    if result.ok:
        st.success(f"✅ {result.message}")
    else:
        st.error(f"⚠️ {result.message}")


def show_empty_state(
    title: str,
    subtitle: Optional[str] = None,
    action_label: str = "Browse recipes",
    action_page_path: Optional[str] = None,
) -> None:
    """
    Display a standardized empty state with optional action button.

    Args:
        title: Main empty state title
        subtitle: Optional subtitle/description text
        action_label: Label for the action button
        action_page_path: Optional page path to navigate to when button is clicked
    """
    st.info(f"📭 **{title}**")
    if subtitle:
        st.caption(subtitle)

    if action_page_path:
        if st.button(action_label, use_container_width=True, type="primary"):
            st.switch_page(action_page_path)


@contextmanager
def working_spinner(label: str = "Working…"):
    """
    Context manager wrapper for standardized loading spinners.

    Usage:
        with working_spinner("Loading recipes…"):
            result = build_catalog_view(client, session)
    """
    with st.spinner(label):
        yield
