"""
Reusable UI Components for the recipe listings.

This module provides the building blocks shared by the catalog, favorites and
profile pages:

- load_listing(): fetch a page's ViewResult once and keep it in its ViewSlot
- render_listing_controls(): search box, sort select and optional difficulty filter
- render_recipe_grid(): one page of recipe cards
- render_pagination(): previous/next buttons with up to three page numbers
- render_account_sidebar(): sign-in / sign-out box shown on every page

Favorite toggles go through frytopia.views.toggle_favorite, then every listing
is invalidated and the script reruns, so the cards always show what the
backend confirmed.
"""

from html import escape
from typing import Callable, List, Optional, Sequence

import streamlit as st

from frytopia.client import FrytopiaClient
from frytopia.config import configure_logging
from frytopia.models import Difficulty, ViewItem
from frytopia.pipeline import QueryResult, SortKey, page_numbers
from frytopia.session import SessionContext
from frytopia.views import ViewResult, toggle_favorite
from ui.feedback import show_view_errors, show_write_result, working_spinner
from ui.layout import card
from ui.style import difficulty_pill, stars_html
from ui.styles import load_global_styles
from utils.api_client import lookup_user
from utils.session import end_session, get_session, get_user_name, start_session
from utils.state import (
    ListingState,
    get_listing_state,
    get_view_slot,
    invalidate_views,
    pop_flash,
    set_flash,
    set_listing_state,
)

CATALOG_PAGE = "pages/01_🍟_Recipes.py"
DETAIL_PAGE = "pages/02_📖_Recipe_Detail.py"
FAVORITES_PAGE = "pages/03_💛_Favorites.py"
PROFILE_PAGE = "pages/04_👤_Profile.py"
EDIT_PROFILE_PAGE = "pages/05_✏️_Edit_Profile.py"

SELECTED_RECIPE_KEY = "selected_recipe_id"
SELECTED_PROFILE_KEY = "selected_profile_id"

GRID_COLUMNS = 3


def open_recipe(recipe_id: int) -> None:
    """Navigate to the detail page of a recipe."""
    st.session_state[SELECTED_RECIPE_KEY] = recipe_id
    st.switch_page(DETAIL_PAGE)


def open_profile(user_id: int) -> None:
    """Navigate to a user's profile page."""
    st.session_state[SELECTED_PROFILE_KEY] = user_id
    st.switch_page(PROFILE_PAGE)


def selected_id(param: str, state_key: str) -> Optional[int]:
    """
    Read an id from the URL query (?recipe_id=3) or, failing that, from session state.

    Returns:
        The id, or None if neither is set or the query value is not a number
    """
    raw = st.query_params.get(param)
    if raw is not None:
        try:
            return int(raw)
        except ValueError:
            return None
    return st.session_state.get(state_key)


def render_flash() -> None:
    """Show the outcome of the write that triggered this rerun, if any."""
    result = pop_flash()
    if result is not None:
        show_write_result(result)


def load_listing(page_key: str, build: Callable[[], ViewResult], label: str = "Loading recipes…") -> ViewResult:
    """
    Get a page's fetched collection, building it only when the slot is empty.

    Args:
        page_key: Unique key of the listing
        build: Zero-argument view builder (e.g., lambda: build_catalog_view(client, session))
        label: Spinner text

    Returns:
        The committed ViewResult. When the primary fetch failed, the previous
        collection (if any) is kept and the failure is in errors.
    """
    slot = get_view_slot(page_key)
    if slot.stale:
        token = slot.begin()
        with working_spinner(label):
            result = build()
        slot.commit(token, result)
    committed = slot.result if slot.result is not None else ViewResult(items=[], primary_ok=False)
    show_view_errors(committed.errors)
    return committed


def render_listing_controls(
    page_key: str,
    sort_options: Sequence[SortKey],
    show_difficulty: bool = False,
    search_placeholder: str = "Search recipes…",
) -> ListingState:
    """
    Render search, sort and (optionally) difficulty controls for a listing.

    Any change resets the listing to page 1.

    Returns:
        The updated ListingState (already stored in session state)
    """
    state = get_listing_state(page_key, default_sort=sort_options[0])
    if state.sort_key not in sort_options:
        state = state.with_controls(sort_key=sort_options[0])

    columns = st.columns([2, 1, 1] if show_difficulty else [2, 1])
    with columns[0]:
        search_text = st.text_input(
            "Search",
            value=state.search_text,
            placeholder=search_placeholder,
            key=f"{page_key}_search",
        )
    with columns[1]:
        sort_key = st.selectbox(
            "Sort by",
            options=list(sort_options),
            index=list(sort_options).index(state.sort_key),
            format_func=lambda key: key.label,
            key=f"{page_key}_sort",
        )
    difficulties = None
    if show_difficulty:
        with columns[2]:
            difficulties = st.multiselect(
                "Difficulty",
                options=list(Difficulty),
                default=sorted(state.difficulties, key=list(Difficulty).index),
                format_func=lambda level: level.value.title(),
                key=f"{page_key}_difficulty",
            )

    state = state.with_controls(search_text=search_text, sort_key=sort_key, difficulties=difficulties)
    set_listing_state(page_key, state)
    return state


def _toggle(client: FrytopiaClient, session: SessionContext, item: ViewItem) -> None:
    result = toggle_favorite(client, session, item.id, item.is_favorite)
    set_flash(result)
    invalidate_views()
    st.rerun()


def recipe_card(
    item: ViewItem,
    client: FrytopiaClient,
    session: SessionContext,
    page_key: str,
) -> None:
    """
    Render one recipe card: image, name, difficulty, cooking time, stars and actions.
    """
    with card(extra_class="fry-recipe-card"):
        image_url = client.media_url(item.image_path)
        if image_url:
            st.image(image_url, use_container_width=True)
        st.markdown(f'<div class="fry-recipe-title">{escape(item.name)}</div>', unsafe_allow_html=True)
        st.markdown(difficulty_pill(item.difficulty), unsafe_allow_html=True)
        st.markdown(
            f'<div class="fry-recipe-description">{escape(item.description or "")}</div>',
            unsafe_allow_html=True,
        )
        st.caption(f"⏱ {item.cooking_time_minutes} min")
        st.markdown(stars_html(item.average_rating), unsafe_allow_html=True)

        view_col, fav_col = st.columns(2)
        with view_col:
            if st.button("View recipe", key=f"{page_key}_view_{item.id}", use_container_width=True):
                open_recipe(item.id)
        with fav_col:
            if session.can_write():
                label = "💛 Saved" if item.is_favorite else "🤍 Save"
                help_text = "Remove from favorites" if item.is_favorite else "Add to favorites"
                if st.button(label, key=f"{page_key}_fav_{item.id}", help=help_text, use_container_width=True):
                    _toggle(client, session, item)


def render_recipe_grid(
    items: List[ViewItem],
    client: FrytopiaClient,
    session: SessionContext,
    page_key: str,
) -> None:
    """Render recipe cards in rows of GRID_COLUMNS."""
    for start in range(0, len(items), GRID_COLUMNS):
        row = items[start:start + GRID_COLUMNS]
        columns = st.columns(GRID_COLUMNS, gap="medium")
        for column, item in zip(columns, row):
            with column:
                recipe_card(item, client, session, page_key)


def render_pagination(page_key: str, result: QueryResult) -> None:
    """
    Render the pagination bar: ‹ Prev, up to three page numbers, Next ›.

    Requests outside [1, total_pages] are ignored by ListingState.with_page.
    """
    current = result.clamped_page
    state = get_listing_state(page_key).with_page(current, result.total_pages)
    numbers = page_numbers(current, result.total_pages)

    columns = st.columns(len(numbers) + 2)
    requested = None
    with columns[0]:
        if st.button("‹ Prev", key=f"{page_key}_prev", disabled=current <= 1, use_container_width=True):
            requested = current - 1
    for column, number in zip(columns[1:-1], numbers):
        with column:
            kind = "primary" if number == current else "secondary"
            if st.button(str(number), key=f"{page_key}_page_{number}", type=kind, use_container_width=True):
                requested = number
    with columns[-1]:
        if st.button(
            "Next ›", key=f"{page_key}_next", disabled=current >= result.total_pages, use_container_width=True
        ):
            requested = current + 1

    st.markdown(
        f'<div class="fry-page-status">Page {current} of {result.total_pages} · {result.total_count} recipes</div>',
        unsafe_allow_html=True,
    )

    if requested is not None:
        moved = state.with_page(requested, result.total_pages)
        if moved.page != state.page:
            set_listing_state(page_key, moved)
            st.rerun()


def render_account_sidebar() -> SessionContext:
    """
    Render the sidebar account box: sign-in by user id, or the signed-in user with a sign-out button.

    Returns:
        The current SessionContext after any sign-in/sign-out on this run
    """
    session = get_session()
    with st.sidebar:
        st.markdown("### 🍟 **Frytopia**")
        st.divider()
        st.markdown('<div class="fry-card fry-card--sidebar">', unsafe_allow_html=True)
        st.markdown("#### Account")
        if session.is_logged_in:
            role = " (admin)" if session.is_admin else ""
            st.markdown(f"Signed in as **{get_user_name() or session.user_id}**{role}")
            if st.button("My profile", key="sidebar_profile", use_container_width=True):
                open_profile(session.user_id)
            if st.button("Sign out", key="sidebar_sign_out", use_container_width=True):
                end_session()
                st.rerun()
        else:
            st.caption("Sign in to save favorites and rate recipes.")
            user_id = st.number_input("User id", min_value=1, step=1, value=None, key="sidebar_user_id")
            if st.button("Sign in", key="sidebar_sign_in", type="primary", use_container_width=True):
                if user_id is None:
                    st.warning("Enter your user id first.")
                else:
                    user = lookup_user(int(user_id))
                    if user is not None:
                        start_session(user)
                        st.rerun()
        st.markdown('</div>', unsafe_allow_html=True)
    return get_session()


def setup_page(title: str, icon: str = "🍟") -> SessionContext:
    """
    Common page preamble: logging, page config, global CSS and the account sidebar.

    Must run before any other Streamlit call on the page.

    Returns:
        The current SessionContext
    """
    configure_logging()
    st.set_page_config(
        page_title=f"{title} · Frytopia",
        page_icon=icon,
        layout="wide",
        initial_sidebar_state="expanded",
    )
    load_global_styles()
    return render_account_sidebar()
