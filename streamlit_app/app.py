"""
Frytopia - Streamlit Frontend Main Entry Point.

This is the main Streamlit application entry point. It sets up the page configuration
and provides the global layout with the account sidebar.

Note: Multi-page routing is handled automatically by Streamlit via the `pages/` folder.
Files in `pages/` starting with numbered prefixes (e.g., `01_🍟_Recipes.py`) will appear
as pages in the sidebar navigation.
"""

import sys
from pathlib import Path

# Ensure the streamlit_app directory is in the Python path
# This allows imports to work regardless of how the app is run
streamlit_app_dir = Path(__file__).parent
if str(streamlit_app_dir) not in sys.path:
    sys.path.insert(0, str(streamlit_app_dir))

# Add project root to path so we can import frytopia
project_root = streamlit_app_dir.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import config early to load .env file before any other code accesses environment variables
import frytopia.config  # noqa: F401

import streamlit as st

from ui.layout import page_header
from ui.style import render_footer
from utils.ui_components import CATALOG_PAGE, FAVORITES_PAGE, open_profile, setup_page

session = setup_page("Home")

page_header(
    "Frytopia",
    subtitle="Crispy recipes from the community. Browse, save your favorites and rate what you cook.",
)

st.markdown("#### Get started")
cta_col1, cta_col2, cta_col3 = st.columns(3, gap="medium")

with cta_col1:
    if st.button("Browse recipes", use_container_width=True, type="primary"):
        st.switch_page(CATALOG_PAGE)

with cta_col2:
    if st.button("My favorites", use_container_width=True, disabled=not session.is_logged_in):
        st.switch_page(FAVORITES_PAGE)

with cta_col3:
    if st.button("My profile", use_container_width=True, disabled=not session.is_logged_in):
        open_profile(session.user_id)

if not session.is_logged_in:
    st.caption("💡 Sign in from the sidebar to save favorites and leave ratings.")

st.divider()

with st.expander("How it works", expanded=False):
    st.markdown("""
    1. **Browse** – Search every recipe by name or description and sort by popularity, time, name or rating.
    2. **Save** – Keep the recipes you love in your favorites.
    3. **Rate** – Give recipes 1 to 5 stars and leave a comment for other cooks.
    """)

render_footer()
