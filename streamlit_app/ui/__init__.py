"""
UI Styling and Components Module.

This module provides global CSS styling and reusable UI components
for the Frytopia Streamlit app.
"""

from ui.style import difficulty_pill, stars_html, render_footer

__all__ = [
    "difficulty_pill",
    "stars_html",
    "render_footer",
]
