"""
Small HTML helpers shared by the pages: difficulty pills, star bars and the footer.
"""

from html import escape
from typing import Optional

import streamlit as st

from frytopia.models import Difficulty
from frytopia.ratings import format_average, star_string


def difficulty_pill(difficulty: Optional[Difficulty]) -> str:
    """
    Create HTML for a difficulty pill (e.g., "Easy").

    Returns:
        HTML string, or "" when the recipe has no difficulty
    """
    if difficulty is None:
        return ""
    return f'<span class="fry-pill fry-pill--{difficulty.value}">{difficulty.value.title()}</span>'


def stars_html(average: Optional[float], caption: Optional[str] = None) -> str:
    """
    Create HTML for a five-star bar with the formatted average next to it.

    Args:
        average: Average rating, or None when it could not be fetched
        caption: Text after the stars; defaults to format_average(average)
    """
    caption = format_average(average) if caption is None else caption
    return (
        f'<span class="fry-stars">{star_string(average)}</span>'
        f'<span class="fry-stars-caption">{escape(caption)}</span>'
    )


def render_footer() -> None:
    """
    Render a consistent footer across all pages.
    """
    st.markdown(
        """
        <div class="fry-footer">
          <div class="fry-footer-inner">
            <div class="fry-footer-col">
              <h4>Frytopia</h4>
              <p>Crispy, golden recipes shared by the community.</p>
            </div>
            <div class="fry-footer-col">
              <h5>App</h5>
              <ul>
                <li>Browse &amp; search recipes</li>
                <li>Save favorites</li>
                <li>Rate and review</li>
              </ul>
            </div>
            <div class="fry-footer-col">
              <h5>Contact</h5>
              <p><span class="fry-footer-pill">Fried with love 🍟</span></p>
            </div>
          </div>
        </div>
        """,
        unsafe_allow_html=True,
    )
