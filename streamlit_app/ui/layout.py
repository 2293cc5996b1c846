"""
Layout primitives for consistent page structure.

Provides reusable components for page headers, sections, cards, and KPI rows.
"""

from contextlib import contextmanager
from typing import Callable, Optional

import streamlit as st


def _header_block(title: str, subtitle: Optional[str]) -> None:
    st.markdown('<div class="fry-page-header">', unsafe_allow_html=True)
    st.markdown(f"# {title}")
    if subtitle:
        st.markdown(f'<div class="subtitle">{subtitle}</div>', unsafe_allow_html=True)
    st.markdown('</div>', unsafe_allow_html=True)


def page_header(title: str, subtitle: Optional[str] = None, right: Optional[Callable[[], None]] = None) -> None:
    """
    Render a consistent page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional subtitle/description text
        right: Optional callable that renders right-side content (e.g., a refresh button)
    """
    if right is not None:
        col_title, col_right = st.columns([3, 1])
        with col_title:
            _header_block(title, subtitle)
        with col_right:
            right()
    else:
        _header_block(title, subtitle)


def kpi_row(kpis: list[dict]) -> None:
    """
    Render a row of KPI metrics.

    Args:
        kpis: List of dicts with keys:
            - label: KPI label text
            - value: KPI value (number or string)
            - icon: Optional emoji prefix
    """
    cols = st.columns(len(kpis))
    for col, kpi in zip(cols, kpis):
        with col:
            icon = kpi.get("icon", "")
            label = kpi.get("label", "")
            st.metric(label=f"{icon} {label}" if icon else label, value=kpi.get("value", ""))


def section(title: str, caption: Optional[str] = None) -> None:
    """
    Render a section header with optional caption.

    Args:
        title: Section title
        caption: Optional caption/help text below title
    """
    st.markdown(f"## {title}")
    if caption:
        st.markdown(f'<div class="fry-section-caption">{caption}</div>', unsafe_allow_html=True)


@contextmanager
def card(title: Optional[str] = None, extra_class: str = ""):
    """
    Context manager for a card container.

    Usage:
        with card("Card Title"):
            st.write("Card content")

    Args:
        title: Optional card title
        extra_class: Additional CSS class (e.g., "fry-recipe-card")
    """
    st.markdown(f'<div class="fry-card {extra_class}">', unsafe_allow_html=True)
    if title:
        st.markdown(f"### {title}")
    yield
    st.markdown('</div>', unsafe_allow_html=True)
