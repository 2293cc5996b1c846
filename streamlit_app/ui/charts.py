"""
Chart builders for the recipe pages.

All charts share the same quiet, modern theme.
"""

from typing import Dict

import altair as alt
import pandas as pd


# Muted palette with a warm accent
COLORS = {
    "primary": "#f59e0b",      # Amber
    "secondary": "#64748b",    # Slate gray
    "text": "#1e293b",         # Dark slate
    "background": "#ffffff",   # White
    "grid": "#f1f5f9",         # Very light gray
}


def apply_modern_theme(chart: alt.Chart) -> alt.Chart:
    """
    Apply a unified modern theme to an Altair chart.

    Args:
        chart: Altair chart to theme

    Returns:
        Themed chart with consistent styling
    """
    return chart.configure_view(
        strokeWidth=0,
        fill=COLORS["background"],
    ).configure_axis(
        grid=True,
        gridColor=COLORS["grid"],
        gridOpacity=0.3,
        domain=False,
        labelColor=COLORS["text"],
        labelFontSize=11,
        titleColor=COLORS["text"],
        titleFontSize=12,
        titleFontWeight="normal",
        ticks=False,
    ).configure(
        padding={"left": 10, "top": 10, "right": 10, "bottom": 10},
        background=COLORS["background"],
    )


def rating_distribution_frame(distribution: Dict[int, int]) -> pd.DataFrame:
    """
    Turn a score -> count mapping into a frame ordered 5 stars first.

    Returns:
        DataFrame with columns: stars (label), score, count, share (0..1)
    """
    total = sum(distribution.values())
    rows = [
        {
            "stars": f"{score} ★",
            "score": score,
            "count": count,
            "share": (count / total) if total else 0.0,
        }
        for score, count in sorted(distribution.items(), reverse=True)
    ]
    return pd.DataFrame(rows, columns=["stars", "score", "count", "share"])


def build_rating_distribution(distribution: Dict[int, int]) -> alt.Chart:
    """
    Build a horizontal bar chart of how many ratings each star level received.

    Args:
        distribution: Mapping of score (1..5) to count, see frytopia.ratings.score_distribution

    Returns:
        Themed bar chart
    """
    df = rating_distribution_frame(distribution)
    chart = alt.Chart(df).mark_bar(
        cornerRadiusEnd=4,
        color=COLORS["primary"],
    ).encode(
        y=alt.Y("stars:N", sort=alt.SortField("score", order="descending"), title=None),
        x=alt.X("count:Q", title="Ratings", axis=alt.Axis(tickMinStep=1)),
        tooltip=[
            alt.Tooltip("stars:N", title="Stars"),
            alt.Tooltip("count:Q", title="Ratings"),
            alt.Tooltip("share:Q", title="Share", format=".0%"),
        ],
    ).properties(
        height=180,
    )
    return apply_modern_theme(chart)
