"""
Global CSS Styling for Frytopia.

This module provides load_global_styles() to inject consistent styling
across all pages. Focuses on typography, recipe cards, star ratings and
the pagination bar.
"""

import streamlit as st


def load_global_styles() -> None:
    """
    Inject global CSS styles for the Frytopia app.

    This function:
    - Imports Google Fonts (Nunito) for friendly typography
    - Styles recipe cards, difficulty pills and star bars
    - Creates a slightly narrower content width on large screens
    - Styles the footer shared by every page
    """
    css = """
    <style>
        @import url('https://fonts.googleapis.com/css2?family=Nunito:wght@400;600;700&display=swap');

        /* Global font family */
        html, body, [class*="css"] {
            font-family: 'Nunito', 'sans serif' !important;
        }

        h1, h2, h3, h4, h5, h6 {
            font-weight: 600 !important;
            letter-spacing: 0.02em !important;
        }

        h1 {
            font-size: 2.5rem !important;
            margin-bottom: 1rem !important;
        }

        h2 {
            font-size: 2rem !important;
            margin-top: 0.5rem !important;
            margin-bottom: 0.5rem !important;
        }

        hr {
            margin-top: 1rem !important;
            margin-bottom: 1rem !important;
        }

        /* Buttons - rounded pills */
        .stButton > button {
            border-radius: 50px !important;
            box-shadow: 0 2px 6px rgba(217, 119, 6, 0.12) !important;
            transition: all 0.3s ease !important;
            font-weight: 600 !important;
        }

        .stButton > button:hover {
            box-shadow: 0 3px 10px rgba(217, 119, 6, 0.2) !important;
            transform: translateY(-1px) !important;
        }

        /* Base card */
        .fry-card {
            border-radius: 12px !important;
            padding: 1rem 1.25rem !important;
            background-color: #ffffff !important;
            border: 1px solid rgba(217, 119, 6, 0.12) !important;
            margin-bottom: 1rem !important;
        }

        .fry-card--sidebar {
            padding: 0.75rem 0.875rem !important;
        }

        /* Recipe card images */
        .fry-recipe-card img {
            border-radius: 18px !important;
            max-height: 200px !important;
            object-fit: cover !important;
        }

        .fry-recipe-title {
            font-size: 1.15rem;
            font-weight: 700;
            margin: 0.5rem 0 0.25rem 0;
        }

        .fry-recipe-description {
            color: #57534e;
            font-size: 0.9rem;
            min-height: 2.8em;
        }

        /* Star bar */
        .fry-stars {
            color: #f59e0b;
            font-size: 1.1rem;
            letter-spacing: 0.05em;
        }

        .fry-stars-caption {
            color: #78716c;
            font-size: 0.85rem;
            margin-left: 0.35rem;
        }

        /* Difficulty pills */
        .fry-pill {
            display: inline-block;
            padding: 0.2rem 0.7rem;
            border-radius: 50px;
            font-size: 0.75rem;
            font-weight: 600;
            margin: 0 0.25rem 0.25rem 0;
            background: #fef3c7;
            color: #92400e;
        }

        .fry-pill--easy {
            background: #dcfce7;
            color: #166534;
        }

        .fry-pill--medium {
            background: #fef9c3;
            color: #854d0e;
        }

        .fry-pill--hard {
            background: #fee2e2;
            color: #991b1b;
        }

        /* Main app container */
        .main .block-container {
            max-width: 1200px !important;
            padding-top: 1.5rem !important;
            padding-bottom: 2.5rem !important;
        }

        [data-testid="stSidebar"] {
            padding-top: 1rem !important;
        }

        /* Page header */
        .fry-page-header {
            margin-bottom: 1.25rem !important;
        }

        .fry-page-header .subtitle {
            color: #666 !important;
            font-size: 1rem !important;
        }

        .fry-section-caption {
            color: #666 !important;
            font-size: 0.9rem !important;
            margin-bottom: 0.75rem !important;
        }

        /* Pagination */
        .fry-page-status {
            text-align: center;
            color: #78716c;
            font-size: 0.85rem;
            padding-top: 0.5rem;
        }

        /* Footer */
        .fry-footer {
            margin-top: 2rem !important;
            padding: 2rem 0 1.5rem 0 !important;
            background: linear-gradient(180deg, #fef3c7 0%, #fde68a 100%) !important;
            border-top-left-radius: 24px !important;
            border-top-right-radius: 24px !important;
        }

        .fry-footer-inner {
            max-width: 1100px !important;
            margin: 0 auto !important;
            display: grid !important;
            grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)) !important;
            gap: 1.5rem !important;
            font-size: 0.9rem !important;
        }

        .fry-footer-col h4,
        .fry-footer-col h5 {
            margin-bottom: 0.5rem !important;
            font-weight: 700 !important;
        }

        .fry-footer-col ul {
            list-style-type: none !important;
            padding-left: 0 !important;
            margin: 0 !important;
        }

        .fry-footer-pill {
            display: inline-block !important;
            padding: 0.2rem 0.6rem !important;
            border-radius: 999px !important;
            background-color: #b45309 !important;
            color: #ffffff !important;
            font-size: 0.8rem !important;
        }
    </style>
    """
    st.markdown(css, unsafe_allow_html=True)
