"""Styling helpers for Streamlit layouts."""
from __future__ import annotations

import streamlit as st


def render_app_styles() -> None:
    """Apply the global card layout used by every page."""
    base_css = """
    <style>
    .stApp {
        background: linear-gradient(180deg, #eef5ef 0%, #f8fbf6 68%, #ffffff 100%);
    }
    [data-testid="stHeader"] {
        background: rgba(0, 0, 0, 0);
    }
    [data-testid="stAppViewContainer"] > .main > div:first-child {
        background-color: rgba(255, 255, 255, 0.92);
        border-radius: 16px;
        padding: 1.25rem 1.5rem;
        box-shadow: 0 12px 32px rgba(0, 0, 0, 0.10);
        max-width: 640px;
    }
    [data-testid="stImage"] img {
        border-radius: 12px;
        max-height: 360px;
        object-fit: contain;
    }
    @media (max-width: 640px) {
        [data-testid="stAppViewContainer"] > .main > div:first-child {
            padding: 0.9rem 0.8rem;
        }
    }
    </style>
    """
    st.markdown(base_css, unsafe_allow_html=True)


__all__ = ["render_app_styles"]
