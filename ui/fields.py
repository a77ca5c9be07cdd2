"""Widget callbacks shared by the form pages."""
from __future__ import annotations

import streamlit as st

from app_constants import LOCATION_FIELDS
from services.container import GeoPictureServices
from session_state import pull_location_from_widgets


def store_field(services: GeoPictureServices, key: str) -> None:
    """``on_change`` callback: mirror a widget value into the field cache."""

    value = st.session_state.get(key, "")
    services.field_cache.store(key, value)
    if key in LOCATION_FIELDS:
        pull_location_from_widgets()


def render_cached_input(services: GeoPictureServices, label: str, key: str, **kwargs) -> str:
    return st.text_input(label, key=key, on_change=store_field, args=(services, key), **kwargs)


__all__ = ["render_cached_input", "store_field"]
