"""Location page: refresh the device position and edit the address."""
from __future__ import annotations

import streamlit as st

from app_constants import PAGE_HOME
from services.container import GeoPictureServices
from session_state import go_page
from ui.fields import render_cached_input

_LABELS = {
    "street": "Street",
    "city": "City",
    "province": "Province",
    "postal_code": "Postal code",
}


def _refresh(services: GeoPictureServices) -> None:
    services.location.refresh()


def render_location_page(services: GeoPictureServices) -> None:
    st.subheader("Location")

    resolver = services.location
    pending = services.geolocation.pending
    st.button(
        "📍 Refresh location",
        width='stretch',
        disabled=pending,
        on_click=_refresh,
        args=(services,),
    )
    if pending:
        st.caption("Waiting for the browser to share its position…")
    elif resolver.last_error is not None:
        st.warning(f"Location unavailable: {resolver.last_error.message}")
    if resolver.geocoder is None:
        st.caption("Add a Google Maps API key in the options to fill in the address automatically.")

    c1, c2 = st.columns(2)
    with c1:
        render_cached_input(services, "Latitude", "latitude")
    with c2:
        render_cached_input(services, "Longitude", "longitude")
    for key, label in _LABELS.items():
        render_cached_input(services, label, key)

    st.markdown(f"**{resolver.summary()}**")

    if st.button("← Back", width='stretch'):
        go_page(PAGE_HOME)
        st.rerun()


__all__ = ["render_location_page"]
