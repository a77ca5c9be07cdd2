"""Options page: Drupal endpoint, account and geocoding key."""
from __future__ import annotations

import streamlit as st

from app_constants import PAGE_HOME
from services.container import GeoPictureServices, build_geocoder
from session_state import go_page
from ui.fields import render_cached_input, store_field


def _change_endpoint(services: GeoPictureServices) -> None:
    store_field(services, "base_url")
    services.session_client.initialize((st.session_state.get("base_url") or "").strip())


def _change_maps_key(services: GeoPictureServices) -> None:
    geocoder = build_geocoder(services.config, st.session_state.get("maps_api_key"))
    services.location.set_geocoder(geocoder)


def _login(services: GeoPictureServices) -> None:
    name = (st.session_state.get("name") or "").strip()
    password = st.session_state.get("password") or ""
    if services.session_client.login(name, password) is not None:
        st.session_state["password"] = ""
        go_page(PAGE_HOME)


def _logout(services: GeoPictureServices) -> None:
    services.session_client.logout()


def render_options_page(services: GeoPictureServices) -> None:
    st.subheader("Options")

    st.text_input(
        "Drupal endpoint",
        key="base_url",
        placeholder="https://example.com/",
        on_change=_change_endpoint,
        args=(services,),
    )
    session_client = services.session_client
    if session_client.last_error:
        st.warning(session_client.last_error)

    if session_client.is_authenticated():
        st.success(f"Logged in as **{session_client.current_user.name}**.")
        st.button("Logout", width='stretch', on_click=_logout, args=(services,))
    else:
        render_cached_input(services, "User name", "name")
        st.text_input("Password", key="password", type="password")
        st.button("Login", type="primary", width='stretch', on_click=_login, args=(services,))

    st.text_input(
        "Google Maps API key",
        key="maps_api_key",
        type="password",
        help="Used to fill in the address from the device position. Leave empty to use the server key.",
        on_change=_change_maps_key,
        args=(services,),
    )

    if st.button("← Back", width='stretch'):
        go_page(PAGE_HOME)
        st.rerun()


__all__ = ["render_options_page"]
