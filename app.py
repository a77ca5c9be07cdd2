# app.py
from __future__ import annotations

import logging

import streamlit as st

from app_config import AppConfig
from app_constants import PAGE_HOME, PAGE_LOCATION, PAGE_OPTIONS, PAGE_PICTURE
from services.container import GeoPictureServices, build_services
from session_state import ensure_state, go_page, pull_location_from_widgets
from ui.home import render_home_screen
from ui.location import render_location_page
from ui.options import render_options_page
from ui.picture import render_picture_page
from ui.styles import render_app_styles

st.set_page_config(page_title="Drupal GeoPicture", page_icon="📍", layout="centered")

logger = logging.getLogger(__name__)

_PAGE_RENDERERS = {
    PAGE_HOME: render_home_screen,
    PAGE_PICTURE: render_picture_page,
    PAGE_LOCATION: render_location_page,
    PAGE_OPTIONS: render_options_page,
}


@st.cache_resource
def load_config() -> AppConfig:
    return AppConfig.from_env()


def _start_session(services: GeoPictureServices) -> None:
    """First run of a browser session: restore cached fields and connect."""

    restored = services.field_cache.restore(st.session_state)
    if restored:
        logger.info("Restored cached fields: %s", ", ".join(sorted(restored)))
    pull_location_from_widgets()
    base_url = st.session_state.get("base_url") or services.config.drupal_base_url
    st.session_state["base_url"] = base_url
    if base_url:
        services.session_client.initialize(base_url)
    services.location.refresh()
    st.session_state["fields_restored"] = True


def get_services() -> GeoPictureServices:
    services = st.session_state.get("services")
    if isinstance(services, GeoPictureServices):
        return services
    services = build_services(load_config(), st.session_state, navigate=go_page)
    st.session_state["services"] = services
    return services


session_proxy = ensure_state()
services = get_services()
if not session_proxy.get("fields_restored"):
    _start_session(services)

# Device replies arrive on later reruns.
if services.geolocation.poll():
    st.rerun()

render_app_styles()
st.title("📍 Drupal GeoPicture")
services.notifier.render()

_PAGE_RENDERERS[session_proxy.page](services)
