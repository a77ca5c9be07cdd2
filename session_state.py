"""Session state helpers for the Streamlit app."""
from __future__ import annotations

from typing import Any

import streamlit as st

from app_constants import LOCATION_FIELDS, PAGE_HOME
from location_resolver import LocationDraft
from picture_acquirer import PictureDraft
from session_proxy import GeoPictureSessionProxy


_STATE_DEFAULTS: dict[str, Any] = {
    # Navigation
    "page": PAGE_HOME,

    # Post form
    "title": "",
    "body": "",

    # Options form
    "base_url": "",
    "name": "",
    "password": "",
    "maps_api_key": "",

    # Location form; mirrors LocationDraft
    "latitude": "",
    "longitude": "",
    "street": "",
    "city": "",
    "province": "",
    "postal_code": "",

    # UI helper flags
    "fields_restored": False,
    "submission_state": "idle",
}


def _proxy() -> GeoPictureSessionProxy:
    """Return a proxy around the current Streamlit session state."""

    return GeoPictureSessionProxy(st.session_state)


def ensure_state() -> GeoPictureSessionProxy:
    proxy = _proxy()
    for key, default in _STATE_DEFAULTS.items():
        proxy.setdefault(key, default)

    if not isinstance(proxy.get("picture_draft"), PictureDraft):
        proxy["picture_draft"] = PictureDraft()
    if not isinstance(proxy.get("location_draft"), LocationDraft):
        proxy["location_draft"] = LocationDraft()
    proxy.setdefault("pending_alerts", [])
    return proxy


def go_page(page: str) -> None:
    _proxy().page = page


def pull_location_from_widgets() -> LocationDraft:
    """Copy the location widget keys back into the draft."""

    proxy = ensure_state()
    draft = proxy["location_draft"]
    draft.update(**{key: proxy.get(key) or "" for key in LOCATION_FIELDS})
    return draft


__all__ = [
    "ensure_state",
    "go_page",
    "pull_location_from_widgets",
    "GeoPictureSessionProxy",
]
