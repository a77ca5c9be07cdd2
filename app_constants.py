"""Shared constants for the GeoPicture views and services."""
from __future__ import annotations

PLACEHOLDER_IMAGE = "images/entry_no_icon.png"
EMPTY_DATA_URL = "data:,"

ALLOWED_PICTURE_TYPES = ("image/gif", "image/jpeg", "image/png")
PICTURE_QUALITY = 50
MAX_CANVAS_DIMENSION = 2048

PAGE_HOME = "home"
PAGE_PICTURE = "picture"
PAGE_LOCATION = "location"
PAGE_OPTIONS = "options"
PAGES = (PAGE_HOME, PAGE_PICTURE, PAGE_LOCATION, PAGE_OPTIONS)

LOCATION_FIELDS = ("latitude", "longitude", "street", "city", "province", "postal_code")

# Widgets whose values survive app restarts, keyed by their storage key.
CACHED_FIELD_KEYS = ("base_url", "name", "street", "city", "province", "postal_code")

EVENT_LOGIN = "drupal_login"
EVENT_LOGOUT = "drupal_logout"

NODE_TYPE = "blog"
NODE_LANGUAGE = "und"


__all__ = [
    "ALLOWED_PICTURE_TYPES",
    "CACHED_FIELD_KEYS",
    "EMPTY_DATA_URL",
    "EVENT_LOGIN",
    "EVENT_LOGOUT",
    "LOCATION_FIELDS",
    "MAX_CANVAS_DIMENSION",
    "NODE_LANGUAGE",
    "NODE_TYPE",
    "PAGES",
    "PAGE_HOME",
    "PAGE_LOCATION",
    "PAGE_OPTIONS",
    "PAGE_PICTURE",
    "PICTURE_QUALITY",
    "PLACEHOLDER_IMAGE",
]
