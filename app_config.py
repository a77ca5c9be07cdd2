"""Environment-driven configuration for the GeoPicture app."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_GEOCODER_REGION = "US"


def _normalize_base_url(raw: str) -> str:
    url = raw.strip()
    if url and not url.endswith("/"):
        url += "/"
    return url


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return DEFAULT_HTTP_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_HTTP_TIMEOUT
    return value if value > 0 else DEFAULT_HTTP_TIMEOUT


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Settings shared by the services and the Streamlit views."""

    drupal_base_url: str
    google_maps_api_key: str | None
    geocoder_region: str
    field_cache_path: Path
    device_files_root: Path
    http_timeout: float

    @property
    def geocoding_enabled(self) -> bool:
        return bool(self.google_maps_api_key)

    @classmethod
    def from_env(cls) -> "AppConfig":
        api_key = (os.getenv("GOOGLE_MAPS_API_KEY") or "").strip()
        region = (os.getenv("GEOCODER_REGION") or "").strip().upper()
        return cls(
            drupal_base_url=_normalize_base_url(os.getenv("DRUPAL_BASE_URL") or ""),
            google_maps_api_key=api_key or None,
            geocoder_region=region or DEFAULT_GEOCODER_REGION,
            field_cache_path=Path((os.getenv("FIELD_CACHE_PATH") or "field_cache.db").strip()),
            device_files_root=Path((os.getenv("DEVICE_FILES_ROOT") or "device_files").strip()),
            http_timeout=_parse_timeout(os.getenv("HTTP_TIMEOUT_SECONDS")),
        )


__all__ = ["AppConfig", "DEFAULT_GEOCODER_REGION", "DEFAULT_HTTP_TIMEOUT"]
