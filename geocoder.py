"""Reverse geocoding through the Google Geocoding web service."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import requests

from app_config import DEFAULT_GEOCODER_REGION, DEFAULT_HTTP_TIMEOUT

logger = logging.getLogger(__name__)

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class GeocodingError(RuntimeError):
    """Raised when a coordinate pair cannot be turned into an address."""

    def __init__(self, message: str, *, status: str | None = None) -> None:
        super().__init__(message)
        self.status = status


@dataclass(frozen=True, slots=True)
class PostalAddress:
    street: str
    city: str
    province: str
    postal_code: str


def _component_map(result: Mapping[str, Any]) -> dict[str, str]:
    """Flatten address components into ``{type: long_name}``; later entries win."""

    address: dict[str, str] = {}
    for component in result.get("address_components") or []:
        if not isinstance(component, Mapping):
            continue
        long_name = str(component.get("long_name") or "")
        for component_type in component.get("types") or []:
            address[str(component_type)] = long_name
    return address


def parse_address(result: Mapping[str, Any]) -> PostalAddress:
    address = _component_map(result)
    street = " ".join(
        part for part in (address.get("route", ""), address.get("street_number", "")) if part
    )
    return PostalAddress(
        street=street,
        city=address.get("locality", ""),
        province=address.get("administrative_area_level_1", ""),
        postal_code=address.get("postal_code", ""),
    )


class GoogleGeocoder:
    """Resolve a latitude/longitude pair to the first matching postal address."""

    def __init__(
        self,
        api_key: str,
        *,
        region: str = DEFAULT_GEOCODER_REGION,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required")
        self.api_key = api_key
        self.region = region
        self.timeout = timeout

    def reverse(self, latitude: float, longitude: float) -> PostalAddress:
        params = {
            "latlng": f"{latitude},{longitude}",
            "key": self.api_key,
            "region": self.region.lower(),
        }
        try:
            response = requests.get(GEOCODE_URL, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise GeocodingError(f"Network error contacting the geocoder: {exc}") from exc

        if response.status_code >= 400:
            raise GeocodingError(f"Geocoder returned HTTP {response.status_code}")
        try:
            data = response.json()
        except ValueError as exc:
            raise GeocodingError("Invalid response from the geocoder (non-JSON body)") from exc

        status = str(data.get("status") or "") if isinstance(data, Mapping) else ""
        results = data.get("results") if isinstance(data, Mapping) else None
        if status != "OK" or not results:
            raise GeocodingError(f"Geocoder failed due to: {status or 'unknown status'}", status=status or None)
        if not isinstance(results, list) or not isinstance(results[0], Mapping):
            raise GeocodingError("Invalid response from the geocoder (malformed results)")

        address = parse_address(results[0])
        logger.debug("Reverse geocoded %s,%s to %s", latitude, longitude, address)
        return address


__all__ = ["GEOCODE_URL", "GeocodingError", "GoogleGeocoder", "PostalAddress", "parse_address"]
