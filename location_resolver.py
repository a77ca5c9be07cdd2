"""Device position lookup and optional reverse geocoding into a location draft."""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Callable, Protocol

from capabilities import GeolocationService, Position, PositionError
from geocoder import GeocodingError, PostalAddress

logger = logging.getLogger(__name__)


class ReverseGeocoder(Protocol):
    def reverse(self, latitude: float, longitude: float) -> PostalAddress: ...


def format_summary(street: str, postal_code: str, city: str) -> str:
    return f"{street}, {postal_code} {city}"


@dataclass(slots=True)
class LocationDraft:
    """Editable location fields; every value is kept as entered text."""

    latitude: str = ""
    longitude: str = ""
    street: str = ""
    city: str = ""
    province: str = ""
    postal_code: str = ""

    @property
    def summary(self) -> str:
        return format_summary(self.street, self.postal_code, self.city)

    def as_dict(self) -> dict[str, str]:
        return asdict(self)

    def update(self, **fields: str) -> None:
        for key, value in fields.items():
            if key not in self.__dataclass_fields__:
                raise KeyError(key)
            setattr(self, key, "" if value is None else str(value))


class LocationResolver:
    """Keep a ``LocationDraft`` in sync with the device position.

    Each ``refresh`` issues one high-accuracy fix request. Requests carry no
    identity, so when several are outstanding the last one to answer wins.
    """

    def __init__(
        self,
        geolocation: GeolocationService,
        *,
        draft: LocationDraft | None = None,
        geocoder: ReverseGeocoder | None = None,
        on_update: Callable[[LocationDraft], None] | None = None,
    ) -> None:
        self.geolocation = geolocation
        self.draft = draft if draft is not None else LocationDraft()
        self.geocoder = geocoder
        self.on_update = on_update
        self.last_position: Position | None = None
        self.last_error: PositionError | None = None

    def refresh(self) -> None:
        self.geolocation.get_current_position(
            self._handle_position,
            self._handle_error,
            enable_high_accuracy=True,
        )

    def summary(self) -> str:
        return self.draft.summary

    def set_geocoder(self, geocoder: ReverseGeocoder | None) -> None:
        """Install a geocoder; a position obtained earlier is geocoded right away."""

        self.geocoder = geocoder
        if geocoder is not None and self.last_position is not None:
            self._geocode(self.last_position)
            self._notify()

    def _handle_position(self, position: Position) -> None:
        self.last_position = position
        self.last_error = None
        self.draft.latitude = str(position.latitude)
        self.draft.longitude = str(position.longitude)
        self._geocode(position)
        self._notify()

    def _handle_error(self, error: PositionError) -> None:
        self.last_error = error
        logger.warning("Location unavailable (code %s): %s", error.code, error.message)

    def _geocode(self, position: Position) -> None:
        if self.geocoder is None:
            return
        try:
            address = self.geocoder.reverse(position.latitude, position.longitude)
        except GeocodingError as exc:
            logger.info("Reverse geocoding skipped: %s", exc)
            return
        self.draft.street = address.street
        self.draft.city = address.city
        self.draft.province = address.province
        self.draft.postal_code = address.postal_code

    def _notify(self) -> None:
        if self.on_update is not None:
            self.on_update(self.draft)


__all__ = [
    "LocationDraft",
    "LocationResolver",
    "ReverseGeocoder",
    "format_summary",
]
