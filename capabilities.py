"""Device capabilities consumed by the services.

The services only talk to these protocols; ``device_bridge`` provides the
browser-backed implementations used by the Streamlit app and the tests provide
fakes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Protocol


class DestinationType(IntEnum):
    DATA_URL = 0
    FILE_URI = 1


class PictureSourceType(IntEnum):
    PHOTOLIBRARY = 0
    CAMERA = 1
    SAVEDPHOTOALBUM = 2


@dataclass(frozen=True, slots=True)
class Position:
    latitude: float
    longitude: float
    accuracy: float | None = None


@dataclass(frozen=True, slots=True)
class PositionError:
    code: int
    message: str


PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3

PositionCallback = Callable[[Position], None]
PositionErrorCallback = Callable[[PositionError], None]
PictureCallback = Callable[[str], None]
PictureErrorCallback = Callable[[str], None]


class GeolocationService(Protocol):
    def get_current_position(
        self,
        on_success: PositionCallback,
        on_error: PositionErrorCallback,
        *,
        enable_high_accuracy: bool = True,
    ) -> None: ...


class CameraService(Protocol):
    def get_picture(
        self,
        on_success: PictureCallback,
        on_error: PictureErrorCallback,
        *,
        quality: int,
        destination_type: DestinationType,
        source_type: PictureSourceType,
    ) -> None: ...


class Notifier(Protocol):
    """User-facing feedback: alerts, haptics and the loading indicator."""

    def alert(self, message: str, title: str = "Drupal", on_dismiss: Callable[[], None] | None = None) -> None: ...

    def vibrate(self, milliseconds: int) -> None: ...

    def show_loading(self) -> None: ...

    def hide_loading(self) -> None: ...


__all__ = [
    "CameraService",
    "DestinationType",
    "GeolocationService",
    "Notifier",
    "PERMISSION_DENIED",
    "POSITION_UNAVAILABLE",
    "PictureCallback",
    "PictureErrorCallback",
    "PictureSourceType",
    "Position",
    "PositionCallback",
    "PositionError",
    "PositionErrorCallback",
    "TIMEOUT",
]
