"""Browser-backed device capabilities for the Streamlit app.

Streamlit answers device requests on a later rerun, so each capability keeps
its pending callbacks and the page calls ``poll`` on every run until the
browser has replied.
"""
from __future__ import annotations

import io
import logging
from datetime import datetime, timezone
from typing import Any, Callable, MutableMapping

import streamlit as st
from PIL import Image, UnidentifiedImageError
from streamlit_js_eval import get_geolocation, streamlit_js_eval

from capabilities import (
    PERMISSION_DENIED,
    POSITION_UNAVAILABLE,
    DestinationType,
    PictureCallback,
    PictureErrorCallback,
    PictureSourceType,
    Position,
    PositionCallback,
    PositionError,
    PositionErrorCallback,
)
from device_files import FileSystemError, LocalFileSystem
from session_proxy import GeoPictureSessionProxy

logger = logging.getLogger(__name__)

LOADING_MESSAGE = "Sending your post…"


def parse_geolocation(result: Any) -> Position | PositionError | None:
    """Turn a ``get_geolocation`` reply into a position, an error or ``None`` (no reply yet)."""

    if not result:
        return None
    if not isinstance(result, dict):
        return PositionError(POSITION_UNAVAILABLE, str(result))
    error = result.get("error")
    if error:
        if isinstance(error, dict):
            return PositionError(int(error.get("code") or POSITION_UNAVAILABLE), str(error.get("message") or ""))
        return PositionError(PERMISSION_DENIED, str(error))
    coords = result.get("coords") or {}
    latitude = coords.get("latitude")
    longitude = coords.get("longitude")
    if latitude is None or longitude is None:
        return PositionError(POSITION_UNAVAILABLE, "The browser returned no coordinates.")
    accuracy = coords.get("accuracy")
    return Position(float(latitude), float(longitude), float(accuracy) if accuracy is not None else None)


def store_capture(
    file_system: LocalFileSystem,
    data: bytes,
    *,
    quality: int,
    name: str | None = None,
) -> str:
    """Save a camera shot as JPEG under ``/tmp`` and return its file URI."""

    if name is None:
        name = datetime.now(timezone.utc).strftime("picture_%Y%m%d%H%M%S%f.jpg")
    directory = file_system.root.get_directory("tmp", create=True)
    entry = directory.get_file(name, create=True)
    with Image.open(io.BytesIO(data)) as image:
        image.convert("RGB").save(entry.path, format="JPEG", quality=quality)
    return entry.path.as_uri()


class StreamlitNotifier:
    """Queue alerts and vibrations in session state and render them on the next run."""

    def __init__(self, backing: MutableMapping[str, Any]) -> None:
        self._proxy = GeoPictureSessionProxy(backing)
        self._loading: Any = None

    def alert(self, message: str, title: str = "Drupal", on_dismiss: Callable[[], None] | None = None) -> None:
        self._proxy.push_alert(
            {"id": self._next("alert_seq"), "message": message, "title": title, "on_dismiss": on_dismiss}
        )

    def vibrate(self, milliseconds: int) -> None:
        self._proxy.setdefault("pending_vibrations", []).append(int(milliseconds))

    def show_loading(self) -> None:
        self._loading = st.empty()
        self._loading.info(LOADING_MESSAGE)

    def hide_loading(self) -> None:
        if self._loading is not None:
            self._loading.empty()
            self._loading = None

    def _next(self, counter: str) -> int:
        value = int(self._proxy.get(counter) or 0) + 1
        self._proxy[counter] = value
        return value

    def dismiss(self) -> None:
        alert = self._proxy.pop_alert()
        if alert and alert.get("on_dismiss") is not None:
            alert["on_dismiss"]()

    def render(self) -> None:
        for milliseconds in self._proxy.get("pending_vibrations") or []:
            streamlit_js_eval(
                js_expressions=f"window.parent.navigator.vibrate && window.parent.navigator.vibrate({milliseconds})",
                want_output=False,
                key=f"vibrate_{self._next('vibration_seq')}",
            )
        self._proxy["pending_vibrations"] = []

        if not self._proxy.alerts:
            return
        alert = self._proxy.alerts[0]
        with st.container(border=True):
            st.markdown(f"**{alert['title']}**")
            st.write(alert["message"])
            st.button("OK", key=f"alert_ok_{alert['id']}", on_click=self.dismiss)


class BrowserGeolocation:
    def __init__(self) -> None:
        self._pending: tuple[PositionCallback, PositionErrorCallback] | None = None
        self._request = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def get_current_position(
        self,
        on_success: PositionCallback,
        on_error: PositionErrorCallback,
        *,
        enable_high_accuracy: bool = True,
    ) -> None:
        # The browser component always asks for its best fix.
        self._request += 1
        self._pending = (on_success, on_error)

    def poll(self) -> bool:
        """Render the geolocation component; return True once callbacks ran."""

        if self._pending is None:
            return False
        outcome = parse_geolocation(get_geolocation(component_key=f"geolocation_{self._request}"))
        if outcome is None:
            return False
        on_success, on_error = self._pending
        self._pending = None
        if isinstance(outcome, Position):
            on_success(outcome)
        else:
            on_error(outcome)
        return True


class StreamlitCamera:
    def __init__(self, file_system: LocalFileSystem) -> None:
        self.file_system = file_system
        self._pending: tuple[PictureCallback, PictureErrorCallback] | None = None
        self._quality = 50
        self._request = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def get_picture(
        self,
        on_success: PictureCallback,
        on_error: PictureErrorCallback,
        *,
        quality: int,
        destination_type: DestinationType,
        source_type: PictureSourceType,
    ) -> None:
        if destination_type is not DestinationType.FILE_URI or source_type is not PictureSourceType.CAMERA:
            on_error("Only camera shots saved as files are available in the browser.")
            return
        self._request += 1
        self._quality = quality
        self._pending = (on_success, on_error)

    def cancel(self) -> None:
        if self._pending is not None:
            _, on_error = self._pending
            self._pending = None
            on_error("Camera cancelled.")

    def poll(self) -> bool:
        """Render the camera widget; return True once a shot was delivered."""

        if self._pending is None:
            return False
        shot = st.camera_input("Take a picture", key=f"camera_{self._request}")
        st.button("Cancel", key=f"camera_cancel_{self._request}", on_click=self.cancel)
        if shot is None:
            return False
        on_success, on_error = self._pending
        self._pending = None
        try:
            uri = store_capture(self.file_system, shot.getvalue(), quality=self._quality)
        except (FileSystemError, OSError, UnidentifiedImageError) as exc:
            logger.warning("Could not store camera shot: %s", exc)
            on_error(str(exc))
            return True
        on_success(uri)
        return True


__all__ = [
    "BrowserGeolocation",
    "LOADING_MESSAGE",
    "StreamlitCamera",
    "StreamlitNotifier",
    "parse_geolocation",
    "store_capture",
]
