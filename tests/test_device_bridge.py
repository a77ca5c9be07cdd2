from __future__ import annotations

import io

from PIL import Image

import device_bridge
from capabilities import PERMISSION_DENIED, POSITION_UNAVAILABLE, DestinationType, PictureSourceType, Position, PositionError
from device_bridge import BrowserGeolocation, StreamlitCamera, StreamlitNotifier, parse_geolocation, store_capture
from device_files import LocalFileSystem


def test_parse_geolocation_variants():
    assert parse_geolocation(None) is None
    assert parse_geolocation(
        {"coords": {"latitude": 50.85, "longitude": 4.35, "accuracy": 12}, "timestamp": 1}
    ) == Position(50.85, 4.35, 12.0)
    assert parse_geolocation({"error": {"code": 1, "message": "User denied Geolocation"}}) == PositionError(
        PERMISSION_DENIED, "User denied Geolocation"
    )
    assert parse_geolocation({"coords": {}}).code == POSITION_UNAVAILABLE


def test_geolocation_poll_delivers_once(monkeypatch):
    replies = [None, {"coords": {"latitude": 1.5, "longitude": 2.5}}]
    keys: list[str] = []

    def fake_get_geolocation(component_key=None):
        keys.append(component_key)
        return replies.pop(0)

    monkeypatch.setattr(device_bridge, "get_geolocation", fake_get_geolocation)
    geolocation = BrowserGeolocation()
    received: list = []

    assert geolocation.poll() is False
    geolocation.get_current_position(received.append, received.append)
    assert geolocation.poll() is False
    assert geolocation.pending is True
    assert geolocation.poll() is True

    assert received == [Position(1.5, 2.5, None)]
    assert geolocation.pending is False
    assert keys == ["geolocation_1", "geolocation_1"]


def test_store_capture_writes_jpeg_under_tmp(tmp_path):
    fs = LocalFileSystem(tmp_path)
    buffer = io.BytesIO()
    Image.new("RGBA", (8, 6), (0, 128, 0, 255)).save(buffer, format="PNG")

    uri = store_capture(fs, buffer.getvalue(), quality=50, name="shot.jpg")

    assert uri.startswith("file://")
    entry = fs.resolve_uri(uri)
    assert entry.full_path == "/tmp/shot.jpg"
    assert entry.read_as_data_url().startswith("data:image/jpeg;base64,")


def test_camera_rejects_sources_other_than_camera(tmp_path):
    camera = StreamlitCamera(LocalFileSystem(tmp_path))
    errors: list[str] = []

    camera.get_picture(
        lambda uri: None,
        errors.append,
        quality=50,
        destination_type=DestinationType.FILE_URI,
        source_type=PictureSourceType.PHOTOLIBRARY,
    )

    assert camera.pending is False
    assert len(errors) == 1


def test_camera_cancel_reports_error(tmp_path):
    camera = StreamlitCamera(LocalFileSystem(tmp_path))
    errors: list[str] = []
    camera.get_picture(
        lambda uri: None,
        errors.append,
        quality=50,
        destination_type=DestinationType.FILE_URI,
        source_type=PictureSourceType.CAMERA,
    )
    assert camera.pending is True

    camera.cancel()

    assert errors == ["Camera cancelled."]
    assert camera.pending is False


def test_notifier_queues_alerts_and_runs_dismiss_callback():
    state: dict = {}
    notifier = StreamlitNotifier(state)
    dismissed: list[str] = []

    notifier.alert("You need to login before posting picture.", "Drupal", on_dismiss=lambda: dismissed.append("options"))
    notifier.alert("Second")
    notifier.vibrate(500)

    assert [alert["message"] for alert in state["pending_alerts"]] == [
        "You need to login before posting picture.",
        "Second",
    ]
    assert state["pending_alerts"][0]["id"] != state["pending_alerts"][1]["id"]
    assert state["pending_vibrations"] == [500]

    notifier.dismiss()
    assert dismissed == ["options"]
    assert [alert["message"] for alert in state["pending_alerts"]] == ["Second"]
