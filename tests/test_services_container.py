from __future__ import annotations

from app_config import AppConfig
from capabilities import Position
from drupal_client import DrupalUser
from geocoder import PostalAddress
from location_resolver import LocationDraft
from picture_acquirer import PictureDraft
from services import container
from submission import SubmissionState


def _config(tmp_path, api_key=None) -> AppConfig:
    return AppConfig(
        drupal_base_url="https://drupal.example.com/",
        google_maps_api_key=api_key,
        geocoder_region="US",
        field_cache_path=tmp_path / "cache.db",
        device_files_root=tmp_path / "device",
        http_timeout=5.0,
    )


def test_build_services_reuses_drafts_from_session(tmp_path):
    picture = PictureDraft("data:image/png;base64,AAAA", "kept.png")
    location = LocationDraft(city="Gent")
    backing: dict = {"picture_draft": picture, "location_draft": location}

    services = container.build_services(_config(tmp_path), backing)

    assert services.pictures.draft is picture
    assert services.location.draft is location
    assert services.submission.location_draft is location
    assert services.client.base_url == "https://drupal.example.com/"
    assert services.location.geocoder is None
    assert (tmp_path / "device").is_dir()


def test_geocoder_enabled_with_api_key(tmp_path):
    services = container.build_services(_config(tmp_path, api_key="maps-key"), {})
    assert services.location.geocoder is not None
    assert services.location.geocoder.api_key == "maps-key"


def test_location_updates_are_mirrored_into_widget_keys(tmp_path):
    backing: dict = {}
    services = container.build_services(_config(tmp_path), backing)

    services.location.draft.update(street="Main St 5")
    services.location.on_update(services.location.draft)

    assert backing["street"] == "Main St 5"
    assert backing["latitude"] == ""


def test_session_events_and_submission_states_are_recorded(tmp_path, monkeypatch):
    recorded: list[dict] = []
    monkeypatch.setattr(container, "emit_log_event", lambda **kwargs: recorded.append(kwargs))
    backing: dict = {}
    services = container.build_services(_config(tmp_path), backing)

    services.events.emit("drupal_login", DrupalUser(4, "erin"))
    services.events.emit("drupal_logout")
    services.submission._transition(SubmissionState.FAILED)

    assert [(entry["type"], entry["action"], entry["result"]) for entry in recorded] == [
        ("user", "login", "success"),
        ("user", "logout", "success"),
        ("post", "create", "fail"),
    ]
    assert recorded[0]["user_name"] == "erin"
    assert backing["submission_state"] == "failed"


def test_field_cache_round_trip_through_container(tmp_path):
    config = _config(tmp_path)
    first = container.build_services(config, {})
    first.field_cache.store("base_url", "https://other.example.com/")

    fields: dict = {}
    container.build_services(config, {}).field_cache.restore(fields)
    assert fields == {"base_url": "https://other.example.com/"}


def test_geocoder_key_entered_later_geocodes_last_position(tmp_path, monkeypatch):
    lookups: list[dict] = []

    class FakeGeocoder:
        def __init__(self, api_key, *, region, timeout):
            lookups.append({"api_key": api_key, "region": region})

        def reverse(self, latitude, longitude):
            return PostalAddress("Rue Neuve 1", "Bruxelles", "Bruxelles", "1000")

    monkeypatch.setattr(container, "GoogleGeocoder", FakeGeocoder)
    config = _config(tmp_path)
    backing: dict = {}
    services = container.build_services(config, backing)
    services.location._handle_position(Position(50.85, 4.35))
    assert backing["city"] == ""

    services.location.set_geocoder(container.build_geocoder(config, " user-key "))

    assert lookups == [{"api_key": "user-key", "region": "US"}]
    assert backing["city"] == "Bruxelles"
    assert services.location.draft.summary == "Rue Neuve 1, 1000 Bruxelles"


def test_build_geocoder_falls_back_to_configured_key(tmp_path):
    assert container.build_geocoder(_config(tmp_path), "") is None
    assert container.build_geocoder(_config(tmp_path, api_key="maps-key"), None).api_key == "maps-key"
