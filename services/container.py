"""Per-session wiring of the GeoPicture services."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, MutableMapping

from app_config import AppConfig
from app_constants import CACHED_FIELD_KEYS, EVENT_LOGIN, EVENT_LOGOUT
from device_bridge import BrowserGeolocation, StreamlitCamera, StreamlitNotifier
from device_files import LocalFileSystem
from drupal_client import DrupalClient, DrupalUser
from events import EventDispatcher
from field_cache import FieldCache, SqliteLocalStorage
from geocoder import GoogleGeocoder
from location_resolver import LocationDraft, LocationResolver
from picture_acquirer import PictureAcquirer, PictureDraft
from session_client import SessionClient
from submission import SubmissionCoordinator, SubmissionState
from telemetry import emit_log_event

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GeoPictureServices:
    config: AppConfig
    events: EventDispatcher
    client: DrupalClient
    session_client: SessionClient
    notifier: StreamlitNotifier
    geolocation: BrowserGeolocation
    camera: StreamlitCamera
    file_system: LocalFileSystem
    pictures: PictureAcquirer
    location: LocationResolver
    field_cache: FieldCache
    submission: SubmissionCoordinator


def _mirror_location(backing: MutableMapping[str, Any]) -> Callable[[LocationDraft], None]:
    def _update(draft: LocationDraft) -> None:
        for key, value in draft.as_dict().items():
            backing[key] = value

    return _update


def _record_login(user: DrupalUser) -> None:
    emit_log_event(type="user", action="login", result="success", params=[str(user.uid)], user_name=user.name)


def _record_logout() -> None:
    emit_log_event(type="user", action="logout", result="success")


def build_geocoder(config: AppConfig, api_key: str | None = None) -> GoogleGeocoder | None:
    """Return a geocoder for ``api_key`` (or the configured key), ``None`` without one."""

    key = (api_key or "").strip() or config.google_maps_api_key
    if not key:
        return None
    return GoogleGeocoder(key, region=config.geocoder_region, timeout=config.http_timeout)


def build_services(
    config: AppConfig,
    backing: MutableMapping[str, Any],
    *,
    navigate: Callable[[str], None] | None = None,
) -> GeoPictureServices:
    """Create the services for one browser session.

    ``backing`` is the Streamlit session state; drafts already stored there are
    reused so a rebuilt container keeps the user's pending post.
    """

    events = EventDispatcher()
    notifier = StreamlitNotifier(backing)
    client = DrupalClient(config.drupal_base_url, timeout=config.http_timeout)
    session_client = SessionClient(client, events, notifier)

    file_system = LocalFileSystem(config.device_files_root)
    camera = StreamlitCamera(file_system)
    picture_draft = backing.get("picture_draft")
    pictures = PictureAcquirer(
        notifier,
        camera=camera,
        file_system=file_system,
        draft=picture_draft if isinstance(picture_draft, PictureDraft) else None,
    )
    backing["picture_draft"] = pictures.draft

    geolocation = BrowserGeolocation()
    geocoder = build_geocoder(config)
    location_draft = backing.get("location_draft")
    location = LocationResolver(
        geolocation,
        draft=location_draft if isinstance(location_draft, LocationDraft) else None,
        geocoder=geocoder,
        on_update=_mirror_location(backing),
    )
    backing["location_draft"] = location.draft

    field_cache = FieldCache(SqliteLocalStorage(config.field_cache_path), CACHED_FIELD_KEYS)

    submission = SubmissionCoordinator(
        session_client,
        client,
        pictures,
        location.draft,
        notifier,
        navigate=navigate,
    )

    def _track_state(state: SubmissionState) -> None:
        backing["submission_state"] = state.value

    def _record_post(state: SubmissionState) -> None:
        if state is SubmissionState.DONE:
            emit_log_event(type="post", action="create", result="success", user_name=session_client.current_user.name)
        elif state is SubmissionState.FAILED:
            emit_log_event(type="post", action="create", result="fail", user_name=session_client.current_user.name)

    submission.add_state_handler(_track_state)
    submission.add_state_handler(_record_post)

    events.subscribe(EVENT_LOGIN, _record_login)
    events.subscribe(EVENT_LOGOUT, _record_logout)

    logger.debug("Services ready (geocoding %s)", "on" if geocoder else "off")
    return GeoPictureServices(
        config=config,
        events=events,
        client=client,
        session_client=session_client,
        notifier=notifier,
        geolocation=geolocation,
        camera=camera,
        file_system=file_system,
        pictures=pictures,
        location=location,
        field_cache=field_cache,
        submission=submission,
    )


__all__ = ["GeoPictureServices", "build_geocoder", "build_services"]
