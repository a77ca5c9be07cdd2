"""Post workflow: gate on the session, validate, upload the picture, create the node."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, MutableMapping

from app_constants import NODE_LANGUAGE, NODE_TYPE, PAGE_OPTIONS
from capabilities import Notifier
from drupal_client import DrupalApiError, DrupalClient, DrupalUser
from location_resolver import LocationDraft
from picture_acquirer import PictureAcquirer, is_empty_payload, payload_body
from session_client import SessionClient

logger = logging.getLogger(__name__)

LOGIN_REQUIRED_MESSAGE = "You need to login before posting picture."
MISSING_PICTURE_MESSAGE = "You cannot post without a picture."
MISSING_TITLE_MESSAGE = "You cannot post without a title."


class SubmissionState(str, Enum):
    IDLE = "idle"
    GATED = "gated"
    VALIDATING = "validating"
    UPLOADING = "uploading"
    CREATING = "creating"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class PostDraft:
    title: str
    body: str
    picture_payload: str
    filename: str
    location: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    """End state of one ``submit`` call."""

    state: SubmissionState
    nid: int | None = None
    fid: int | None = None
    message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is SubmissionState.DONE


StateHandler = Callable[[SubmissionState], None]


def build_node(draft: PostDraft, fid: int, user: DrupalUser) -> dict[str, Any]:
    """Return the node body for ``api/node`` (before the ``{"node": ...}`` wrap)."""

    location = draft.location
    return {
        "uid": user.uid,
        "name": user.name,
        "title": draft.title,
        "body": {NODE_LANGUAGE: [{"value": draft.body}]},
        "type": NODE_TYPE,
        "language": NODE_LANGUAGE,
        "field_images": {NODE_LANGUAGE: [{"fid": fid}]},
        "locations": [
            {
                "street": location.get("street", ""),
                "city": location.get("city", ""),
                "postal_code": location.get("postal_code", ""),
                "latitude": location.get("latitude", ""),
                "longitude": location.get("longitude", ""),
                "province": location.get("province", ""),
            }
        ],
    }


class SubmissionCoordinator:
    """Run one post at a time through the submission states.

    Every transition is published to the state handlers in the order they were
    added. Preconditions that fail are reported to the user and end back in
    ``IDLE``. Backend errors pass through ``FAILED`` before ``IDLE``.
    """

    def __init__(
        self,
        session_client: SessionClient,
        client: DrupalClient,
        pictures: PictureAcquirer,
        location_draft: LocationDraft,
        notifier: Notifier,
        *,
        navigate: Callable[[str], None] | None = None,
    ) -> None:
        self.session_client = session_client
        self.client = client
        self.pictures = pictures
        self.location_draft = location_draft
        self.notifier = notifier
        self.navigate = navigate
        self.state = SubmissionState.IDLE
        self._handlers: list[StateHandler] = []
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def add_state_handler(self, handler: StateHandler) -> None:
        self._handlers.append(handler)

    def submit(self, form: MutableMapping[str, Any]) -> SubmissionOutcome:
        """Post ``form["title"]``/``form["body"]`` with the pending picture.

        On success the title and body are cleared in ``form`` and the picture
        goes back to the placeholder.
        """

        if self._busy:
            logger.info("Submission ignored: another post is in flight")
            return SubmissionOutcome(self.state, message="A post is already being sent.")
        self._busy = True
        try:
            return self._run(form)
        finally:
            self._busy = False

    def _run(self, form: MutableMapping[str, Any]) -> SubmissionOutcome:
        if not self.session_client.is_authenticated():
            self._transition(SubmissionState.GATED)
            self.notifier.vibrate(500)
            self.notifier.alert(LOGIN_REQUIRED_MESSAGE, "Drupal", on_dismiss=self._go_to_options)
            self._transition(SubmissionState.IDLE)
            return SubmissionOutcome(SubmissionState.GATED, message=LOGIN_REQUIRED_MESSAGE)

        self._transition(SubmissionState.VALIDATING)
        payloads: list[str] = []
        self.pictures.get_encoded_payload(self.pictures.draft.image_ref, payloads.append)
        payload = payloads[0] if payloads else ""
        if is_empty_payload(payload):
            return self._reject(MISSING_PICTURE_MESSAGE, "Missing Picture")

        title = str(form.get("title") or "")
        if not title.strip():
            return self._reject(MISSING_TITLE_MESSAGE, "Missing Title")

        draft = PostDraft(
            title=title,
            body=str(form.get("body") or ""),
            picture_payload=payload,
            filename=self.pictures.draft.filename,
            location=self.location_draft.as_dict(),
        )
        user = self.session_client.current_user

        fid: int | None = None
        self.notifier.show_loading()
        try:
            self._transition(SubmissionState.UPLOADING)
            fid = self.client.create_file(
                filename=draft.filename,
                file_data=payload_body(draft.picture_payload),
                uid=user.uid,
            )
            self._transition(SubmissionState.CREATING)
            nid = self.client.create_node(build_node(draft, fid, user))
        except DrupalApiError as exc:
            self.notifier.hide_loading()
            logger.warning("Post failed during %s: %s", self.state.value, exc)
            self._transition(SubmissionState.FAILED)
            self.notifier.alert(str(exc), "Drupal")
            self._transition(SubmissionState.IDLE)
            return SubmissionOutcome(SubmissionState.FAILED, fid=fid, message=str(exc))
        self.notifier.hide_loading()

        form["title"] = ""
        form["body"] = ""
        self.pictures.draft.reset()
        message = f"New post created with nid {nid}"
        logger.info("Created node %s with file %s", nid, fid)
        self._transition(SubmissionState.DONE)
        self.notifier.vibrate(250)
        self.notifier.alert(message, "Drupal")
        self._transition(SubmissionState.IDLE)
        return SubmissionOutcome(SubmissionState.DONE, nid=nid, fid=fid, message=message)

    def _reject(self, message: str, title: str) -> SubmissionOutcome:
        self.notifier.vibrate(250)
        self.notifier.alert(message, title)
        self._transition(SubmissionState.IDLE)
        return SubmissionOutcome(SubmissionState.IDLE, message=message)

    def _go_to_options(self) -> None:
        if self.navigate is not None:
            self.navigate(PAGE_OPTIONS)

    def _transition(self, state: SubmissionState) -> None:
        self.state = state
        for handler in list(self._handlers):
            handler(state)


__all__ = [
    "LOGIN_REQUIRED_MESSAGE",
    "MISSING_PICTURE_MESSAGE",
    "MISSING_TITLE_MESSAGE",
    "PostDraft",
    "SubmissionCoordinator",
    "SubmissionOutcome",
    "SubmissionState",
    "build_node",
]
