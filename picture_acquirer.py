"""Acquire a single picture and normalize it to an inline base64 data URL."""
from __future__ import annotations

import base64
import io
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable
from urllib.parse import unquote, urlparse

from PIL import Image, UnidentifiedImageError

from app_constants import (
    ALLOWED_PICTURE_TYPES,
    EMPTY_DATA_URL,
    MAX_CANVAS_DIMENSION,
    PICTURE_QUALITY,
    PLACEHOLDER_IMAGE,
)
from capabilities import CameraService, DestinationType, Notifier, PictureSourceType
from device_files import FileSystemError, LocalFileSystem

logger = logging.getLogger(__name__)

_BASE64_MARKER = ";base64,"
_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/gif": "gif"}


class UnsupportedPictureError(ValueError):
    """Raised when a selected file is not a gif, jpeg or png image."""

    def __init__(self, mime_type: str) -> None:
        super().__init__(f"Unsupported picture type: {mime_type or 'unknown'}")
        self.mime_type = mime_type


class ReferenceKind(str, Enum):
    PLACEHOLDER = "placeholder"
    DATA_URL = "data_url"
    FILE = "file"


def classify_reference(image_ref: str | None) -> ReferenceKind:
    if not image_ref or image_ref == PLACEHOLDER_IMAGE:
        return ReferenceKind.PLACEHOLDER
    if image_ref.startswith("data:"):
        return ReferenceKind.DATA_URL
    return ReferenceKind.FILE


def is_empty_payload(payload: str | None) -> bool:
    return not isinstance(payload, str) or payload == EMPTY_DATA_URL or _BASE64_MARKER not in payload


def payload_body(data_url: str) -> str:
    """Return the base64 part of a data URL, or an empty string."""

    index = data_url.find(_BASE64_MARKER)
    if index < 0:
        return ""
    return data_url[index + len(_BASE64_MARKER) :]


def payload_mime_type(data_url: str) -> str:
    if not data_url.startswith("data:"):
        return ""
    header = data_url[len("data:") :].split(",", 1)[0]
    return header.split(";", 1)[0]


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def derive_filename(image_ref: str | None) -> str:
    kind = classify_reference(image_ref)
    if kind is ReferenceKind.PLACEHOLDER:
        return ""
    if kind is ReferenceKind.DATA_URL:
        extension = _EXTENSIONS.get(payload_mime_type(image_ref or ""), "jpg")
        return f"picture.{extension}"
    path = urlparse(image_ref).path or image_ref or ""
    return unquote(path.rstrip("/").rsplit("/", 1)[-1])


def _local_path(image_ref: str) -> Path:
    parsed = urlparse(image_ref)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(image_ref)


def canvas_export(image_bytes: bytes, *, max_dimension: int = MAX_CANVAS_DIMENSION) -> str:
    """Redraw an image as JPEG, shrinking it so its longer side fits ``max_dimension``."""

    with Image.open(io.BytesIO(image_bytes)) as image:
        width, height = image.size
        ratio = min(1.0, max_dimension / max(width, height, 1))
        canvas = image.convert("RGB")
        if ratio < 1.0:
            canvas = canvas.resize((int(width * ratio), int(height * ratio)))
        buffer = io.BytesIO()
        canvas.save(buffer, format="JPEG")
    return to_data_url(buffer.getvalue(), "image/jpeg")


@dataclass(slots=True)
class PictureDraft:
    """The one pending picture; replaced wholesale on every acquisition."""

    image_ref: str = PLACEHOLDER_IMAGE
    original_name: str | None = None

    @property
    def kind(self) -> ReferenceKind:
        return classify_reference(self.image_ref)

    @property
    def is_empty(self) -> bool:
        return self.kind is ReferenceKind.PLACEHOLDER

    @property
    def display(self) -> bytes | str:
        """Something ``st.image`` can render."""

        if self.kind is ReferenceKind.DATA_URL:
            return base64.b64decode(payload_body(self.image_ref))
        if self.kind is ReferenceKind.FILE:
            return str(_local_path(self.image_ref))
        return self.image_ref

    @property
    def filename(self) -> str:
        return self.original_name or derive_filename(self.image_ref)

    def replace(self, image_ref: str, original_name: str | None = None) -> None:
        self.image_ref = image_ref
        self.original_name = original_name

    def reset(self) -> None:
        self.replace(PLACEHOLDER_IMAGE)


class PictureAcquirer:
    def __init__(
        self,
        notifier: Notifier,
        *,
        camera: CameraService | None = None,
        file_system: LocalFileSystem | None = None,
        draft: PictureDraft | None = None,
    ) -> None:
        self.notifier = notifier
        self.camera = camera
        self.file_system = file_system
        self.draft = draft if draft is not None else PictureDraft()

    @property
    def has_camera(self) -> bool:
        return self.camera is not None

    def capture(self, source: PictureSourceType = PictureSourceType.CAMERA) -> None:
        if self.camera is None:
            raise RuntimeError("No device camera is available; use the file picker instead.")
        self.camera.get_picture(
            self._set_reference,
            self._on_capture_error,
            quality=PICTURE_QUALITY,
            destination_type=DestinationType.FILE_URI,
            source_type=source,
        )

    def select_file(self, name: str, mime_type: str, read: Callable[[], bytes]) -> bool:
        """Accept a picked file if it is an image; ``read`` is only called then."""

        try:
            self._check_type(mime_type)
        except UnsupportedPictureError as exc:
            logger.info("Rejected %s: %s", name, exc)
            self.notifier.alert("This file is not an image.")
            self.draft.reset()
            return False
        try:
            data = read()
        except OSError as exc:
            logger.warning("Could not read %s: %s", name, exc)
            self.notifier.alert(f"Could not read {name}.")
            return False
        self.draft.replace(to_data_url(data, mime_type), name or None)
        return True

    def get_encoded_payload(self, image_ref: str | None, callback: Callable[[str], None]) -> None:
        callback(self.encode(image_ref))

    def encode(self, image_ref: str | None) -> str:
        kind = classify_reference(image_ref)
        if kind is ReferenceKind.PLACEHOLDER:
            return EMPTY_DATA_URL
        if kind is ReferenceKind.DATA_URL:
            return image_ref or EMPTY_DATA_URL
        if self.file_system is not None:
            try:
                return self.file_system.resolve_uri(image_ref or "").read_as_data_url()
            except FileSystemError as exc:
                logger.warning("Picture %s could not be read from the device: %s", image_ref, exc)
                return EMPTY_DATA_URL
        try:
            return canvas_export(_local_path(image_ref or "").read_bytes())
        except (OSError, UnidentifiedImageError) as exc:
            logger.warning("Picture %s could not be redrawn: %s", image_ref, exc)
            return EMPTY_DATA_URL

    @staticmethod
    def _check_type(mime_type: str) -> None:
        if (mime_type or "").lower() not in ALLOWED_PICTURE_TYPES:
            raise UnsupportedPictureError(mime_type)

    def _set_reference(self, image_ref: str) -> None:
        self.draft.replace(image_ref)

    def _on_capture_error(self, message: str) -> None:
        logger.info("Picture capture cancelled or failed: %s", message)


__all__ = [
    "PictureAcquirer",
    "PictureDraft",
    "ReferenceKind",
    "UnsupportedPictureError",
    "canvas_export",
    "classify_reference",
    "derive_filename",
    "is_empty_payload",
    "payload_body",
    "payload_mime_type",
    "to_data_url",
]
