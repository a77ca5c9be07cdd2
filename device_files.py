"""Persistent device file system exposed as file and directory entries."""
from __future__ import annotations

import base64
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Protocol

NOT_FOUND_ERR = 1
PATH_EXISTS_ERR = 12
TYPE_MISMATCH_ERR = 11
SECURITY_ERR = 2

_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)


class FileSystemError(RuntimeError):
    """Raised for missing entries, type mismatches and paths outside the root."""

    def __init__(self, message: str, *, code: int) -> None:
        super().__init__(message)
        self.code = code


def detect_mime_type(data: bytes, name: str = "") -> str:
    for signature, mime_type in _SIGNATURES:
        if data.startswith(signature):
            return mime_type
    guessed, _ = mimetypes.guess_type(name)
    return guessed or "application/octet-stream"


class Entry(Protocol):
    kind: ClassVar[str]
    root: Path
    full_path: str

    @property
    def name(self) -> str: ...

    @property
    def is_file(self) -> bool: ...

    @property
    def is_directory(self) -> bool: ...

    def get_parent(self) -> "DirectoryEntry": ...


def _join(full_path: str, child: str) -> str:
    if child.startswith("/"):
        return "/" + child.strip("/")
    base = full_path.rstrip("/")
    return f"{base}/{child.strip('/')}"


def _resolve(root: Path, full_path: str) -> Path:
    resolved_root = root.resolve()
    candidate = (resolved_root / full_path.lstrip("/")).resolve()
    if candidate != resolved_root and resolved_root not in candidate.parents:
        raise FileSystemError(f"{full_path} is outside the file system root", code=SECURITY_ERR)
    return candidate


@dataclass(frozen=True, slots=True)
class _EntryBase:
    root: Path
    full_path: str

    @property
    def name(self) -> str:
        return self.full_path.rstrip("/").rsplit("/", 1)[-1]

    @property
    def path(self) -> Path:
        return _resolve(self.root, self.full_path)

    def get_parent(self) -> "DirectoryEntry":
        parent = self.full_path.rstrip("/").rsplit("/", 1)[0]
        return DirectoryEntry(self.root, parent or "/")


@dataclass(frozen=True, slots=True)
class FileEntry(_EntryBase):
    kind: ClassVar[str] = "file"

    @property
    def is_file(self) -> bool:
        return True

    @property
    def is_directory(self) -> bool:
        return False

    def read_bytes(self) -> bytes:
        try:
            return self.path.read_bytes()
        except FileNotFoundError as exc:
            raise FileSystemError(f"{self.full_path} does not exist", code=NOT_FOUND_ERR) from exc

    def read_as_data_url(self) -> str:
        data = self.read_bytes()
        mime_type = detect_mime_type(data, self.name)
        return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


@dataclass(frozen=True, slots=True)
class DirectoryEntry(_EntryBase):
    kind: ClassVar[str] = "directory"

    @property
    def is_file(self) -> bool:
        return False

    @property
    def is_directory(self) -> bool:
        return True

    def get_file(self, path: str, *, create: bool = False, exclusive: bool = False) -> FileEntry:
        entry = FileEntry(self.root, _join(self.full_path, path))
        target = entry.path
        if target.is_dir():
            raise FileSystemError(f"{entry.full_path} is a directory", code=TYPE_MISMATCH_ERR)
        if target.exists():
            if create and exclusive:
                raise FileSystemError(f"{entry.full_path} already exists", code=PATH_EXISTS_ERR)
            return entry
        if not create:
            raise FileSystemError(f"{entry.full_path} does not exist", code=NOT_FOUND_ERR)
        if not target.parent.is_dir():
            raise FileSystemError(f"{entry.get_parent().full_path} does not exist", code=NOT_FOUND_ERR)
        target.touch()
        return entry

    def get_directory(self, path: str, *, create: bool = False, exclusive: bool = False) -> "DirectoryEntry":
        entry = DirectoryEntry(self.root, _join(self.full_path, path))
        target = entry.path
        if target.is_file():
            raise FileSystemError(f"{entry.full_path} is a file", code=TYPE_MISMATCH_ERR)
        if target.is_dir():
            if create and exclusive:
                raise FileSystemError(f"{entry.full_path} already exists", code=PATH_EXISTS_ERR)
            return entry
        if not create:
            raise FileSystemError(f"{entry.full_path} does not exist", code=NOT_FOUND_ERR)
        target.mkdir(parents=False)
        return entry


class LocalFileSystem:
    """A persistent file system rooted at a local directory."""

    def __init__(self, root_path: Path) -> None:
        self.root_path = Path(root_path)
        self.root_path.mkdir(parents=True, exist_ok=True)
        self.root = DirectoryEntry(self.root_path, "/")

    def resolve_uri(self, uri: str) -> FileEntry:
        """Map a device file URI onto ``/tmp/<basename>`` inside the root."""

        basename = uri.rstrip("/").rsplit("/", 1)[-1]
        if not basename:
            raise FileSystemError(f"{uri!r} does not name a file", code=NOT_FOUND_ERR)
        return self.root.get_file(f"/tmp/{basename}")


__all__ = [
    "DirectoryEntry",
    "Entry",
    "FileEntry",
    "FileSystemError",
    "LocalFileSystem",
    "NOT_FOUND_ERR",
    "PATH_EXISTS_ERR",
    "SECURITY_ERR",
    "TYPE_MISMATCH_ERR",
    "detect_mime_type",
]
