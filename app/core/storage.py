"""File storage for uploaded slide images and thumbnails.

Objects live under a storage root, grouped by bucket, and are addressed by an
opaque id. Metadata rows are kept in ``stored_files`` by the DB services; this
module only touches the filesystem.
"""

from __future__ import annotations

import base64
import binascii
import mimetypes
import re
import uuid
from dataclasses import dataclass
from pathlib import Path

from app.core.config import settings


_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<b64>;base64)?,(?P<data>.*)$", re.S)


class StorageError(Exception):
    """Raised when an object cannot be stored or located."""


@dataclass(frozen=True)
class DataUrl:
    content_type: str
    data: bytes


def encode_data_url(data: bytes, content_type: str = "image/png") -> str:
    return f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_url(url: str) -> DataUrl:
    """Split a ``data:`` URL into its MIME type and raw bytes."""
    m = _DATA_URL_RE.match(url or "")
    if not m:
        raise StorageError("Not a data URL")
    mime = m.group("mime") or "text/plain"
    payload = m.group("data")
    if m.group("b64"):
        try:
            raw = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise StorageError(f"Invalid base64 payload: {e}") from e
    else:
        raw = payload.encode("utf-8")
    return DataUrl(content_type=mime, data=raw)


def new_file_id() -> str:
    return uuid.uuid4().hex


class FileStorage:
    """Manages object files on disk below a storage root."""

    def __init__(self, base_dir: str | Path = "storage", *, max_bytes: int | None = None):
        self.base_dir = Path(base_dir)
        self.max_bytes = max_bytes
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def bucket_dir(self, bucket: str) -> Path:
        path = self.base_dir / self._sanitize_filename(bucket)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def save(
        self,
        data: bytes,
        *,
        bucket: str,
        file_id: str,
        filename: str,
        content_type: str | None = None,
    ) -> Path:
        """Write ``data`` and return its path relative to the storage root."""
        if self.max_bytes is not None and len(data) > self.max_bytes:
            raise StorageError(
                f"File exceeds the upload limit of {self.max_bytes} bytes"
            )
        extension = self._extension_for(filename, content_type)
        target = self.bucket_dir(bucket) / f"{file_id}{extension}"
        target.write_bytes(data)
        return target.relative_to(self.base_dir)

    def resolve(self, relative_path: str | Path) -> Path:
        path = (self.base_dir / relative_path).resolve()
        if self.base_dir.resolve() not in path.parents:
            raise StorageError("Path escapes the storage root")
        if not path.exists():
            raise StorageError(f"Stored file not found: {relative_path}")
        return path

    def delete(self, relative_path: str | Path) -> bool:
        try:
            path = self.resolve(relative_path)
        except StorageError:
            return False
        path.unlink()
        return True

    def _extension_for(self, filename: str, content_type: str | None) -> str:
        suffix = Path(self._sanitize_filename(filename)).suffix.lower()
        if suffix:
            return suffix
        if content_type:
            guessed = mimetypes.guess_extension(content_type.split(";")[0].strip())
            if guessed:
                return guessed
        return ".bin"

    def _sanitize_filename(self, filename: str) -> str:
        """Sanitize filename for safe filesystem usage."""

        unsafe_chars = '<>:"/\\|?*'
        for char in unsafe_chars:
            filename = filename.replace(char, "_")

        filename = filename.strip(" .")[:50]

        filename = filename.replace(" ", "_")

        while "__" in filename:
            filename = filename.replace("__", "_")

        return filename or "untitled"


def file_view_url(file_id: str | None) -> str | None:
    """Public URL serving a stored file's bytes."""
    if not file_id:
        return None
    return f"/{settings.app.version}/files/{file_id}/view"


storage = FileStorage(
    settings.storage.base_dir, max_bytes=settings.storage.max_upload_bytes
)
