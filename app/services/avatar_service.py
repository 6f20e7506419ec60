"""Team avatar uploads."""

from __future__ import annotations

import logging
import time
from typing import Optional

from app.models.results import UploadResult
from app.services.storage_client import StorageClient, StorageError

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
}
_KNOWN_EXTENSIONS = frozenset(_EXTENSIONS.values()) | {"jpeg"}


class AvatarUploadError(ValueError):
    """The request itself is unusable (missing file, bad team id, not an image)."""


def build_avatar_key(
    team_id: int,
    filename: Optional[str],
    content_type: str,
    timestamp_ms: Optional[int] = None,
) -> str:
    """Object key ``teams/{team_id}-{timestamp_ms}.{ext}``.

    The extension is taken from the content type. A filename extension is
    only used for image types without a mapping, and only when it is one of
    the known image extensions; anything else is stored as ``bin``.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    ext = _EXTENSIONS.get(content_type)
    if ext is None and filename and "." in filename:
        candidate = filename.rsplit(".", 1)[1].lower()
        if candidate in _KNOWN_EXTENSIONS:
            ext = candidate
    return f"teams/{team_id}-{timestamp_ms}.{ext or 'bin'}"


def parse_team_id(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        raise AvatarUploadError("No team ID provided")
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise AvatarUploadError("Invalid team ID") from exc


def upload_team_avatar(
    storage: StorageClient,
    team_id: int,
    filename: Optional[str],
    content_type: Optional[str],
    data: bytes,
) -> UploadResult:
    """Validate and store an avatar image.

    Raises:
        AvatarUploadError: the file is empty or not an image
        StorageError: the storage backend rejected the write
    """
    if not data:
        raise AvatarUploadError("No file provided")
    if not content_type or not content_type.startswith("image/"):
        raise AvatarUploadError("File must be an image")

    key = build_avatar_key(team_id, filename, content_type)
    try:
        url = storage.upload(key, data, content_type=content_type)
    except StorageError:
        logger.exception("Avatar upload failed for team %s", team_id)
        raise

    logger.info("Stored avatar for team %s at %s", team_id, key)
    return UploadResult(success=True, url=url)
