"""Bucketed file storage with public URLs, served by the app under /storage."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from lostfound.errors import NotFoundError, RemoteError, ValidationError

logger = logging.getLogger(__name__)

BUCKETS = ("item-images", "proofs", "avatars")

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}
MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5MB


class LocalStorage:
    """Store objects as files under ``root/<bucket>/<path>``."""

    def __init__(self, root: str | Path, base_url: str) -> None:
        self.root = Path(root).resolve()
        self.base_url = base_url.rstrip("/")

    def _target(self, bucket: str, path: str) -> Path:
        if bucket not in BUCKETS:
            raise NotFoundError(f"Unknown storage bucket '{bucket}'")

        target = (self.root / bucket / path).resolve()
        if self.root / bucket not in target.parents:
            raise ValidationError("Invalid object path")
        return target

    def upload(self, bucket: str, path: str, data: bytes, *, upsert: bool = False) -> None:
        target = self._target(bucket, path)
        if target.exists() and not upsert:
            raise RemoteError("An object already exists at this path")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            logger.warning("Upload to %s/%s failed: %s", bucket, path, exc)
            raise RemoteError("Failed to upload file") from exc

    def public_url(self, bucket: str, path: str) -> str:
        self._target(bucket, path)
        return f"{self.base_url}/{bucket}/{path}"

    def owns_url(self, bucket: str, url: str, owner_id: uuid.UUID | None = None) -> bool:
        """True when ``url`` was issued by this storage for an existing object in ``bucket``.

        With ``owner_id`` the object must also sit under that uploader's prefix.
        """

        prefix = f"{self.base_url}/{bucket}/"
        if not url.startswith(prefix):
            return False
        try:
            target = self._target(bucket, url[len(prefix):])
        except ValidationError:
            return False

        if owner_id is not None and target.parent != self.root / bucket / str(owner_id):
            return False
        return target.is_file()


def validate_image(content_type: str | None, data: bytes) -> str:
    """Return the file extension for an acceptable image, or raise ValidationError."""

    extension = ALLOWED_IMAGE_TYPES.get(content_type or "")
    if extension is None:
        raise ValidationError("Please upload a valid image file (JPEG, PNG, or WebP)")
    if len(data) > MAX_IMAGE_SIZE:
        raise ValidationError("File size must be less than 5MB")
    if not data:
        raise ValidationError("File is empty")
    return extension


def store_image(
    storage: LocalStorage,
    bucket: str,
    owner_id: uuid.UUID,
    content_type: str | None,
    data: bytes,
) -> str:
    extension = validate_image(content_type, data)

    # Unique file name with the uploader's id as prefix
    path = f"{owner_id}/{uuid.uuid4().hex}.{extension}"
    storage.upload(bucket, path, data)

    return storage.public_url(bucket, path)
