"""Blob store on top of Django's storage API."""

import io
import logging
import mimetypes
import uuid
from dataclasses import asdict, dataclass
from typing import Optional

from django.core.files.base import ContentFile
from django.core.files.storage import Storage, default_storage
from PIL import Image, UnidentifiedImageError

from core.utils.exceptions import DependencyError, ValidationError

logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE = (1920, 1080)
JPEG_QUALITY = 85


@dataclass
class StoredBlob:
    storage_id: str
    url: str
    size: int
    mime_type: str
    original_name: str = ""
    width: Optional[int] = None
    height: Optional[int] = None

    def dict(self) -> dict:
        return asdict(self)


def optimize_image(content: bytes):
    """
    Fit an image inside 1920x1080 and re-encode it as JPEG.

    Returns ``(jpeg_bytes, width, height)``.
    """
    try:
        with Image.open(io.BytesIO(content)) as img:
            img = img.convert("RGB")
            img.thumbnail(MAX_IMAGE_SIZE)
            buffer = io.BytesIO()
            img.save(buffer, format="JPEG", quality=JPEG_QUALITY)
            return buffer.getvalue(), img.width, img.height
    except (UnidentifiedImageError, OSError) as exc:
        raise ValidationError(f"Invalid image file: {exc}")


class BlobStore:
    def __init__(self, storage: Optional[Storage] = None):
        self.storage = storage or default_storage

    def upload(
        self, content: bytes, mime_type: str, folder: str, original_name: str = ""
    ) -> StoredBlob:
        width = height = None
        if mime_type.startswith("image/"):
            content, width, height = optimize_image(content)
            mime_type = "image/jpeg"
        extension = mimetypes.guess_extension(mime_type) or ""
        if extension == ".jpe":
            extension = ".jpg"
        name = f"{folder.strip('/')}/{uuid.uuid4().hex}{extension}"

        try:
            storage_id = self.storage.save(name, ContentFile(content))
            url = self.storage.url(storage_id)
        except Exception as exc:
            logger.exception("Blob upload failed for %s", original_name or name)
            raise DependencyError(f"File storage failed: {exc}") from exc

        logger.info("Stored %s (%d bytes) as %s", original_name, len(content), storage_id)
        return StoredBlob(
            storage_id=storage_id,
            url=url,
            size=len(content),
            mime_type=mime_type,
            original_name=original_name,
            width=width,
            height=height,
        )

    def info(self, storage_id: str) -> Optional[dict]:
        """Size, URL and type of a stored blob, or None when it is missing."""
        try:
            if not self.storage.exists(storage_id):
                return None
            size = self.storage.size(storage_id)
            url = self.storage.url(storage_id)
            created_at = self.storage.get_created_time(storage_id)
        except Exception as exc:
            raise DependencyError(f"File lookup failed: {exc}") from exc
        mime_type, _ = mimetypes.guess_type(storage_id)
        return {
            "storage_id": storage_id,
            "url": url,
            "size": size,
            "mime_type": mime_type or "application/octet-stream",
            "created_at": created_at,
        }

    def delete(self, storage_id: str) -> bool:
        """Remove a blob. Returns False when it did not exist."""
        try:
            if not self.storage.exists(storage_id):
                return False
            self.storage.delete(storage_id)
        except Exception as exc:
            raise DependencyError(f"File deletion failed: {exc}") from exc
        logger.info("Deleted blob %s", storage_id)
        return True


def get_blob_store() -> BlobStore:
    return BlobStore()
