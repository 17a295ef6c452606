"""Upload orchestration: validate, store, then create the pending analysis."""

import logging
import posixpath
from typing import List, Optional

from django.conf import settings
from django.utils import timezone

from core.models import Analysis, AnalysisFile, DIRECTIONS
from core.utils.exceptions import (
    DependencyError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from features.analysis import service as analysis_service
from features.auth.api import Principal
from .storage import StoredBlob, get_blob_store

logger = logging.getLogger(__name__)


def user_folder(user_id: int) -> str:
    return f"{settings.UPLOAD_ROOT_FOLDER}/users/{user_id}"


def validate_file(upload) -> None:
    if upload.size > settings.MAX_UPLOAD_SIZE:
        limit_mb = settings.MAX_UPLOAD_SIZE // (1024 * 1024)
        raise ValidationError(f"File '{upload.name}' exceeds the {limit_mb}MB limit")
    if upload.content_type not in settings.ALLOWED_UPLOAD_TYPES:
        raise ValidationError(
            f"Invalid file type for '{upload.name}'. Only JPEG, PNG, and PDF are allowed."
        )


def store_batch(user_id: int, uploads: list) -> List[StoredBlob]:
    """
    Store every upload in order.

    If one fails, the blobs already stored for this batch are deleted and
    the error is re-raised.
    """
    store = get_blob_store()
    folder = user_folder(user_id)
    stored: List[StoredBlob] = []
    try:
        for upload in uploads:
            stored.append(
                store.upload(upload.read(), upload.content_type, folder, upload.name)
            )
    except (DependencyError, ValidationError):
        for blob in stored:
            try:
                store.delete(blob.storage_id)
            except DependencyError:
                logger.warning("Cleanup failed for blob %s", blob.storage_id)
        raise
    return stored


def upload_analysis_files(
    principal: Principal,
    uploads: list,
    *,
    orientation: Optional[str],
    title: Optional[str] = None,
    description: Optional[str] = None,
) -> dict:
    """Store 1-5 floor-plan files and create a pending analysis for them."""
    if not uploads:
        raise ValidationError("No files uploaded")
    if len(uploads) > settings.MAX_UPLOAD_FILES:
        raise ValidationError(
            f"Too many files. Maximum {settings.MAX_UPLOAD_FILES} files allowed."
        )
    if orientation not in DIRECTIONS:
        raise ValidationError("Property orientation is required")
    for upload in uploads:
        validate_file(upload)

    stored = store_batch(principal.id, uploads)
    title = (title or "").strip() or f"Analysis {timezone.localdate():%d/%m/%Y}"
    try:
        return analysis_service.create_analysis(
            principal.id,
            title=title,
            description=description,
            orientation=orientation,
            files=[blob.dict() for blob in stored],
        )
    except Exception:
        store = get_blob_store()
        for blob in stored:
            try:
                store.delete(blob.storage_id)
            except DependencyError:
                logger.warning("Cleanup failed for blob %s", blob.storage_id)
        raise


def upload_single_file(principal: Principal, upload) -> dict:
    """Store one file without attaching it to an analysis."""
    validate_file(upload)
    blob = get_blob_store().upload(
        upload.read(), upload.content_type, user_folder(principal.id), upload.name
    )
    return blob.dict()


def owned_storage_id(principal: Principal, storage_id: str) -> str:
    """
    Normalise ``storage_id`` and make sure it lives in the caller's folder.

    ``..`` segments are rejected outright so a path cannot climb into
    another user's folder after the prefix check.
    """
    if ".." in storage_id.replace("\\", "/").split("/"):
        raise ForbiddenError("You can only access your own files")
    normalized = posixpath.normpath(storage_id.replace("\\", "/"))
    if not normalized.startswith(user_folder(principal.id) + "/"):
        raise ForbiddenError("You can only access your own files")
    return normalized


def file_info(principal: Principal, storage_id: str) -> dict:
    """Metadata for a blob inside the caller's own folder."""
    info = get_blob_store().info(owned_storage_id(principal, storage_id))
    if info is None:
        raise NotFoundError("File not found")
    return info


def delete_file(principal: Principal, storage_id: str) -> bool:
    """Delete a blob inside the caller's own folder."""
    return get_blob_store().delete(owned_storage_id(principal, storage_id))


def upload_stats(principal: Principal) -> dict:
    total_analyses = Analysis.objects.filter(user_id=principal.id).count()
    total_files = AnalysisFile.objects.filter(analysis__user_id=principal.id).count()
    remaining = (
        None
        if principal.is_premium
        else max(0, settings.FREE_TIER_ANALYSIS_LIMIT - total_analyses)
    )
    return {
        "total_analyses": total_analyses,
        "total_files": total_files,
        "subscription_tier": principal.entitlement_tier,
        "remaining_uploads": remaining,
    }
