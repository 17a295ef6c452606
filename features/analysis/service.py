"""
Analysis job lifecycle.

State machine: ``pending -> processing -> completed | failed``. Every
function here is synchronous and transactional; endpoints call them through
``sync_to_async``. The scoring queue calls ``run_scoring_job`` directly.
"""

import json
import logging
from concurrent.futures import TimeoutError as ScoringTimeout
from typing import Any, Dict, List, Optional, Tuple

import pydantic
from django.conf import settings
from django.db import DatabaseError, connection, transaction
from django.db.models import F, Q
from django.utils import timezone

from core.models import Analysis, AnalysisFile, DIRECTIONS
from core.models.analysis import derive_area
from core.utils.exceptions import (
    ConflictError,
    DependencyError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from features.auth.api import Principal
from features.uploads.storage import get_blob_store
from features.vastu.catalog import rule_snapshot
from .schemas import VastuAnalysisSchema
from .scoring import get_scoring_strategy
from .worker import call_with_timeout, get_scoring_queue

logger = logging.getLogger(__name__)


SUMMARY_FIELDS = (
    "id",
    "user_id",
    "title",
    "description",
    "status",
    "overall_score",
    "tags",
    "is_public",
    "views",
    "likes",
    "shares",
    "created_at",
    "updated_at",
)

SORT_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
}

COUNTER_FIELDS = ("likes", "shares")

FILE_FIELDS = (
    "storage_id",
    "original_name",
    "url",
    "size",
    "mime_type",
    "width",
    "height",
)


# =============================================================================
# Formatting
# =============================================================================


def format_summary(row: dict) -> dict:
    """Format an Analysis ``.values()`` row for list responses."""
    return {
        "id": row["id"],
        "user_id": row["user_id"],
        "title": row["title"],
        "description": row.get("description") or None,
        "status": row["status"],
        "overall_score": row.get("overall_score"),
        "tags": row.get("tags") or [],
        "is_public": row["is_public"],
        "views": row["views"],
        "likes": row["likes"],
        "shares": row["shares"],
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    }


def format_analysis(analysis: Analysis) -> dict:
    files = [
        {
            "storage_id": f.storage_id,
            "original_name": f.original_name,
            "url": f.url,
            "size": f.size,
            "mime_type": f.mime_type,
            "width": f.width,
            "height": f.height,
            "uploaded_at": f.uploaded_at,
        }
        for f in analysis.files.all()
    ]
    data = format_summary(
        {field: getattr(analysis, field) for field in SUMMARY_FIELDS}
    )
    data.update(
        {
            "floor_plan": analysis.floor_plan,
            "files": files,
            "file_count": len(files),
            "room_count": analysis.room_count,
            "processing_started_at": analysis.processing_started_at,
            "completed_at": analysis.completed_at,
            "processing_time": analysis.processing_time,
            "vastu_analysis": analysis.vastu_analysis,
        }
    )
    return data


def _load(analysis_id: int) -> Optional[Analysis]:
    return Analysis.objects.prefetch_related("files").filter(id=analysis_id).first()


def _owned(analysis_id: int, principal: Optional[Principal]) -> Analysis:
    """Fetch an analysis for mutation by its owner."""
    if principal is None:
        raise UnauthorizedError("Access denied. Please login first.")
    analysis = _load(analysis_id)
    if analysis is None:
        raise NotFoundError("Analysis not found")
    if analysis.user_id != principal.id:
        raise ForbiddenError("You can only modify your own analyses")
    return analysis


# =============================================================================
# Transitions
# =============================================================================


def create_analysis(
    user_id: int,
    *,
    title: str,
    orientation: str,
    description: Optional[str] = None,
    length: Optional[float] = None,
    width: Optional[float] = None,
    unit: str = "sqft",
    rooms: Optional[List[dict]] = None,
    is_public: bool = False,
    tags: Optional[List[str]] = None,
    files: Optional[List[dict]] = None,
) -> dict:
    """Persist a new analysis in ``pending`` together with its file references."""
    title = (title or "").strip()
    if not 3 <= len(title) <= 100:
        raise ValidationError("Title must be between 3 and 100 characters")
    if orientation not in DIRECTIONS:
        raise ValidationError("Property orientation is required")
    if description and len(description) > 500:
        raise ValidationError("Description cannot exceed 500 characters")

    with transaction.atomic():
        analysis = Analysis(
            user_id=user_id,
            title=title,
            description=description or "",
            orientation=orientation,
            length=length,
            width=width,
            unit=unit,
            rooms=rooms or [],
            is_public=is_public,
            tags=tags or [],
        )
        analysis.save()
        AnalysisFile.objects.bulk_create(
            AnalysisFile(
                analysis=analysis,
                position=position,
                **{field: blob.get(field) for field in FILE_FIELDS},
            )
            for position, blob in enumerate(files or [])
        )

    logger.info("Created analysis %s for user %s", analysis.id, user_id)
    return format_analysis(_load(analysis.id))


def start_analysis(analysis_id: int, principal: Optional[Principal]) -> dict:
    """
    Move a pending analysis to ``processing`` and schedule scoring.

    The status check and the transition are one conditional UPDATE, so only
    one of several concurrent callers wins; the others get ConflictError.
    Returns the ``processing`` snapshot without waiting for the score.
    """
    if principal is None:
        raise UnauthorizedError("Access denied. Please login first.")

    with transaction.atomic():
        row = Analysis.objects.filter(id=analysis_id).values("user_id").first()
        if row is None:
            raise NotFoundError("Analysis not found")
        if row["user_id"] != principal.id:
            raise ForbiddenError("You can only process your own analyses")
        if settings.ANALYSIS_START_REQUIRES_PREMIUM and not principal.is_premium:
            raise ForbiddenError("Premium subscription required to process analyses")

        now = timezone.now()
        started = Analysis.objects.filter(
            id=analysis_id, status=Analysis.Status.PENDING
        ).update(
            status=Analysis.Status.PROCESSING,
            processing_started_at=now,
            updated_at=now,
        )
        if started != 1:
            raise ConflictError("Analysis is already processing or completed")
        snapshot = format_analysis(_load(analysis_id))

    logger.info("Analysis %s moved to processing", analysis_id)
    get_scoring_queue().enqueue(run_scoring_job, analysis_id)
    return snapshot


def _validate_payload(payload: Dict[str, Any]) -> dict:
    try:
        validated = VastuAnalysisSchema.model_validate(payload)
    except pydantic.ValidationError as exc:
        details = [
            {"loc": list(err["loc"]), "msg": err["msg"]} for err in exc.errors()
        ]
        raise ValidationError("Invalid analysis result payload", details=details)
    return validated.model_dump()


def complete_analysis(analysis_id: int, payload: Dict[str, Any]) -> Analysis:
    """Attach a validated result and move ``processing -> completed``."""
    result = _validate_payload(payload)
    with transaction.atomic():
        analysis = Analysis.objects.select_for_update().filter(id=analysis_id).first()
        if analysis is None:
            raise NotFoundError("Analysis not found")
        if analysis.status != Analysis.Status.PROCESSING:
            raise ConflictError(
                f"Cannot complete an analysis in status '{analysis.status}'"
            )
        analysis.status = Analysis.Status.COMPLETED
        analysis.completed_at = timezone.now()
        if analysis.processing_started_at > analysis.completed_at:
            analysis.completed_at = analysis.processing_started_at
        analysis.processing_time = analysis.processing_duration
        analysis.vastu_analysis = result
        analysis.overall_score = result["overall_score"]
        analysis.save(
            update_fields=[
                "status",
                "completed_at",
                "processing_time",
                "vastu_analysis",
                "overall_score",
                "updated_at",
            ]
        )

    logger.info(
        "Analysis %s completed with score %s in %ss",
        analysis_id,
        analysis.overall_score,
        analysis.processing_time,
    )
    return analysis


def fail_analysis(analysis_id: int, reason: str) -> Analysis:
    """Move ``processing -> failed``; ``processing_started_at`` is kept."""
    with transaction.atomic():
        analysis = Analysis.objects.select_for_update().filter(id=analysis_id).first()
        if analysis is None:
            raise NotFoundError("Analysis not found")
        if analysis.status != Analysis.Status.PROCESSING:
            raise ConflictError(
                f"Cannot fail an analysis in status '{analysis.status}'"
            )
        analysis.status = Analysis.Status.FAILED
        analysis.failure_reason = reason
        analysis.save(update_fields=["status", "failure_reason", "updated_at"])

    logger.warning("Analysis %s failed: %s", analysis_id, reason)
    return analysis


def run_scoring_job(analysis_id: int) -> None:
    """
    Score a processing analysis and record the outcome.

    Never raises: a strategy error, an invalid payload or a timeout all end
    in ``failed``.
    """
    timeout = settings.ANALYSIS_SCORING_TIMEOUT
    try:
        analysis = Analysis.objects.filter(id=analysis_id).first()
        if analysis is None or analysis.status != Analysis.Status.PROCESSING:
            logger.warning("Skipping scoring for analysis %s: not processing", analysis_id)
            return
        floor_plan = analysis.floor_plan
        rules = rule_snapshot()
        strategy = get_scoring_strategy()
        payload = call_with_timeout(strategy.score, timeout, floor_plan, rules)
        complete_analysis(analysis_id, payload)
    except ScoringTimeout:
        _fail_quietly(analysis_id, f"Scoring timed out after {timeout} seconds")
    except Exception as exc:
        logger.exception("Scoring failed for analysis %s", analysis_id)
        _fail_quietly(analysis_id, f"Scoring failed: {exc}")


def _fail_quietly(analysis_id: int, reason: str) -> None:
    try:
        fail_analysis(analysis_id, reason)
    except Exception:
        logger.exception("Could not mark analysis %s as failed", analysis_id)


def score_floor_plan(principal: Optional[Principal], floor_plan: Dict[str, Any]) -> dict:
    """
    Score a floor plan on the spot without storing an analysis.

    Uses the configured strategy and the same timeout as the queue. A slow
    or broken strategy surfaces as DependencyError.
    """
    if principal is None:
        raise UnauthorizedError("Access denied. Please login first.")
    if settings.ANALYSIS_START_REQUIRES_PREMIUM and not principal.is_premium:
        raise ForbiddenError("Premium subscription required to score floor plans")
    if floor_plan.get("orientation") not in DIRECTIONS:
        raise ValidationError("Property orientation is required")

    dimensions = dict(floor_plan.get("dimensions") or {})
    dimensions.setdefault("unit", "sqft")
    dimensions["area"] = derive_area(dimensions.get("length"), dimensions.get("width"))
    plan = {
        "orientation": floor_plan["orientation"],
        "dimensions": dimensions,
        "rooms": list(floor_plan.get("rooms") or []),
    }

    timeout = settings.ANALYSIS_SCORING_TIMEOUT
    strategy = get_scoring_strategy()
    try:
        payload = call_with_timeout(strategy.score, timeout, plan, rule_snapshot())
    except ScoringTimeout:
        raise DependencyError(f"Scoring timed out after {timeout} seconds")
    except Exception as exc:
        logger.exception("On-demand scoring failed for user %s", principal.id)
        raise DependencyError(f"Scoring failed: {exc}")
    return _validate_payload(payload)


# =============================================================================
# Queries
# =============================================================================


def get_analysis(analysis_id: int, principal: Optional[Principal]) -> dict:
    """Read one analysis; non-owners see public analyses only and bump views."""
    analysis = _load(analysis_id)
    if analysis is None:
        raise NotFoundError("Analysis not found")
    is_owner = principal is not None and principal.id == analysis.user_id
    if not is_owner and not analysis.is_public:
        raise ForbiddenError("This analysis is private")

    data = format_analysis(analysis)
    if not is_owner:
        try:
            Analysis.objects.filter(id=analysis_id).update(views=F("views") + 1)
            data["views"] += 1
        except DatabaseError:
            logger.warning("Could not record view for analysis %s", analysis_id, exc_info=True)
    return data


def _tag_filter(tags: List[str]) -> Q:
    """Match analyses carrying any of ``tags``."""
    query = Q()
    for tag in tags:
        if connection.features.supports_json_field_contains:
            query |= Q(tags__contains=[tag])
        else:
            query |= Q(tags__icontains=json.dumps(tag))
    return query


def list_analyses(
    principal: Optional[Principal],
    *,
    page: int = 1,
    limit: int = 10,
    sort: str = "-createdAt",
    min_score: Optional[int] = None,
    tags: Optional[List[str]] = None,
    mine: bool = False,
    status: Optional[str] = None,
) -> Tuple[List[dict], int]:
    """Return one page of the public feed, or of the caller's own analyses."""
    if not 1 <= limit <= 100:
        raise ValidationError("Limit must be between 1 and 100")
    if page < 1:
        raise ValidationError("Page must be at least 1")
    descending = sort.startswith("-")
    field = SORT_FIELDS.get(sort.lstrip("-"))
    if field is None:
        raise ValidationError(f"Cannot sort by '{sort}'")

    if mine:
        if principal is None:
            raise UnauthorizedError("Access denied. Please login first.")
        queryset = Analysis.objects.filter(user_id=principal.id)
        if status:
            queryset = queryset.filter(status=status)
    else:
        queryset = Analysis.objects.filter(is_public=True)
    if min_score is not None:
        queryset = queryset.filter(overall_score__gte=min_score)
    if tags:
        queryset = queryset.filter(_tag_filter(tags))

    order = f"-{field}" if descending else field
    queryset = queryset.order_by(order, "-id")
    total = queryset.count()
    offset = (page - 1) * limit
    rows = queryset.values(*SUMMARY_FIELDS)[offset : offset + limit]
    return [format_summary(row) for row in rows], total


def popular_analyses(limit: int = 10) -> List[dict]:
    if not 1 <= limit <= 100:
        raise ValidationError("Limit must be between 1 and 100")
    rows = (
        Analysis.objects.filter(is_public=True)
        .order_by("-views", "-likes", "-id")
        .values(*SUMMARY_FIELDS)[:limit]
    )
    return [format_summary(row) for row in rows]


def recent_analyses(limit: int = 10) -> List[dict]:
    if not 1 <= limit <= 100:
        raise ValidationError("Limit must be between 1 and 100")
    rows = (
        Analysis.objects.filter(is_public=True)
        .order_by("-created_at", "-id")
        .values(*SUMMARY_FIELDS)[:limit]
    )
    return [format_summary(row) for row in rows]


# =============================================================================
# Mutations
# =============================================================================


def increment_counter(
    analysis_id: int, field: str, principal: Optional[Principal]
) -> int:
    """Atomically add one to ``likes`` or ``shares`` of a public analysis."""
    if field not in COUNTER_FIELDS:
        raise ValidationError(f"Unknown counter '{field}'")
    if principal is None:
        raise UnauthorizedError("Access denied. Please login first.")
    row = Analysis.objects.filter(id=analysis_id).values("is_public").first()
    if row is None:
        raise NotFoundError("Analysis not found")
    if not row["is_public"]:
        raise ForbiddenError("Only public analyses can be liked or shared")

    Analysis.objects.filter(id=analysis_id).update(**{field: F(field) + 1})
    return Analysis.objects.values_list(field, flat=True).get(id=analysis_id)


def like_analysis(analysis_id: int, principal: Optional[Principal]) -> int:
    return increment_counter(analysis_id, "likes", principal)


def share_analysis(analysis_id: int, principal: Optional[Principal]) -> int:
    return increment_counter(analysis_id, "shares", principal)


def update_analysis(
    analysis_id: int, principal: Optional[Principal], updates: Dict[str, Any]
) -> dict:
    """Owner-only partial update of the descriptive fields."""
    allowed = {"title", "description", "is_public", "tags"}
    updates = {k: v for k, v in updates.items() if k in allowed and v is not None}
    if not updates:
        raise ValidationError("At least one field must be provided for update")
    if "title" in updates and not 3 <= len(updates["title"]) <= 100:
        raise ValidationError("Title must be between 3 and 100 characters")

    with transaction.atomic():
        analysis = _owned(analysis_id, principal)
        for key, value in updates.items():
            setattr(analysis, key, value)
        analysis.save(update_fields=[*updates, "updated_at"])

    logger.info("Updated analysis %s fields %s", analysis_id, sorted(updates))
    return format_analysis(_load(analysis_id))


def delete_analysis(analysis_id: int, principal: Optional[Principal]) -> None:
    """Owner-only hard delete; stored files are removed best-effort."""
    with transaction.atomic():
        analysis = _owned(analysis_id, principal)
        storage_ids = [f.storage_id for f in analysis.files.all()]
        analysis.delete()

    store = get_blob_store()
    for storage_id in storage_ids:
        try:
            store.delete(storage_id)
        except DependencyError:
            logger.warning(
                "Could not delete blob %s of analysis %s", storage_id, analysis_id
            )
    logger.info("Deleted analysis %s", analysis_id)
