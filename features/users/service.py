import logging
from typing import List, Optional, Tuple

from django.contrib.auth.models import User
from django.db import IntegrityError, transaction
from django.db.models import Avg, Count
from django.utils import timezone

from core.models import Analysis, Profile
from core.utils.exceptions import NotFoundError, ValidationError
from features.analysis.service import SUMMARY_FIELDS, format_summary

logger = logging.getLogger(__name__)


USER_FIELDS = (
    "id",
    "first_name",
    "last_name",
    "email",
    "is_staff",
    "is_active",
    "date_joined",
    "last_login",
)
PROFILE_FIELDS = (
    "phone",
    "gender",
    "date_of_birth",
    "avatar",
    "subscription_tier",
    "subscription_active",
    "is_email_verified",
    "is_phone_verified",
    "login_count",
    "preferences",
)


# =============================================================================
# Data Fetching Functions
# =============================================================================


def _merge_profile(user_data: dict, profile_data: Optional[dict]) -> dict:
    profile_data = profile_data or {}
    result = dict(user_data)
    for field in PROFILE_FIELDS:
        result[field] = profile_data.get(field)
    result["is_premium"] = bool(
        result["subscription_active"]
        and result["subscription_tier"] in ("premium", "expert")
    )
    return result


def fetch_user(user_id: int) -> Optional[dict]:
    """
    Fetch a user together with the profile fields.

    Returns:
        dict of user + profile data, or None if the user does not exist.
    """
    user_data = User.objects.filter(id=user_id).values(*USER_FIELDS).first()
    if not user_data:
        return None
    profile_data = Profile.objects.filter(user_id=user_id).values(*PROFILE_FIELDS).first()
    return _merge_profile(user_data, profile_data)


def fetch_users(page: int, limit: int) -> Tuple[List[dict], int]:
    """A page of users, newest first, with their profile fields."""
    users = User.objects.order_by("-date_joined", "-id")
    total = users.count()
    offset = (page - 1) * limit
    rows = list(users.values(*USER_FIELDS)[offset : offset + limit])
    profiles = {
        p["user_id"]: p
        for p in Profile.objects.filter(user_id__in=[r["id"] for r in rows]).values(
            "user_id", *PROFILE_FIELDS
        )
    }
    return [_merge_profile(row, profiles.get(row["id"])) for row in rows], total


def require_user(user_id: int) -> dict:
    user = fetch_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def fetch_user_stats(user_id: int) -> dict:
    """
    Analysis statistics for the dashboard.

    Returns:
        totals by status, the average score of completed analyses and the
        five most recent analyses.
    """
    analyses = Analysis.objects.filter(user_id=user_id)
    by_status = {
        row["status"]: row["count"]
        for row in analyses.values("status").annotate(count=Count("id"))
    }
    average = analyses.filter(status=Analysis.Status.COMPLETED).aggregate(
        avg=Avg("overall_score")
    )["avg"]
    recent = analyses.order_by("-created_at", "-id").values(*SUMMARY_FIELDS)[:5]
    return {
        "total_analyses": sum(by_status.values()),
        "completed_analyses": by_status.get(Analysis.Status.COMPLETED, 0),
        "processing_analyses": by_status.get(Analysis.Status.PROCESSING, 0),
        "pending_analyses": by_status.get(Analysis.Status.PENDING, 0),
        "failed_analyses": by_status.get(Analysis.Status.FAILED, 0),
        "average_score": round(average, 1) if average is not None else None,
        "recent_analyses": [format_summary(r) for r in recent],
    }


# =============================================================================
# Mutations
# =============================================================================


def update_profile(user_id: int, updates: dict) -> dict:
    """Update name fields on User and the rest on Profile."""
    user_updates = {k: updates.pop(k) for k in ("first_name", "last_name") if k in updates}
    try:
        with transaction.atomic():
            if user_updates:
                User.objects.filter(id=user_id).update(**user_updates)
            if updates:
                Profile.objects.filter(user_id=user_id).update(
                    **updates, updated_at=timezone.now()
                )
    except IntegrityError:
        raise ValidationError("Phone number is already registered")
    logger.info("Updated profile of user %s", user_id)
    return require_user(user_id)


def merge_preferences(current: dict, changes: dict) -> dict:
    merged = dict(current or {})
    for key, value in changes.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_preferences(merged[key], value)
        else:
            merged[key] = value
    return merged


def update_preferences(user_id: int, changes: dict) -> dict:
    with transaction.atomic():
        profile = Profile.objects.select_for_update().filter(user_id=user_id).first()
        if profile is None:
            raise NotFoundError("User not found")
        profile.preferences = merge_preferences(profile.preferences, changes)
        profile.updated_at = timezone.now()
        profile.save(update_fields=["preferences", "updated_at"])
    return profile.preferences


def deactivate_account(user_id: int) -> None:
    """Soft delete: the user can no longer log in, data is kept."""
    updated = User.objects.filter(id=user_id, is_active=True).update(is_active=False)
    if not updated:
        raise NotFoundError("User not found")
    logger.info("Deactivated user %s", user_id)


def admin_update_user(user_id: int, updates: dict) -> dict:
    """Staff change of role, activation and subscription."""
    user_updates = {k: updates.pop(k) for k in ("is_staff", "is_active") if k in updates}
    with transaction.atomic():
        if not User.objects.filter(id=user_id).exists():
            raise NotFoundError("User not found")
        if user_updates:
            User.objects.filter(id=user_id).update(**user_updates)
        if updates:
            Profile.objects.filter(user_id=user_id).update(
                **updates, updated_at=timezone.now()
            )
    logger.info("Staff updated user %s fields %s", user_id, sorted({**user_updates, **updates}))
    return require_user(user_id)
