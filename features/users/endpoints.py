"""Profile, preferences and statistics of the logged-in user, plus staff user management."""

import logging

from asgiref.sync import sync_to_async
from ninja import Query, Router

from core.utils.exceptions import ValidationError
from core.utils.responses import paginated_response, success_response
from features.auth.api import AuthBearer, require_principal, require_staff
from features.auth.schemas import MessageResponse, UserResponse
from . import service
from .schemas import (
    AdminUserUpdateSchema,
    PreferencesResponse,
    PreferencesUpdateSchema,
    ProfileUpdateSchema,
    UserListQuery,
    UserPageResponse,
    UserStatsResponse,
)

logger = logging.getLogger(__name__)
router = Router(auth=AuthBearer())


@router.get("/profile", response=UserResponse)
async def get_profile(request):
    user = await sync_to_async(service.require_user)(require_principal(request).id)
    return success_response(user)


@router.put("/profile", response=UserResponse)
async def update_profile(request, payload: ProfileUpdateSchema):
    user = await sync_to_async(service.update_profile)(
        require_principal(request).id, payload.dict(exclude_unset=True)
    )
    return success_response(user, "Profile updated successfully")


@router.put("/preferences", response=PreferencesResponse)
async def update_preferences(request, payload: PreferencesUpdateSchema):
    preferences = await sync_to_async(service.update_preferences)(
        require_principal(request).id, payload.dict(exclude_none=True)
    )
    return success_response(preferences, "Preferences updated successfully")


@router.delete("/account", response=MessageResponse)
async def delete_account(request):
    """Deactivate the caller's account."""
    await sync_to_async(service.deactivate_account)(require_principal(request).id)
    return success_response(None, "Account deactivated successfully")


@router.get("/stats", response=UserStatsResponse)
async def user_stats(request):
    stats = await sync_to_async(service.fetch_user_stats)(require_principal(request).id)
    return success_response(stats)


# =============================================================================
# Staff user management
# =============================================================================


@router.get("/", response=UserPageResponse)
async def list_users(request, query: UserListQuery = Query(...)):
    require_staff(request)
    users, total = await sync_to_async(service.fetch_users)(query.page, query.limit)
    return paginated_response(users, query.page, query.limit, total)


@router.get("/{user_id}", response=UserResponse)
async def get_user(request, user_id: int):
    require_staff(request)
    user = await sync_to_async(service.require_user)(user_id)
    return success_response(user)


@router.put("/{user_id}", response=UserResponse)
async def update_user(request, user_id: int, payload: AdminUserUpdateSchema):
    principal = require_staff(request)
    user = await sync_to_async(service.admin_update_user)(
        user_id, payload.dict(exclude_none=True)
    )
    logger.info("User %s updated by staff %s", user_id, principal.id)
    return success_response(user, "User updated successfully")


@router.delete("/{user_id}", response=MessageResponse)
async def deactivate_user(request, user_id: int):
    principal = require_staff(request)
    if user_id == principal.id:
        raise ValidationError("Use /users/account to deactivate your own account")
    await sync_to_async(service.deactivate_account)(user_id)
    return success_response(None, "User deactivated successfully")
