from ninja import Query, Router

from core.models import Notification
from core.utils.exceptions import NotFoundError
from core.utils.responses import success_response
from features.auth.api import AuthBearer, require_principal
from .schemas import NotificationListResponse, NotificationResponse

router = Router(auth=AuthBearer())

NOTIFICATION_FIELDS = (
    "id",
    "title",
    "message",
    "is_read",
    "notification_type",
    "analysis_id",
    "created_at",
)


@router.get("/", response=NotificationListResponse)
async def list_notifications(request, unread: bool = Query(False)):
    """List the caller's notifications, newest first."""
    queryset = Notification.objects.filter(user_id=require_principal(request).id)
    if unread:
        queryset = queryset.filter(is_read=False)
    notifications = [
        n async for n in queryset.order_by("-created_at").values(*NOTIFICATION_FIELDS)
    ]
    return success_response(notifications)


@router.put("/{notification_id}/read", response=NotificationResponse)
async def mark_as_read(request, notification_id: int):
    """Mark a notification as read."""
    filters = {"id": notification_id, "user_id": require_principal(request).id}
    updated = await Notification.objects.filter(**filters).aupdate(is_read=True)
    if not updated:
        raise NotFoundError("Notification not found")
    notification = await Notification.objects.filter(**filters).values(*NOTIFICATION_FIELDS).afirst()
    return success_response(notification, "Marked as read")
