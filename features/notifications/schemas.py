from datetime import datetime
from typing import List, Optional

from ninja import Schema


class NotificationSchema(Schema):
    id: int
    title: str
    message: str
    is_read: bool
    notification_type: str
    analysis_id: Optional[int] = None
    created_at: datetime


class NotificationListResponse(Schema):
    success: bool
    message: str
    data: List[NotificationSchema]


class NotificationResponse(Schema):
    success: bool
    message: str
    data: Optional[NotificationSchema] = None
