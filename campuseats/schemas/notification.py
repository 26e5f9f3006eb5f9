from pydantic import BaseModel, ConfigDict
from typing import List, Optional
import uuid
from datetime import datetime

from campuseats.models.notification import NotificationType


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    message: str
    type: NotificationType
    order_id: Optional[uuid.UUID] = None
    is_read: bool
    created_at: datetime


class NotificationFeed(BaseModel):
    """Newest notifications first, with the unread badge count."""
    notifications: List[NotificationResponse]
    unread_count: int
