from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.models.notification import NotificationType


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class MarkReadRequest(BaseModel):
    """Omit id to mark every unread notification of the caller"""
    id: Optional[str] = None
