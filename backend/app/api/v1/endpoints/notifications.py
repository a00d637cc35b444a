from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.notification import MarkReadRequest, NotificationResponse
from app.services import notification_service
from app.utils.pagination import build_pagination
from app.utils.responses import success_response

router = APIRouter()


@router.get("")
async def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Caller's notifications, newest first, with the unread counter"""
    items, total, unread_count = await notification_service.list_notifications(
        db, current_user.id, page=page, limit=limit
    )
    return success_response("Notifications fetched", {
        "notifications": [
            NotificationResponse.model_validate(n).model_dump(mode="json") for n in items
        ],
        "pagination": build_pagination(total, page, limit),
        "unread_count": unread_count,
    })


@router.post("/mark-read")
async def mark_read(
    data: Optional[MarkReadRequest] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Mark one notification (``id``) or all unread ones as read"""
    await notification_service.mark_read(db, current_user.id, data.id if data else None)
    return success_response("Notifications marked as read")


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Ids owned by another account are ignored"""
    await notification_service.delete_notification(db, current_user.id, notification_id)
    return success_response("Notification deleted")


@router.delete("")
async def clear_notifications(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await notification_service.clear_notifications(db, current_user.id)
    return success_response("All notifications cleared")
