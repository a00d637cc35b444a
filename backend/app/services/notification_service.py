"""
Notification store

Persistence side of notifications. Every query is scoped to the owning
account, so ids belonging to someone else are silently ignored.
"""

from typing import List, Optional, Tuple

from sqlalchemy import select, func, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.notification import Notification, NotificationType
from app.models.user import User, UserRole
from app.utils.pagination import paginate


async def create_notification(
    db: AsyncSession,
    user_id: str,
    title: str,
    message: str,
    type: NotificationType = NotificationType.INFO
) -> Notification:
    notification = Notification(user_id=user_id, title=title, message=message, type=type)
    db.add(notification)
    await db.flush()
    await db.refresh(notification)
    return notification


async def create_admin_notifications(
    db: AsyncSession,
    title: str,
    message: str,
    type: NotificationType = NotificationType.INFO
) -> List[str]:
    """Bulk-insert one row per admin/super_admin account; returns their ids"""
    result = await db.execute(
        select(User.id).where(User.role.in_([UserRole.ADMIN, UserRole.SUPER_ADMIN]))
    )
    admin_ids = [row[0] for row in result.all()]

    db.add_all([
        Notification(user_id=admin_id, title=title, message=message, type=type)
        for admin_id in admin_ids
    ])
    await db.flush()
    return admin_ids


async def list_notifications(
    db: AsyncSession,
    user_id: str,
    page: int = 1,
    limit: int = 10
) -> Tuple[List[Notification], int, int]:
    """Newest first. Returns (items, total, unread_count)"""
    unread_count = (await db.execute(
        select(func.count(Notification.id)).where(
            Notification.user_id == user_id,
            Notification.read.is_(False)
        )
    )).scalar() or 0

    items, total = await paginate(
        db,
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc()),
        page=page,
        limit=limit,
        count_query=select(func.count(Notification.id)).where(Notification.user_id == user_id),
    )
    return items, total, unread_count


async def mark_read(db: AsyncSession, user_id: str, notification_id: Optional[str] = None) -> int:
    """Mark one (if id given) or every unread notification of the owner as read"""
    stmt = update(Notification).where(Notification.user_id == user_id)
    if notification_id:
        stmt = stmt.where(Notification.id == notification_id)
    else:
        stmt = stmt.where(Notification.read.is_(False))

    result = await db.execute(stmt.values(read=True).execution_options(synchronize_session=False))
    await db.commit()
    return result.rowcount or 0


async def delete_notification(db: AsyncSession, user_id: str, notification_id: str) -> int:
    result = await db.execute(
        delete(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user_id
        )
    )
    await db.commit()
    return result.rowcount or 0


async def clear_notifications(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(delete(Notification).where(Notification.user_id == user_id))
    await db.commit()
    return result.rowcount or 0
