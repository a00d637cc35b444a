"""
Activity log queries (read side of the audit trail)

All functions take a session bound to the activity log database.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity_log import ActivityAction, ActivityLog
from app.schemas.activity_log import ActivityLogFilters
from app.utils.pagination import paginate
from app.utils.search import LIKE_ESCAPE, contains_pattern


def _window(query, since: Optional[datetime] = None, until: Optional[datetime] = None, user_id: Optional[str] = None):
    if since is not None:
        query = query.where(ActivityLog.created_at >= since)
    if until is not None:
        query = query.where(ActivityLog.created_at < until)
    if user_id is not None:
        query = query.where(ActivityLog.user_id == str(user_id))
    return query


async def list_logs(
    db: AsyncSession,
    filters: ActivityLogFilters,
    page: int = 1,
    limit: int = 10,
    user_id: Optional[str] = None
) -> Tuple[List[ActivityLog], int]:
    """Filtered, newest-first page of entries"""
    conditions = []

    if filters.search:
        pattern = contains_pattern(filters.search)
        conditions.append(or_(
            ActivityLog.user_name.ilike(pattern, escape=LIKE_ESCAPE),
            ActivityLog.description.ilike(pattern, escape=LIKE_ESCAPE),
        ))
    if filters.module:
        conditions.append(ActivityLog.module == filters.module)
    if filters.action:
        conditions.append(ActivityLog.action == filters.action)
    if user_id is not None:
        conditions.append(ActivityLog.user_id == str(user_id))

    return await paginate(
        db,
        select(ActivityLog).where(*conditions).order_by(ActivityLog.created_at.desc()),
        page=page,
        limit=limit,
        count_query=select(func.count(ActivityLog.id)).where(*conditions),
    )


async def count_logs(
    db: AsyncSession,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    user_id: Optional[str] = None
) -> int:
    query = _window(select(func.count(ActivityLog.id)), since, until, user_id)
    return (await db.execute(query)).scalar() or 0


async def recent_logs(db: AsyncSession, limit: int = 5, user_id: Optional[str] = None) -> List[ActivityLog]:
    query = _window(select(ActivityLog), user_id=user_id)
    result = await db.execute(query.order_by(ActivityLog.created_at.desc()).limit(limit))
    return list(result.scalars().all())


async def count_by_action(
    db: AsyncSession,
    since: Optional[datetime] = None,
    user_id: Optional[str] = None
) -> List[Dict[str, Any]]:
    query = _window(
        select(ActivityLog.action, func.count(ActivityLog.id).label("count")),
        since=since,
        user_id=user_id
    ).group_by(ActivityLog.action).order_by(func.count(ActivityLog.id).desc())
    rows = (await db.execute(query)).all()
    return [
        {"action": action.value if isinstance(action, ActivityAction) else action, "count": count}
        for action, count in rows
    ]


async def count_by_module(db: AsyncSession, since: Optional[datetime] = None) -> List[Dict[str, Any]]:
    query = _window(
        select(ActivityLog.module, func.count(ActivityLog.id).label("count")),
        since=since
    ).group_by(ActivityLog.module).order_by(func.count(ActivityLog.id).desc())
    rows = (await db.execute(query)).all()
    return [{"module": module, "count": count} for module, count in rows]


async def top_actors(db: AsyncSession, since: Optional[datetime] = None, limit: int = 5) -> List[Dict[str, Any]]:
    """Most active (user_id, user_name) pairs by entry count"""
    count_col = func.count(ActivityLog.id).label("count")
    query = _window(
        select(ActivityLog.user_id, ActivityLog.user_name, count_col),
        since=since
    ).group_by(ActivityLog.user_id, ActivityLog.user_name).order_by(count_col.desc()).limit(limit)
    rows = (await db.execute(query)).all()
    return [{"user_id": user_id, "name": name, "count": count} for user_id, name, count in rows]
