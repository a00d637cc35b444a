"""
Report Service - read-only aggregations for the dashboard and reports

Handles:
- Role-scoped dashboard cards, recent activity and the 7-day series
- System report (account totals, 30-day activity breakdowns, top actors)
- Per-account activity report
"""

import math
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import UserNotFoundError
from app.core.types import utcnow
from app.models.activity_log import ActivityLog
from app.models.user import User, UserStatus
from app.modules.auth.dependencies import is_admin
from app.schemas.activity_log import ActivityLogFilters, ActivityLogResponse
from app.services import activity_log_service


def round_half_up(value: float) -> int:
    """Nearest integer with halves rounded up (2.5 -> 3, -2.5 -> -2)"""
    return math.floor(value + 0.5)


def growth_percentage(current: int, previous: int) -> int:
    """
    Period-over-period growth, rounded to the nearest integer.

    A previous period of zero reports 100 when the current one is non-zero
    and 0 when both are zero.
    """
    if previous == 0:
        return 100 if current > 0 else 0
    return round_half_up((current - previous) / previous * 100)


def daily_windows(days: int, now: Optional[datetime] = None) -> List[Tuple[datetime, datetime, str]]:
    """
    ``days`` consecutive [start, end) day windows, oldest first, the last one
    being today. Each entry carries its short weekday label ("Mon").
    """
    now = now or utcnow()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    windows = []
    for offset in range(days - 1, -1, -1):
        start = today - timedelta(days=offset)
        windows.append((start, start + timedelta(days=1), start.strftime("%a")))
    return windows


def serialize_logs(logs: List[ActivityLog]) -> List[Dict[str, Any]]:
    return [ActivityLogResponse.model_validate(log).model_dump(mode="json") for log in logs]


class ReportService:

    async def _count_users(self, db: AsyncSession, *conditions) -> int:
        return (await db.execute(select(func.count(User.id)).where(*conditions))).scalar() or 0

    async def daily_series(
        self,
        db: AsyncSession,
        activity_db: AsyncSession,
        user_id: Optional[str] = None,
        days: Optional[int] = None,
        now: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        """
        Per-day activity and signup counts. With ``user_id`` the activity is
        that account's own and signups are always zero.
        """
        series = []
        for start, end, label in daily_windows(days or settings.DASHBOARD_SERIES_DAYS, now):
            active = await activity_log_service.count_logs(activity_db, since=start, until=end, user_id=user_id)
            if user_id is None:
                new = await self._count_users(db, User.created_at >= start, User.created_at < end)
            else:
                new = 0
            series.append({"name": label, "date": start.date().isoformat(), "active": active, "new": new})
        return series

    async def dashboard(self, db: AsyncSession, activity_db: AsyncSession, user: User) -> Dict[str, Any]:
        now = utcnow()
        window = timedelta(days=settings.REPORT_WINDOW_DAYS)
        limit = settings.RECENT_ACTIVITY_LIMIT

        if is_admin(user):
            total_users = await self._count_users(db)
            active_users = await self._count_users(db, User.status == UserStatus.ACTIVE)

            last_start, prev_start = now - window, now - 2 * window
            new_last = await self._count_users(db, User.created_at >= last_start)
            new_prev = await self._count_users(db, User.created_at >= prev_start, User.created_at < last_start)
            growth = growth_percentage(new_last, new_prev)

            events = await activity_log_service.count_logs(activity_db, since=last_start)
            active_share = round_half_up(active_users / total_users * 100) if total_users else 0

            stats = [
                {"name": "Total Users", "value": total_users, "change": f"{'+' if growth > 0 else ''}{growth}%"},
                {"name": "Active Users", "value": active_users, "change": f"{active_share}% of total"},
                {"name": "System Events", "value": events, "change": f"Last {settings.REPORT_WINDOW_DAYS} days"},
                {"name": "Security Status", "value": "Secure", "change": "No alerts"},
            ]
            recent = await activity_log_service.recent_logs(activity_db, limit=limit)
            chart = await self.daily_series(db, activity_db, now=now)
        else:
            own_count = await activity_log_service.count_logs(activity_db, user_id=user.id)
            stats = [
                {"name": "Your Activity", "value": own_count, "change": "Total actions"},
                {"name": "Profile Status", "value": "Active", "change": "Account verified"},
            ]
            recent = await activity_log_service.recent_logs(activity_db, limit=limit, user_id=user.id)
            chart = await self.daily_series(db, activity_db, user_id=user.id, now=now)

        return {
            "stats": stats,
            "recent_activity": serialize_logs(recent),
            "chart_data": chart,
        }

    async def system_report(self, db: AsyncSession, activity_db: AsyncSession) -> Dict[str, Any]:
        since = utcnow() - timedelta(days=settings.REPORT_WINDOW_DAYS)

        return {
            "users": {
                "total": await self._count_users(db),
                "active": await self._count_users(db, User.status == UserStatus.ACTIVE),
                "inactive": await self._count_users(db, User.status == UserStatus.INACTIVE),
            },
            "activities": {
                "total": await activity_log_service.count_logs(activity_db, since=since),
                "by_action": await activity_log_service.count_by_action(activity_db, since=since),
                "by_module": await activity_log_service.count_by_module(activity_db, since=since),
                "top_users": await activity_log_service.top_actors(
                    activity_db, since=since, limit=settings.TOP_ACTORS_LIMIT
                ),
            },
        }

    async def user_report(
        self,
        db: AsyncSession,
        activity_db: AsyncSession,
        user_id: str,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[User, List[Dict[str, Any]], List[ActivityLog], int]:
        """Returns (user, action breakdown, page of logs, total log count)"""
        user = await db.get(User, user_id)
        if not user:
            raise UserNotFoundError(user_id)

        logs, total = await activity_log_service.list_logs(
            activity_db, ActivityLogFilters(), page=page, limit=limit, user_id=user.id
        )
        breakdown = await activity_log_service.count_by_action(activity_db, user_id=user.id)
        return user, breakdown, logs, total


# Singleton instance
report_service = ReportService()
