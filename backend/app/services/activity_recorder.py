"""
Activity Recorder

Append-only audit trail writer. ``record`` never raises: a failed write is
logged with its traceback and the primary operation carries on. Endpoints
schedule writes with ``BackgroundTasks`` so the response is not held up.
"""

from typing import Any, Callable, Dict, Optional

from fastapi import BackgroundTasks, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.database import get_activity_session_local
from app.core.logging_config import logger
from app.models.activity_log import ActivityAction, ActivityLog
from app.models.user import User


def extract_client_ip(request: Optional[Request]) -> Optional[str]:
    """First X-Forwarded-For hop, falling back to the socket address"""
    if request is None:
        return None
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def extract_request_context(request: Optional[Request]) -> Dict[str, Optional[str]]:
    if request is None:
        return {"ip_address": None, "user_agent": None}
    return {
        "ip_address": extract_client_ip(request),
        "user_agent": request.headers.get("user-agent"),
    }


class ActivityRecorder:
    """Writes ActivityLog entries through the activity log session factory"""

    def __init__(self, session_factory: Optional[Callable[[], async_sessionmaker[AsyncSession]]] = None):
        self._session_factory = session_factory or get_activity_session_local

    async def record(
        self,
        user_id: str,
        user_name: str,
        user_role: str,
        action: ActivityAction,
        module: str,
        description: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> Optional[ActivityLog]:
        try:
            entry = ActivityLog(
                user_id=str(user_id),
                user_name=user_name,
                user_role=getattr(user_role, "value", user_role),
                action=action,
                module=module,
                description=description,
                ip_address=ip_address,
                user_agent=user_agent,
                meta=meta,
            )
            async with self._session_factory()() as db:
                db.add(entry)
                await db.commit()
            return entry
        except Exception as e:
            logger.log_error_with_context(
                e,
                context="activity_log",
                activity_action=getattr(action, "value", action),
                activity_module=module,
            )
            return None

    async def record_for(
        self,
        user: User,
        action: ActivityAction,
        module: str,
        description: Optional[str] = None,
        request: Optional[Request] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> Optional[ActivityLog]:
        """Record an entry for ``user``, snapshotting its name and role"""
        return await self.record(
            user_id=user.id,
            user_name=user.name,
            user_role=user.role,
            action=action,
            module=module,
            description=description,
            meta=meta,
            **extract_request_context(request),
        )


def log_activity(
    background_tasks: BackgroundTasks,
    request: Request,
    user: User,
    action: ActivityAction,
    module: str,
    description: Optional[str] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Schedule an activity entry after the response is sent.

    The actor snapshot and request context are captured now, while the
    ORM instance and request are still live.
    """
    recorder: ActivityRecorder = request.app.state.activity_recorder
    background_tasks.add_task(
        recorder.record,
        user_id=user.id,
        user_name=user.name,
        user_role=user.role,
        action=action,
        module=module,
        description=description,
        meta=meta,
        **extract_request_context(request),
    )
