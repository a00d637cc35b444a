"""
Activity Logs API (super admin only)

Search by actor name or description, filter by module and action,
newest first. Every view is itself recorded.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_activity_db
from app.models.activity_log import ActivityAction
from app.models.user import User
from app.modules.auth.dependencies import require_super_admin
from app.schemas.activity_log import ActivityLogFilters
from app.services import activity_log_service
from app.services.activity_recorder import log_activity
from app.services.report_service import serialize_logs
from app.utils.responses import paginated_response

router = APIRouter()


@router.get("")
async def list_activity_logs(
    request: Request,
    background_tasks: BackgroundTasks,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Case-insensitive match on actor name or description"),
    module: Optional[str] = Query(None),
    action: Optional[ActivityAction] = Query(None),
    current_user: User = Depends(require_super_admin),
    activity_db: AsyncSession = Depends(get_activity_db)
):
    logs, total = await activity_log_service.list_logs(
        activity_db,
        ActivityLogFilters(search=search, module=module, action=action),
        page=page,
        limit=limit,
    )

    log_activity(
        background_tasks, request, current_user,
        ActivityAction.VIEW, "Activity Logs", "Viewed activity logs"
    )

    return paginated_response(serialize_logs(logs), total, page, limit)
