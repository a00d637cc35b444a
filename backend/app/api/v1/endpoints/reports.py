from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_activity_db, get_db
from app.models.activity_log import ActivityAction
from app.models.user import User
from app.modules.auth.dependencies import require_super_admin
from app.schemas.user import UserResponse
from app.services.activity_recorder import log_activity
from app.services.report_service import report_service, serialize_logs
from app.utils.pagination import build_pagination
from app.utils.responses import success_response

router = APIRouter()


@router.get("/stats")
async def report_stats(
    request: Request,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db),
    activity_db: AsyncSession = Depends(get_activity_db)
):
    """Account totals and trailing-window activity breakdowns"""
    stats = await report_service.system_report(db, activity_db)

    log_activity(
        background_tasks, request, current_user,
        ActivityAction.VIEW, "Reports", "Viewed system analysis report"
    )

    return success_response("Report statistics retrieved successfully", stats)


@router.get("/user/{user_id}")
async def user_activity_report(
    request: Request,
    user_id: str,
    background_tasks: BackgroundTasks,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db),
    activity_db: AsyncSession = Depends(get_activity_db)
):
    """One account's paginated activity history plus its action breakdown"""
    user, breakdown, logs, total = await report_service.user_report(
        db, activity_db, user_id, page=page, limit=limit
    )

    log_activity(
        background_tasks, request, current_user,
        ActivityAction.VIEW, "Reports", f"Viewed detailed activity report for user {user.name}",
        meta={"target_user_id": user.id}
    )

    return {
        "success": True,
        "message": "Data retrieved successfully",
        "data": {
            "user": UserResponse.model_validate(user).model_dump(mode="json"),
            "stats": breakdown,
            "logs": serialize_logs(logs),
        },
        "pagination": build_pagination(total, page, limit),
    }
