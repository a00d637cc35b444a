from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_activity_db, get_db
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.services.report_service import report_service
from app.utils.responses import success_response

router = APIRouter()


@router.get("/stats")
async def dashboard_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    activity_db: AsyncSession = Depends(get_activity_db)
):
    """Admins get system-wide figures; everyone else gets their own activity"""
    data = await report_service.dashboard(db, activity_db, current_user)
    return success_response("Dashboard stats retrieved successfully", data)
