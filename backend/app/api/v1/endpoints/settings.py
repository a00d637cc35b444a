from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.activity_log import ActivityAction
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.settings import SettingsResponse, SettingsUpdate
from app.services.activity_recorder import log_activity
from app.services.settings_service import settings_service
from app.utils.responses import success_response

router = APIRouter()


@router.get("")
async def get_settings(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    app_setting = await settings_service.get_settings(db)
    return success_response(
        "Settings retrieved successfully",
        SettingsResponse.model_validate(app_setting).model_dump(mode="json")
    )


@router.put("")
async def update_settings(
    request: Request,
    data: SettingsUpdate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    app_setting = await settings_service.update_settings(db, data)

    log_activity(
        background_tasks, request, current_user,
        ActivityAction.UPDATE, "Settings", "Updated application settings",
        meta={"changes": sorted(data.model_dump(exclude_unset=True, exclude_none=True).keys())}
    )

    return success_response(
        "Settings updated successfully",
        SettingsResponse.model_validate(app_setting).model_dump(mode="json")
    )
