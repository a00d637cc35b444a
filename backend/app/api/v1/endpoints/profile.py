from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.models.activity_log import ActivityAction
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.profile import ChangePasswordRequest, ProfileUpdate
from app.schemas.user import UserResponse
from app.services.activity_recorder import log_activity
from app.services.profile_service import profile_service
from app.services.upload_service import upload_service
from app.utils.responses import success_response

router = APIRouter()


@router.get("")
async def get_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    user = await profile_service.get_profile(db, current_user.id)
    return success_response(
        "Profile retrieved successfully",
        UserResponse.model_validate(user).model_dump(mode="json")
    )


@router.put("")
async def update_profile(
    request: Request,
    background_tasks: BackgroundTasks,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Multipart form: optional name, email and avatar image (JPEG/PNG/WebP, 5MB)"""
    data = ProfileUpdate(name=name or None, email=email or None)

    avatar_path = None
    if avatar is not None and avatar.filename:
        avatar_path = await upload_service.save_avatar(avatar)

    try:
        user = await profile_service.update_profile(db, current_user.id, data, avatar=avatar_path)
    except Exception:
        await upload_service.discard([avatar_path] if avatar_path else [])
        raise

    log_activity(
        background_tasks, request, current_user,
        ActivityAction.UPDATE, "Profile", "User updated their profile"
    )

    return success_response(
        "Profile updated successfully",
        UserResponse.model_validate(user).model_dump(mode="json")
    )


@router.post("/change-password")
async def change_password(
    request: Request,
    data: ChangePasswordRequest,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await profile_service.change_password(db, current_user.id, data.current_password, data.new_password)

    log_activity(
        background_tasks, request, current_user,
        ActivityAction.UPDATE, "Profile", "User changed their password"
    )

    return success_response("Password changed successfully")
