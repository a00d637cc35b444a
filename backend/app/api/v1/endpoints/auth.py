from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.middleware import bind_actor
from app.core.rate_limiter import login_rate_limit
from app.models.activity_log import ActivityAction
from app.models.notification import NotificationType
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.auth import LoginResponse, UserLogin
from app.schemas.user import UserResponse
from app.services.activity_recorder import log_activity
from app.services.auth_service import auth_service
from app.utils.responses import success_response

router = APIRouter()


@router.post("/login")
@login_rate_limit()
async def login(
    request: Request,
    credentials: UserLogin,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db)
):
    """
    Exchange email + password for a bearer token.

    Unknown email and wrong password return the same 401; a deactivated
    account returns 403.
    """
    user, token = await auth_service.login(db, credentials.email, credentials.password)
    bind_actor(request, user.id, user.role)

    log_activity(
        background_tasks, request, user,
        ActivityAction.LOGIN, "Auth", "User logged in successfully"
    )
    background_tasks.add_task(
        request.app.state.notification_hub.notify_user,
        user.id, "Login successful", f"Welcome back, {user.name}!", NotificationType.SUCCESS
    )

    body = LoginResponse(token=token, user=UserResponse.model_validate(user))
    return success_response("Login successful", body.model_dump(mode="json"))


@router.get("/profile")
async def get_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Account behind the presented token"""
    user = await auth_service.get_profile(db, current_user.id)
    return success_response(
        "Profile retrieved successfully",
        UserResponse.model_validate(user).model_dump(mode="json")
    )


@router.post("/logout")
async def logout(
    request: Request,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user)
):
    """Tokens are stateless; the client discards its copy. Only the audit entry is written."""
    log_activity(
        background_tasks, request, current_user,
        ActivityAction.LOGOUT, "Auth", "User logged out"
    )
    return success_response("Logout successful")
