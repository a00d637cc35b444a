"""
Users Management API

Provides endpoints for managing accounts with:
- Pagination (page, limit)
- Search (by name or email)
- Filtering (by role, and by status for super admins only)
- Soft delete (status -> inactive)
"""
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.models.activity_log import ActivityAction
from app.models.notification import NotificationType
from app.models.user import User, UserRole, UserStatus
from app.modules.auth.dependencies import get_current_user, require_admin, require_super_admin
from app.schemas.user import UserCreate, UserFilters, UserResponse, UserUpdate
from app.services.activity_recorder import log_activity
from app.services.user_service import user_service
from app.utils.responses import paginated_response, success_response

router = APIRouter()


def _dump(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")


@router.post("", status_code=201)
async def create_user(
    request: Request,
    data: UserCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    user = await user_service.create_user(db, data)

    log_activity(
        background_tasks, request, current_user,
        ActivityAction.CREATE, "Users", f"Created user {user.name} ({user.email})",
        meta={"target_user_id": user.id}
    )
    background_tasks.add_task(
        request.app.state.notification_hub.notify_admins,
        "New user created",
        f"{current_user.name} created account {user.name} ({user.email})",
        NotificationType.INFO
    )

    return success_response("User created successfully", _dump(user))


# Open to every authenticated role, unlike the admin-only routes below:
# visible_status keeps inactive accounts out of non super_admin results.
@router.get("")
async def list_users(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    search: Optional[str] = Query(None, description="Search by name or email"),
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    status: Optional[UserStatus] = Query(None, description="Filter by status (super admin only)"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    List accounts, newest first.

    Only super admins see inactive accounts; every other caller is limited
    to active ones whatever ``status`` says.
    """
    users, total = await user_service.list_users(
        db,
        caller_role=current_user.role,
        filters=UserFilters(search=search, role=role, status=status),
        page=page,
        limit=limit,
    )
    return paginated_response([_dump(user) for user in users], total, page, limit)


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    user = await user_service.get_user(db, user_id)
    return success_response("User retrieved successfully", _dump(user))


@router.put("/{user_id}")
async def update_user(
    request: Request,
    user_id: str,
    data: UserUpdate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    user, changed = await user_service.update_user(db, user_id, data)

    log_activity(
        background_tasks, request, current_user,
        ActivityAction.UPDATE, "Users", f"Updated user {user.name} ({user.email})",
        meta={"target_user_id": user.id, "changes": changed}
    )

    return success_response("User updated successfully", _dump(user))


@router.delete("/{user_id}")
async def delete_user(
    request: Request,
    user_id: str,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
):
    """Deactivate an account; rows are never removed"""
    user = await user_service.deactivate_user(db, user_id)

    log_activity(
        background_tasks, request, current_user,
        ActivityAction.DELETE, "Users", f"Deleted user ID {user.id}",
        meta={"target_user_id": user.id}
    )

    return success_response("User deleted successfully")
