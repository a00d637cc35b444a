"""
User Service - account CRUD and role-scoped listing

Handles:
- Account creation/update with unique email checks
- Soft delete (status -> inactive)
- Listing where the caller's role decides which statuses are visible
"""

from typing import List, Optional, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DuplicateEmailError, UserNotFoundError
from app.core.security import get_password_hash
from app.models.user import User, UserRole, UserStatus
from app.schemas.user import UserCreate, UserFilters, UserUpdate
from app.utils.pagination import paginate
from app.utils.search import LIKE_ESCAPE, contains_pattern


def visible_status(caller_role: UserRole, requested: Optional[UserStatus]) -> Optional[UserStatus]:
    """
    Status filter actually applied for a caller.

    super_admin gets what it asked for (None = every status); any other
    role is pinned to active accounts whatever it asked for.
    """
    if UserRole(caller_role) == UserRole.SUPER_ADMIN:
        return requested
    return UserStatus.ACTIVE


class UserService:
    """Service for managing accounts"""

    async def _ensure_email_free(self, db: AsyncSession, email: str, exclude_id: Optional[str] = None) -> None:
        query = select(User.id).where(User.email == email)
        if exclude_id:
            query = query.where(User.id != exclude_id)
        if (await db.execute(query)).first():
            raise DuplicateEmailError()

    async def get_user(self, db: AsyncSession, user_id: str) -> User:
        user = await db.get(User, user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return user

    async def create_user(self, db: AsyncSession, data: UserCreate) -> User:
        email = data.email.lower()
        await self._ensure_email_free(db, email)

        user = User(
            name=data.name,
            email=email,
            hashed_password=get_password_hash(data.password),
            role=data.role,
            status=data.status or UserStatus.ACTIVE,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    async def list_users(
        self,
        db: AsyncSession,
        caller_role: UserRole,
        filters: UserFilters,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[User], int]:
        """Newest first; see ``visible_status`` for the status rule"""
        conditions = []

        if filters.search:
            pattern = contains_pattern(filters.search)
            conditions.append(or_(
                User.name.ilike(pattern, escape=LIKE_ESCAPE),
                User.email.ilike(pattern, escape=LIKE_ESCAPE),
            ))

        if filters.role:
            conditions.append(User.role == filters.role)

        status = visible_status(caller_role, filters.status)
        if status is not None:
            conditions.append(User.status == status)

        return await paginate(
            db,
            select(User).where(*conditions).order_by(User.created_at.desc()),
            page=page,
            limit=limit,
            count_query=select(func.count(User.id)).where(*conditions),
        )

    async def update_user(self, db: AsyncSession, user_id: str, data: UserUpdate) -> Tuple[User, List[str]]:
        """Apply provided fields only. Returns the user and the changed field names."""
        user = await self.get_user(db, user_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in changes:
            changes["email"] = changes["email"].lower()
            await self._ensure_email_free(db, changes["email"], exclude_id=user.id)

        if "password" in changes:
            user.hashed_password = get_password_hash(changes.pop("password"))

        for field, value in changes.items():
            setattr(user, field, value)

        await db.commit()
        await db.refresh(user)
        return user, sorted(data.model_dump(exclude_unset=True, exclude_none=True).keys())

    async def deactivate_user(self, db: AsyncSession, user_id: str) -> User:
        """Soft delete: accounts are never removed"""
        user = await self.get_user(db, user_id)
        user.status = UserStatus.INACTIVE
        await db.commit()
        await db.refresh(user)
        return user


# Singleton instance
user_service = UserService()
