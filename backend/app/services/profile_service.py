"""
Profile Service - self-service account edits
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DuplicateEmailError, UserNotFoundError, ValidationError
from app.core.security import get_password_hash, verify_password
from app.models.user import User
from app.schemas.profile import ProfileUpdate


class ProfileService:

    async def get_profile(self, db: AsyncSession, user_id: str) -> User:
        user = await db.get(User, user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return user

    async def update_profile(
        self,
        db: AsyncSession,
        user_id: str,
        data: ProfileUpdate,
        avatar: Optional[str] = None
    ) -> User:
        user = await self.get_profile(db, user_id)

        if data.email:
            email = data.email.lower()
            taken = await db.execute(select(User.id).where(User.email == email, User.id != user.id))
            if taken.first():
                raise DuplicateEmailError()
            user.email = email

        if data.name:
            user.name = data.name

        if avatar:
            user.avatar = avatar

        await db.commit()
        await db.refresh(user)
        return user

    async def change_password(self, db: AsyncSession, user_id: str, current_password: str, new_password: str) -> None:
        user = await self.get_profile(db, user_id)

        if not verify_password(current_password, user.hashed_password):
            raise ValidationError("Current password is incorrect", field="current_password")

        user.hashed_password = get_password_hash(new_password)
        await db.commit()


# Singleton instance
profile_service = ProfileService()
