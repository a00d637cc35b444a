"""
Auth Service - credential checks and token issuing
"""

from typing import Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AccountInactiveError, InvalidCredentialsError, UserNotFoundError
from app.core.logging_config import logger
from app.core.security import create_access_token, verify_password
from app.models.user import User, UserStatus


class AuthService:
    """Session issuer"""

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> User:
        """
        Resolve (email, password) to an active account.

        Unknown email and wrong password raise the same InvalidCredentialsError.
        The status check runs only after the password matched, so a
        deactivated account is reported only to someone holding its password.
        """
        result = await db.execute(select(User).where(User.email == email.lower()))
        user = result.scalar_one_or_none()

        if not user or not verify_password(password, user.hashed_password):
            logger.log_auth_event("login", success=False, user_email=email, reason="invalid credentials")
            raise InvalidCredentialsError()

        if user.status != UserStatus.ACTIVE:
            logger.log_auth_event("login", success=False, user_email=email, reason="account inactive")
            raise AccountInactiveError()

        return user

    def issue_token(self, user: User) -> str:
        role = user.role.value if hasattr(user.role, "value") else user.role
        return create_access_token({"sub": str(user.id), "role": role})

    async def login(self, db: AsyncSession, email: str, password: str) -> Tuple[User, str]:
        user = await self.authenticate(db, email, password)
        token = self.issue_token(user)
        logger.log_auth_event("login", success=True, user_email=user.email, user_id=user.id)
        return user, token

    async def get_profile(self, db: AsyncSession, user_id: str) -> User:
        user = await db.get(User, user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return user


# Singleton instance
auth_service = AuthService()
