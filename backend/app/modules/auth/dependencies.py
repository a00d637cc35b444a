from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Callable, Iterable, Optional
import uuid

from app.core.database import get_db
from app.core.exceptions import AccountInactiveError, AuthenticationError, AuthorizationError
from app.core.middleware import bind_actor
from app.core.security import decode_token
from app.models.user import User, UserRole, UserStatus

# auto_error=False: a missing header must surface as 401, not FastAPI's 403
security = HTTPBearer(auto_error=False)

ADMIN_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPER_ADMIN})
SUPER_ADMIN_ONLY = frozenset({UserRole.SUPER_ADMIN})


def has_role(user: Optional[User], allowed_roles: Iterable[UserRole]) -> bool:
    """Single capability check used by route guards and role-scoped handlers"""
    if user is None:
        return False
    return UserRole(user.role) in set(allowed_roles)


def is_admin(user: Optional[User]) -> bool:
    return has_role(user, ADMIN_ROLES)


async def resolve_user_from_token(db: AsyncSession, token: Optional[str]) -> User:
    """
    Resolve a bearer token to an active account.

    Raises AuthenticationError (401) for a missing/invalid/expired token or a
    vanished account and AccountInactiveError (403) for a deactivated one.
    Shared by the HTTP dependency and the WebSocket handshake.
    """
    if not token:
        raise AuthenticationError("Authentication required")

    payload = decode_token(token)
    user_id = payload["sub"]

    try:
        uuid.UUID(user_id)
    except ValueError:
        raise AuthenticationError("Invalid token payload")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("User not found")

    if user.status != UserStatus.ACTIVE:
        raise AccountInactiveError()

    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Get current authenticated user"""
    token = credentials.credentials if credentials else None
    user = await resolve_user_from_token(db, token)
    bind_actor(request, user.id, user.role)
    return user


def require_roles(*roles: UserRole) -> Callable:
    """
    Build a dependency that admits only the given roles.

    Usage:
        @router.get("/", dependencies=[Depends(require_roles(UserRole.SUPER_ADMIN))])
    or, to also receive the caller:
        current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.SUPER_ADMIN))
    """
    allowed = frozenset(roles)

    async def role_checker(current_user: Optional[User] = Depends(get_current_user)) -> User:
        if current_user is None:
            raise AuthenticationError()
        if not has_role(current_user, allowed):
            raise AuthorizationError()
        return current_user

    return role_checker


require_admin = require_roles(UserRole.ADMIN, UserRole.SUPER_ADMIN)
require_super_admin = require_roles(UserRole.SUPER_ADMIN)
