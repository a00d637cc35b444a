# Authentication module

from app.modules.auth.dependencies import (
    get_current_user,
    resolve_user_from_token,
    require_roles,
    require_admin,
    require_super_admin,
    has_role,
    is_admin,
    ADMIN_ROLES,
    SUPER_ADMIN_ONLY,
)

__all__ = [
    "get_current_user",
    "resolve_user_from_token",
    "require_roles",
    "require_admin",
    "require_super_admin",
    "has_role",
    "is_admin",
    "ADMIN_ROLES",
    "SUPER_ADMIN_ONLY",
]
