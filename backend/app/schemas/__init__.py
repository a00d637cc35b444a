# Pydantic schemas
from app.schemas.auth import UserLogin, LoginResponse
from app.schemas.user import UserCreate, UserUpdate, UserResponse, UserFilters
from app.schemas.profile import ProfileUpdate, ChangePasswordRequest
from app.schemas.student import (
    StudentCreate,
    StudentUpdate,
    StudentResponse,
    StudentFilters,
    CourseResponse,
)
from app.schemas.notification import NotificationResponse, MarkReadRequest
from app.schemas.activity_log import ActivityLogResponse, ActivityLogFilters
from app.schemas.settings import SettingsResponse, SettingsUpdate

__all__ = [
    "UserLogin",
    "LoginResponse",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserFilters",
    "ProfileUpdate",
    "ChangePasswordRequest",
    "StudentCreate",
    "StudentUpdate",
    "StudentResponse",
    "StudentFilters",
    "CourseResponse",
    "NotificationResponse",
    "MarkReadRequest",
    "ActivityLogResponse",
    "ActivityLogFilters",
    "SettingsResponse",
    "SettingsUpdate",
]
