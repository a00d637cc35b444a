# Re-export all models for convenient imports
from app.models.user import User, UserRole, UserStatus
from app.models.student import Student
from app.models.notification import Notification, NotificationType
from app.models.app_setting import AppSetting
from app.models.activity_log import ActivityLog, ActivityAction

__all__ = [
    # Accounts
    "User",
    "UserRole",
    "UserStatus",
    # Students
    "Student",
    # Notifications
    "Notification",
    "NotificationType",
    # Settings
    "AppSetting",
    # Audit trail
    "ActivityLog",
    "ActivityAction",
]
