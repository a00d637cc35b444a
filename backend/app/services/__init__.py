# Function-style stores are imported first; the singletons below depend on them
from app.services import activity_log_service, notification_service
from app.services.auth_service import AuthService, auth_service
from app.services.user_service import UserService, user_service
from app.services.profile_service import ProfileService, profile_service
from app.services.student_service import StudentService, student_service
from app.services.settings_service import SettingsService, settings_service
from app.services.upload_service import UploadService, upload_service
from app.services.report_service import ReportService, report_service
from app.services.activity_recorder import ActivityRecorder
from app.services.notification_hub import NotificationHub

__all__ = [
    # Stores
    "activity_log_service",
    "notification_service",
    # Domain services
    "AuthService",
    "auth_service",
    "UserService",
    "user_service",
    "ProfileService",
    "profile_service",
    "StudentService",
    "student_service",
    "SettingsService",
    "settings_service",
    "UploadService",
    "upload_service",
    "ReportService",
    "report_service",
    # Side-effect channels
    "ActivityRecorder",
    "NotificationHub",
]
