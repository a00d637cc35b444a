# API endpoints
from . import (
    auth,
    users,
    profile,
    students,
    notifications,
    notifications_ws,
    settings,
    activity_logs,
    reports,
    dashboard,
    health,
)

__all__ = [
    "auth", "users", "profile", "students", "notifications", "notifications_ws",
    "settings", "activity_logs", "reports", "dashboard", "health",
]
