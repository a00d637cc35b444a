from fastapi import APIRouter
from app.api.v1.endpoints import (
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

api_router = APIRouter()

# Deep health checks (/health/live, /health/ready)
api_router.include_router(health.router)

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(profile.router, prefix="/profile", tags=["Profile"])
api_router.include_router(students.router, prefix="/students", tags=["Students"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(settings.router, prefix="/settings", tags=["Settings"])
api_router.include_router(activity_logs.router, prefix="/activity-logs", tags=["Activity Logs"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])

# Live notifications over WebSocket (/ws/notifications)
api_router.include_router(notifications_ws.router, tags=["Notifications"])
