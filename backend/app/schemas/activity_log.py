from pydantic import BaseModel
from typing import Any, Dict, Optional
from datetime import datetime

from app.models.activity_log import ActivityAction


class ActivityLogResponse(BaseModel):
    id: str
    user_id: str
    user_name: str
    user_role: str
    action: ActivityAction
    module: str
    description: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ActivityLogFilters(BaseModel):
    search: Optional[str] = None
    module: Optional[str] = None
    action: Optional[ActivityAction] = None
