from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class SettingsResponse(BaseModel):
    id: str
    app_name: str
    support_email: str
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SettingsUpdate(BaseModel):
    app_name: Optional[str] = Field(None, min_length=1, max_length=255)
    support_email: Optional[EmailStr] = None
