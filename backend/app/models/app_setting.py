from sqlalchemy import Column, String, DateTime

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class AppSetting(Base):
    """Global application settings; a single row created on first read"""
    __tablename__ = "app_settings"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    app_name = Column(String(255), nullable=False)
    support_email = Column(String(255), nullable=False)

    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<AppSetting {self.app_name}>"
