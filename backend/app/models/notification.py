from sqlalchemy import Column, String, DateTime, Text, Boolean, ForeignKey, Index, Enum as SQLEnum
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow
from app.models.user import enum_values


class NotificationType(str, enum.Enum):
    """Notification severity"""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(Base):
    """Per-account notification with a read flag"""
    __tablename__ = "notifications"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(
        SQLEnum(NotificationType, name="notification_type", values_callable=enum_values),
        default=NotificationType.INFO,
        nullable=False
    )
    read = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index('ix_notifications_user_created', 'user_id', 'created_at'),
        Index('ix_notifications_user_read', 'user_id', 'read'),
    )

    def to_push_payload(self) -> dict:
        """Shape pushed over the live channel"""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "message": self.message,
            "type": self.type.value if isinstance(self.type, NotificationType) else self.type,
            "read": self.read,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Notification {self.title} -> {self.user_id}>"
