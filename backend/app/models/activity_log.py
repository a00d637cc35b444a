from sqlalchemy import Column, String, DateTime, Text, JSON, Index, Enum as SQLEnum
import enum

from app.core.database import ActivityBase
from app.core.types import GUID, generate_uuid, utcnow
from app.models.user import enum_values


class ActivityAction(str, enum.Enum):
    """Kinds of audited actions"""
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    VIEW = "VIEW"
    OTHER = "OTHER"


class ActivityLog(ActivityBase):
    """
    Append-only audit trail entry.

    Lives on its own metadata and engine, so there is no foreign key to
    users: the actor's name and role are snapshotted at write time.
    """
    __tablename__ = "activity_logs"

    id = Column(GUID, primary_key=True, default=generate_uuid)

    # Actor snapshot
    user_id = Column(GUID, nullable=False)
    user_name = Column(String(255), nullable=False)
    user_role = Column(String(50), nullable=False)

    # Action details
    action = Column(
        SQLEnum(ActivityAction, name="activity_action", values_callable=enum_values),
        nullable=False
    )
    module = Column(String(100), nullable=False)  # e.g. 'Auth', 'Users', 'Students', 'Reports'
    description = Column(Text, nullable=True)
    meta = Column(JSON, nullable=True)  # Free-form extra context (target ids, changed fields)

    # Request metadata
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)

    # Timestamp
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index('ix_activity_logs_created_at', 'created_at'),
        Index('ix_activity_logs_user_date', 'user_id', 'created_at'),
        Index('ix_activity_logs_module', 'module'),
        Index('ix_activity_logs_action', 'action'),
    )

    def __repr__(self):
        return f"<ActivityLog {self.action} {self.module} by {self.user_id}>"
