from sqlalchemy import Column, String, DateTime, Text, Float, JSON

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class Student(Base):
    """Student record"""
    __tablename__ = "students"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False, index=True)
    father_name = Column(String(255), nullable=False)
    qualification = Column(String(255), nullable=False)
    gender = Column(String(20), nullable=False, index=True)

    # Selected course names, serialized as a JSON list
    courses = Column(JSON, nullable=False, default=list)

    mobile_no = Column(String(20), nullable=False, index=True)
    address = Column(Text, nullable=False)

    # Uploaded files, stored as relative paths under the uploads mount
    photo = Column(String(500), nullable=True)
    documents = Column(JSON, nullable=False, default=list)  # Appended to on update, never replaced

    total_amount = Column(Float, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Student {self.name}>"
