import json
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


def parse_courses(raw: Optional[str]) -> List[str]:
    """Accept a JSON array ('["A","B"]') or a comma-separated list ('A, B')"""
    if raw is None:
        return []
    raw = raw.strip()
    if raw.startswith('['):
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, list):
            return [str(item).strip() for item in value if str(item).strip()]
    return [item.strip() for item in raw.split(',') if item.strip()]


class StudentCreate(BaseModel):
    name: str = Field(..., min_length=1)
    father_name: str = Field(..., min_length=1)
    qualification: str = Field(..., min_length=1)
    gender: str = Field(..., min_length=1)
    courses: List[str] = Field(..., min_length=1)
    mobile_no: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    total_amount: float = Field(0, ge=0)


class StudentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    father_name: Optional[str] = Field(None, min_length=1)
    qualification: Optional[str] = Field(None, min_length=1)
    gender: Optional[str] = Field(None, min_length=1)
    courses: Optional[List[str]] = None
    mobile_no: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = Field(None, min_length=1)
    total_amount: Optional[float] = Field(None, ge=0)


class StudentResponse(BaseModel):
    id: str
    name: str
    father_name: str
    qualification: str
    gender: str
    courses: List[str]
    mobile_no: str
    address: str
    photo: Optional[str] = None
    documents: List[str]
    total_amount: float
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StudentFilters(BaseModel):
    search: Optional[str] = None
    gender: Optional[str] = None
    course: Optional[str] = None
    qualification: Optional[str] = None
    sort_by: str = "created_at"
    sort_order: str = "desc"


class CourseResponse(BaseModel):
    id: int
    name: str
    price: int
