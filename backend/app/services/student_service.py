"""
Student Service - student record CRUD

Handles:
- Create/update with uploaded photo and documents
- Filtered, sorted, paginated listing
- The fixed course catalogue
"""

from typing import List, Optional, Tuple

from sqlalchemy import select, func, or_, String, cast
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StudentNotFoundError, ValidationError
from app.models.student import Student
from app.schemas.student import CourseResponse, StudentCreate, StudentFilters, StudentUpdate
from app.utils.pagination import paginate
from app.utils.search import LIKE_ESCAPE, contains_pattern

COURSES = [
    {"id": 1, "name": "Full Stack Web Development", "price": 25000},
    {"id": 2, "name": "Data Science", "price": 30000},
    {"id": 3, "name": "Digital Marketing", "price": 15000},
    {"id": 4, "name": "Graphic Design", "price": 12000},
    {"id": 5, "name": "Mobile App Development", "price": 20000},
]

SORTABLE_COLUMNS = {
    "name": Student.name,
    "father_name": Student.father_name,
    "qualification": Student.qualification,
    "gender": Student.gender,
    "mobile_no": Student.mobile_no,
    "total_amount": Student.total_amount,
    "created_at": Student.created_at,
    "updated_at": Student.updated_at,
}


class StudentService:
    """Service for managing student records"""

    def list_courses(self) -> List[CourseResponse]:
        return [CourseResponse(**course) for course in COURSES]

    async def get_student(self, db: AsyncSession, student_id: str) -> Student:
        student = await db.get(Student, student_id)
        if not student:
            raise StudentNotFoundError(student_id)
        return student

    async def create_student(
        self,
        db: AsyncSession,
        data: StudentCreate,
        photo: Optional[str] = None,
        documents: Optional[List[str]] = None
    ) -> Student:
        student = Student(
            **data.model_dump(),
            photo=photo,
            documents=list(documents or []),
        )
        db.add(student)
        await db.commit()
        await db.refresh(student)
        return student

    async def list_students(
        self,
        db: AsyncSession,
        filters: StudentFilters,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Student], int]:
        conditions = []

        if filters.search:
            pattern = contains_pattern(filters.search)
            conditions.append(or_(
                Student.name.ilike(pattern, escape=LIKE_ESCAPE),
                Student.mobile_no.ilike(pattern, escape=LIKE_ESCAPE),
                Student.father_name.ilike(pattern, escape=LIKE_ESCAPE),
            ))

        if filters.gender:
            conditions.append(Student.gender == filters.gender)

        if filters.course:
            # Substring match over the serialized course list
            conditions.append(cast(Student.courses, String).ilike(
                contains_pattern(filters.course), escape=LIKE_ESCAPE
            ))

        if filters.qualification:
            conditions.append(Student.qualification.ilike(
                contains_pattern(filters.qualification), escape=LIKE_ESCAPE
            ))

        sort_column = SORTABLE_COLUMNS.get(filters.sort_by)
        if sort_column is None:
            raise ValidationError(
                f"Cannot sort by '{filters.sort_by}'. Allowed: {', '.join(SORTABLE_COLUMNS)}",
                field="sort_by"
            )
        order = sort_column.asc() if filters.sort_order.lower() == "asc" else sort_column.desc()

        return await paginate(
            db,
            select(Student).where(*conditions).order_by(order, Student.id),
            page=page,
            limit=limit,
            count_query=select(func.count(Student.id)).where(*conditions),
        )

    async def update_student(
        self,
        db: AsyncSession,
        student_id: str,
        data: StudentUpdate,
        photo: Optional[str] = None,
        new_documents: Optional[List[str]] = None
    ) -> Student:
        """
        Apply provided fields. A new photo replaces the old one; new
        documents are appended to the existing list.
        """
        student = await self.get_student(db, student_id)

        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(student, field, value)

        if photo:
            student.photo = photo

        if new_documents:
            # Reassign so the JSON column is flagged dirty
            student.documents = list(student.documents or []) + list(new_documents)

        await db.commit()
        await db.refresh(student)
        return student

    async def delete_student(self, db: AsyncSession, student_id: str) -> Student:
        student = await self.get_student(db, student_id)
        await db.delete(student)
        await db.commit()
        return student


# Singleton instance
student_service = StudentService()
