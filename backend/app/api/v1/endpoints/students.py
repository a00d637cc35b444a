"""
Student Records API

Multipart create/update with one photo and up to MAX_STUDENT_DOCUMENTS
documents, filtered listing and the course catalogue. Admins and super
admins only.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Query, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import ValidationError
from app.models.activity_log import ActivityAction
from app.models.user import User
from app.modules.auth.dependencies import require_admin
from app.schemas.student import (
    StudentCreate,
    StudentFilters,
    StudentResponse,
    StudentUpdate,
    parse_courses,
)
from app.services.activity_recorder import log_activity
from app.services.student_service import student_service
from app.services.upload_service import upload_service
from app.utils.responses import paginated_response, success_response

router = APIRouter()

MODULE = "Management"


def _dump(student) -> dict:
    return StudentResponse.model_validate(student).model_dump(mode="json")


def _real_files(files: Optional[List[UploadFile]]) -> List[UploadFile]:
    """Browsers send an empty part for an untouched file input"""
    return [f for f in (files or []) if f is not None and f.filename]


async def _store_uploads(photo: Optional[UploadFile], documents: Optional[List[UploadFile]]):
    documents = _real_files(documents)
    if len(documents) > settings.MAX_STUDENT_DOCUMENTS:
        raise ValidationError(
            f"At most {settings.MAX_STUDENT_DOCUMENTS} documents can be uploaded at once",
            field="documents"
        )

    photo_path = None
    if photo is not None and photo.filename:
        photo_path = await upload_service.save_student_photo(photo)

    try:
        document_paths = await upload_service.save_student_documents(documents)
    except Exception:
        await upload_service.discard([photo_path] if photo_path else [])
        raise
    return photo_path, document_paths


def _stored(photo_path: Optional[str], document_paths: List[str]) -> List[str]:
    return ([photo_path] if photo_path else []) + list(document_paths)


@router.get("/courses")
async def list_courses(current_user: User = Depends(require_admin)):
    return success_response(
        "Courses retrieved successfully",
        [course.model_dump() for course in student_service.list_courses()]
    )


@router.post("", status_code=201)
async def create_student(
    request: Request,
    background_tasks: BackgroundTasks,
    name: str = Form(..., min_length=1),
    father_name: str = Form(..., min_length=1),
    qualification: str = Form(..., min_length=1),
    gender: str = Form(..., min_length=1),
    courses: str = Form(..., min_length=1, description="JSON array or comma-separated course names"),
    mobile_no: str = Form(..., min_length=1),
    address: str = Form(..., min_length=1),
    total_amount: float = Form(0, ge=0),
    photo: Optional[UploadFile] = File(None),
    documents: Optional[List[UploadFile]] = File(None),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    course_list = parse_courses(courses)
    if not course_list:
        raise ValidationError("At least one course is required", field="courses")

    data = StudentCreate(
        name=name,
        father_name=father_name,
        qualification=qualification,
        gender=gender,
        courses=course_list,
        mobile_no=mobile_no,
        address=address,
        total_amount=total_amount,
    )

    photo_path, document_paths = await _store_uploads(photo, documents)
    try:
        student = await student_service.create_student(db, data, photo=photo_path, documents=document_paths)
    except Exception:
        await upload_service.discard(_stored(photo_path, document_paths))
        raise

    log_activity(
        background_tasks, request, current_user,
        ActivityAction.CREATE, MODULE, f"Created student {student.name}",
        meta={"student_id": student.id}
    )

    return success_response("Student created successfully", _dump(student))


@router.get("")
async def list_students(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Search name, mobile number or father's name"),
    gender: Optional[str] = Query(None),
    course: Optional[str] = Query(None, description="Course name substring"),
    qualification: Optional[str] = Query(None, description="Qualification substring"),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc", pattern="^(asc|desc|ASC|DESC)$"),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    filters = StudentFilters(
        search=search,
        gender=gender,
        course=course,
        qualification=qualification,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    students, total = await student_service.list_students(db, filters, page=page, limit=limit)
    return paginated_response([_dump(s) for s in students], total, page, limit)


@router.get("/{student_id}")
async def get_student(
    student_id: str,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    student = await student_service.get_student(db, student_id)
    return success_response("Student fetched successfully", _dump(student))


@router.put("/{student_id}")
async def update_student(
    request: Request,
    student_id: str,
    background_tasks: BackgroundTasks,
    name: Optional[str] = Form(None),
    father_name: Optional[str] = Form(None),
    qualification: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    courses: Optional[str] = Form(None),
    mobile_no: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    total_amount: Optional[float] = Form(None, ge=0),
    photo: Optional[UploadFile] = File(None),
    documents: Optional[List[UploadFile]] = File(None),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Provided fields are replaced; a new photo replaces the old one, new documents are appended"""
    # Make sure the record exists before anything is written to disk
    await student_service.get_student(db, student_id)

    data = StudentUpdate(
        name=name or None,
        father_name=father_name or None,
        qualification=qualification or None,
        gender=gender or None,
        courses=parse_courses(courses) or None,
        mobile_no=mobile_no or None,
        address=address or None,
        total_amount=total_amount,
    )

    photo_path, document_paths = await _store_uploads(photo, documents)
    try:
        student = await student_service.update_student(
            db, student_id, data, photo=photo_path, new_documents=document_paths
        )
    except Exception:
        await upload_service.discard(_stored(photo_path, document_paths))
        raise

    log_activity(
        background_tasks, request, current_user,
        ActivityAction.UPDATE, MODULE, f"Updated student {student.name}",
        meta={"student_id": student.id}
    )

    return success_response("Student updated successfully", _dump(student))


@router.delete("/{student_id}")
async def delete_student(
    request: Request,
    student_id: str,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    student = await student_service.delete_student(db, student_id)

    log_activity(
        background_tasks, request, current_user,
        ActivityAction.DELETE, MODULE, f"Deleted student {student.name}",
        meta={"student_id": student_id}
    )

    return success_response("Student deleted successfully")
