"""
Unit Tests for request schemas and pagination helpers
"""
import pytest
from pydantic import ValidationError

from app.models.user import UserRole
from app.schemas.profile import ChangePasswordRequest
from app.schemas.student import StudentCreate, parse_courses
from app.schemas.user import UserCreate
from app.utils.pagination import build_pagination
from app.utils.search import contains_pattern


class TestUserCreate:

    def test_defaults_to_user_role(self):
        data = UserCreate(name="Asha Rao", email="asha@example.com", password="secret1")

        assert data.role == UserRole.USER
        assert data.status is None

    @pytest.mark.parametrize("field,value", [
        ("name", "A"),
        ("email", "not-an-email"),
        ("password", "12345"),
    ])
    def test_rejects_invalid_fields(self, field, value):
        payload = {"name": "Asha Rao", "email": "asha@example.com", "password": "secret1"}
        payload[field] = value

        with pytest.raises(ValidationError):
            UserCreate(**payload)


class TestChangePasswordRequest:

    def test_matching_passwords(self):
        data = ChangePasswordRequest(
            current_password="old-pass", new_password="new-pass", confirm_password="new-pass"
        )

        assert data.new_password == "new-pass"

    def test_mismatch_reported_on_confirm_field(self):
        with pytest.raises(ValidationError) as exc_info:
            ChangePasswordRequest(
                current_password="old-pass", new_password="new-pass", confirm_password="other"
            )

        error = exc_info.value.errors()[0]
        assert error["loc"] == ("confirm_password",)
        assert "Passwords don't match" in error["msg"]

    def test_short_new_password(self):
        with pytest.raises(ValidationError):
            ChangePasswordRequest(current_password="old", new_password="12345", confirm_password="12345")


class TestCourses:

    def test_parse_json_array(self):
        assert parse_courses('["Web Development", "Data Science"]') == ["Web Development", "Data Science"]

    def test_parse_comma_list(self):
        assert parse_courses("Web Development, Data Science ,") == ["Web Development", "Data Science"]

    def test_parse_empty(self):
        assert parse_courses(None) == []
        assert parse_courses("") == []

    def test_student_requires_a_course(self):
        with pytest.raises(ValidationError):
            StudentCreate(
                name="Ravi", father_name="Mohan", qualification="B.Sc", gender="Male",
                courses=[], mobile_no="9876543210", address="Pune",
            )

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            StudentCreate(
                name="Ravi", father_name="Mohan", qualification="B.Sc", gender="Male",
                courses=["Web Development"], mobile_no="9876543210", address="Pune",
                total_amount=-1,
            )


class TestPagination:

    def test_total_pages_rounds_up(self):
        assert build_pagination(total=21, page=2, limit=10) == {
            "page": 2, "limit": 10, "total": 21, "totalPages": 3
        }

    def test_empty_result_has_zero_pages(self):
        assert build_pagination(total=0, page=1, limit=10)["totalPages"] == 0

    def test_exact_multiple(self):
        assert build_pagination(total=20, page=1, limit=10)["totalPages"] == 2


class TestSearchPattern:

    def test_plain_term(self):
        assert contains_pattern("ravi") == "%ravi%"

    def test_wildcards_escaped(self):
        assert contains_pattern("50%_off") == "%50\\%\\_off%"

    def test_escape_character_doubled(self):
        assert contains_pattern("a\\b") == "%a\\\\b%"
