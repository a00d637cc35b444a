"""
Unit Tests for request logging and security headers
"""
import logging
import pytest
from httpx import AsyncClient

from app.core.logging_config import logger
from app.core.middleware import should_skip_logging


class RecordCollector(logging.Handler):

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def completed(self, path: str):
        return [
            r for r in self.records
            if getattr(r, "event_type", None) == "http_request_complete" and r.http_path == path
        ]


@pytest.fixture
def collected_logs():
    collector = RecordCollector()
    previous_level = logger.level
    logger.setLevel(logging.DEBUG)
    logger.addHandler(collector)
    yield collector
    logger.removeHandler(collector)
    logger.setLevel(previous_level)


class TestRequestLogging:

    @pytest.mark.asyncio
    async def test_completion_names_the_resolved_account(
        self, client: AsyncClient, test_user, auth_headers, collected_logs
    ):
        response = await client.get("/api/v1/profile", headers=auth_headers)

        assert response.status_code == 200
        (record,) = collected_logs.completed("/api/v1/profile")
        assert record.actor_id == test_user.id
        assert record.actor_role == "user"
        assert record.http_status == 200
        assert f"[user:{test_user.id}]" in record.getMessage()

    @pytest.mark.asyncio
    async def test_login_binds_the_account(self, client: AsyncClient, admin_user, collected_logs):
        response = await client.post(
            "/api/v1/auth/login", json={"email": admin_user.email, "password": "Password@123"}
        )

        assert response.status_code == 200
        (record,) = collected_logs.completed("/api/v1/auth/login")
        assert (record.actor_id, record.actor_role) == (admin_user.id, "admin")

    @pytest.mark.asyncio
    async def test_rejected_token_is_anonymous(self, client: AsyncClient, database, collected_logs):
        response = await client.get("/api/v1/profile", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        (record,) = collected_logs.completed("/api/v1/profile")
        assert record.actor_id is None
        assert record.levelno == logging.WARNING
        assert "[anonymous]" in record.getMessage()

    def test_liveness_and_uploads_are_not_logged(self):
        assert should_skip_logging("/health")
        assert should_skip_logging("/api/v1/health/live")
        assert should_skip_logging("/uploads/avatars/avatar-1.png")
        assert not should_skip_logging("/api/v1/health/ready")
        assert not should_skip_logging("/api/v1/users")


class TestSecurityHeaders:

    @pytest.mark.asyncio
    async def test_api_responses_are_not_cached(self, client: AsyncClient, auth_headers):
        response = await client.get("/api/v1/profile", headers=auth_headers)

        assert response.headers["Cache-Control"] == "no-store"
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    @pytest.mark.asyncio
    async def test_uploaded_files_are_sandboxed(self, client: AsyncClient, auth_headers):
        updated = await client.put(
            "/api/v1/profile",
            files={"avatar": ("me.png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 16, "image/png")},
            headers=auth_headers
        )
        avatar = updated.json()["data"]["avatar"]

        response = await client.get(f"/{avatar}")

        assert response.status_code == 200
        assert "sandbox" in response.headers["Content-Security-Policy"]
        assert "Cache-Control" not in response.headers
