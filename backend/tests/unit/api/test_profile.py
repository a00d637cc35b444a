"""
Unit Tests for Profile API Endpoints
"""
import pytest
from pathlib import Path
from httpx import AsyncClient

from app.core.config import settings

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class TestProfile:

    @pytest.mark.asyncio
    async def test_get_profile(self, client: AsyncClient, test_user, auth_headers):
        response = await client.get("/api/v1/profile", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["id"] == test_user.id

    @pytest.mark.asyncio
    async def test_update_name_and_email(self, client: AsyncClient, test_user, auth_headers):
        response = await client.put(
            "/api/v1/profile",
            data={"name": "New Name", "email": "Fresh.Address@Example.com"},
            headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "New Name"
        assert data["email"] == "fresh.address@example.com"

    @pytest.mark.asyncio
    async def test_update_with_avatar(self, client: AsyncClient, test_user, auth_headers):
        response = await client.put(
            "/api/v1/profile",
            files={"avatar": ("me.png", PNG_BYTES, "image/png")},
            headers=auth_headers
        )

        assert response.status_code == 200
        avatar = response.json()["data"]["avatar"]
        assert avatar.startswith("uploads/avatars/avatar-")
        assert avatar.endswith(".png")
        stored = Path(settings.UPLOAD_DIR) / "avatars" / avatar.rsplit("/", 1)[-1]
        assert stored.read_bytes() == PNG_BYTES

    @pytest.mark.asyncio
    async def test_avatar_must_be_an_image(self, client: AsyncClient, test_user, auth_headers):
        response = await client.put(
            "/api/v1/profile",
            files={"avatar": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_FILE_TYPE"
        assert "avatar" in response.json()["errors"]

    @pytest.mark.asyncio
    async def test_email_taken_by_another_account(self, client: AsyncClient, test_user, admin_user, auth_headers):
        response = await client.put(
            "/api/v1/profile", data={"email": admin_user.email}, headers=auth_headers
        )

        assert response.status_code == 409
        assert response.json()["message"] == "Email already in use"

    @pytest.mark.asyncio
    async def test_keeping_own_email_is_fine(self, client: AsyncClient, test_user, auth_headers):
        response = await client.put(
            "/api/v1/profile", data={"email": test_user.email}, headers=auth_headers
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_invalid_email(self, client: AsyncClient, test_user, auth_headers):
        response = await client.put("/api/v1/profile", data={"email": "nope"}, headers=auth_headers)

        assert response.status_code == 400
        assert "email" in response.json()["errors"]


class TestChangePassword:

    @pytest.mark.asyncio
    async def test_change_password(self, client: AsyncClient, test_user, auth_headers):
        response = await client.post(
            "/api/v1/profile/change-password",
            json={
                "current_password": "Password@123",
                "new_password": "Another@456",
                "confirm_password": "Another@456",
            },
            headers=auth_headers
        )

        assert response.status_code == 200

        login = await client.post(
            "/api/v1/auth/login", json={"email": test_user.email, "password": "Another@456"}
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_current_password(self, client: AsyncClient, test_user, auth_headers):
        response = await client.post(
            "/api/v1/profile/change-password",
            json={
                "current_password": "wrong-one",
                "new_password": "Another@456",
                "confirm_password": "Another@456",
            },
            headers=auth_headers
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Current password is incorrect"
        assert "current_password" in body["errors"]

    @pytest.mark.asyncio
    async def test_confirmation_mismatch(self, client: AsyncClient, test_user, auth_headers):
        response = await client.post(
            "/api/v1/profile/change-password",
            json={
                "current_password": "Password@123",
                "new_password": "Another@456",
                "confirm_password": "Different@789",
            },
            headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["errors"]["confirm_password"] == ["Passwords don't match"]


class TestAvatarCleanup:

    @pytest.mark.asyncio
    async def test_rejected_update_discards_avatar(self, client: AsyncClient, test_user, admin_user, auth_headers):
        avatars = settings.upload_path / "avatars"
        before = set(avatars.iterdir()) if avatars.exists() else set()

        response = await client.put(
            "/api/v1/profile",
            data={"email": admin_user.email},
            files={"avatar": ("me.png", PNG_BYTES, "image/png")},
            headers=auth_headers
        )

        assert response.status_code == 409
        after = set(avatars.iterdir()) if avatars.exists() else set()
        assert after == before
