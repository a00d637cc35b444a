"""
Unit Tests for Users API Endpoints
Tests for: create, role-scoped listing, get, update, soft delete
"""
import pytest
from httpx import AsyncClient
from faker import Faker
from sqlalchemy import select

from app.core.database import get_activity_session_local
from app.models.activity_log import ActivityAction, ActivityLog
from app.models.notification import Notification
from app.models.user import User, UserRole, UserStatus

fake = Faker()


def new_user_payload(**overrides) -> dict:
    payload = {
        "name": fake.name(),
        "email": fake.unique.email(),
        "password": "secret123",
    }
    payload.update(overrides)
    return payload


class TestCreateUser:
    """Test POST /users"""

    @pytest.mark.asyncio
    async def test_admin_creates_user(self, client: AsyncClient, admin_user, admin_headers):
        payload = new_user_payload(role="user")

        response = await client.post("/api/v1/users", json=payload, headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User created successfully"
        assert body["data"]["email"] == payload["email"].lower()
        assert body["data"]["role"] == "user"
        assert body["data"]["status"] == "active"
        assert "password" not in body["data"]
        assert "hashed_password" not in body["data"]

    @pytest.mark.asyncio
    async def test_create_records_activity_and_notifies_admins(
        self, client: AsyncClient, super_admin, admin_user, admin_headers, db_session
    ):
        await client.post("/api/v1/users", json=new_user_payload(), headers=admin_headers)

        async with get_activity_session_local()() as activity_db:
            logs = (await activity_db.execute(select(ActivityLog))).scalars().all()
        assert [(log.action, log.module) for log in logs] == [(ActivityAction.CREATE, "Users")]
        assert logs[0].user_id == admin_user.id

        recipients = (await db_session.execute(
            select(Notification.user_id).where(Notification.title == "New user created")
        )).scalars().all()
        assert set(recipients) == {super_admin.id, admin_user.id}

    @pytest.mark.asyncio
    async def test_regular_user_cannot_create(self, client: AsyncClient, auth_headers):
        response = await client.post("/api/v1/users", json=new_user_payload(), headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_duplicate_email_conflict(self, client: AsyncClient, test_user, admin_headers):
        response = await client.post(
            "/api/v1/users",
            json=new_user_payload(email=test_user.email.upper()),
            headers=admin_headers
        )

        assert response.status_code == 409
        assert response.json()["error"] == "DUPLICATE_ERROR"

    @pytest.mark.asyncio
    async def test_invalid_payload(self, client: AsyncClient, admin_headers):
        response = await client.post(
            "/api/v1/users",
            json={"name": "A", "email": "bad", "password": "1"},
            headers=admin_headers
        )

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert {"name", "email", "password"} <= set(errors)


class TestListUsers:
    """Test GET /users role scoping"""

    @pytest.mark.asyncio
    async def test_super_admin_sees_inactive_accounts(
        self, client: AsyncClient, make_account, super_admin_headers
    ):
        inactive = await make_account(status=UserStatus.INACTIVE)

        response = await client.get("/api/v1/users", headers=super_admin_headers)

        ids = [u["id"] for u in response.json()["data"]]
        assert inactive.id in ids

    @pytest.mark.asyncio
    async def test_super_admin_status_filter(self, client: AsyncClient, make_account, super_admin_headers):
        inactive = await make_account(status=UserStatus.INACTIVE)

        response = await client.get("/api/v1/users?status=inactive", headers=super_admin_headers)

        assert [u["id"] for u in response.json()["data"]] == [inactive.id]

    @pytest.mark.asyncio
    async def test_admin_never_sees_inactive_accounts(self, client: AsyncClient, make_account, admin_headers):
        inactive = await make_account(status=UserStatus.INACTIVE)

        for url in ("/api/v1/users", "/api/v1/users?status=inactive"):
            response = await client.get(url, headers=admin_headers)

            assert response.status_code == 200
            statuses = {u["status"] for u in response.json()["data"]}
            assert statuses <= {"active"}
            assert inactive.id not in [u["id"] for u in response.json()["data"]]

    @pytest.mark.asyncio
    async def test_regular_user_sees_only_active(self, client: AsyncClient, make_account, auth_headers):
        await make_account(status=UserStatus.INACTIVE)

        response = await client.get("/api/v1/users", headers=auth_headers)

        assert response.status_code == 200
        assert all(u["status"] == "active" for u in response.json()["data"])

    @pytest.mark.asyncio
    async def test_search_role_and_pagination(self, client: AsyncClient, make_account, super_admin_headers):
        await make_account(name="Zed Searchable", role=UserRole.ADMIN)
        for _ in range(3):
            await make_account()

        searched = await client.get("/api/v1/users?search=searchable", headers=super_admin_headers)
        assert [u["name"] for u in searched.json()["data"]] == ["Zed Searchable"]

        admins = await client.get("/api/v1/users?role=admin", headers=super_admin_headers)
        assert {u["role"] for u in admins.json()["data"]} == {"admin"}

        page = await client.get("/api/v1/users?page=2&limit=2", headers=super_admin_headers)
        body = page.json()
        # 4 accounts above plus the super admin
        assert body["pagination"] == {"page": 2, "limit": 2, "total": 5, "totalPages": 3}
        assert len(body["data"]) == 2
        assert body["message"] == "Data retrieved successfully"

    @pytest.mark.asyncio
    async def test_search_wildcards_match_literally(self, client: AsyncClient, make_account, super_admin_headers):
        await make_account(name="Snake_Case", email="snake_case@example.com")
        await make_account(name="Plain Name", email="plain@example.com")

        underscore = await client.get("/api/v1/users?search=_", headers=super_admin_headers)
        assert [u["name"] for u in underscore.json()["data"]] == ["Snake_Case"]

        percent = await client.get("/api/v1/users?search=%25", headers=super_admin_headers)
        assert percent.json()["data"] == []

    @pytest.mark.asyncio
    async def test_newest_first(self, client: AsyncClient, make_account, super_admin_headers):
        first = await make_account()
        second = await make_account()

        response = await client.get("/api/v1/users", headers=super_admin_headers)

        ids = [u["id"] for u in response.json()["data"]]
        assert ids.index(second.id) < ids.index(first.id)


class TestGetUpdateDelete:

    @pytest.mark.asyncio
    async def test_get_user(self, client: AsyncClient, test_user, admin_headers):
        response = await client.get(f"/api/v1/users/{test_user.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["email"] == test_user.email

    @pytest.mark.asyncio
    async def test_get_missing_user(self, client: AsyncClient, admin_headers):
        response = await client.get("/api/v1/users/does-not-exist", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_update_user(self, client: AsyncClient, test_user, admin_headers):
        response = await client.put(
            f"/api/v1/users/{test_user.id}",
            json={"name": "Renamed Person", "role": "admin"},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Renamed Person"
        assert response.json()["data"]["role"] == "admin"

    @pytest.mark.asyncio
    async def test_update_password_allows_login(self, client: AsyncClient, test_user, admin_headers):
        await client.put(
            f"/api/v1/users/{test_user.id}", json={"password": "brand-new-pass"}, headers=admin_headers
        )

        response = await client.post(
            "/api/v1/auth/login", json={"email": test_user.email, "password": "brand-new-pass"}
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_update_to_taken_email(self, client: AsyncClient, test_user, admin_user, admin_headers):
        response = await client.put(
            f"/api/v1/users/{test_user.id}", json={"email": admin_user.email}, headers=admin_headers
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_regular_user_cannot_update(self, client: AsyncClient, admin_user, auth_headers):
        response = await client.put(
            f"/api/v1/users/{admin_user.id}", json={"name": "Hijacked"}, headers=auth_headers
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_only_super_admin_deletes(self, client: AsyncClient, test_user, admin_headers):
        response = await client.delete(f"/api/v1/users/{test_user.id}", headers=admin_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_delete_is_soft(self, client: AsyncClient, test_user, super_admin_headers, db_session):
        response = await client.delete(f"/api/v1/users/{test_user.id}", headers=super_admin_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "User deleted successfully"

        user = (await db_session.execute(select(User).where(User.id == test_user.id))).scalar_one()
        assert user.status == UserStatus.INACTIVE

    @pytest.mark.asyncio
    async def test_deleted_user_cannot_log_in(self, client: AsyncClient, test_user, super_admin_headers):
        await client.delete(f"/api/v1/users/{test_user.id}", headers=super_admin_headers)

        response = await client.post(
            "/api/v1/auth/login", json={"email": test_user.email, "password": "Password@123"}
        )

        assert response.status_code == 403
