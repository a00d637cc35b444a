"""
Unit Tests for the Activity Recorder
"""
import pytest
from sqlalchemy import select
from starlette.requests import Request

from app.core.database import get_activity_session_local
from app.models.activity_log import ActivityAction, ActivityLog
from app.services.activity_recorder import ActivityRecorder, extract_client_ip, extract_request_context


def make_request(headers=None, client=("10.0.0.5", 1234)) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


class TestRequestContext:

    def test_forwarded_for_first_hop_wins(self):
        request = make_request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})

        assert extract_client_ip(request) == "203.0.113.7"

    def test_falls_back_to_socket_address(self):
        assert extract_client_ip(make_request()) == "10.0.0.5"

    def test_context_includes_user_agent(self):
        context = extract_request_context(make_request({"User-Agent": "pytest-agent"}))

        assert context == {"ip_address": "10.0.0.5", "user_agent": "pytest-agent"}

    def test_missing_request(self):
        assert extract_request_context(None) == {"ip_address": None, "user_agent": None}


class TestRecord:

    @pytest.mark.asyncio
    async def test_record_for_snapshots_actor(self, admin_user):
        recorder = ActivityRecorder()

        entry = await recorder.record_for(
            admin_user, ActivityAction.CREATE, "Users", "Created something",
            request=make_request({"User-Agent": "pytest-agent"}),
            meta={"target_user_id": "abc"},
        )

        assert entry is not None
        async with get_activity_session_local()() as db:
            stored = (await db.execute(select(ActivityLog))).scalars().all()

        assert len(stored) == 1
        log = stored[0]
        assert log.user_id == admin_user.id
        assert log.user_name == admin_user.name
        assert log.user_role == "admin"
        assert log.action == ActivityAction.CREATE
        assert log.module == "Users"
        assert log.ip_address == "10.0.0.5"
        assert log.user_agent == "pytest-agent"
        assert log.meta == {"target_user_id": "abc"}

    @pytest.mark.asyncio
    async def test_record_swallows_storage_failure(self, database):
        def broken_factory():
            raise RuntimeError("activity store offline")

        recorder = ActivityRecorder(session_factory=broken_factory)

        result = await recorder.record(
            user_id="user-1",
            user_name="Someone",
            user_role="user",
            action=ActivityAction.LOGIN,
            module="Auth",
        )

        assert result is None
