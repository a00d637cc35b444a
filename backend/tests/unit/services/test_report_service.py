"""
Unit Tests for report helpers and aggregations
"""
import pytest
from datetime import datetime, timedelta

from app.models.activity_log import ActivityAction
from app.services.activity_recorder import ActivityRecorder
from app.services.report_service import (
    daily_windows,
    growth_percentage,
    report_service,
    round_half_up,
)
from app.core.database import get_activity_session_local, get_session_local


class TestGrowthPercentage:

    def test_zero_previous_with_growth(self):
        assert growth_percentage(5, 0) == 100

    def test_zero_previous_and_zero_current(self):
        assert growth_percentage(0, 0) == 0

    def test_increase(self):
        assert growth_percentage(15, 10) == 50

    def test_decrease(self):
        assert growth_percentage(5, 10) == -50

    def test_rounds_to_nearest_integer(self):
        # 1/3 -> 33.33..
        assert growth_percentage(4, 3) == 33
        # 2/3 -> 66.66..
        assert growth_percentage(5, 3) == 67

    def test_halves_round_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert growth_percentage(201, 200) == 1


class TestDailyWindows:

    def test_seven_windows_oldest_first_ending_today(self):
        now = datetime(2024, 3, 10, 15, 30)

        windows = daily_windows(7, now)

        assert len(windows) == 7
        starts = [start for start, _, _ in windows]
        assert starts == sorted(starts)
        assert starts[-1] == datetime(2024, 3, 10)
        assert starts[0] == datetime(2024, 3, 4)

    def test_windows_are_contiguous_days(self):
        windows = daily_windows(7, datetime(2024, 3, 10, 1, 0))

        for start, end, _ in windows:
            assert end - start == timedelta(days=1)
        for (_, end, _), (next_start, _, _) in zip(windows, windows[1:]):
            assert end == next_start

    def test_labels_are_short_weekdays(self):
        windows = daily_windows(7, datetime(2024, 3, 10))  # a Sunday

        assert [label for _, _, label in windows] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


class TestDashboardAggregation:

    @pytest.mark.asyncio
    async def test_admin_dashboard_cards(self, super_admin, admin_user, test_user):
        recorder = ActivityRecorder()
        await recorder.record_for(test_user, ActivityAction.LOGIN, "Auth")
        await recorder.record_for(admin_user, ActivityAction.CREATE, "Users")

        async with get_session_local()() as db, get_activity_session_local()() as activity_db:
            dashboard = await report_service.dashboard(db, activity_db, admin_user)

        cards = {card["name"]: card for card in dashboard["stats"]}
        assert cards["Total Users"]["value"] == 3
        assert cards["Total Users"]["change"] == "+100%"
        assert cards["Active Users"]["value"] == 3
        assert cards["Active Users"]["change"] == "100% of total"
        assert cards["System Events"]["value"] == 2
        assert cards["Security Status"]["value"] == "Secure"
        assert len(dashboard["recent_activity"]) == 2
        assert len(dashboard["chart_data"]) == 7
        assert dashboard["chart_data"][-1]["active"] == 2
        assert dashboard["chart_data"][-1]["new"] == 3

    @pytest.mark.asyncio
    async def test_user_dashboard_is_self_scoped(self, admin_user, test_user):
        recorder = ActivityRecorder()
        await recorder.record_for(test_user, ActivityAction.LOGIN, "Auth")
        await recorder.record_for(admin_user, ActivityAction.CREATE, "Users")

        async with get_session_local()() as db, get_activity_session_local()() as activity_db:
            dashboard = await report_service.dashboard(db, activity_db, test_user)

        assert [card["name"] for card in dashboard["stats"]] == ["Your Activity", "Profile Status"]
        assert dashboard["stats"][0]["value"] == 1
        assert [entry["user_id"] for entry in dashboard["recent_activity"]] == [test_user.id]
        assert all(point["new"] == 0 for point in dashboard["chart_data"])
        assert dashboard["chart_data"][-1]["active"] == 1
