from datetime import datetime, timedelta
from freezegun import freeze_time

from rota_engine.services.scheduling.summary import summarize_week, upcoming_shifts
from rota_engine.services.scheduling.types import ShiftStatus

from conftest import get_test_monday, make_shift, wire_shift


class TestSummarizeWeek:
    def test_totals(self, week_shifts):
        summary = summarize_week(week_shifts, staff_id="staff-a")
        assert summary.total_hours == 26.0
        assert summary.scheduled_days == 3
        assert summary.staff_scheduled == 2
        assert summary.open_shifts == 2
        assert summary.active_shifts == 4
        assert summary.my_shifts == 1

    def test_completed_and_cancelled_are_not_active(self, alice):
        monday = datetime.combine(get_test_monday(), datetime.min.time())
        shifts = [
            make_shift("a", monday.replace(hour=9), staff=alice, status=ShiftStatus.COMPLETED),
            make_shift("b", monday.replace(hour=9), status=ShiftStatus.IN_PROGRESS),
            make_shift("c", monday.replace(hour=9), status=ShiftStatus.CANCELLED),
        ]
        summary = summarize_week(shifts)
        assert summary.active_shifts == 1
        assert summary.my_shifts == 0

    def test_empty(self):
        summary = summarize_week([])
        assert summary.total_hours == 0
        assert summary.scheduled_days == 0


class TestUpcomingShifts:
    def test_window_and_limit(self):
        now = datetime(2025, 1, 13, 12, 0)
        shifts = [make_shift(f"s{i}", now + timedelta(days=i, hours=1)) for i in range(9)]
        shifts.append(make_shift("past", now - timedelta(hours=2)))
        upcoming = upcoming_shifts(list(reversed(shifts)), now=now)
        assert [s.id for s in upcoming] == ["s0", "s1", "s2", "s3", "s4"]

    def test_nothing_beyond_horizon(self):
        now = datetime(2025, 1, 13, 12, 0)
        shifts = [make_shift("far", now + timedelta(days=10))]
        assert upcoming_shifts(shifts, now=now) == []

    @freeze_time("2025-01-13 12:00:00")
    def test_default_now_with_service_shifts(self):
        shifts = [
            wire_shift("later", "2025-01-13T15:00:00Z", hours=4),
            wire_shift("earlier", "2025-01-13T09:00:00Z", hours=2),
        ]
        assert [s.id for s in upcoming_shifts(shifts)] == ["later"]

    @freeze_time("2025-01-14 03:00:00")
    def test_now_is_taken_in_configured_zone(self, new_york):
        # 22:00 on Monday in New York
        shifts = [
            wire_shift("started", "2025-01-14T02:00:00Z", hours=4),
            wire_shift("late", "2025-01-14T04:00:00Z", hours=4),
        ]
        assert [s.id for s in upcoming_shifts(shifts)] == ["late"]
