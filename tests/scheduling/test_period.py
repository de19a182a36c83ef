import pytest
from datetime import date, datetime, timedelta
from freezegun import freeze_time

from rota_engine.services.scheduling.errors import InvalidPeriod
from rota_engine.services.scheduling.period import (
    BulkDeletePeriod,
    PeriodSelection,
    preview_deletion,
    resolve_period,
)
from rota_engine.services.scheduling.types import DeletionCriteria, ShiftStatus, ShiftType

from conftest import get_test_monday, make_shift


class TestResolveFixedPeriods:
    def test_week_uses_iso_week_token(self):
        criteria = resolve_period(PeriodSelection(period="week"), now=datetime(2025, 1, 15, 10, 0))
        assert criteria.to_payload() == {"week": "2025-W03"}

    def test_today(self):
        criteria = resolve_period(PeriodSelection(period=BulkDeletePeriod.TODAY), now=datetime(2025, 3, 1, 18, 0))
        assert criteria.to_payload() == {"day": "2025-03-01"}

    def test_month_is_zero_padded(self):
        criteria = resolve_period(PeriodSelection(period="month"), now=datetime(2025, 3, 1))
        assert criteria.to_payload() == {"month": "2025-03"}

    def test_week_at_year_boundary_uses_iso_year(self):
        criteria = resolve_period(PeriodSelection(period="week"), now=datetime(2024, 12, 31, 9, 0))
        assert criteria.week == "2025-W01"

    @freeze_time("2025-03-01 12:00:00")
    def test_defaults_to_current_time(self):
        criteria = resolve_period(PeriodSelection(period="today"))
        assert criteria.day == date(2025, 3, 1)

    def test_fixed_period_rejects_custom_fields(self):
        selection = PeriodSelection(period="today", month="2025-03")
        with pytest.raises(InvalidPeriod):
            resolve_period(selection, now=datetime(2025, 3, 1))

    def test_unknown_period(self):
        with pytest.raises(InvalidPeriod):
            resolve_period(PeriodSelection(period="fortnight"), now=datetime(2025, 3, 1))


class TestResolveCustom:
    def test_range_passes_through(self):
        selection = PeriodSelection(start_date=date(2025, 1, 1), end_date=date(2025, 1, 10))
        assert resolve_period(selection).to_payload() == {"start_date": "2025-01-01", "end_date": "2025-01-10"}

    def test_day_passes_through(self):
        assert resolve_period(PeriodSelection(day=date(2025, 2, 2))).to_payload() == {"day": "2025-02-02"}

    def test_week_passes_through(self):
        assert resolve_period(PeriodSelection(week="2025-W10")).week == "2025-W10"

    def test_month_passes_through(self):
        assert resolve_period(PeriodSelection(month="2025-11")).month == "2025-11"

    def test_empty_custom_is_invalid(self):
        with pytest.raises(InvalidPeriod):
            resolve_period(PeriodSelection())

    def test_multiple_scopes_are_invalid(self):
        with pytest.raises(InvalidPeriod) as exc:
            resolve_period(PeriodSelection(day=date(2025, 2, 2), month="2025-02"))
        assert "mutually exclusive" in exc.value.message

    def test_half_range_is_invalid(self):
        with pytest.raises(InvalidPeriod):
            resolve_period(PeriodSelection(start_date=date(2025, 1, 1)))

    def test_reversed_range_is_invalid(self):
        with pytest.raises(InvalidPeriod):
            resolve_period(PeriodSelection(start_date=date(2025, 1, 10), end_date=date(2025, 1, 1)))

    @pytest.mark.parametrize("token", ["2025-3", "2025-W3", "25-W03", "2025-W54", "2021-W53"])
    def test_malformed_week(self, token):
        with pytest.raises(InvalidPeriod):
            resolve_period(PeriodSelection(week=token))

    @pytest.mark.parametrize("token", ["2025-13", "2025-00", "2025/03", "March"])
    def test_malformed_month(self, token):
        with pytest.raises(InvalidPeriod):
            resolve_period(PeriodSelection(month=token))


class TestFiltersAndForce:
    def test_filters_copied_through(self):
        selection = PeriodSelection(
            period="week",
            assignee_id="staff-a",
            status="scheduled",
            shift_type="open",
            force=True,
        )
        payload = resolve_period(selection, now=datetime(2025, 1, 15)).to_payload()
        assert payload == {
            "week": "2025-W03",
            "user_id": "staff-a",
            "status": "scheduled",
            "type": "open",
            "force": True,
        }

    def test_force_false_is_omitted(self):
        payload = resolve_period(PeriodSelection(period="today"), now=datetime(2025, 1, 15)).to_payload()
        assert "force" not in payload

    def test_unknown_shift_type(self):
        with pytest.raises(InvalidPeriod):
            resolve_period(PeriodSelection(period="today", shift_type="temp"), now=datetime(2025, 1, 15))


class TestDateRange:
    def test_week_covers_monday_to_sunday(self):
        assert DeletionCriteria(week="2025-W03").date_range() == (date(2025, 1, 13), date(2025, 1, 19))

    def test_month_covers_whole_month(self):
        assert DeletionCriteria(month="2024-02").date_range() == (date(2024, 2, 1), date(2024, 2, 29))

    def test_day(self):
        assert DeletionCriteria(day=date(2025, 3, 1)).date_range() == (date(2025, 3, 1), date(2025, 3, 1))

    def test_no_scope(self):
        with pytest.raises(ValueError):
            DeletionCriteria().date_range()


class TestPreviewDeletion:
    @pytest.fixture
    def shifts(self, alice):
        monday = datetime.combine(get_test_monday(), datetime.min.time())
        return [
            make_shift("past", monday.replace(hour=6), hours=4, staff=alice),
            make_shift("later", monday + timedelta(days=2, hours=9)),
            make_shift("done", monday + timedelta(days=3, hours=9), status=ShiftStatus.COMPLETED),
            make_shift("next-week", monday + timedelta(days=8, hours=9)),
        ]

    def test_started_shifts_excluded_without_force(self, shifts):
        now = datetime(2025, 1, 13, 12, 0)
        matched = preview_deletion(shifts, DeletionCriteria(week="2025-W03"), now=now)
        assert [s.id for s in matched] == ["later", "done"]

    def test_force_includes_started_shifts(self, shifts):
        now = datetime(2025, 1, 13, 12, 0)
        matched = preview_deletion(shifts, DeletionCriteria(week="2025-W03", force=True), now=now)
        assert [s.id for s in matched] == ["past", "later", "done"]

    def test_filters_apply(self, shifts):
        now = datetime(2025, 1, 1)
        criteria = DeletionCriteria(week="2025-W03", shift_type=ShiftType.OPEN, status="scheduled")
        assert [s.id for s in preview_deletion(shifts, criteria, now=now)] == ["later"]
        by_staff = DeletionCriteria(week="2025-W03", assignee_id="staff-a")
        assert [s.id for s in preview_deletion(shifts, by_staff, now=now)] == ["past"]
