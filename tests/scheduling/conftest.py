import pytest
from datetime import date, datetime, timedelta
from typing import Optional

from rota_engine.core.config import settings
from rota_engine.schemas.shifts import ShiftResponse
from rota_engine.services.scheduling.types import (
    Shift,
    ShiftRequest,
    ShiftRequestStatus,
    ShiftStatus,
    StaffMember,
)


def get_test_monday() -> date:
    # returns a fixed Monday for deterministic tests
    return date(2025, 1, 13)


def make_shift(
    shift_id: str,
    start: datetime,
    hours: float = 8,
    staff: Optional[StaffMember] = None,
    required_staff: int = 1,
    status: ShiftStatus = ShiftStatus.SCHEDULED,
    is_active: bool = True,
) -> Shift:
    return Shift(
        id=shift_id,
        title=f"Shift {shift_id}",
        start=start,
        end=start + timedelta(hours=hours),
        location="Main Store",
        required_staff=required_staff,
        assigned_staff=staff,
        status=status,
        is_active=is_active,
    )


def make_request(
    request_id: str,
    shift_id: str,
    staff: StaffMember,
    status: ShiftRequestStatus = ShiftRequestStatus.PENDING,
    created_at: Optional[datetime] = None,
) -> ShiftRequest:
    return ShiftRequest(
        id=request_id,
        shift_id=shift_id,
        staff=staff,
        status=status,
        created_at=created_at,
    )


@pytest.fixture
def alice() -> StaffMember:
    return StaffMember(id="staff-a", first_name="Alice", last_name="Adams")


@pytest.fixture
def bob() -> StaffMember:
    return StaffMember(id="staff-b", first_name="Bob", last_name="Brown")


@pytest.fixture
def week_shifts(alice, bob) -> list[Shift]:
    # Mon 09-17 Alice, Mon 09-13 open, Tue 22-06 Bob (overnight), Wed 12-18 open
    monday = datetime.combine(get_test_monday(), datetime.min.time())
    return [
        make_shift("s1", monday.replace(hour=9), hours=8, staff=alice),
        make_shift("s2", monday.replace(hour=9), hours=4),
        make_shift("s3", monday + timedelta(days=1, hours=22), hours=8, staff=bob),
        make_shift("s4", monday + timedelta(days=2, hours=12), hours=6),
    ]


def wire_shift(shift_id: str, start_time: str, hours: float = 8) -> Shift:
    # parsed the way ScheduleClient parses service responses, so starts are zone-aware
    start = datetime.fromisoformat(start_time.replace("Z", "+00:00"))
    return ShiftResponse.model_validate({
        "_id": shift_id,
        "title": f"Shift {shift_id}",
        "start_time": start_time,
        "end_time": (start + timedelta(hours=hours)).isoformat(),
        "location": "Main Store",
    }).to_domain()


@pytest.fixture
def new_york(monkeypatch) -> str:
    monkeypatch.setattr(settings, "TIMEZONE", "America/New_York")
    return settings.TIMEZONE
