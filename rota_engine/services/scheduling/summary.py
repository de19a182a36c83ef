"""
Week summary statistics shown under the rota.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .time_grid import local_now, wall_time
from .types import Shift, ShiftStatus


@dataclass
class WeekSummary:
    total_hours: float
    scheduled_days: int
    staff_scheduled: int
    open_shifts: int
    active_shifts: int
    my_shifts: int = 0


def summarize_week(shifts: list[Shift], staff_id: Optional[str] = None) -> WeekSummary:
    total_hours = sum(s.duration_hours for s in shifts)
    return WeekSummary(
        total_hours=round(total_hours, 1),
        scheduled_days=len({s.start.date() for s in shifts}),
        staff_scheduled=len({s.assigned_staff.id for s in shifts if s.assigned_staff}),
        open_shifts=sum(1 for s in shifts if s.is_open),
        active_shifts=sum(1 for s in shifts if s.status in (ShiftStatus.SCHEDULED, ShiftStatus.IN_PROGRESS)),
        my_shifts=sum(
            1 for s in shifts
            if staff_id and s.assigned_staff and s.assigned_staff.id == staff_id
        ),
    )


def upcoming_shifts(
    shifts: list[Shift],
    now: Optional[datetime] = None,
    days: int = 7,
    limit: int = 5,
) -> list[Shift]:
    """Next shifts starting between now and `days` ahead, soonest first."""
    now = wall_time(now or local_now())
    horizon = now + timedelta(days=days)
    window = [s for s in shifts if now <= wall_time(s.start) <= horizon]
    return sorted(window, key=lambda s: wall_time(s.start))[:limit]
