"""
Internal data types for scheduling logic.
decoupled from the wire schemas for cleaner logic.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional, Union

from .errors import ValidationError
from .time_grid import iso_week_monday


class ShiftStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ShiftType(str, Enum):
    OPEN = "open"
    ASSIGNED = "assigned"


class ShiftRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class StaffMember:
    id: str
    first_name: str = ""
    last_name: str = ""

    @property
    def display_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.id


@dataclass
class ShiftTask:
    description: str
    completed: bool = False


@dataclass
class Shift:
    """A scheduled work interval. `end` may fall on a later day than `start`."""
    id: str
    title: str
    start: datetime
    end: datetime
    location: Optional[str] = None
    required_staff: int = 1
    assigned_staff: Optional[StaffMember] = None  # None means open
    color_hex: Optional[str] = None
    tasks: list[ShiftTask] = field(default_factory=list)
    is_active: bool = True
    status: ShiftStatus = ShiftStatus.SCHEDULED
    description: Optional[str] = None

    def __post_init__(self):
        if self.end <= self.start:
            raise ValidationError(f"Shift {self.id}: end time must be after start time")
        if self.required_staff < 1:
            raise ValidationError(f"Shift {self.id}: required staff must be at least 1")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def duration_minutes(self) -> float:
        return self.duration.total_seconds() / 60

    @property
    def duration_hours(self) -> float:
        return self.duration.total_seconds() / 3600

    @property
    def is_open(self) -> bool:
        return self.assigned_staff is None

    @property
    def shift_type(self) -> ShiftType:
        return ShiftType.OPEN if self.is_open else ShiftType.ASSIGNED

    @property
    def is_multi_day(self) -> bool:
        return self.end.date() != self.start.date()


@dataclass
class ShiftRequest:
    """A staff member's claim on an open shift."""
    id: str
    shift_id: str
    staff: StaffMember
    status: ShiftRequestStatus = ShiftRequestStatus.PENDING
    staff_note: Optional[str] = None
    admin_note: Optional[str] = None
    responded_by: Optional[StaffMember] = None
    responded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == ShiftRequestStatus.PENDING

    @property
    def is_resolved(self) -> bool:
        return not self.is_pending


# Shift state variant, computed once from the authoritative fields

@dataclass(frozen=True)
class OpenShift:
    open_slots: int
    approved_count: int = 0


@dataclass(frozen=True)
class AssignedShift:
    staff: StaffMember
    approved_count: int = 0


@dataclass(frozen=True)
class FilledShift:
    approved_count: int


ShiftState = Union[OpenShift, AssignedShift, FilledShift]


@dataclass(frozen=True)
class DeletionCriteria:
    """Concrete payload describing which shifts a bulk delete targets."""
    day: Optional[date] = None
    week: Optional[str] = None  # YYYY-Www
    month: Optional[str] = None  # YYYY-MM
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    assignee_id: Optional[str] = None
    status: Optional[str] = None
    shift_type: Optional[ShiftType] = None
    force: bool = False

    def to_payload(self) -> dict:
        """JSON body for the bulk delete endpoint; unset filters are omitted."""
        payload: dict = {}
        if self.start_date and self.end_date:
            payload["start_date"] = self.start_date.isoformat()
            payload["end_date"] = self.end_date.isoformat()
        elif self.day:
            payload["day"] = self.day.isoformat()
        elif self.week:
            payload["week"] = self.week
        elif self.month:
            payload["month"] = self.month

        if self.assignee_id:
            payload["user_id"] = self.assignee_id
        if self.status:
            payload["status"] = self.status
        if self.shift_type:
            payload["type"] = self.shift_type.value
        if self.force:
            payload["force"] = True
        return payload

    def date_range(self) -> tuple[date, date]:
        """Inclusive (first_day, last_day) covered by the scope."""
        if self.start_date and self.end_date:
            return self.start_date, self.end_date
        if self.day:
            return self.day, self.day
        if self.week:
            year, week = self.week.split("-W")
            monday = iso_week_monday(int(year), int(week))
            return monday, monday + timedelta(days=6)
        if self.month:
            year, month = (int(part) for part in self.month.split("-"))
            last_day = calendar.monthrange(year, month)[1]
            return date(year, month, 1), date(year, month, last_day)
        raise ValueError("DeletionCriteria has no scope")


@dataclass(frozen=True)
class CalendarBlock:
    """Render descriptor for the hourly calendar grid."""
    shift: Shift
    day_index: int
    hour: int
    width_fraction: float
    stack_index: int
    multi_day: bool
    label: str


@dataclass(frozen=True)
class GridBlock:
    """Render descriptor for one cell of the per-staff grid."""
    shift: Shift
    day_index: int
    width_fraction: float
    multi_day: bool
    label: str


@dataclass
class UserGridRow:
    staff: Optional[StaffMember]  # None = synthetic unassigned row
    days: list[list[GridBlock]] = field(default_factory=lambda: [[] for _ in range(7)])

    @property
    def is_unassigned(self) -> bool:
        return self.staff is None

    @property
    def shift_count(self) -> int:
        return sum(len(day) for day in self.days)
