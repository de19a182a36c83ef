"""
Scheduling engine package.

Usage:
    from datetime import date
    from rota_engine.services.scheduling import layout_calendar, week_start

    # Render one week of shifts into (day, hour) cells
    cells = layout_calendar(shifts, week_start(date(2025, 1, 15)))

    # Resolve a bulk delete selection into a payload for the schedule service
    from rota_engine.services.scheduling import PeriodSelection, resolve_period

    criteria = resolve_period(PeriodSelection(period="week"))
    payload = criteria.to_payload()
"""

from .types import (
    StaffMember,
    ShiftTask,
    Shift,
    ShiftStatus,
    ShiftType,
    ShiftRequest,
    ShiftRequestStatus,
    OpenShift,
    AssignedShift,
    FilledShift,
    ShiftState,
    DeletionCriteria,
    CalendarBlock,
    GridBlock,
    UserGridRow,
)
from .errors import (
    SchedulingError,
    ValidationError,
    NotAvailable,
    DuplicateRequest,
    AlreadyResolved,
    ShiftFull,
    InvalidPeriod,
    NetworkFailure,
    ScheduleServiceError,
)
from .time_grid import (
    week_start,
    day_offset,
    day_index_in_week,
    is_in_week,
    week_dates,
    iso_week_number,
    iso_week_year,
    iso_week_token,
    iso_week_monday,
    local_now,
    wall_time,
)
from .layout import (
    ViewMode,
    layout_calendar,
    layout_user_grid,
    layout_matrix,
    layout_list,
    layout_week,
)
from .period import BulkDeletePeriod, PeriodSelection, resolve_period, preview_deletion
from .requests import (
    OpenShiftDateFilter,
    OpenShiftSort,
    RequestCounts,
    RequestLifecycle,
    ApprovalOutcome,
    shift_state,
    list_open_shifts,
    capacity_conflicts,
)
from .validation import validate_shift_fields, validate_staff_change
from .summary import WeekSummary, summarize_week, upcoming_shifts

__all__ = [
    # Types
    "StaffMember",
    "ShiftTask",
    "Shift",
    "ShiftStatus",
    "ShiftType",
    "ShiftRequest",
    "ShiftRequestStatus",
    "OpenShift",
    "AssignedShift",
    "FilledShift",
    "ShiftState",
    "DeletionCriteria",
    "CalendarBlock",
    "GridBlock",
    "UserGridRow",
    # Errors
    "SchedulingError",
    "ValidationError",
    "NotAvailable",
    "DuplicateRequest",
    "AlreadyResolved",
    "ShiftFull",
    "InvalidPeriod",
    "NetworkFailure",
    "ScheduleServiceError",
    # Time grid
    "week_start",
    "day_offset",
    "day_index_in_week",
    "is_in_week",
    "week_dates",
    "iso_week_number",
    "iso_week_year",
    "iso_week_token",
    "iso_week_monday",
    "local_now",
    "wall_time",
    # Layout
    "ViewMode",
    "layout_calendar",
    "layout_user_grid",
    "layout_matrix",
    "layout_list",
    "layout_week",
    # Bulk delete
    "BulkDeletePeriod",
    "PeriodSelection",
    "resolve_period",
    "preview_deletion",
    # Requests
    "OpenShiftDateFilter",
    "OpenShiftSort",
    "RequestCounts",
    "RequestLifecycle",
    "ApprovalOutcome",
    "shift_state",
    "list_open_shifts",
    "capacity_conflicts",
    # Editing and summaries
    "validate_shift_fields",
    "validate_staff_change",
    "WeekSummary",
    "summarize_week",
    "upcoming_shifts",
]
