"""
Layout of shifts into renderable week views.

Every function takes plain Shift values plus the week's Monday and returns
plain descriptors; nothing here knows about a presentation framework.

Usage:
    from rota_engine.services.scheduling import layout_calendar, week_start

    monday = week_start(selected_date)
    cells = layout_calendar(shifts, monday)
    for (day_index, hour), blocks in cells.items():
        ...
"""

import logging
from enum import Enum
from typing import Optional

from .time_grid import Instant, day_index_in_week, is_in_week, week_start as to_week_start
from .types import CalendarBlock, GridBlock, Shift, StaffMember, UserGridRow


logger = logging.getLogger(__name__)

# user grid cells are scaled against a full day
MIN_GRID_WIDTH = 0.40
MAX_GRID_WIDTH = 1.0

DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


class ViewMode(str, Enum):
    CALENDAR = "calendar"
    USER_GRID = "user-grid"
    LIST = "list"
    MATRIX = "matrix"


def calendar_width(shift: Shift) -> float:
    """Fraction of an hour cell: duration / 60 minutes, capped at 1.0."""
    return min(1.0, shift.duration_minutes / 60)


def grid_width(shift: Shift) -> float:
    """Fraction of a day cell, clamped to [0.40, 1.0] so short shifts stay legible."""
    return max(MIN_GRID_WIDTH, min(MAX_GRID_WIDTH, shift.duration_hours / 24))


def time_label(shift: Shift) -> str:
    """'09:00 - 17:00', or '22:00 → 06:00 (Tue 14)' when the shift ends on a later day."""
    start = shift.start.strftime("%H:%M")
    end = shift.end.strftime("%H:%M")
    if shift.is_multi_day:
        end_day = f"{DAY_NAMES[shift.end.weekday()]} {shift.end.day}"
        return f"{start} → {end} ({end_day})"
    return f"{start} - {end}"


def _visible_shifts(shifts: list[Shift], monday: Instant) -> list[Shift]:
    """Active shifts starting inside the week, in input order."""
    visible = []
    dropped = 0
    for shift in shifts:
        if shift.is_active and is_in_week(shift.start, monday):
            visible.append(shift)
        else:
            dropped += 1
    if dropped:
        logger.debug(f"Dropped {dropped} shift(s) outside week of {monday:%Y-%m-%d} or inactive")
    return visible


def layout_calendar(shifts: list[Shift], week_start: Instant) -> dict[tuple[int, int], list[CalendarBlock]]:
    """
    Place each shift in the (day, hour) cell where it starts.
    Blocks sharing a cell stack in arrival order.
    """
    monday = to_week_start(week_start)
    cells: dict[tuple[int, int], list[CalendarBlock]] = {}

    for shift in _visible_shifts(shifts, monday):
        day = day_index_in_week(shift.start, monday)
        key = (day, shift.start.hour)
        slot = cells.setdefault(key, [])
        slot.append(CalendarBlock(
            shift=shift,
            day_index=day,
            hour=shift.start.hour,
            width_fraction=calendar_width(shift),
            stack_index=len(slot),
            multi_day=shift.is_multi_day,
            label=time_label(shift),
        ))

    logger.debug(f"Calendar layout: {sum(len(c) for c in cells.values())} block(s) in {len(cells)} cell(s)")
    return cells


def _grid_block(shift: Shift, monday: Instant) -> GridBlock:
    return GridBlock(
        shift=shift,
        day_index=day_index_in_week(shift.start, monday),
        width_fraction=grid_width(shift),
        multi_day=shift.is_multi_day,
        label=time_label(shift),
    )


def layout_user_grid(shifts: list[Shift], week_start: Instant) -> list[UserGridRow]:
    """
    One row per assigned staff member (order of first appearance) followed by
    the unassigned row, which always exists and collects every open shift.
    """
    monday = to_week_start(week_start)
    rows: dict[str, UserGridRow] = {}
    unassigned = UserGridRow(staff=None)

    for shift in _visible_shifts(shifts, monday):
        block = _grid_block(shift, monday)
        staff: Optional[StaffMember] = shift.assigned_staff
        if staff is None:
            row = unassigned
        else:
            row = rows.setdefault(staff.id, UserGridRow(staff=staff))
        row.days[block.day_index].append(block)

    return [*rows.values(), unassigned]


def layout_matrix(shifts: list[Shift], week_start: Instant) -> list[UserGridRow]:
    """Staff x day matrix; shares the user grid rows and width rules."""
    return layout_user_grid(shifts, week_start)


def layout_list(shifts: list[Shift]) -> list[Shift]:
    """Ascending by start; shifts starting together keep their input order."""
    return sorted(shifts, key=lambda s: s.start)


def layout_week(shifts: list[Shift], week_start: Instant, view: ViewMode):
    """Dispatch to the layout for `view`."""
    view = ViewMode(view)
    if view == ViewMode.LIST:
        return layout_list(shifts)
    if view == ViewMode.MATRIX:
        return layout_matrix(shifts, week_start)
    if view == ViewMode.USER_GRID:
        return layout_user_grid(shifts, week_start)
    return layout_calendar(shifts, week_start)
