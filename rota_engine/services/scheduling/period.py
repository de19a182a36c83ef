"""
Bulk delete period resolution.
Turns a period selector (today / this week / this month / custom) into DeletionCriteria.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from .errors import InvalidPeriod
from .time_grid import iso_week_monday, iso_week_token, local_now, wall_time
from .types import DeletionCriteria, Shift, ShiftType


logger = logging.getLogger(__name__)

WEEK_TOKEN = re.compile(r"^(\d{4})-W(\d{2})$")
MONTH_TOKEN = re.compile(r"^(\d{4})-(\d{2})$")


class BulkDeletePeriod(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    CUSTOM = "custom"


@dataclass
class PeriodSelection:
    """What the user picked in the bulk delete form."""
    period: BulkDeletePeriod = BulkDeletePeriod.CUSTOM
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    day: Optional[date] = None
    week: Optional[str] = None
    month: Optional[str] = None
    assignee_id: Optional[str] = None
    status: Optional[str] = None
    shift_type: Optional[ShiftType] = None
    force: bool = False

    def custom_scopes(self) -> list[str]:
        """Names of the custom scopes the caller populated."""
        scopes = []
        if self.start_date or self.end_date:
            scopes.append("range")
        if self.day:
            scopes.append("day")
        if self.week:
            scopes.append("week")
        if self.month:
            scopes.append("month")
        return scopes


def validate_week_token(token: str) -> str:
    match = WEEK_TOKEN.match(token)
    if not match:
        raise InvalidPeriod(f"Week must be in YYYY-Www format, got '{token}'")
    iso_week_monday(int(match.group(1)), int(match.group(2)))
    return token


def validate_month_token(token: str) -> str:
    match = MONTH_TOKEN.match(token)
    if not match or not 1 <= int(match.group(2)) <= 12:
        raise InvalidPeriod(f"Month must be in YYYY-MM format, got '{token}'")
    return token


def _parse_period(period) -> BulkDeletePeriod:
    try:
        return BulkDeletePeriod(period)
    except ValueError:
        raise InvalidPeriod(f"Unknown period: {period}")


def _parse_shift_type(shift_type) -> Optional[ShiftType]:
    if shift_type is None or shift_type == "":
        return None
    try:
        return ShiftType(shift_type)
    except ValueError:
        raise InvalidPeriod(f"Shift type must be 'open' or 'assigned', got '{shift_type}'")


def _resolve_custom(selection: PeriodSelection) -> dict:
    scopes = selection.custom_scopes()
    if not scopes:
        raise InvalidPeriod("Custom period needs a date range, day, week or month")
    if len(scopes) > 1:
        raise InvalidPeriod(f"Custom period scopes are mutually exclusive, got {', '.join(scopes)}")

    scope = scopes[0]
    if scope == "range":
        if not (selection.start_date and selection.end_date):
            raise InvalidPeriod("Custom range needs both a start date and an end date")
        if selection.start_date > selection.end_date:
            raise InvalidPeriod("Custom range start date is after its end date")
        return {"start_date": selection.start_date, "end_date": selection.end_date}
    if scope == "day":
        return {"day": selection.day}
    if scope == "week":
        return {"week": validate_week_token(selection.week)}
    return {"month": validate_month_token(selection.month)}


def resolve_period(selection: PeriodSelection, now: Optional[datetime] = None) -> DeletionCriteria:
    """
    Resolve `selection` into one complete DeletionCriteria.
    Contradictory input raises InvalidPeriod instead of being coerced.
    """
    now = wall_time(now or local_now())
    period = _parse_period(selection.period)

    if period == BulkDeletePeriod.CUSTOM:
        scope = _resolve_custom(selection)
    else:
        if selection.custom_scopes():
            raise InvalidPeriod(f"Period '{period.value}' does not take custom dates")
        if period == BulkDeletePeriod.TODAY:
            scope = {"day": now.date()}
        elif period == BulkDeletePeriod.WEEK:
            scope = {"week": iso_week_token(now)}
        else:
            scope = {"month": f"{now.year}-{now.month:02d}"}

    criteria = DeletionCriteria(
        **scope,
        assignee_id=selection.assignee_id or None,
        status=selection.status or None,
        shift_type=_parse_shift_type(selection.shift_type),
        force=selection.force,
    )
    logger.debug(f"Resolved period '{period.value}' to {criteria.to_payload()}")
    return criteria


def preview_deletion(
    shifts: list[Shift],
    criteria: DeletionCriteria,
    now: Optional[datetime] = None,
) -> list[Shift]:
    """
    Shifts the criteria would delete, for a confirmation count.
    Without `force`, shifts that have already started are left out.
    """
    now = now or local_now()
    first_day, last_day = criteria.date_range()

    matched = []
    for shift in shifts:
        if not first_day <= wall_time(shift.start).date() <= last_day:
            continue
        if criteria.assignee_id and (shift.assigned_staff is None or shift.assigned_staff.id != criteria.assignee_id):
            continue
        if criteria.status and shift.status.value != criteria.status:
            continue
        if criteria.shift_type and shift.shift_type != criteria.shift_type:
            continue
        if not criteria.force and _has_started(shift, now):
            continue
        matched.append(shift)
    return matched


def _has_started(shift: Shift, now: datetime) -> bool:
    return wall_time(shift.start) <= wall_time(now)
