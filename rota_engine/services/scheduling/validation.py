"""
Field checks for creating and editing shifts.
"""

from datetime import datetime, timedelta
from typing import Optional

from .errors import ValidationError
from .types import Shift, ShiftStatus, ShiftType

MAX_SHIFT_LENGTH = timedelta(hours=24)


def validate_shift_fields(
    title: Optional[str],
    location: Optional[str],
    start: Optional[datetime],
    end: Optional[datetime],
    assigned_staff_id: Optional[str] = None,
    shift_type: ShiftType = ShiftType.OPEN,
) -> None:
    """Raise ValidationError for the first problem found."""
    if not title or not title.strip():
        raise ValidationError("Please enter a shift title")
    if start is None:
        raise ValidationError("Please enter a start time")
    if end is None:
        raise ValidationError("Please enter an end time")
    if ShiftType(shift_type) == ShiftType.ASSIGNED and not assigned_staff_id:
        raise ValidationError("Please select a staff member for assigned shift")
    if not location or not location.strip():
        raise ValidationError("Please select a location")
    if end <= start:
        raise ValidationError("End time must be after start time")
    if end - start > MAX_SHIFT_LENGTH:
        raise ValidationError("Shift duration cannot exceed 24 hours")


def validate_staff_change(shift: Shift, new_staff_id: Optional[str]) -> None:
    """Completed or cancelled shifts keep their assignee."""
    if shift.status not in (ShiftStatus.COMPLETED, ShiftStatus.CANCELLED):
        return
    current = shift.assigned_staff.id if shift.assigned_staff else None
    if current is not None and current != new_staff_id:
        raise ValidationError("Cannot change assigned staff for completed or cancelled shifts")
