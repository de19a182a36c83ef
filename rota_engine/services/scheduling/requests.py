"""
Open shift request lifecycle.

A ShiftRequest moves pending -> approved or pending -> rejected and never
leaves either terminal state. The rules are pure functions over explicit
Shift / ShiftRequest collections; RequestLifecycle runs them before each
call to the schedule service and never mutates local state optimistically.
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional, Protocol

from .errors import AlreadyResolved, DuplicateRequest, NetworkFailure, NotAvailable, ShiftFull, ValidationError
from .time_grid import local_now, wall_time
from .types import (
    AssignedShift,
    FilledShift,
    OpenShift,
    Shift,
    ShiftRequest,
    ShiftRequestStatus,
    ShiftState,
    ShiftStatus,
)


logger = logging.getLogger(__name__)


class OpenShiftDateFilter(str, Enum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class OpenShiftSort(str, Enum):
    START_TIME = "date"
    DURATION = "duration"


# ==================== Derived state ====================

def approved_count(shift_id: str, requests: list[ShiftRequest]) -> int:
    return sum(1 for r in requests if r.shift_id == shift_id and r.status == ShiftRequestStatus.APPROVED)


def shift_state(shift: Shift, requests: list[ShiftRequest]) -> ShiftState:
    """Open, Assigned or Filled, from the assignee and the approved requests."""
    approved = approved_count(shift.id, requests)
    if approved >= shift.required_staff:
        return FilledShift(approved_count=approved)
    if shift.assigned_staff is not None:
        return AssignedShift(staff=shift.assigned_staff, approved_count=approved)
    return OpenShift(open_slots=shift.required_staff - approved, approved_count=approved)


def is_requestable(shift: Shift, requests: list[ShiftRequest]) -> bool:
    return (
        shift.is_active
        and shift.status == ShiftStatus.SCHEDULED
        and isinstance(shift_state(shift, requests), OpenShift)
    )


@dataclass(frozen=True)
class RequestCounts:
    pending: int = 0
    approved: int = 0
    rejected: int = 0

    @property
    def total(self) -> int:
        return self.pending + self.approved + self.rejected

    @classmethod
    def from_requests(cls, requests: list[ShiftRequest]) -> "RequestCounts":
        return cls(
            pending=pending_count(requests),
            approved=approved_count_total(requests),
            rejected=rejected_count(requests),
        )


def pending_count(requests: list[ShiftRequest]) -> int:
    return len(filter_requests(requests, ShiftRequestStatus.PENDING))


def approved_count_total(requests: list[ShiftRequest]) -> int:
    return len(filter_requests(requests, ShiftRequestStatus.APPROVED))


def rejected_count(requests: list[ShiftRequest]) -> int:
    return len(filter_requests(requests, ShiftRequestStatus.REJECTED))


def filter_requests(
    requests: list[ShiftRequest],
    status: Optional[ShiftRequestStatus] = None,
) -> list[ShiftRequest]:
    if status is None:
        return list(requests)
    status = ShiftRequestStatus(status)
    return [r for r in requests if r.status == status]


def sort_requests(requests: list[ShiftRequest], newest_first: bool = True) -> list[ShiftRequest]:
    """By creation time; requests without one sort last."""
    dated = [r for r in requests if r.created_at is not None]
    undated = [r for r in requests if r.created_at is None]
    return sorted(dated, key=lambda r: r.created_at, reverse=newest_first) + undated


# ==================== Open shift listing ====================

def _add_month(day: date) -> date:
    year, month = (day.year + 1, 1) if day.month == 12 else (day.year, day.month + 1)
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def _matches_date_filter(shift: Shift, date_filter: OpenShiftDateFilter, now: datetime) -> bool:
    if date_filter == OpenShiftDateFilter.ALL:
        return True

    today = wall_time(now).date()
    start = wall_time(shift.start)
    if date_filter == OpenShiftDateFilter.TODAY:
        return start.date() == today

    if date_filter == OpenShiftDateFilter.WEEK:
        window_end = today + timedelta(days=7)
    else:
        window_end = _add_month(today)
    # window runs from today 00:00 to 00:00 of the last day, inclusive
    return datetime.combine(today, time.min) <= start <= datetime.combine(window_end, time.min)


def list_open_shifts(
    shifts: list[Shift],
    requests: list[ShiftRequest],
    date_filter: OpenShiftDateFilter = OpenShiftDateFilter.ALL,
    sort: OpenShiftSort = OpenShiftSort.START_TIME,
    now: Optional[datetime] = None,
) -> list[Shift]:
    """Requestable shifts, filtered by start date and sorted for display."""
    now = now or local_now()
    date_filter = OpenShiftDateFilter(date_filter)
    sort = OpenShiftSort(sort)

    open_shifts = [
        s for s in shifts
        if is_requestable(s, requests) and _matches_date_filter(s, date_filter, now)
    ]
    if sort == OpenShiftSort.DURATION:
        return sorted(open_shifts, key=lambda s: s.duration, reverse=True)
    return sorted(open_shifts, key=lambda s: wall_time(s.start))


# ==================== Transition rules ====================

def check_can_submit(shift: Shift, staff_id: str, requests: list[ShiftRequest]) -> None:
    if not is_requestable(shift, requests):
        raise NotAvailable(f"Shift '{shift.title}' has no open slot")

    for r in requests:
        if r.shift_id == shift.id and r.staff.id == staff_id and r.status != ShiftRequestStatus.REJECTED:
            raise DuplicateRequest(f"You have already requested shift '{shift.title}'")


def check_can_approve(request: ShiftRequest, shift: Optional[Shift], requests: list[ShiftRequest]) -> None:
    if not request.is_pending:
        raise AlreadyResolved(f"Request {request.id} is already {request.status.value}")
    if shift is None:
        return
    if approved_count(shift.id, requests) + 1 > shift.required_staff:
        raise ShiftFull(f"Shift '{shift.title}' already has {shift.required_staff} approved staff")


def check_can_reject(request: Optional[ShiftRequest], admin_note: Optional[str]) -> None:
    if request is not None and not request.is_pending:
        raise AlreadyResolved(f"Request {request.id} is already {request.status.value}")
    if not admin_note or not admin_note.strip():
        raise ValidationError("A note is required when rejecting a request")


def capacity_conflicts(shift: Shift, requests: list[ShiftRequest]) -> list[ShiftRequest]:
    """Pending requests left on a shift with no open slot; the admin must reject them."""
    if approved_count(shift.id, requests) < shift.required_staff:
        return []
    return [r for r in requests if r.shift_id == shift.id and r.is_pending]


# ==================== Service orchestration ====================

class RequestService(Protocol):
    async def create_request(self, shift_id: str, note: Optional[str] = None) -> ShiftRequest: ...

    async def fetch_requests(self, status: Optional[ShiftRequestStatus] = None) -> list[ShiftRequest]: ...

    async def approve_request(self, request_id: str, note: Optional[str] = None) -> ShiftRequest: ...

    async def reject_request(self, request_id: str, note: str) -> ShiftRequest: ...


@dataclass
class ApprovalOutcome:
    request: ShiftRequest
    # pending requests on the same shift that no longer fit
    conflicts: list[ShiftRequest] = field(default_factory=list)


def _find_shift(shifts: list[Shift], shift_id: str) -> Optional[Shift]:
    return next((s for s in shifts if s.id == shift_id), None)


def _find_request(requests: list[ShiftRequest], request_id: str) -> Optional[ShiftRequest]:
    return next((r for r in requests if r.id == request_id), None)


class RequestLifecycle:
    """
    Runs the transition rules against the caller's collections, then asks the
    service to perform the transition. The service stays authoritative: callers
    refetch after every call instead of patching their collections.
    """

    def __init__(self, client: RequestService):
        self.client = client

    async def refresh(self, status: Optional[ShiftRequestStatus] = None) -> list[ShiftRequest]:
        return await self.client.fetch_requests(status)

    async def submit_request(
        self,
        shift_id: str,
        staff_id: str,
        note: Optional[str],
        shifts: list[Shift],
        requests: list[ShiftRequest],
    ) -> ShiftRequest:
        shift = _find_shift(shifts, shift_id)
        if shift is None:
            raise NotAvailable(f"Shift {shift_id} is not available")
        check_can_submit(shift, staff_id, requests)

        created = await self.client.create_request(shift_id, note)
        logger.info(f"Staff {staff_id} requested shift {shift_id} (request {created.id})")
        return created

    async def approve(
        self,
        request_id: str,
        admin_note: Optional[str],
        shifts: list[Shift],
        requests: list[ShiftRequest],
    ) -> ApprovalOutcome:
        request = _find_request(requests, request_id)
        shift = _find_shift(shifts, request.shift_id) if request else None

        try:
            if request is not None:
                check_can_approve(request, shift, requests)
            approved = await self.client.approve_request(request_id, admin_note)
        except ShiftFull as e:
            logger.warning(f"Approval of request {request_id} refused: {e.message}; refetching requests")
            try:
                e.refreshed_requests = await self.refresh()
            except NetworkFailure as refetch_error:
                logger.error(f"Refetch after refused approval of {request_id} failed: {refetch_error.message}")
            raise

        logger.info(f"Request {request_id} approved")
        shift = shift or _find_shift(shifts, approved.shift_id)
        if shift is None:
            return ApprovalOutcome(request=approved)

        updated = [approved if r.id == request_id else r for r in requests]
        if request is None:
            updated.append(approved)
        conflicts = capacity_conflicts(shift, updated)
        if conflicts:
            logger.info(f"Shift {shift.id} is full; {len(conflicts)} pending request(s) need rejection")
        return ApprovalOutcome(request=approved, conflicts=conflicts)

    async def reject(
        self,
        request_id: str,
        admin_note: str,
        requests: list[ShiftRequest],
    ) -> ShiftRequest:
        check_can_reject(_find_request(requests, request_id), admin_note)

        rejected = await self.client.reject_request(request_id, admin_note.strip())
        logger.info(f"Request {request_id} rejected")
        return rejected
