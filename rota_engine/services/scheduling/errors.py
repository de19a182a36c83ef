"""
Error kinds raised by the scheduling engine and the schedule service client.
"""

from typing import Optional


class SchedulingError(Exception):
    """Base for every error surfaced to the presentation layer."""

    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SchedulingError):
    """Missing or inconsistent user input (shift fields, rejection note)."""


class NotAvailable(SchedulingError):
    """The target shift has no open slot."""


class DuplicateRequest(SchedulingError):
    """The staff member already holds a live request on the shift."""


class AlreadyResolved(SchedulingError):
    """The request has already left pending."""


class ShiftFull(SchedulingError):
    """Approving would exceed the shift's required staff."""

    def __init__(self, message: str, refreshed_requests: Optional[list] = None):
        super().__init__(message)
        # set once the authoritative request list has been refetched
        self.refreshed_requests = refreshed_requests


class InvalidPeriod(SchedulingError):
    """Contradictory or malformed bulk-delete period selection."""


class NetworkFailure(SchedulingError):
    """Transport-level failure talking to the schedule service."""

    retryable = True


class ScheduleServiceError(SchedulingError):
    """Non-2xx response the client has no specific mapping for."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code
