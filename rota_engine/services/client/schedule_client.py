"""
HTTP client for the remote schedule service.
Parses wire schemas into domain types and maps service errors onto the engine's error kinds.
"""

import logging
from datetime import date
from typing import Optional

import httpx
from pydantic import ValidationError as SchemaValidationError

from rota_engine.core.config import settings
from rota_engine.schemas.bulk_delete import BulkDeleteRequest, BulkDeleteResponse, ErrorResponse
from rota_engine.schemas.shift_requests import ShiftRequestCreate, ShiftRequestDecision, ShiftRequestResponse
from rota_engine.schemas.shifts import ShiftResponse
from rota_engine.services.scheduling.errors import (
    AlreadyResolved,
    DuplicateRequest,
    InvalidPeriod,
    NetworkFailure,
    NotAvailable,
    ScheduleServiceError,
    SchedulingError,
    ShiftFull,
    ValidationError,
)
from rota_engine.services.scheduling.requests import OpenShiftDateFilter
from rota_engine.services.scheduling.types import (
    DeletionCriteria,
    Shift,
    ShiftRequest,
    ShiftRequestStatus,
    ShiftStatus,
    ShiftType,
)


logger = logging.getLogger(__name__)

ERROR_CODES: dict[str, type[SchedulingError]] = {
    "NotAvailable": NotAvailable,
    "AlreadyRequested": DuplicateRequest,
    "DuplicateRequest": DuplicateRequest,
    "AlreadyResolved": AlreadyResolved,
    "ShiftFull": ShiftFull,
    "ValidationError": ValidationError,
    "InvalidPeriod": InvalidPeriod,
}


class ScheduleClient:
    """
    Async client; use as `async with ScheduleClient() as client:`.
    Reads are retried on transport failures, mutations never are.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        read_retries: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        token = token if token is not None else settings.SCHEDULE_API_TOKEN
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.read_retries = settings.READ_RETRIES if read_retries is None else read_retries
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.SCHEDULE_API_URL,
            headers=headers,
            timeout=timeout or settings.REQUEST_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def __aenter__(self) -> "ScheduleClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ==================== Transport ====================

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        logger.debug(f"{method} {url}")
        try:
            response = await self._http.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            raise self._map_error(e.response) from e
        except httpx.TransportError as e:
            logger.error(f"Schedule service unreachable ({method} {url}): {e}")
            raise NetworkFailure(f"Could not reach the schedule service: {e}") from e

    async def _read(self, url: str, params: Optional[dict] = None) -> httpx.Response:
        attempt = 0
        while True:
            try:
                return await self._send("GET", url, params=params)
            except NetworkFailure:
                if attempt >= self.read_retries:
                    raise
                attempt += 1
                logger.warning(f"Retrying GET {url} ({attempt}/{self.read_retries})")

    @staticmethod
    def _map_error(response: httpx.Response) -> SchedulingError:
        try:
            body = ErrorResponse.model_validate(response.json())
            code, message = body.code, body.message
        except (ValueError, SchemaValidationError):
            code, message = "", response.text

        logger.warning(f"Schedule service error: {response.status_code} {code} - {message}")
        error_cls = ERROR_CODES.get(code)
        if error_cls is None:
            return ScheduleServiceError(message or f"Schedule service error ({response.status_code})", response.status_code)
        return error_cls(message or code)

    # ==================== Shifts ====================

    async def fetch_shifts(
        self,
        start_date: date,
        end_date: date,
        assignee_id: Optional[str] = None,
        status: Optional[ShiftStatus] = None,
        shift_type: Optional[ShiftType] = None,
    ) -> list[Shift]:
        params = {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()}
        if assignee_id:
            params["user_id"] = assignee_id
        if status:
            params["status"] = ShiftStatus(status).value
        if shift_type:
            params["type"] = ShiftType(shift_type).value

        response = await self._read("/shifts", params=params)
        return [ShiftResponse.model_validate(item).to_domain() for item in response.json()]

    async def fetch_open_shifts(self, date_filter: OpenShiftDateFilter = OpenShiftDateFilter.ALL) -> list[Shift]:
        response = await self._read("/shifts/open", params={"date_filter": OpenShiftDateFilter(date_filter).value})
        return [ShiftResponse.model_validate(item).to_domain() for item in response.json()]

    async def delete_shifts_bulk(self, criteria: DeletionCriteria) -> int:
        payload = BulkDeleteRequest(**criteria.to_payload()).model_dump(mode="json", exclude_defaults=True)
        response = await self._send("DELETE", "/shifts/bulk", json=payload)
        result = BulkDeleteResponse.model_validate(response.json())
        logger.info(f"Bulk delete {payload} removed {result.deleted_count} shift(s)")
        return result.deleted_count

    # ==================== Shift requests ====================

    async def create_request(self, shift_id: str, note: Optional[str] = None) -> ShiftRequest:
        body = ShiftRequestCreate(shift_id=shift_id, staff_notes=note)
        response = await self._send("POST", "/shifts/requests", json=body.model_dump(exclude_none=True))
        return ShiftRequestResponse.model_validate(response.json()).to_domain()

    async def fetch_requests(self, status: Optional[ShiftRequestStatus] = None) -> list[ShiftRequest]:
        params = {"status": ShiftRequestStatus(status).value} if status else None
        response = await self._read("/shifts/requests", params=params)
        return [ShiftRequestResponse.model_validate(item).to_domain() for item in response.json()]

    async def fetch_my_requests(self) -> list[ShiftRequest]:
        response = await self._read("/shifts/requests/my")
        return [ShiftRequestResponse.model_validate(item).to_domain() for item in response.json()]

    async def approve_request(self, request_id: str, note: Optional[str] = None) -> ShiftRequest:
        body = ShiftRequestDecision(admin_notes=note)
        response = await self._send("POST", f"/shifts/requests/{request_id}/approve", json=body.model_dump(exclude_none=True))
        return ShiftRequestResponse.model_validate(response.json()).to_domain()

    async def reject_request(self, request_id: str, note: str) -> ShiftRequest:
        body = ShiftRequestDecision(admin_notes=note)
        response = await self._send("POST", f"/shifts/requests/{request_id}/reject", json=body.model_dump(exclude_none=True))
        return ShiftRequestResponse.model_validate(response.json()).to_domain()
