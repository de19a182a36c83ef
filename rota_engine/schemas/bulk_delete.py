from pydantic import BaseModel
from datetime import date
from typing import Optional

from rota_engine.services.scheduling.types import ShiftType


class BulkDeleteRequest(BaseModel):
    day: Optional[date] = None
    week: Optional[str] = None
    month: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    user_id: Optional[str] = None
    status: Optional[str] = None
    type: Optional[ShiftType] = None
    force: bool = False


class BulkDeleteResponse(BaseModel):
    deleted_count: int
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    code: str
    message: str = ""
