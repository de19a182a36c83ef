from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, Union

from rota_engine.schemas.shifts import ShiftResponse, StaffRef, to_local
from rota_engine.services.scheduling.types import ShiftRequest, ShiftRequestStatus


class ShiftRequestCreate(BaseModel):
    shift_id: str
    staff_notes: Optional[str] = None


class ShiftRequestDecision(BaseModel):
    admin_notes: Optional[str] = None


class ShiftRequestResponse(BaseModel):
    id: str = Field(alias="_id")
    # the service populates the shift on list endpoints and sends a bare id elsewhere
    shift_id: Union[ShiftResponse, str]
    user_id: StaffRef
    status: ShiftRequestStatus = ShiftRequestStatus.PENDING
    staff_notes: Optional[str] = None
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None
    responded_by: Optional[StaffRef] = None

    class Config:
        populate_by_name = True

    @property
    def shift_ref(self) -> str:
        return self.shift_id.id if isinstance(self.shift_id, ShiftResponse) else self.shift_id

    def to_domain(self) -> ShiftRequest:
        return ShiftRequest(
            id=self.id,
            shift_id=self.shift_ref,
            staff=self.user_id.to_domain(),
            status=self.status,
            staff_note=self.staff_notes,
            admin_note=self.admin_notes,
            responded_by=self.responded_by.to_domain() if self.responded_by else None,
            responded_at=to_local(self.responded_at) if self.responded_at else None,
            created_at=to_local(self.created_at) if self.created_at else None,
        )
