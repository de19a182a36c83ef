from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional, Union

from rota_engine.core.config import local_timezone
from rota_engine.services.scheduling.types import (
    Shift,
    ShiftStatus,
    ShiftTask,
    ShiftType,
    StaffMember,
)


class StaffRef(BaseModel):
    id: str = Field(alias="_id")
    first_name: str = ""
    last_name: str = ""

    class Config:
        populate_by_name = True

    def to_domain(self) -> StaffMember:
        return StaffMember(id=self.id, first_name=self.first_name, last_name=self.last_name)


class ShiftTaskSchema(BaseModel):
    description: str
    completed: bool = False


def to_local(value: datetime) -> datetime:
    """Wire instants are converted into the configured zone; naive ones are taken as local."""
    if value.tzinfo is None:
        return value
    return value.astimezone(local_timezone())


class ShiftBase(BaseModel):
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    location: Optional[str] = None
    required_staff: int = 1
    color_hex: Optional[str] = None
    tasks: List[ShiftTaskSchema] = Field(default_factory=list)


class ShiftResponse(ShiftBase):
    id: str = Field(alias="_id")
    # populated on most endpoints, a bare id on some
    user_id: Optional[Union[StaffRef, str]] = None
    status: ShiftStatus = ShiftStatus.SCHEDULED
    type: ShiftType = ShiftType.OPEN
    is_active: bool = True
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    class Config:
        populate_by_name = True

    @property
    def assignee_id(self) -> Optional[str]:
        if isinstance(self.user_id, StaffRef):
            return self.user_id.id
        return self.user_id

    def _assignee(self) -> Optional[StaffMember]:
        if isinstance(self.user_id, StaffRef):
            return self.user_id.to_domain()
        if self.user_id:
            return StaffMember(id=self.user_id)
        return None

    def to_domain(self) -> Shift:
        return Shift(
            id=self.id,
            title=self.title,
            description=self.description,
            start=to_local(self.start_time),
            end=to_local(self.end_time),
            location=self.location,
            required_staff=self.required_staff,
            assigned_staff=self._assignee(),
            color_hex=self.color_hex,
            tasks=[ShiftTask(description=t.description, completed=t.completed) for t in self.tasks],
            is_active=self.is_active,
            status=self.status,
        )
