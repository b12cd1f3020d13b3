"""Appointment model for property viewing requests."""

import enum
from datetime import datetime
from typing import Annotated, Optional
from zoneinfo import ZoneInfo
from pydantic import AfterValidator, BaseModel, computed_field, field_validator
from showing_desk.core.config import settings


class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


CREATED_ACTION = "created"


def to_wall_clock(value: datetime) -> datetime:
    """Return ``value`` as a naive wall-clock time in settings.TIMEZONE."""
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(settings.TIMEZONE)).replace(tzinfo=None)


WallClockDatetime = Annotated[datetime, AfterValidator(to_wall_clock)]


class Requester(BaseModel):
    """The person asking to view a property."""
    name: str
    phone: str
    user_id: str
    avatar_url: Optional[str] = None

    class Config:
        frozen = True


class PropertySnapshot(BaseModel):
    """Property details as the requester saw them when booking.

    Copied onto the appointment at creation and never refreshed from the
    property record.
    """
    property_id: str
    name: str
    layout: str
    address: str

    class Config:
        frozen = True


class HistoryEntry(BaseModel):
    """One audit record on an appointment."""
    timestamp: WallClockDatetime
    action: str
    operator: str
    remark: Optional[str] = None

    class Config:
        frozen = True


class Appointment(BaseModel):
    """A request to view a property at a given time.

    Instances are immutable; the transition engine returns a new value with
    an extra history entry instead of editing one in place.
    """
    id: str
    appointment_number: str
    requester: Requester
    property_ref: PropertySnapshot
    scheduled_at: WallClockDatetime
    status: AppointmentStatus = AppointmentStatus.PENDING
    created_at: WallClockDatetime
    history: tuple[HistoryEntry, ...]

    class Config:
        frozen = True

    @field_validator("history")
    @classmethod
    def check_history_order(cls, history: tuple[HistoryEntry, ...]) -> tuple[HistoryEntry, ...]:
        if not history:
            raise ValueError("history must contain at least the creation entry")
        for earlier, later in zip(history, history[1:]):
            if later.timestamp < earlier.timestamp:
                raise ValueError("history timestamps must not decrease")
        return history

    @computed_field
    @property
    def is_new(self) -> bool:
        """True while the request is pending and nobody has acted on it yet."""
        return self.status == AppointmentStatus.PENDING and len(self.history) == 1

    @property
    def property_name(self) -> str:
        return self.property_ref.name

    @property
    def last_entry(self) -> HistoryEntry:
        return self.history[-1]
