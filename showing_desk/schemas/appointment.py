"""Pydantic schemas for Appointments."""

from datetime import datetime
from pydantic import BaseModel
from typing import Optional
from showing_desk.models.appointment import (
    Appointment,
    AppointmentStatus,
    HistoryEntry,
    PropertySnapshot,
    Requester,
    WallClockDatetime,
)
from showing_desk.services.transitions import RejectReason, TransitionOperation, allowed_operations


class AppointmentCreate(BaseModel):
    """Schema for creating an appointment."""
    requester: Requester
    property_ref: PropertySnapshot
    scheduled_at: WallClockDatetime
    operator: Optional[str] = None
    remark: Optional[str] = None


class TransitionRequest(BaseModel):
    """Common body for status changes."""
    operator: Optional[str] = None  # falls back to settings.DEFAULT_OPERATOR
    remark: Optional[str] = None


class RejectRequest(TransitionRequest):
    reason: Optional[RejectReason] = None


class RescheduleRequest(TransitionRequest):
    # Optional here so a missing value surfaces as the workflow's own error
    new_time: Optional[WallClockDatetime] = None


class AppointmentOut(BaseModel):
    """Schema for returning appointment details."""
    id: str
    appointment_number: str
    requester: Requester
    property_ref: PropertySnapshot
    scheduled_at: datetime
    status: AppointmentStatus
    created_at: datetime
    is_new: bool
    history: list[HistoryEntry]
    allowed_operations: list[TransitionOperation]

    @classmethod
    def from_appointment(cls, appointment: Appointment) -> "AppointmentOut":
        return cls(
            id=appointment.id,
            appointment_number=appointment.appointment_number,
            requester=appointment.requester,
            property_ref=appointment.property_ref,
            scheduled_at=appointment.scheduled_at,
            status=appointment.status,
            created_at=appointment.created_at,
            is_new=appointment.is_new,
            history=list(appointment.history),
            allowed_operations=allowed_operations(appointment.status),
        )


class AppointmentPage(BaseModel):
    """One page of a filtered appointment list."""
    items: list[AppointmentOut]
    total: int
    page: int
    page_size: int


class AppointmentStatsOut(BaseModel):
    """Schema for appointment statistics."""
    pending: int
    confirmed: int
    cancelled: int
    completed: int
    total: int
