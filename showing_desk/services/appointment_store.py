"""In-memory appointment store.

Holds every appointment known to the process, in insertion order. All
status changes go through :meth:`AppointmentStore.apply`, which runs the
transition engine and only swaps the stored record once it succeeds.
"""

import logging
import uuid
from collections import defaultdict
from datetime import datetime
from typing import Iterable, Optional, Union

from showing_desk.core.config import settings
from showing_desk.core.exceptions import DuplicateAppointment, NotFound
from showing_desk.models.appointment import (
    CREATED_ACTION,
    Appointment,
    AppointmentStatus,
    HistoryEntry,
    PropertySnapshot,
    Requester,
    to_wall_clock,
)
from showing_desk.services.transitions import Clock, RejectReason, TransitionOperation, apply_transition, reject

logger = logging.getLogger(__name__)


class AppointmentStore:
    """Authoritative collection of appointments for the current session."""

    def __init__(
        self,
        appointments: Iterable[Appointment] = (),
        clock: Clock = datetime.now,
        number_prefix: Optional[str] = None,
    ):
        self._appointments: dict[str, Appointment] = {}
        self._clock = clock
        self._number_prefix = number_prefix if number_prefix is not None else settings.APPOINTMENT_NUMBER_PREFIX
        # creation date (YYYYMMDD) -> last sequence number handed out
        self._daily_sequence: dict[str, int] = defaultdict(int)
        for appointment in appointments:
            self.add(appointment)

    def __len__(self) -> int:
        return len(self._appointments)

    def __contains__(self, appointment_id: object) -> bool:
        return appointment_id in self._appointments

    def add(self, appointment: Appointment) -> Appointment:
        """Insert an existing appointment record (e.g. demo data or an import)."""
        if appointment.id in self._appointments:
            raise DuplicateAppointment(appointment.id)
        self._appointments[appointment.id] = appointment
        self._note_number(appointment.appointment_number)
        return appointment

    def get(self, appointment_id: str) -> Appointment:
        try:
            return self._appointments[appointment_id]
        except KeyError:
            raise NotFound(appointment_id) from None

    def all(self) -> list[Appointment]:
        """Every appointment, in the order it entered the store."""
        return list(self._appointments.values())

    def replace(self, appointment: Appointment) -> Appointment:
        if appointment.id not in self._appointments:
            raise NotFound(appointment.id)
        self._appointments[appointment.id] = appointment
        return appointment

    def create(
        self,
        requester: Requester,
        property_ref: PropertySnapshot,
        scheduled_at: datetime,
        operator: Optional[str] = None,
        remark: Optional[str] = None,
    ) -> Appointment:
        """Intake a new viewing request in ``pending`` status."""
        created_at = to_wall_clock(self._clock())
        appointment = Appointment(
            id=uuid.uuid4().hex,
            appointment_number=self._next_number(created_at),
            requester=requester,
            property_ref=property_ref,
            scheduled_at=scheduled_at,
            status=AppointmentStatus.PENDING,
            created_at=created_at,
            history=(
                HistoryEntry(
                    timestamp=created_at,
                    action=CREATED_ACTION,
                    operator=operator or settings.SYSTEM_OPERATOR,
                    remark=remark,
                ),
            ),
        )
        self.add(appointment)
        logger.info(
            "Appointment %s (%s) created for %s at %s",
            appointment.id, appointment.appointment_number, property_ref.name, appointment.scheduled_at,
        )
        return appointment

    def apply(
        self,
        appointment_id: str,
        operation: Union[TransitionOperation, str],
        operator: str,
        remark: Optional[str] = None,
        new_time: Optional[Union[datetime, str]] = None,
    ) -> Appointment:
        """Run a transition against a stored appointment.

        Raises NotFound, MissingArgument, InvalidArgument or InvalidTransition;
        on any error the stored record is left as it was.
        """
        current = self.get(appointment_id)
        updated = apply_transition(
            current, operation, operator, remark=remark, new_time=new_time, clock=self._clock
        )
        return self.replace(updated)

    def reject(
        self,
        appointment_id: str,
        operator: str,
        remark: Optional[str] = None,
        reason: Optional[RejectReason] = None,
    ) -> Appointment:
        """Reject a stored pending request, recording ``reason`` as the remark if no remark is given."""
        current = self.get(appointment_id)
        return self.replace(reject(current, operator, remark=remark, reason=reason, clock=self._clock))

    def _next_number(self, created_at: datetime) -> str:
        day = created_at.strftime("%Y%m%d")
        self._daily_sequence[day] += 1
        return f"{self._number_prefix}{day}{self._daily_sequence[day]:03d}"

    def _note_number(self, appointment_number: str) -> None:
        """Keep generated numbers clear of ones already in the store."""
        if not appointment_number.startswith(self._number_prefix):
            return
        suffix = appointment_number[len(self._number_prefix):]
        if len(suffix) < 11 or not suffix.isdigit():
            return
        day, sequence = suffix[:8], int(suffix[8:])
        if sequence > self._daily_sequence[day]:
            self._daily_sequence[day] = sequence
