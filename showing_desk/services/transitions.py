"""Status transitions for viewing appointments.

Allowed moves:

- pending   --confirm-->    confirmed
- pending   --reject-->     cancelled
- confirmed --reschedule--> confirmed  (new time required)
- confirmed --complete-->   completed

cancelled and completed are terminal. Every successful transition appends
exactly one history entry; a failed one leaves the appointment untouched.
"""

import enum
import logging
from datetime import datetime
from typing import Callable, Optional, Union

from pydantic import TypeAdapter, ValidationError

from showing_desk.core.exceptions import InvalidArgument, InvalidTransition, MissingArgument
from showing_desk.models.appointment import (
    Appointment,
    AppointmentStatus,
    HistoryEntry,
    WallClockDatetime,
    to_wall_clock,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_wall_clock = TypeAdapter(WallClockDatetime)


class TransitionOperation(str, enum.Enum):
    CONFIRM = "confirm"
    REJECT = "reject"
    RESCHEDULE = "reschedule"
    COMPLETE = "complete"


# operation -> (required current status, resulting status)
TRANSITIONS: dict[TransitionOperation, tuple[AppointmentStatus, AppointmentStatus]] = {
    TransitionOperation.CONFIRM: (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED),
    TransitionOperation.REJECT: (AppointmentStatus.PENDING, AppointmentStatus.CANCELLED),
    TransitionOperation.RESCHEDULE: (AppointmentStatus.CONFIRMED, AppointmentStatus.CONFIRMED),
    TransitionOperation.COMPLETE: (AppointmentStatus.CONFIRMED, AppointmentStatus.COMPLETED),
}


class RejectReason(str, enum.Enum):
    TIME_CONFLICT = "time_conflict"
    PROPERTY_RENTED = "property_rented"
    USER_CANCELLED = "user_cancelled"


REJECT_REASON_LABELS = {
    RejectReason.TIME_CONFLICT: "Time conflict",
    RejectReason.PROPERTY_RENTED: "Property already rented",
    RejectReason.USER_CANCELLED: "Cancelled by user",
}


def reason_label(reason: RejectReason) -> str:
    """Human-readable remark for a rejection reason."""
    return REJECT_REASON_LABELS[RejectReason(reason)]


def allowed_operations(status: AppointmentStatus) -> list[TransitionOperation]:
    """Operations that can be applied to an appointment in ``status``."""
    return [op for op, (source, _) in TRANSITIONS.items() if source == status]


def _coerce_operation(operation: Union[TransitionOperation, str], current_status: AppointmentStatus) -> TransitionOperation:
    try:
        return TransitionOperation(operation)
    except ValueError:
        raise InvalidTransition(str(operation), current_status.value) from None


def apply_transition(
    appointment: Appointment,
    operation: Union[TransitionOperation, str],
    operator: str,
    remark: Optional[str] = None,
    new_time: Optional[Union[datetime, str]] = None,
    now: Optional[datetime] = None,
    clock: Clock = datetime.now,
) -> Appointment:
    """Apply ``operation`` to ``appointment`` and return the updated value.

    Args:
        appointment: Current appointment value (left unchanged)
        operation: One of confirm / reject / reschedule / complete
        operator: Who performed the action, written verbatim into history
        remark: Optional free-text note for the history entry
        new_time: New viewing time, required for reschedule; ISO strings
            are parsed and aware values converted to wall-clock time
        now: Timestamp for the history entry (defaults to ``clock()``)
        clock: Time source used when ``now`` is not given

    Returns:
        A new Appointment with the status change and one more history entry

    Raises:
        MissingArgument: operator is blank, or reschedule has no new_time
        InvalidArgument: new_time is not a date-time
        InvalidTransition: the operation is unknown or not allowed from the
            current status
    """
    current_status = appointment.status
    op = _coerce_operation(operation, current_status)

    if not operator or not operator.strip():
        raise MissingArgument("operator", op.value)
    if op == TransitionOperation.RESCHEDULE and new_time is None:
        raise MissingArgument("new_time", op.value)
    if op == TransitionOperation.RESCHEDULE:
        try:
            new_time = _wall_clock.validate_python(new_time)
        except ValidationError:
            raise InvalidArgument("new_time", new_time) from None

    source, target = TRANSITIONS[op]
    if current_status != source:
        logger.warning(
            "Rejected %s on appointment %s: status is %s",
            op.value, appointment.id, current_status.value,
        )
        raise InvalidTransition(op.value, current_status.value)

    timestamp = to_wall_clock(now if now is not None else clock())
    # History must never run backwards, even if the clock does
    last_timestamp = appointment.last_entry.timestamp
    if timestamp < last_timestamp:
        timestamp = last_timestamp

    entry = HistoryEntry(timestamp=timestamp, action=op.value, operator=operator, remark=remark)
    update = {
        "status": target,
        "history": appointment.history + (entry,),
    }
    if op == TransitionOperation.RESCHEDULE:
        update["scheduled_at"] = new_time

    updated = appointment.model_copy(update=update)
    logger.info(
        f"Appointment {appointment.id} {op.value} by {operator}: "
        f"{current_status.value} -> {target.value}"
    )
    return updated


def confirm(appointment: Appointment, operator: str, remark: Optional[str] = None, **kwargs) -> Appointment:
    return apply_transition(appointment, TransitionOperation.CONFIRM, operator, remark=remark, **kwargs)


def reject(
    appointment: Appointment,
    operator: str,
    remark: Optional[str] = None,
    reason: Optional[RejectReason] = None,
    **kwargs,
) -> Appointment:
    """Reject a pending request. ``reason`` fills the remark when none is given."""
    if remark is None and reason is not None:
        remark = reason_label(reason)
    return apply_transition(appointment, TransitionOperation.REJECT, operator, remark=remark, **kwargs)


def reschedule(
    appointment: Appointment,
    new_time: Optional[Union[datetime, str]],
    operator: str,
    remark: Optional[str] = None,
    **kwargs,
) -> Appointment:
    return apply_transition(
        appointment, TransitionOperation.RESCHEDULE, operator, remark=remark, new_time=new_time, **kwargs
    )


def complete(appointment: Appointment, operator: str, remark: Optional[str] = None, **kwargs) -> Appointment:
    return apply_transition(appointment, TransitionOperation.COMPLETE, operator, remark=remark, **kwargs)
