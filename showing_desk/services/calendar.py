"""Day-level calendar view of confirmed appointments."""

from datetime import date
from typing import Iterable, Union

from showing_desk.models.appointment import Appointment, AppointmentStatus

DATE_FORMAT = "%Y-%m-%d"


def group_by_date(appointments: Iterable[Appointment]) -> dict[str, list[Appointment]]:
    """Map ``YYYY-MM-DD`` to that day's confirmed appointments, earliest first.

    Only confirmed appointments are listed. Days without any are left out of
    the mapping rather than given an empty list.
    """
    buckets: dict[str, list[Appointment]] = {}
    for appointment in appointments:
        if appointment.status != AppointmentStatus.CONFIRMED:
            continue
        key = appointment.scheduled_at.strftime(DATE_FORMAT)
        buckets.setdefault(key, []).append(appointment)

    # sorted() is stable, so same-minute appointments keep their input order
    return {
        key: sorted(buckets[key], key=lambda a: a.scheduled_at.time())
        for key in sorted(buckets)
    }


def for_date(appointments: Iterable[Appointment], day: Union[date, str]) -> list[Appointment]:
    """Confirmed appointments on ``day``; empty list when there are none."""
    if isinstance(day, date):
        day = day.strftime(DATE_FORMAT)
    return group_by_date(appointments).get(day, [])
