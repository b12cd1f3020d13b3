"""Filtering, counting and paging of appointment lists.

Nothing here mutates its input.
"""

from datetime import date, datetime, time
from typing import Optional, Sequence, Union

from showing_desk.models.appointment import Appointment, AppointmentStatus, to_wall_clock

DateBound = Union[date, datetime]


def _lower_bound(value: DateBound) -> datetime:
    if isinstance(value, datetime):
        return to_wall_clock(value)
    return datetime.combine(value, time.min)


def _upper_bound(value: DateBound) -> datetime:
    # A plain date covers the whole day
    if isinstance(value, datetime):
        return to_wall_clock(value)
    return datetime.combine(value, time.max)


def query(
    appointments: Sequence[Appointment],
    property_name_contains: Optional[str] = None,
    status: Optional[Union[AppointmentStatus, str]] = None,
    date_range: Optional[tuple[Optional[DateBound], Optional[DateBound]]] = None,
) -> list[Appointment]:
    """Return the appointments matching every supplied filter, in input order.

    - ``property_name_contains``: case-sensitive substring of the property name
    - ``status``: exact status match
    - ``date_range``: ``(from, to)``, inclusive at both ends; either bound
      may be None for an open range
    """
    wanted_status = AppointmentStatus(status) if status is not None else None
    lower = upper = None
    if date_range is not None:
        start, end = date_range
        lower = _lower_bound(start) if start is not None else None
        upper = _upper_bound(end) if end is not None else None

    results = []
    for appointment in appointments:
        if property_name_contains and property_name_contains not in appointment.property_name:
            continue
        if wanted_status is not None and appointment.status != wanted_status:
            continue
        if lower is not None and appointment.scheduled_at < lower:
            continue
        if upper is not None and appointment.scheduled_at > upper:
            continue
        results.append(appointment)
    return results


def status_counts(appointments: Sequence[Appointment]) -> dict[str, int]:
    """Count appointments per status, plus the overall total."""
    counts = {status.value: 0 for status in AppointmentStatus}
    for appointment in appointments:
        counts[appointment.status.value] += 1
    counts["total"] = len(appointments)
    return counts


def paginate(items: Sequence[Appointment], page: int, page_size: int) -> tuple[list[Appointment], int]:
    """Slice out one 1-based page. Returns the page and the total item count."""
    if page < 1:
        raise ValueError("page must be >= 1")
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    start = (page - 1) * page_size
    return list(items[start:start + page_size]), len(items)
