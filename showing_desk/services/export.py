"""CSV export of appointment lists."""

import csv
import io
from typing import Iterable

from showing_desk.models.appointment import Appointment

EXPORT_COLUMNS = [
    "appointment_number",
    "requester_name",
    "requester_phone",
    "property_name",
    "property_layout",
    "property_address",
    "scheduled_at",
    "status",
    "created_at",
]

TIME_FORMAT = "%Y-%m-%d %H:%M"


def to_csv(appointments: Iterable[Appointment]) -> str:
    """Render appointments as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_COLUMNS)
    for a in appointments:
        writer.writerow([
            a.appointment_number,
            a.requester.name,
            a.requester.phone,
            a.property_ref.name,
            a.property_ref.layout,
            a.property_ref.address,
            a.scheduled_at.strftime(TIME_FORMAT),
            a.status.value,
            a.created_at.strftime(TIME_FORMAT),
        ])
    return buffer.getvalue()
