"""Seed demo appointments on app startup."""

import logging
from datetime import datetime

from showing_desk.core.config import settings
from showing_desk.models.appointment import (
    CREATED_ACTION,
    Appointment,
    AppointmentStatus,
    HistoryEntry,
    PropertySnapshot,
    Requester,
)
from showing_desk.services.appointment_store import AppointmentStore
from showing_desk.services.transitions import TransitionOperation

logger = logging.getLogger(__name__)

ADMIN = "admin"

# (id, requester name, phone, property name, layout, address, viewing time, status,
#  [(timestamp, action), ...] after creation)
DEMO_APPOINTMENTS = [
    ("A001", "Zhang San", "138****5678", "Sunshine Garden 2BR", "2 bed, 1 living, 1 bath",
     "88 Jianguo Rd, Chaoyang, Beijing", "2025-03-15 14:30", AppointmentStatus.PENDING,
     "2025-03-15 10:30", []),
    ("A002", "Li Si", "139****1234", "City Apartments 1BR", "1 bed, 1 living, 1 bath",
     "1 Zhongguancun St, Haidian, Beijing", "2025-03-15 15:00", AppointmentStatus.CONFIRMED,
     "2025-03-15 11:00", [("2025-03-15 11:30", TransitionOperation.CONFIRM)]),
    ("A003", "Wang Wu", "137****9012", "Haizhu Garden 3BR", "3 bed, 2 living, 2 bath",
     "88 Jianguo Rd, Chaoyang, Beijing", "2025-03-15 16:00", AppointmentStatus.CANCELLED,
     "2025-03-15 11:30", [("2025-03-15 12:00", TransitionOperation.REJECT)]),
    ("A004", "Zhao Liu", "136****3456", "Tianhe Apartments 2BR", "2 bed, 1 living, 1 bath",
     "88 Jianguo Rd, Chaoyang, Beijing", "2025-03-15 17:00", AppointmentStatus.COMPLETED,
     "2025-03-15 12:00", [("2025-03-15 12:30", TransitionOperation.CONFIRM),
                          ("2025-03-15 17:30", TransitionOperation.COMPLETE)]),
    ("A005", "Sun Qi", "135****8888", "Greenland Center Studio", "1 bed, 0 living, 1 bath",
     "99 South 3rd Ring West Rd, Fengtai, Beijing", "2025-03-16 10:00", AppointmentStatus.PENDING,
     "2025-03-15 13:00", []),
    ("A006", "Zhou Ba", "134****6666", "Blue Harbor 3BR", "3 bed, 2 living, 2 bath",
     "6 Chaoyang Park Rd, Chaoyang, Beijing", "2025-03-16 11:00", AppointmentStatus.CONFIRMED,
     "2025-03-15 13:30", [("2025-03-15 14:00", TransitionOperation.CONFIRM)]),
    ("A007", "Qian Jiu", "133****9999", "Golden Home 2BR", "2 bed, 2 living, 1 bath",
     "77 Lugu Rd, Shijingshan, Beijing", "2025-03-16 14:00", AppointmentStatus.CANCELLED,
     "2025-03-15 14:30", [("2025-03-15 15:00", TransitionOperation.REJECT)]),
    ("A008", "Wu Shi", "132****0000", "Ginza Apartments 1BR", "1 bed, 1 living, 1 bath",
     "1 Xizhimenwai St, Xicheng, Beijing", "2025-03-16 16:00", AppointmentStatus.COMPLETED,
     "2025-03-15 15:00", [("2025-03-15 15:30", TransitionOperation.CONFIRM),
                          ("2025-03-16 16:30", TransitionOperation.COMPLETE)]),
    ("A009", "Zheng Shiyi", "131****1111", "China World Trade Center 2BR", "2 bed, 1 living, 1 bath",
     "99 Jianguomenwai St, Chaoyang, Beijing", "2025-03-17 09:30", AppointmentStatus.CONFIRMED,
     "2025-03-16 09:00", [("2025-03-16 09:30", TransitionOperation.CONFIRM)]),
    ("A010", "Feng Shier", "130****2222", "Wangjing SOHO 1BR", "1 bed, 1 living, 1 bath",
     "1 Wangjing St, Chaoyang, Beijing", "2025-03-17 14:00", AppointmentStatus.CONFIRMED,
     "2025-03-16 10:00", [("2025-03-16 10:30", TransitionOperation.CONFIRM)]),
    ("A011", "Chu Shisan", "139****3333", "Guomao Apartments 3BR", "3 bed, 2 living, 2 bath",
     "88 Jianguomenwai St, Chaoyang, Beijing", "2025-03-18 10:00", AppointmentStatus.CONFIRMED,
     "2025-03-17 09:00", [("2025-03-17 09:30", TransitionOperation.CONFIRM)]),
    ("A012", "Wei Shisi", "138****4444", "Ocean International 2BR", "2 bed, 2 living, 1 bath",
     "36 East 3rd Ring Middle Rd, Chaoyang, Beijing", "2025-03-18 15:30", AppointmentStatus.CONFIRMED,
     "2025-03-17 10:00", [("2025-03-17 10:30", TransitionOperation.CONFIRM)]),
]


def _parse(value: str) -> datetime:
    return datetime.strptime(value, "%Y-%m-%d %H:%M")


def demo_appointments() -> list[Appointment]:
    """Build the demo appointments shown on a fresh dashboard."""
    appointments = []
    # creation day (YYYYMMDD) -> last sequence used
    daily_sequence: dict[str, int] = {}
    for index, row in enumerate(DEMO_APPOINTMENTS, start=1):
        (appointment_id, name, phone, property_name, layout, address,
         scheduled_at, status, created_at, actions) = row
        number = f"{index:03d}"
        day = _parse(created_at).strftime("%Y%m%d")
        daily_sequence[day] = daily_sequence.get(day, 0) + 1
        history = [HistoryEntry(timestamp=_parse(created_at), action=CREATED_ACTION, operator=settings.SYSTEM_OPERATOR)]
        history += [HistoryEntry(timestamp=_parse(ts), action=op.value, operator=ADMIN) for ts, op in actions]
        appointments.append(Appointment(
            id=appointment_id,
            appointment_number=f"{settings.APPOINTMENT_NUMBER_PREFIX}{day}{daily_sequence[day]:03d}",
            requester=Requester(
                name=name,
                phone=phone,
                user_id=f"U{number}",
                avatar_url=f"https://example.com/avatar{index}.jpg",
            ),
            property_ref=PropertySnapshot(
                property_id=f"P{number}",
                name=property_name,
                layout=layout,
                address=address,
            ),
            scheduled_at=_parse(scheduled_at),
            status=status,
            created_at=_parse(created_at),
            history=history,
        ))
    return appointments


def seed_demo_appointments(store: AppointmentStore) -> int:
    """Load the demo appointments into an empty store. Returns how many were added."""
    if not settings.SEED_DEMO_DATA:
        logger.info("Demo data disabled (SEED_DEMO_DATA=false)")
        return 0
    if len(store):
        logger.info(f"Store already holds {len(store)} appointments, skipping demo data")
        return 0

    added = 0
    for appointment in demo_appointments():
        store.add(appointment)
        added += 1
    logger.info(f"✅ Seeded {added} demo appointments")
    return added
