"""Tests for the in-memory appointment store."""

from datetime import datetime, timezone

import pytest

from showing_desk.core.exceptions import (
    DuplicateAppointment,
    InvalidArgument,
    InvalidTransition,
    MissingArgument,
    NotFound,
)
from showing_desk.core.seed import demo_appointments
from showing_desk.models.appointment import AppointmentStatus
from showing_desk.services.calendar import group_by_date
from showing_desk.services.transitions import RejectReason


def test_create_starts_pending(store, make_appointment):
    appointment = make_appointment()

    assert appointment.status == AppointmentStatus.PENDING
    assert appointment.is_new is True
    assert appointment.created_at == datetime(2025, 3, 15, 10, 30)
    assert len(appointment.history) == 1
    assert appointment.history[0].action == "created"
    assert appointment.history[0].operator == "system"
    assert store.get(appointment.id) is appointment


def test_appointment_numbers_follow_creation_day(store, make_appointment, clock):
    first = make_appointment()
    second = make_appointment()
    clock.advance(days=1)
    third = make_appointment()

    assert first.appointment_number == "YY20250315001"
    assert second.appointment_number == "YY20250315002"
    assert third.appointment_number == "YY20250316001"
    assert len({first.id, second.id, third.id}) == 3


def test_numbers_continue_after_loaded_records(demo_store, make_appointment):
    appointment = make_appointment()
    assert appointment.appointment_number == "YY20250315009"


def test_add_duplicate_id(store):
    appointment = demo_appointments()[0]
    store.add(appointment)
    with pytest.raises(DuplicateAppointment):
        store.add(appointment)
    assert len(store) == 1


def test_all_preserves_insertion_order(demo_store):
    assert [a.id for a in demo_store.all()] == [f"A{i:03d}" for i in range(1, 13)]


def test_get_unknown_id(store):
    with pytest.raises(NotFound) as exc_info:
        store.get("missing")
    assert exc_info.value.appointment_id == "missing"


def test_apply_unknown_id(store):
    with pytest.raises(NotFound):
        store.apply("missing", "confirm", "admin")


def test_apply_replaces_record(store, make_appointment, clock):
    appointment = make_appointment()
    clock.advance(minutes=5)
    updated = store.apply(appointment.id, "confirm", "admin")

    assert store.get(appointment.id) is updated
    assert updated.history[-1].timestamp == datetime(2025, 3, 15, 10, 35)


def test_failed_apply_leaves_store_unchanged(store, make_appointment):
    appointment = make_appointment()
    store.apply(appointment.id, "reject", "admin")
    before = store.get(appointment.id)

    with pytest.raises(InvalidTransition):
        store.apply(appointment.id, "confirm", "admin")
    with pytest.raises(MissingArgument):
        store.apply(appointment.id, "reschedule", "admin")

    assert store.get(appointment.id) is before
    assert len(before.history) == 2


def test_confirm_reschedule_scenario(store, make_appointment):
    a1 = make_appointment(scheduled_at=datetime(2025, 3, 15, 10, 30))

    a1 = store.apply(a1.id, "confirm", "admin")
    assert a1.status == AppointmentStatus.CONFIRMED
    assert len(a1.history) == 2

    a1 = store.apply(a1.id, "reschedule", "admin", new_time=datetime(2025, 3, 16, 9, 0))
    assert a1.scheduled_at == datetime(2025, 3, 16, 9, 0)
    assert a1.status == AppointmentStatus.CONFIRMED
    assert len(a1.history) == 3

    calendar = group_by_date([a1])
    assert list(calendar) == ["2025-03-16"]
    assert calendar["2025-03-16"] == [a1]


def test_reject_then_confirm_scenario(store, make_appointment):
    a2 = make_appointment()

    a2 = store.apply(a2.id, "reject", "admin")
    assert a2.status == AppointmentStatus.CANCELLED
    assert len(a2.history) == 2

    with pytest.raises(InvalidTransition):
        store.apply(a2.id, "confirm", "admin")
    assert len(store.get(a2.id).history) == 2


def test_create_normalizes_aware_viewing_time(store, requester, property_ref):
    appointment = store.create(requester, property_ref, datetime(2025, 3, 16, 9, 0, tzinfo=timezone.utc))
    assert appointment.scheduled_at == datetime(2025, 3, 16, 9, 0)
    assert appointment.scheduled_at.tzinfo is None


def test_reject_with_reason(store, make_appointment):
    appointment = make_appointment()
    cancelled = store.reject(appointment.id, "admin", reason=RejectReason.TIME_CONFLICT)

    assert store.get(appointment.id) is cancelled
    assert cancelled.status == AppointmentStatus.CANCELLED
    assert cancelled.history[-1].remark == "Time conflict"


def test_reject_unknown_id(store):
    with pytest.raises(NotFound):
        store.reject("missing", "admin")


def test_failed_reschedule_with_bad_time_leaves_store_unchanged(store, make_appointment):
    appointment = make_appointment()
    confirmed = store.apply(appointment.id, "confirm", "admin")

    with pytest.raises(InvalidArgument):
        store.apply(appointment.id, "reschedule", "admin", new_time="soon")
    assert store.get(appointment.id) is confirmed
