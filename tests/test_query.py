"""Tests for appointment filtering, counting and paging."""

from datetime import date, datetime, timedelta, timezone

import pytest

from showing_desk.models.appointment import AppointmentStatus
from showing_desk.services.query import paginate, query, status_counts


def _ids(appointments):
    return [a.id for a in appointments]


def test_no_filters_is_identity(demo_store):
    appointments = demo_store.all()
    assert query(appointments) == appointments


def test_empty_input():
    assert query([], property_name_contains="Garden", status="pending") == []


def test_property_name_is_case_sensitive_substring(demo_store):
    appointments = demo_store.all()
    assert _ids(query(appointments, property_name_contains="Garden")) == ["A001", "A003"]
    assert query(appointments, property_name_contains="garden") == []


def test_empty_property_name_matches_everything(demo_store):
    assert len(query(demo_store.all(), property_name_contains="")) == 12


def test_status_filter(demo_store):
    appointments = demo_store.all()
    assert _ids(query(appointments, status=AppointmentStatus.PENDING)) == ["A001", "A005"]
    assert _ids(query(appointments, status="completed")) == ["A004", "A008"]


def test_unknown_status_value():
    with pytest.raises(ValueError):
        query([], status="archived")


def test_datetime_range_is_inclusive(demo_store):
    result = query(
        demo_store.all(),
        date_range=(datetime(2025, 3, 15, 15, 0), datetime(2025, 3, 16, 10, 0)),
    )
    assert _ids(result) == ["A002", "A003", "A004", "A005"]


def test_date_bounds_cover_whole_days(demo_store):
    result = query(demo_store.all(), date_range=(date(2025, 3, 16), date(2025, 3, 16)))
    assert _ids(result) == ["A005", "A006", "A007", "A008"]


def test_open_ended_range(demo_store):
    result = query(demo_store.all(), date_range=(date(2025, 3, 18), None))
    assert _ids(result) == ["A011", "A012"]


def test_filters_combine(demo_store):
    result = query(
        demo_store.all(),
        property_name_contains="Apartments",
        status=AppointmentStatus.CONFIRMED,
        date_range=(date(2025, 3, 15), date(2025, 3, 17)),
    )
    assert _ids(result) == ["A002"]


def test_query_does_not_mutate_input(demo_store):
    appointments = demo_store.all()
    snapshot = list(appointments)
    query(appointments, status="confirmed")
    assert appointments == snapshot


def test_status_counts(demo_store):
    assert status_counts(demo_store.all()) == {
        "pending": 2,
        "confirmed": 6,
        "cancelled": 2,
        "completed": 2,
        "total": 12,
    }


def test_status_counts_empty():
    assert status_counts([]) == {"pending": 0, "confirmed": 0, "cancelled": 0, "completed": 0, "total": 0}


def test_paginate(demo_store):
    appointments = demo_store.all()
    first, total = paginate(appointments, 1, 10)
    second, _ = paginate(appointments, 2, 10)
    third, _ = paginate(appointments, 3, 10)

    assert total == 12
    assert len(first) == 10
    assert _ids(second) == ["A011", "A012"]
    assert third == []


def test_paginate_rejects_bad_page():
    with pytest.raises(ValueError):
        paginate([], 0, 10)


def test_aware_datetime_bounds_are_converted(demo_store):
    beijing = timezone(timedelta(hours=8))
    result = query(
        demo_store.all(),
        date_range=(datetime(2025, 3, 15, 23, 0, tzinfo=beijing), datetime(2025, 3, 16, 10, 0)),
    )
    assert _ids(result) == ["A002", "A003", "A004", "A005"]


def test_aware_viewing_time_is_comparable(store, requester, property_ref):
    store.create(requester, property_ref, datetime(2025, 3, 16, 9, 0, tzinfo=timezone.utc))
    result = query(store.all(), date_range=(date(2025, 3, 16), None))
    assert len(result) == 1
