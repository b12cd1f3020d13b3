"""FastAPI dependencies."""

from typing import Optional

from showing_desk.services.appointment_store import AppointmentStore

_store: Optional[AppointmentStore] = None


def get_store() -> AppointmentStore:
    """Return the process-wide appointment store.

    Override this dependency to run the API against a different store.
    """
    global _store
    if _store is None:
        _store = AppointmentStore()
    return _store
