"""Errors raised by the appointment workflow."""

from typing import Optional


class AppointmentError(Exception):
    """Base class for appointment workflow errors."""


class InvalidTransition(AppointmentError, ValueError):
    """The operation is not allowed from the appointment's current status."""

    def __init__(self, operation: str, current_status: str):
        self.operation = operation
        self.current_status = current_status
        super().__init__(f"Cannot {operation} appointment with status {current_status}")


class MissingArgument(AppointmentError, ValueError):
    """A parameter required by the operation was not supplied."""

    def __init__(self, argument: str, operation: Optional[str] = None):
        self.argument = argument
        self.operation = operation
        if operation:
            message = f"'{argument}' is required to {operation} an appointment"
        else:
            message = f"'{argument}' is required"
        super().__init__(message)


class InvalidArgument(AppointmentError, ValueError):
    """A parameter was supplied but could not be understood."""

    def __init__(self, argument: str, value: object):
        self.argument = argument
        self.value = value
        super().__init__(f"Invalid value for '{argument}': {value!r}")


class NotFound(AppointmentError, LookupError):
    """No appointment with the given id exists in the store."""

    def __init__(self, appointment_id: str):
        self.appointment_id = appointment_id
        super().__init__(f"Appointment {appointment_id} not found")


class DuplicateAppointment(AppointmentError, ValueError):
    """An appointment with the same id is already in the store."""

    def __init__(self, appointment_id: str):
        self.appointment_id = appointment_id
        super().__init__(f"Appointment {appointment_id} already exists")
