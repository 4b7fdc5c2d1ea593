"""Errors raised by the calendar and scheduling models."""


class SchedulingError(Exception):
    """Base class for all scheduling errors."""


class ValidationError(SchedulingError, ValueError):
    """An entity was constructed with invalid field values."""


class OverlapError(SchedulingError):
    """A time slot intersects a slot already stored in the calendar."""


class SlotNotFoundError(SchedulingError):
    """The referenced slot is not part of the calendar."""

    def __init__(self, message: str = "Time slot not found in calendar"):
        super().__init__(message)


class SlotUnavailableError(SchedulingError):
    """The referenced slot is already booked."""

    def __init__(self, message: str = "Time slot is not available"):
        super().__init__(message)


class AppointmentNotFoundError(SchedulingError):
    """No appointment exists with the given id."""

    def __init__(self, appointment_id: str):
        self.appointment_id = appointment_id
        super().__init__(f"Appointment '{appointment_id}' not found")
