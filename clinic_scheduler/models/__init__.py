"""Domain models for the scheduling system."""

from clinic_scheduler.models.appointment import (
    Appointment,
    AppointmentRequest,
    Priority,
    create_appointment_request,
)
from clinic_scheduler.models.patient import Patient
from clinic_scheduler.models.results import BatchSchedulingResult, SchedulingResult
from clinic_scheduler.models.slot import TimeSlot

__all__ = [
    "Appointment",
    "AppointmentRequest",
    "BatchSchedulingResult",
    "Patient",
    "Priority",
    "SchedulingResult",
    "TimeSlot",
    "create_appointment_request",
]
