"""Appointment, request and priority models."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import IntEnum

from clinic_scheduler.errors import ValidationError
from clinic_scheduler.models.patient import Patient
from clinic_scheduler.models.slot import TimeSlot
from clinic_scheduler.utils.ids import generate_id


class Priority(IntEnum):
    """Urgency of an appointment.

    Higher values are scheduled first.
    """

    ROUTINE = 1
    URGENT = 2
    EMERGENCY = 3

    @classmethod
    def from_string(cls, value: str) -> "Priority":
        """Convert a case-insensitive token to a Priority."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValidationError(
                f"Invalid priority: '{value}'. Must be one of: routine, urgent, emergency"
            ) from None

    @property
    def label(self) -> str:
        return self.name


@dataclass
class Appointment:
    """A confirmed booking of one time slot."""

    patient: Patient
    time_slot: TimeSlot
    priority: Priority
    reason: str
    appointment_id: str = field(default_factory=generate_id)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    confirmed: bool = True

    def __post_init__(self):
        if not self.reason:
            raise ValidationError("Appointment reason cannot be empty")


@dataclass(frozen=True)
class AppointmentRequest:
    """A patient's request for an appointment near a preferred time."""

    patient: Patient
    priority: Priority
    preferred_time: datetime
    reason: str
    flexibility_minutes: int = 60
    request_id: str = field(default_factory=generate_id)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self):
        if not self.reason:
            raise ValidationError("Appointment reason cannot be empty")
        if self.flexibility_minutes < 0:
            raise ValidationError("Flexibility minutes cannot be negative")

    def earliest_acceptable(self) -> datetime:
        """Earliest slot start time inside the flexibility window."""
        return self.preferred_time - timedelta(minutes=self.flexibility_minutes)

    def latest_acceptable(self) -> datetime:
        """Latest slot start time inside the flexibility window."""
        return self.preferred_time + timedelta(minutes=self.flexibility_minutes)

    def is_time_acceptable(self, slot: TimeSlot) -> bool:
        """Check if a slot starts within the flexibility window."""
        return self.earliest_acceptable() <= slot.start_time <= self.latest_acceptable()


def create_appointment_request(
    patient_id: str,
    patient_name: str,
    patient_contact: str,
    priority: str,
    preferred_time: datetime,
    reason: str,
    flexibility_minutes: int = 60,
) -> AppointmentRequest:
    """Build a validated request from raw presentation-layer inputs.

    Raises:
        ValidationError: If any field is empty, the priority token is unknown,
            or the flexibility is negative
    """
    patient = Patient(patient_id=patient_id, name=patient_name, contact=patient_contact)

    return AppointmentRequest(
        patient=patient,
        priority=Priority.from_string(priority),
        preferred_time=preferred_time,
        reason=reason,
        flexibility_minutes=flexibility_minutes,
    )
