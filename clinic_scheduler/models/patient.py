"""Patient data models."""

from dataclasses import dataclass

from clinic_scheduler.errors import ValidationError


@dataclass(frozen=True)
class Patient:
    """Patient business model.

    Embedded by value in requests and appointments.
    """

    patient_id: str
    name: str
    contact: str

    def __post_init__(self):
        if not self.patient_id:
            raise ValidationError("Patient ID cannot be empty")
        if not self.name:
            raise ValidationError("Patient name cannot be empty")
        if not self.contact:
            raise ValidationError("Patient contact cannot be empty")
