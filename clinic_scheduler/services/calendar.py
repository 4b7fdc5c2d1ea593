"""Calendar management for a single doctor's schedule."""

import threading
from dataclasses import replace
from datetime import date, datetime

from clinic_scheduler.errors import (
    AppointmentNotFoundError,
    OverlapError,
    SlotNotFoundError,
    SlotUnavailableError,
    ValidationError,
)
from clinic_scheduler.models.appointment import Appointment, Priority
from clinic_scheduler.models.patient import Patient
from clinic_scheduler.models.slot import TimeSlot
from clinic_scheduler.utils.ids import generate_id
from clinic_scheduler.utils.logging import get_logger

logger = get_logger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M"


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def _is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


class DoctorCalendar:
    """Source of truth for slot availability and booked appointments.

    Slots and appointments are keyed by generated ids. Stored slots never
    overlap, and every stored appointment references a stored slot that is
    marked unavailable.
    """

    def __init__(self, doctor_name: str, default_slot_duration: int = 30):
        """Initialize a new doctor calendar.

        Args:
            doctor_name: Name of the doctor owning the calendar
            default_slot_duration: Default slot length in minutes

        Raises:
            ValidationError: If the name is empty or the duration is not positive
        """
        if not doctor_name:
            raise ValidationError("Doctor name cannot be empty")
        if default_slot_duration <= 0:
            raise ValidationError("Slot duration must be positive")

        self.doctor_name = doctor_name
        self.doctor_id = generate_id()
        self.default_slot_duration = default_slot_duration
        # Guards find-then-book sequences driven from outside the calendar
        self.lock = threading.RLock()
        self._time_slots: dict[str, TimeSlot] = {}
        self._appointments: dict[str, Appointment] = {}

    def __repr__(self) -> str:
        return (
            f"DoctorCalendar({self.doctor_name}, slots={len(self._time_slots)}, "
            f"appointments={len(self._appointments)})"
        )

    def time_slots(self) -> list[TimeSlot]:
        """Get all time slots sorted by start time."""
        return sorted(self._time_slots.values(), key=lambda s: s.start_time)

    def available_slots(self) -> list[TimeSlot]:
        """Get all unbooked time slots sorted by start time."""
        return sorted(
            (slot for slot in self._time_slots.values() if slot.is_available),
            key=lambda s: s.start_time,
        )

    def appointments(self) -> list[Appointment]:
        """Get all confirmed appointments sorted by slot start time."""
        return sorted(self._appointments.values(), key=lambda a: a.time_slot.start_time)

    def add_slot(self, slot: TimeSlot) -> None:
        """Add a time slot to the calendar.

        Raises:
            ValidationError: If the slot is already marked booked, or mixes
                timezone-aware and naive times with the stored slots
            OverlapError: If the slot intersects a stored slot
        """
        if not slot.is_available:
            raise ValidationError("New time slots must be available")
        self.check_time(slot.start_time)

        for existing in self._time_slots.values():
            if slot.overlaps_with(existing):
                logger.warning(
                    f"Rejected slot {slot.start_time:{TIME_FORMAT}} - {slot.end_time:{TIME_FORMAT}}: overlap"
                )
                raise OverlapError(
                    "Time slot overlaps with existing slot: "
                    f"{existing.start_time:{TIME_FORMAT}} - {existing.end_time:{TIME_FORMAT}}"
                )

        self._time_slots[slot.slot_id] = slot

    def check_time(self, value: datetime) -> None:
        """Ensure a time uses the same timezone convention as the stored slots.

        Raises:
            ValidationError: If one side is timezone-aware and the other naive
        """
        existing = next(iter(self._time_slots.values()), None)
        if existing is not None and _is_aware(existing.start_time) != _is_aware(value):
            raise ValidationError("Cannot mix timezone-aware and naive times in one calendar")

    def remove_time_slot(self, slot_id: str) -> bool:
        """Remove a slot that no appointment references.

        Returns:
            True if the slot was removed, False if unknown or booked
        """
        slot = self._time_slots.get(slot_id)
        if slot is None or not slot.is_available:
            return False

        del self._time_slots[slot_id]
        return True

    def find_available_slot(self, preferred_time: datetime, flexibility_minutes: int) -> TimeSlot | None:
        """Find the available slot starting closest to the preferred time.

        Only slots starting within ``flexibility_minutes`` of the preferred
        time (inclusive) are candidates. Equal distances resolve to the
        earlier start time.
        """
        self.check_time(preferred_time)
        candidates = [
            slot
            for slot in self.available_slots()
            if abs((slot.start_time - preferred_time).total_seconds()) <= flexibility_minutes * 60
        ]
        if not candidates:
            return None

        return min(candidates, key=lambda s: abs((s.start_time - preferred_time).total_seconds()))

    def find_next_available_slot(self, after: datetime) -> TimeSlot | None:
        """Find the earliest available slot starting at or after a given time."""
        self.check_time(after)
        return next((slot for slot in self.available_slots() if slot.start_time >= after), None)

    def find_available_slots_on_date(self, day: date | datetime) -> list[TimeSlot]:
        """Find all available slots starting on a specific date."""
        target = _as_date(day)
        return [slot for slot in self.available_slots() if slot.start_time.date() == target]

    def book_slot(self, slot: TimeSlot | str, patient: Patient, priority: Priority, reason: str) -> Appointment:
        """Book a time slot for a patient.

        Args:
            slot: The slot (or its id) to book
            patient: Patient the appointment is for
            priority: Priority carried over from the request
            reason: Reason for the visit

        Returns:
            The newly created appointment

        Raises:
            SlotNotFoundError: If the slot is not in the calendar
            SlotUnavailableError: If the slot is already booked
            ValidationError: If the reason is empty
        """
        slot_id = slot if isinstance(slot, str) else slot.slot_id
        stored_slot = self._time_slots.get(slot_id)
        if stored_slot is None:
            raise SlotNotFoundError()
        if not stored_slot.is_available:
            raise SlotUnavailableError()

        # Build the appointment first so a validation failure leaves the slot untouched
        appointment = Appointment(
            patient=patient,
            time_slot=replace(stored_slot, is_available=False),
            priority=priority,
            reason=reason,
        )

        stored_slot.is_available = False
        self._appointments[appointment.appointment_id] = appointment

        logger.info(
            f"Booked slot {stored_slot.start_time:{TIME_FORMAT}} for patient {patient.patient_id} "
            f"({priority.label}), appointment {appointment.appointment_id}"
        )
        return appointment

    def cancel_appointment(self, appointment_id: str) -> bool:
        """Cancel an appointment and free up its time slot.

        Returns:
            True if an appointment was cancelled, False if the id is unknown
        """
        appointment = self._appointments.pop(appointment_id, None)
        if appointment is None:
            return False

        slot = self._time_slots.get(appointment.time_slot.slot_id)
        if slot is not None:
            slot.is_available = True

        logger.info(f"Cancelled appointment {appointment_id}")
        return True

    def get_appointment_by_id(self, appointment_id: str) -> Appointment | None:
        """Get an appointment by its id."""
        return self._appointments.get(appointment_id)

    def require_appointment(self, appointment_id: str) -> Appointment:
        """Get an appointment by its id.

        Raises:
            AppointmentNotFoundError: If no appointment has the id
        """
        appointment = self._appointments.get(appointment_id)
        if appointment is None:
            raise AppointmentNotFoundError(appointment_id)
        return appointment

    def get_appointments_on_date(self, day: date | datetime) -> list[Appointment]:
        """Get all appointments whose slot starts on a specific date."""
        target = _as_date(day)
        return [apt for apt in self.appointments() if apt.time_slot.start_time.date() == target]

    @property
    def slot_count(self) -> int:
        return len(self._time_slots)

    @property
    def appointment_count(self) -> int:
        return len(self._appointments)
