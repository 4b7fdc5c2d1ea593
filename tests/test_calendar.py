"""Tests for the doctor calendar."""

import random
from datetime import date, datetime, timedelta, timezone

import pytest

from clinic_scheduler.errors import (
    AppointmentNotFoundError,
    OverlapError,
    SlotNotFoundError,
    SlotUnavailableError,
    ValidationError,
)
from clinic_scheduler.models import Patient, Priority, TimeSlot
from clinic_scheduler.services.calendar import DoctorCalendar

DAY = datetime(2030, 3, 4)


def at(hour: int, minute: int = 0, day: datetime = DAY) -> datetime:
    return day.replace(hour=hour, minute=minute)


def make_slot(hour: int, minute: int = 0, minutes: int = 30, day: datetime = DAY) -> TimeSlot:
    start = at(hour, minute, day)
    return TimeSlot(start_time=start, end_time=start + timedelta(minutes=minutes))


@pytest.fixture
def calendar():
    return DoctorCalendar("Dr. House", 30)


@pytest.fixture
def patient():
    return Patient(patient_id="P001", name="John Smith", contact="john@email.com")


class TestCalendarConstruction:
    """Tests for calendar construction."""

    def test_calendar_valid(self, calendar):
        """Test a new calendar is empty."""
        assert calendar.doctor_name == "Dr. House"
        assert calendar.default_slot_duration == 30
        assert calendar.doctor_id
        assert calendar.time_slots() == []
        assert calendar.appointments() == []

    def test_empty_name_rejected(self):
        """Test doctor name is required."""
        with pytest.raises(ValidationError):
            DoctorCalendar("", 30)

    @pytest.mark.parametrize("duration", [0, -15])
    def test_non_positive_duration_rejected(self, duration):
        """Test slot duration must be positive."""
        with pytest.raises(ValidationError):
            DoctorCalendar("Dr. House", duration)


class TestAddSlot:
    """Tests for adding slots."""

    def test_non_overlapping_slots_all_added(self, calendar):
        """Test back-to-back slots are accepted."""
        for hour in (9, 10, 11):
            calendar.add_slot(make_slot(hour))
            calendar.add_slot(make_slot(hour, 30))
        assert calendar.slot_count == 6

    def test_overlapping_slot_rejected(self, calendar):
        """Test an intersecting slot raises and is not stored."""
        calendar.add_slot(make_slot(9))

        with pytest.raises(OverlapError, match="overlaps with existing slot: 2030-03-04 09:00 - 2030-03-04 09:30"):
            calendar.add_slot(make_slot(9, 15))

        assert calendar.slot_count == 1

    def test_enclosing_slot_rejected(self, calendar):
        """Test a slot covering an existing slot is rejected."""
        calendar.add_slot(make_slot(9, 15, minutes=10))
        with pytest.raises(OverlapError):
            calendar.add_slot(make_slot(9, minutes=60))
        assert calendar.slot_count == 1

    def test_booked_slot_rejected(self, calendar):
        """Test a slot already marked booked cannot be added."""
        start = at(9)
        slot = TimeSlot(start_time=start, end_time=start + timedelta(minutes=30), is_available=False)

        with pytest.raises(ValidationError, match="must be available"):
            calendar.add_slot(slot)

        assert calendar.slot_count == 0
        assert calendar.available_slots() == []

    def test_mixed_timezone_slot_rejected(self, calendar):
        """Test an aware slot cannot join a calendar of naive slots."""
        calendar.add_slot(make_slot(9))
        start = at(10).replace(tzinfo=timezone.utc)

        with pytest.raises(ValidationError, match="Cannot mix timezone-aware and naive"):
            calendar.add_slot(TimeSlot(start_time=start, end_time=start + timedelta(minutes=30)))

        assert calendar.slot_count == 1

    def test_remove_time_slot(self, calendar, patient):
        """Test free slots can be removed but booked ones cannot."""
        free, booked = make_slot(9), make_slot(10)
        calendar.add_slot(free)
        calendar.add_slot(booked)
        calendar.book_slot(booked, patient, Priority.ROUTINE, "Checkup")

        assert calendar.remove_time_slot(free.slot_id) is True
        assert calendar.remove_time_slot(booked.slot_id) is False
        assert calendar.remove_time_slot("missing") is False
        assert calendar.slot_count == 1


class TestSlotQueries:
    """Tests for slot lookup and search."""

    def test_available_slots_sorted_for_any_insertion_order(self, calendar, patient):
        """Test available slots come back in start-time order."""
        slots = [make_slot(hour, minute) for hour in range(9, 13) for minute in (0, 30)]
        random.Random(7).shuffle(slots)
        for slot in slots:
            calendar.add_slot(slot)
        calendar.book_slot(slots[0], patient, Priority.ROUTINE, "Checkup")

        available = calendar.available_slots()
        starts = [slot.start_time for slot in available]
        assert starts == sorted(starts)
        assert len(available) == len(slots) - 1
        assert all(slot.is_available for slot in available)

    def test_find_available_slot_nearest(self, calendar):
        """Test the slot nearest the preferred time wins."""
        for hour in (9, 10, 11):
            calendar.add_slot(make_slot(hour))

        slot = calendar.find_available_slot(at(10, 20), 60)
        assert slot.start_time == at(10)

    def test_find_available_slot_window_inclusive(self, calendar):
        """Test slots exactly at the window edge are candidates."""
        calendar.add_slot(make_slot(10))
        assert calendar.find_available_slot(at(9, 30), 30).start_time == at(10)
        assert calendar.find_available_slot(at(9, 29), 30) is None

    def test_find_available_slot_tie_prefers_earlier(self, calendar):
        """Test equal distances resolve to the earlier slot."""
        calendar.add_slot(make_slot(10))
        calendar.add_slot(make_slot(9))
        assert calendar.find_available_slot(at(9, 30), 30).start_time == at(9)

    def test_find_available_slot_zero_flexibility(self, calendar):
        """Test zero flexibility only matches an exact start time."""
        calendar.add_slot(make_slot(9))
        calendar.add_slot(make_slot(9, 30))

        assert calendar.find_available_slot(at(9, 30), 0).start_time == at(9, 30)
        assert calendar.find_available_slot(at(9, 15), 0) is None

    def test_find_available_slot_skips_booked(self, calendar, patient):
        """Test booked slots are never returned."""
        nine, half_past = make_slot(9), make_slot(9, 30)
        calendar.add_slot(nine)
        calendar.add_slot(half_past)
        calendar.book_slot(nine, patient, Priority.ROUTINE, "Checkup")

        assert calendar.find_available_slot(at(9), 30).slot_id == half_past.slot_id
        assert calendar.find_available_slot(at(9), 0) is None

    def test_find_next_available_slot(self, calendar, patient):
        """Test the earliest free slot at or after a time is found."""
        nine, ten, eleven = make_slot(9), make_slot(10), make_slot(11)
        for slot in (eleven, nine, ten):
            calendar.add_slot(slot)
        calendar.book_slot(ten, patient, Priority.ROUTINE, "Checkup")

        assert calendar.find_next_available_slot(at(9)).slot_id == nine.slot_id
        assert calendar.find_next_available_slot(at(9, 1)).slot_id == eleven.slot_id
        assert calendar.find_next_available_slot(at(11, 1)) is None

    def test_find_available_slots_on_date(self, calendar):
        """Test filtering available slots by date."""
        calendar.add_slot(make_slot(9))
        calendar.add_slot(make_slot(9, day=DAY + timedelta(days=1)))

        assert len(calendar.find_available_slots_on_date(date(2030, 3, 4))) == 1
        assert len(calendar.find_available_slots_on_date(DAY + timedelta(days=1))) == 1
        assert calendar.find_available_slots_on_date(date(2030, 3, 6)) == []

    def test_search_with_aware_time_rejected(self, calendar):
        """Test searching a naive calendar with an aware time raises a validation error."""
        calendar.add_slot(make_slot(9))
        aware = at(9).replace(tzinfo=timezone.utc)

        with pytest.raises(ValidationError):
            calendar.find_available_slot(aware, 60)
        with pytest.raises(ValidationError):
            calendar.find_next_available_slot(aware)


class TestBooking:
    """Tests for booking and cancellation."""

    def test_book_slot(self, calendar, patient):
        """Test booking flips the slot and creates one appointment."""
        slot = make_slot(9)
        calendar.add_slot(slot)

        appointment = calendar.book_slot(slot, patient, Priority.URGENT, "Checkup")

        assert calendar.time_slots()[0].is_available is False
        assert calendar.appointment_count == 1
        assert appointment.patient == patient
        assert appointment.priority is Priority.URGENT
        assert appointment.reason == "Checkup"
        assert appointment.time_slot.slot_id == slot.slot_id
        assert appointment.time_slot.start_time == slot.start_time
        assert calendar.get_appointment_by_id(appointment.appointment_id) is appointment

    def test_book_slot_by_id(self, calendar, patient):
        """Test a slot can be booked by its id."""
        slot = make_slot(9)
        calendar.add_slot(slot)
        appointment = calendar.book_slot(slot.slot_id, patient, Priority.ROUTINE, "Checkup")
        assert appointment.time_slot.slot_id == slot.slot_id

    def test_book_slot_twice_fails(self, calendar, patient):
        """Test a booked slot cannot be booked again."""
        slot = make_slot(9)
        calendar.add_slot(slot)
        calendar.book_slot(slot, patient, Priority.ROUTINE, "Checkup")

        with pytest.raises(SlotUnavailableError, match="not available"):
            calendar.book_slot(slot, patient, Priority.EMERGENCY, "Again")

        assert calendar.appointment_count == 1

    def test_book_unknown_slot_fails(self, calendar, patient):
        """Test booking a slot outside the calendar fails."""
        with pytest.raises(SlotNotFoundError, match="not found"):
            calendar.book_slot(make_slot(9), patient, Priority.ROUTINE, "Checkup")

    def test_book_with_empty_reason_leaves_slot_free(self, calendar, patient):
        """Test a rejected booking does not mark the slot booked."""
        slot = make_slot(9)
        calendar.add_slot(slot)

        with pytest.raises(ValidationError):
            calendar.book_slot(slot, patient, Priority.ROUTINE, "")

        assert slot.is_available is True
        assert calendar.appointment_count == 0

    def test_cancel_appointment(self, calendar, patient):
        """Test cancelling frees the slot and removes the appointment."""
        slot = make_slot(9)
        calendar.add_slot(slot)
        appointment = calendar.book_slot(slot, patient, Priority.ROUTINE, "Checkup")

        assert calendar.cancel_appointment(appointment.appointment_id) is True

        assert calendar.get_appointment_by_id(appointment.appointment_id) is None
        assert calendar.available_slots() == [slot]
        assert calendar.appointment_count == 0

    def test_cancel_unknown_appointment(self, calendar, patient):
        """Test cancelling an unknown id changes nothing."""
        slot = make_slot(9)
        calendar.add_slot(slot)
        calendar.book_slot(slot, patient, Priority.ROUTINE, "Checkup")

        assert calendar.cancel_appointment("missing") is False
        assert calendar.appointment_count == 1
        assert calendar.available_slots() == []

    def test_appointments_sorted_and_by_date(self, calendar, patient):
        """Test appointment listings are ordered by slot start time."""
        late, early, tomorrow = make_slot(15), make_slot(9), make_slot(9, day=DAY + timedelta(days=1))
        for slot in (late, tomorrow, early):
            calendar.add_slot(slot)
            calendar.book_slot(slot, patient, Priority.ROUTINE, "Checkup")

        starts = [apt.time_slot.start_time for apt in calendar.appointments()]
        assert starts == [early.start_time, late.start_time, tomorrow.start_time]
        assert [apt.time_slot.start_time for apt in calendar.get_appointments_on_date(DAY)] == starts[:2]

    def test_require_appointment(self, calendar, patient):
        """Test lookup by id raises for unknown appointments."""
        slot = make_slot(9)
        calendar.add_slot(slot)
        appointment = calendar.book_slot(slot, patient, Priority.ROUTINE, "Checkup")

        assert calendar.require_appointment(appointment.appointment_id) is appointment
        with pytest.raises(AppointmentNotFoundError, match="Appointment 'missing' not found"):
            calendar.require_appointment("missing")
