"""Working-hour slot generation for a doctor's calendar."""

from datetime import date, datetime, time, timedelta

from clinic_scheduler.errors import OverlapError, ValidationError
from clinic_scheduler.models.slot import TimeSlot
from clinic_scheduler.services.calendar import DoctorCalendar
from clinic_scheduler.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_WORKING_DAYS = (0, 1, 2, 3, 4)


def _at_hour(day: date | datetime, hour: int) -> datetime:
    if isinstance(day, datetime):
        base = day.replace(hour=0, minute=0, second=0, microsecond=0)
    else:
        base = datetime.combine(day, time())
    return base + timedelta(hours=hour)


def _in_break(start: datetime, end: datetime, break_start: time | None, break_end: time | None) -> bool:
    if break_start is None or break_end is None:
        return False
    return start.time() < break_end and end.time() > break_start


def generate_daily_slots(
    calendar: DoctorCalendar,
    day: date | datetime,
    start_hour: int = 9,
    end_hour: int = 17,
    slot_duration_minutes: int | None = None,
    break_start: time | None = None,
    break_end: time | None = None,
) -> list[TimeSlot]:
    """Generate consecutive slots for one working day.

    Slots intersecting the break are skipped, as are slots the calendar
    rejects for overlapping existing ones.

    Returns:
        The slots that were added to the calendar
    """
    if slot_duration_minutes is None:
        slot_duration_minutes = calendar.default_slot_duration
    duration = timedelta(minutes=slot_duration_minutes)
    if duration <= timedelta(0):
        raise ValidationError("Slot duration must be positive")

    current = _at_hour(day, start_hour)
    end = _at_hour(day, end_hour)
    added: list[TimeSlot] = []

    while current + duration <= end:
        slot_end = current + duration

        if not _in_break(current, slot_end, break_start, break_end):
            slot = TimeSlot(start_time=current, end_time=slot_end)
            try:
                calendar.add_slot(slot)
            except OverlapError:
                logger.debug(f"Skipping generated slot at {current.isoformat()}: already covered")
            else:
                added.append(slot)

        current = slot_end

    return added


def generate_weekly_slots(
    calendar: DoctorCalendar,
    start_date: date | datetime,
    weeks: int = 1,
    working_days: list[int] | tuple[int, ...] | None = None,
    start_hour: int = 9,
    end_hour: int = 17,
    slot_duration_minutes: int | None = None,
    break_start: time | None = None,
    break_end: time | None = None,
) -> list[TimeSlot]:
    """Generate slots for every working day over a number of weeks.

    Args:
        working_days: Weekday numbers to fill, Monday being 0. Defaults to Monday-Friday.
    """
    days = DEFAULT_WORKING_DAYS if working_days is None else working_days
    all_slots: list[TimeSlot] = []

    for offset in range(weeks * 7):
        current = start_date + timedelta(days=offset)
        if current.weekday() in days:
            all_slots.extend(
                generate_daily_slots(
                    calendar,
                    current,
                    start_hour=start_hour,
                    end_hour=end_hour,
                    slot_duration_minutes=slot_duration_minutes,
                    break_start=break_start,
                    break_end=break_end,
                )
            )

    logger.info(f"Generated {len(all_slots)} slots over {weeks} week(s) for {calendar.doctor_name}")
    return all_slots
