"""Time slot model."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from clinic_scheduler.errors import ValidationError
from clinic_scheduler.utils.ids import generate_id


@dataclass
class TimeSlot:
    """A bookable interval on the doctor's calendar.

    The interval is half-open: ``[start_time, end_time)``.
    """

    start_time: datetime
    end_time: datetime
    is_available: bool = True
    slot_id: str = field(default_factory=generate_id)

    def __post_init__(self):
        if (self.start_time.tzinfo is None) != (self.end_time.tzinfo is None):
            raise ValidationError("Start and end time must both be timezone-aware or both naive")
        if self.end_time <= self.start_time:
            raise ValidationError("End time must be after start time")

    def __hash__(self) -> int:
        return hash(self.slot_id)

    def duration(self) -> timedelta:
        """Length of the slot."""
        return self.end_time - self.start_time

    def duration_minutes(self) -> int:
        """Length of the slot in whole minutes."""
        return int(self.duration().total_seconds() // 60)

    def overlaps_with(self, other: "TimeSlot") -> bool:
        """Check if this time slot intersects another."""
        return self.start_time < other.end_time and self.end_time > other.start_time

    def contains(self, dt: datetime) -> bool:
        """Check if a datetime falls within this time slot."""
        return self.start_time <= dt < self.end_time
