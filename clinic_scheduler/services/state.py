"""Process-wide calendar and scheduler used by the HTTP API."""

from clinic_scheduler.config import SchedulerSettings
from clinic_scheduler.services.calendar import DoctorCalendar
from clinic_scheduler.services.scheduler import AppointmentScheduler
from clinic_scheduler.utils.logging import get_logger

logger = get_logger(__name__)


class ScheduleState:
    """Holds the one calendar and the scheduler that books against it."""

    def __init__(self, settings: SchedulerSettings | None = None):
        self.settings = settings or SchedulerSettings()
        self.calendar: DoctorCalendar
        self.scheduler: AppointmentScheduler
        self.reset()

    def reset(self, doctor_name: str | None = None, slot_duration_minutes: int | None = None) -> None:
        """Replace the calendar with an empty one and drop pending requests.

        Raises:
            ValidationError: If the doctor name is empty or the duration is not positive
        """
        self.calendar = DoctorCalendar(
            doctor_name if doctor_name is not None else self.settings.doctor_name,
            slot_duration_minutes if slot_duration_minutes is not None else self.settings.slot_duration_minutes,
        )
        self.scheduler = AppointmentScheduler(self.calendar, allow_fallback=self.settings.allow_fallback)
        logger.info(f"Calendar ready for {self.calendar.doctor_name}")


schedule_state = ScheduleState(SchedulerSettings.from_env())
