"""Calendar and scheduling services."""

from clinic_scheduler.services.calendar import DoctorCalendar
from clinic_scheduler.services.scheduler import AppointmentScheduler, compare_requests, request_sort_key

__all__ = ["AppointmentScheduler", "DoctorCalendar", "compare_requests", "request_sort_key"]
