"""Priority-based appointment scheduling."""

import heapq
import itertools
from datetime import datetime

from clinic_scheduler.errors import SchedulingError
from clinic_scheduler.models.appointment import AppointmentRequest
from clinic_scheduler.models.results import BatchSchedulingResult, SchedulingResult
from clinic_scheduler.models.slot import TimeSlot
from clinic_scheduler.services.calendar import TIME_FORMAT, DoctorCalendar
from clinic_scheduler.utils.logging import get_logger

logger = get_logger(__name__)

NO_SLOTS_MESSAGE = "No available time slots found"
NOT_FOUND_MESSAGE = "Original appointment not found"
NO_SLOTS_AT_TIME_MESSAGE = "No available slots at the requested time"


def request_sort_key(request: AppointmentRequest) -> tuple:
    """Queue ordering key: higher priority first, then earlier submission."""
    return (-int(request.priority), request.created_at)


def compare_requests(a: AppointmentRequest, b: AppointmentRequest) -> int:
    """Compare two requests by queue order.

    Returns:
        Negative if ``a`` is scheduled before ``b``, positive if after,
        zero if they are indistinguishable by priority and creation time
    """
    key_a, key_b = request_sort_key(a), request_sort_key(b)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


class AppointmentScheduler:
    """Priority-based appointment scheduler.

    Pending requests are drained emergency first, then urgent, then routine;
    within a priority the earliest submission wins. Each request is placed
    as close to its preferred time as its flexibility window allows, falling
    back to the next free slot when ``allow_fallback`` is set.
    """

    def __init__(self, calendar: DoctorCalendar, allow_fallback: bool = True):
        """Initialize the scheduler.

        Args:
            calendar: Calendar to book against (shared, not copied)
            allow_fallback: Book the next free slot outside the flexibility window
                when nothing inside it is available
        """
        self.calendar = calendar
        self.allow_fallback = allow_fallback
        self._queue: list[tuple[tuple, int, AppointmentRequest]] = []
        # Breaks ties between requests with identical keys in submission order
        self._sequence = itertools.count()

    def add_request(self, request: AppointmentRequest) -> None:
        """Add a request to the scheduling queue."""
        heapq.heappush(self._queue, (request_sort_key(request), next(self._sequence), request))
        logger.debug(f"Queued request {request.request_id} ({request.priority.label})")

    def add_requests(self, requests: list[AppointmentRequest]) -> None:
        """Add multiple requests to the queue."""
        for request in requests:
            self.add_request(request)

    def pending_count(self) -> int:
        """Number of requests waiting in the queue."""
        return len(self._queue)

    def clear_queue(self) -> int:
        """Drop all pending requests.

        Returns:
            The number of requests removed
        """
        count = len(self._queue)
        self._queue.clear()
        return count

    def _find_slot_for_request(self, request: AppointmentRequest) -> TimeSlot | None:
        slot = self.calendar.find_available_slot(request.preferred_time, request.flexibility_minutes)

        if slot is None and self.allow_fallback:
            slot = self.calendar.find_next_available_slot(request.preferred_time)

        return slot

    def schedule_single(self, request: AppointmentRequest) -> SchedulingResult:
        """Schedule a single appointment request.

        Search and booking failures are returned as unsuccessful results, never raised.
        """
        with self.calendar.lock:
            try:
                slot = self._find_slot_for_request(request)
                if slot is None:
                    logger.warning(f"No slot for request {request.request_id} ({request.patient.name})")
                    return SchedulingResult(request=request, success=False, message=NO_SLOTS_MESSAGE)

                appointment = self.calendar.book_slot(slot, request.patient, request.priority, request.reason)
            except SchedulingError as e:
                logger.warning(f"Scheduling failed for request {request.request_id}: {e}")
                return SchedulingResult(request=request, success=False, message=str(e))

        if request.is_time_acceptable(slot):
            message = f"Scheduled at preferred time: {slot.start_time:{TIME_FORMAT}}"
        else:
            message = (
                f"Scheduled at alternative time: {slot.start_time:{TIME_FORMAT}} "
                f"(preferred was {request.preferred_time:%H:%M})"
            )

        logger.info(f"Request {request.request_id} ({request.priority.label}): {message}")
        return SchedulingResult(request=request, success=True, message=message, appointment=appointment)

    def process_queue(self) -> BatchSchedulingResult:
        """Schedule every pending request in priority order."""
        result = BatchSchedulingResult(total_requests=len(self._queue))

        while self._queue:
            _, _, request = heapq.heappop(self._queue)
            outcome = self.schedule_single(request)

            if outcome.success and outcome.appointment is not None:
                result.confirmed.append(outcome.appointment)
            else:
                result.failed.append(outcome)

        logger.info(
            f"Processed {result.total_requests} requests: {len(result.confirmed)} confirmed, "
            f"{len(result.failed)} failed ({result.success_rate():.1f}%)"
        )
        return result

    def schedule_batch(self, requests: list[AppointmentRequest]) -> BatchSchedulingResult:
        """Queue the given requests and process the whole queue."""
        self.add_requests(requests)
        return self.process_queue()

    def reschedule_appointment(
        self,
        appointment_id: str,
        new_preferred_time: datetime,
        flexibility_minutes: int = 60,
    ) -> SchedulingResult:
        """Move an existing appointment to a slot near a new preferred time.

        The new slot is booked before the original appointment is cancelled,
        so a failed reschedule always leaves the original booking in place.
        No fallback outside the flexibility window is attempted.
        """
        with self.calendar.lock:
            original = self.calendar.get_appointment_by_id(appointment_id)
            if original is None:
                return SchedulingResult(request=None, success=False, message=NOT_FOUND_MESSAGE)

            request = AppointmentRequest(
                patient=original.patient,
                priority=original.priority,
                preferred_time=new_preferred_time,
                reason=original.reason,
                flexibility_minutes=flexibility_minutes,
            )

            try:
                new_slot = self.calendar.find_available_slot(new_preferred_time, flexibility_minutes)
            except SchedulingError as e:
                return SchedulingResult(request=request, success=False, message=f"Failed to reschedule: {e}")
            if new_slot is None:
                return SchedulingResult(request=request, success=False, message=NO_SLOTS_AT_TIME_MESSAGE)

            try:
                appointment = self.calendar.book_slot(new_slot, original.patient, original.priority, original.reason)
            except SchedulingError as e:
                logger.warning(f"Reschedule of {appointment_id} failed: {e}")
                return SchedulingResult(request=request, success=False, message=f"Failed to reschedule: {e}")

            self.calendar.cancel_appointment(appointment_id)

        logger.info(f"Rescheduled {appointment_id} -> {appointment.appointment_id} at {new_slot.start_time:{TIME_FORMAT}}")
        return SchedulingResult(
            request=request,
            success=True,
            message=f"Rescheduled to {new_slot.start_time:{TIME_FORMAT}}",
            appointment=appointment,
        )
