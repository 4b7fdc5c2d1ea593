"""Scheduling outcome records."""

from dataclasses import dataclass, field

from clinic_scheduler.models.appointment import Appointment, AppointmentRequest


@dataclass
class SchedulingResult:
    """Result of a scheduling attempt for a single request."""

    request: AppointmentRequest | None
    success: bool
    message: str
    appointment: Appointment | None = None


@dataclass
class BatchSchedulingResult:
    """Result of draining the request queue."""

    total_requests: int = 0
    confirmed: list[Appointment] = field(default_factory=list)
    failed: list[SchedulingResult] = field(default_factory=list)

    def success_rate(self) -> float:
        """Percentage of requests that were confirmed."""
        if self.total_requests == 0:
            return 0.0
        return len(self.confirmed) / self.total_requests * 100.0
