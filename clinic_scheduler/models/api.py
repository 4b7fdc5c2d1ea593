"""Request and response models for the HTTP API."""

from datetime import date, datetime, time

from pydantic import BaseModel, Field, NaiveDatetime

from clinic_scheduler.models.appointment import Appointment
from clinic_scheduler.models.results import BatchSchedulingResult, SchedulingResult
from clinic_scheduler.models.slot import TimeSlot


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: datetime
    version: str


class CalendarSetupRequest(BaseModel):
    """Request model for replacing the calendar."""

    doctor_name: str
    slot_duration_minutes: int = 30


class CalendarResponse(BaseModel):
    """Summary of the current calendar."""

    doctor_id: str
    doctor_name: str
    slot_duration_minutes: int
    total_slots: int
    available_slots: int
    appointments: int
    pending_requests: int
    allow_fallback: bool


class SlotCreateRequest(BaseModel):
    """Request model for adding a single slot.

    Times are naive local times, matching the calendar convention.
    """

    start_time: NaiveDatetime
    end_time: NaiveDatetime


class SlotGenerationRequest(BaseModel):
    """Request model for generating working-hour slots.

    Unset fields fall back to the configured working hours.
    """

    start_date: date
    weeks: int = Field(default=1, ge=1, le=52)
    working_days: list[int] | None = None
    start_hour: int | None = Field(default=None, ge=0, le=24)
    end_hour: int | None = Field(default=None, ge=0, le=24)
    slot_duration_minutes: int | None = Field(default=None, gt=0)
    break_start: time | None = None
    break_end: time | None = None


class SlotResponse(BaseModel):
    """A time slot."""

    slot_id: str
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    is_available: bool

    @classmethod
    def from_slot(cls, slot: TimeSlot) -> "SlotResponse":
        return cls(
            slot_id=slot.slot_id,
            start_time=slot.start_time,
            end_time=slot.end_time,
            duration_minutes=slot.duration_minutes(),
            is_available=slot.is_available,
        )


class SlotGenerationResponse(BaseModel):
    """Slots added by a generation run."""

    created: int
    slots: list[SlotResponse]


class AppointmentRequestCreate(BaseModel):
    """Request model for submitting an appointment request.

    Field content is validated by the domain models; the priority token is
    matched case-insensitively.
    """

    patient_id: str
    patient_name: str
    patient_contact: str
    priority: str = "routine"
    preferred_time: NaiveDatetime
    reason: str
    flexibility_minutes: int = 60


class QueuedRequestResponse(BaseModel):
    """A request accepted into the queue."""

    request_id: str
    priority: str
    preferred_time: datetime
    pending: int


class PendingResponse(BaseModel):
    """Number of queued requests."""

    pending: int


class AppointmentResponse(BaseModel):
    """A confirmed appointment."""

    appointment_id: str
    patient_id: str
    patient_name: str
    patient_contact: str
    slot_id: str
    start_time: datetime
    end_time: datetime
    priority: str
    reason: str
    created_at: datetime
    confirmed: bool

    @classmethod
    def from_appointment(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            appointment_id=appointment.appointment_id,
            patient_id=appointment.patient.patient_id,
            patient_name=appointment.patient.name,
            patient_contact=appointment.patient.contact,
            slot_id=appointment.time_slot.slot_id,
            start_time=appointment.time_slot.start_time,
            end_time=appointment.time_slot.end_time,
            priority=appointment.priority.label,
            reason=appointment.reason,
            created_at=appointment.created_at,
            confirmed=appointment.confirmed,
        )


class SchedulingResultResponse(BaseModel):
    """Outcome of scheduling one request."""

    success: bool
    message: str
    request_id: str | None = None
    patient_name: str | None = None
    priority: str | None = None
    appointment: AppointmentResponse | None = None

    @classmethod
    def from_result(cls, result: SchedulingResult) -> "SchedulingResultResponse":
        request = result.request
        return cls(
            success=result.success,
            message=result.message,
            request_id=request.request_id if request else None,
            patient_name=request.patient.name if request else None,
            priority=request.priority.label if request else None,
            appointment=AppointmentResponse.from_appointment(result.appointment) if result.appointment else None,
        )


class BatchResultResponse(BaseModel):
    """Outcome of processing the request queue."""

    total_requests: int
    confirmed: list[AppointmentResponse]
    failed: list[SchedulingResultResponse]
    success_rate: float

    @classmethod
    def from_batch(cls, batch: BatchSchedulingResult) -> "BatchResultResponse":
        return cls(
            total_requests=batch.total_requests,
            confirmed=[AppointmentResponse.from_appointment(apt) for apt in batch.confirmed],
            failed=[SchedulingResultResponse.from_result(res) for res in batch.failed],
            success_rate=batch.success_rate(),
        )


class RescheduleRequest(BaseModel):
    """Request model for moving an appointment."""

    new_preferred_time: NaiveDatetime
    flexibility_minutes: int = Field(default=60, ge=0)


class CancelResponse(BaseModel):
    """Response model for appointment cancellation."""

    success: bool
    message: str
