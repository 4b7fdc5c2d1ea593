"""API endpoints for the appointment scheduling service."""

from datetime import UTC, date, datetime, time, timedelta

from fastapi import APIRouter, HTTPException, Query

from clinic_scheduler import __version__
from clinic_scheduler.errors import AppointmentNotFoundError, OverlapError, ValidationError
from clinic_scheduler.models.api import (
    AppointmentRequestCreate,
    AppointmentResponse,
    BatchResultResponse,
    CalendarResponse,
    CalendarSetupRequest,
    CancelResponse,
    HealthResponse,
    PendingResponse,
    QueuedRequestResponse,
    RescheduleRequest,
    SchedulingResultResponse,
    SlotCreateRequest,
    SlotGenerationRequest,
    SlotGenerationResponse,
    SlotResponse,
)
from clinic_scheduler.models.appointment import Appointment, create_appointment_request
from clinic_scheduler.models.slot import TimeSlot
from clinic_scheduler.services.slot_generation import generate_daily_slots, generate_weekly_slots
from clinic_scheduler.services.state import schedule_state
from clinic_scheduler.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

DEMO_REQUESTS = [
    ("P001", "John Smith", "john@email.com", "routine", time(10, 0), "Annual checkup", 60),
    ("P002", "Jane Doe", "jane@email.com", "emergency", time(10, 0), "Severe chest pain", 30),
    ("P003", "Bob Wilson", "bob@email.com", "urgent", time(14, 0), "Follow-up on test results", 60),
    ("P004", "Alice Brown", "alice@email.com", "routine", time(11, 0), "Prescription renewal", 120),
]


def _calendar_summary() -> CalendarResponse:
    calendar = schedule_state.calendar
    return CalendarResponse(
        doctor_id=calendar.doctor_id,
        doctor_name=calendar.doctor_name,
        slot_duration_minutes=calendar.default_slot_duration,
        total_slots=calendar.slot_count,
        available_slots=len(calendar.available_slots()),
        appointments=calendar.appointment_count,
        pending_requests=schedule_state.scheduler.pending_count(),
        allow_fallback=schedule_state.scheduler.allow_fallback,
    )


def _require_appointment(appointment_id: str) -> Appointment:
    try:
        return schedule_state.calendar.require_appointment(appointment_id)
    except AppointmentNotFoundError as e:
        logger.warning(f"Unknown appointment requested: {appointment_id}")
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=__version__,
    )


@router.get("/calendar", response_model=CalendarResponse, tags=["Calendar"])
async def get_calendar() -> CalendarResponse:
    """Summarize the current calendar and queue."""
    return _calendar_summary()


@router.put("/calendar", response_model=CalendarResponse, tags=["Calendar"])
async def setup_calendar(request: CalendarSetupRequest) -> CalendarResponse:
    """Replace the calendar with an empty one for a doctor."""
    try:
        schedule_state.reset(request.doctor_name, request.slot_duration_minutes)
    except ValidationError as e:
        logger.warning(f"Calendar setup rejected: {e}")
        raise HTTPException(status_code=422, detail=str(e)) from e

    return _calendar_summary()


@router.post("/slots", response_model=SlotResponse, status_code=201, tags=["Slots"])
async def add_slot(request: SlotCreateRequest) -> SlotResponse:
    """Add a single time slot."""
    try:
        slot = TimeSlot(start_time=request.start_time, end_time=request.end_time)
        schedule_state.calendar.add_slot(slot)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except OverlapError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    return SlotResponse.from_slot(slot)


@router.post("/slots/generate", response_model=SlotGenerationResponse, status_code=201, tags=["Slots"])
async def generate_slots(request: SlotGenerationRequest) -> SlotGenerationResponse:
    """Generate working-hour slots using configured defaults for unset fields."""
    settings = schedule_state.settings
    start_hour = request.start_hour if request.start_hour is not None else settings.start_hour
    end_hour = request.end_hour if request.end_hour is not None else settings.end_hour
    if start_hour >= end_hour:
        raise HTTPException(status_code=422, detail="start_hour must be before end_hour")

    slots = generate_weekly_slots(
        schedule_state.calendar,
        request.start_date,
        weeks=request.weeks,
        working_days=request.working_days if request.working_days is not None else settings.working_days,
        start_hour=start_hour,
        end_hour=end_hour,
        slot_duration_minutes=request.slot_duration_minutes,
        break_start=request.break_start if request.break_start is not None else settings.break_start,
        break_end=request.break_end if request.break_end is not None else settings.break_end,
    )
    return SlotGenerationResponse(created=len(slots), slots=[SlotResponse.from_slot(slot) for slot in slots])


@router.get("/slots/available", response_model=list[SlotResponse], tags=["Slots"])
async def list_available_slots(day: date | None = Query(default=None, alias="date")) -> list[SlotResponse]:
    """List available slots in start-time order, optionally for one date."""
    calendar = schedule_state.calendar
    slots = calendar.find_available_slots_on_date(day) if day else calendar.available_slots()
    return [SlotResponse.from_slot(slot) for slot in slots]


@router.post("/requests", response_model=QueuedRequestResponse, status_code=201, tags=["Requests"])
async def submit_request(request: AppointmentRequestCreate) -> QueuedRequestResponse:
    """Validate an appointment request and add it to the queue."""
    try:
        appointment_request = create_appointment_request(
            request.patient_id,
            request.patient_name,
            request.patient_contact,
            request.priority,
            request.preferred_time,
            request.reason,
            request.flexibility_minutes,
        )
    except ValidationError as e:
        logger.warning(f"Rejected appointment request for {request.patient_id!r}: {e}")
        raise HTTPException(status_code=422, detail=str(e)) from e

    schedule_state.scheduler.add_request(appointment_request)
    logger.info(f"Queued request {appointment_request.request_id} for {request.patient_name}")

    return QueuedRequestResponse(
        request_id=appointment_request.request_id,
        priority=appointment_request.priority.label,
        preferred_time=appointment_request.preferred_time,
        pending=schedule_state.scheduler.pending_count(),
    )


@router.get("/requests/pending", response_model=PendingResponse, tags=["Requests"])
async def pending_requests() -> PendingResponse:
    """Number of requests waiting to be scheduled."""
    return PendingResponse(pending=schedule_state.scheduler.pending_count())


@router.delete("/requests", response_model=PendingResponse, tags=["Requests"])
async def clear_requests() -> PendingResponse:
    """Drop all pending requests; returns how many were removed."""
    return PendingResponse(pending=schedule_state.scheduler.clear_queue())


@router.post("/schedule", response_model=BatchResultResponse, tags=["Scheduling"])
async def process_requests() -> BatchResultResponse:
    """Schedule all pending requests in priority order."""
    batch = schedule_state.scheduler.process_queue()
    return BatchResultResponse.from_batch(batch)


@router.get("/appointments", response_model=list[AppointmentResponse], tags=["Appointments"])
async def list_appointments(day: date | None = Query(default=None, alias="date")) -> list[AppointmentResponse]:
    """List confirmed appointments in start-time order, optionally for one date."""
    calendar = schedule_state.calendar
    appointments = calendar.get_appointments_on_date(day) if day else calendar.appointments()
    return [AppointmentResponse.from_appointment(apt) for apt in appointments]


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse, tags=["Appointments"])
async def get_appointment(appointment_id: str) -> AppointmentResponse:
    """Look up a single appointment."""
    appointment = _require_appointment(appointment_id)
    return AppointmentResponse.from_appointment(appointment)


@router.delete("/appointments/{appointment_id}", response_model=CancelResponse, tags=["Appointments"])
async def cancel_appointment(appointment_id: str) -> CancelResponse:
    """Cancel an appointment and free its slot."""
    _require_appointment(appointment_id)
    schedule_state.calendar.cancel_appointment(appointment_id)
    return CancelResponse(success=True, message=f"Appointment {appointment_id} has been cancelled.")


@router.post(
    "/appointments/{appointment_id}/reschedule",
    response_model=SchedulingResultResponse,
    tags=["Appointments"],
)
async def reschedule_appointment(appointment_id: str, request: RescheduleRequest) -> SchedulingResultResponse:
    """Move an appointment to the free slot nearest a new preferred time."""
    _require_appointment(appointment_id)
    result = schedule_state.scheduler.reschedule_appointment(
        appointment_id, request.new_preferred_time, request.flexibility_minutes
    )
    return SchedulingResultResponse.from_result(result)


@router.post("/demo", response_model=BatchResultResponse, tags=["Scheduling"])
async def run_demo() -> BatchResultResponse:
    """Reset the calendar, seed tomorrow's slots and schedule four sample requests."""
    schedule_state.reset()
    tomorrow = (datetime.now() + timedelta(days=1)).date()

    generate_daily_slots(
        schedule_state.calendar,
        tomorrow,
        start_hour=9,
        end_hour=17,
        break_start=time(12, 0),
        break_end=time(13, 0),
    )
    logger.info(f"Demo calendar created with {len(schedule_state.calendar.available_slots())} slots")

    requests = [
        create_appointment_request(
            patient_id, name, contact, priority, datetime.combine(tomorrow, preferred), reason, flexibility
        )
        for patient_id, name, contact, priority, preferred, reason, flexibility in DEMO_REQUESTS
    ]
    batch = schedule_state.scheduler.schedule_batch(requests)
    return BatchResultResponse.from_batch(batch)
