"""Main FastAPI application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clinic_scheduler import __version__
from clinic_scheduler.api.endpoints import router
from clinic_scheduler.services.state import schedule_state
from clinic_scheduler.utils.logging import LogConfig, setup_logging

setup_logging(LogConfig(level=schedule_state.settings.log_level))

# Create FastAPI application
app = FastAPI(
    title="Clinic Scheduler",
    description=(
        "Priority-based appointment scheduling for a doctor's calendar: "
        "emergency requests first, nearest slot to the preferred time, "
        "optional fallback to the next free slot."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Calendar", "description": "Doctor calendar setup and summary."},
        {"name": "Slots", "description": "Adding, generating and listing time slots."},
        {"name": "Requests", "description": "Submitting appointment requests to the priority queue."},
        {"name": "Scheduling", "description": "Processing queued requests into appointments."},
        {"name": "Appointments", "description": "Looking up, cancelling and rescheduling appointments."},
        {"name": "Health", "description": "Service health monitoring and status checks."},
    ],
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("clinic_scheduler.main:app", host="0.0.0.0", port=9001, reload=True, log_level="info")
