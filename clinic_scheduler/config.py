"""Application configuration."""

import os
from datetime import time
from typing import Any

from pydantic import BaseModel, Field, model_validator

ENV_PREFIX = "SCHEDULER_"


class SchedulerSettings(BaseModel):
    """Settings for the calendar, slot generation and scheduler."""

    doctor_name: str = Field(default="Dr. Demo", min_length=1)
    slot_duration_minutes: int = Field(default=30, gt=0)
    allow_fallback: bool = True

    working_days: list[int] = Field(default_factory=lambda: [0, 1, 2, 3, 4])
    start_hour: int = Field(default=9, ge=0, le=24)
    end_hour: int = Field(default=17, ge=0, le=24)
    break_start: time | None = time(12, 0)
    break_end: time | None = time(13, 0)

    log_level: str = "INFO"

    @model_validator(mode="after")
    def check_hours(self) -> "SchedulerSettings":
        if self.start_hour >= self.end_hour:
            raise ValueError("start_hour must be before end_hour")
        if any(day < 0 or day > 6 for day in self.working_days):
            raise ValueError("working_days must be weekday numbers 0-6")
        return self

    @classmethod
    def from_env(cls) -> "SchedulerSettings":
        """Build settings from SCHEDULER_* environment variables."""
        overrides: dict[str, Any] = {}
        for name in ("doctor_name", "slot_duration_minutes", "allow_fallback", "start_hour", "end_hour"):
            value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if value is not None:
                overrides[name] = value

        if log_level := os.getenv("LOG_LEVEL"):
            overrides["log_level"] = log_level

        return cls.model_validate(overrides)
