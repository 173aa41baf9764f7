"""Staff availability slot model."""

import re
from datetime import date as date_type
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from petconnect.utils.errors import MalformedSlotError


WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def time_to_minutes(value: str) -> int:
    """Convert an ``HH:mm`` string to minutes after midnight."""
    match = _TIME_PATTERN.match((value or "").strip())
    if not match:
        raise MalformedSlotError(f"Invalid time '{value}', expected HH:mm")
    return int(match.group(1)) * 60 + int(match.group(2))


class AvailabilitySlot(BaseModel):
    """A staff member's weekly (or date-stamped) time window."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Optional[str] = Field(None, alias="_id", description="Slot ID (not always returned by the backend)")
    day: str = Field(..., description="Day name, e.g. Monday")
    start_time: str = Field(..., alias="startTime", description="Start time HH:mm")
    end_time: str = Field(..., alias="endTime", description="End time HH:mm")
    date: Optional[date_type] = Field(None, description="Concrete date for one-off slots")

    @field_validator("day", mode="before")
    @classmethod
    def normalize_day(cls, value):
        if isinstance(value, str):
            return value.strip().capitalize()
        return value

    @field_validator("date", mode="before")
    @classmethod
    def strip_time_component(cls, value):
        # Backend sends full ISO timestamps for dated slots
        if isinstance(value, str):
            value = value.strip()
            return value[:10] if value else None
        return value

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.end_time)

    @property
    def hours(self) -> float:
        return (self.end_minutes - self.start_minutes) / 60

    def identity(self) -> tuple:
        """Identity used when the backend omitted the slot ID."""
        return (self.day, self.start_time, self.end_time, self.date)

    def describe(self) -> str:
        label = self.date.isoformat() if self.date else self.day
        return f"{label} {self.start_time}-{self.end_time}"

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
