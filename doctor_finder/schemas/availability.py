"""
Data models for doctor availability calendars and resolved slots.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

# "YYYY-MM-DD" -> ["HH:MM", ...]; times within a day are not guaranteed sorted.
AvailabilityCalendar = dict[str, list[str]]


class Slot(BaseModel):
    """A single bookable (date, time-of-day) pair."""
    model_config = ConfigDict(frozen=True)

    date: str
    time: str

    @property
    def starts_at(self) -> datetime:
        return datetime.strptime(f"{self.date} {self.time}", "%Y-%m-%d %H:%M")


class AvailabilitySummary(BaseModel):
    """Availability view for one doctor as served to the display layer."""
    doctor_id: str
    calendar: AvailabilityCalendar
    next_available: Optional[Slot] = None
    next_available_text: str
