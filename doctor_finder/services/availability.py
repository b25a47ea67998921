"""
Availability Service.

Turns a doctor's raw calendar of open slots into what the patient sees:
past dates and already-elapsed same-day times are removed, and the
earliest bookable slot is resolved under the end-of-workday cutoff.

Every function takes the current instant as an argument; nothing here
reads the wall clock. ``now`` is interpreted as clinic-local time.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from doctor_finder.errors import CalendarParseError
from doctor_finder.logging_config import get_logger
from doctor_finder.schemas.availability import AvailabilityCalendar, Slot

logger = get_logger(__name__)

# Hard-coded workday end: no same-day slot is offered from 17:00 on.
DEFAULT_CUTOFF_HOUR = 17

NO_AVAILABILITY_TEXT = "No availability"


def parse_date_key(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` calendar key into a date."""
    parts = value.split("-") if isinstance(value, str) else []
    if len(parts) != 3:
        raise CalendarParseError(f"calendar[{value!r}]", "expected three dash-separated integers")
    try:
        year, month, day = (int(part) for part in parts)
        return date(year, month, day)
    except ValueError as e:
        raise CalendarParseError(f"calendar[{value!r}]", str(e)) from e


def parse_time_of_day(value: str, date_key: str) -> tuple[int, int]:
    """Parse an ``HH:MM`` 24-hour string into ``(hour, minute)``."""
    parts = value.split(":") if isinstance(value, str) else []
    if len(parts) != 2:
        raise CalendarParseError(f"calendar[{date_key!r}]", f"bad time {value!r}, expected HH:MM")
    try:
        hour, minute = int(parts[0]), int(parts[1])
    except ValueError as e:
        raise CalendarParseError(f"calendar[{date_key!r}]", f"bad time {value!r}") from e
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise CalendarParseError(f"calendar[{date_key!r}]", f"time {value!r} out of range")
    return hour, minute


def normalize(calendar: AvailabilityCalendar, now: datetime) -> AvailabilityCalendar:
    """
    Drop past dates and elapsed same-day times from a raw calendar.

    - Dates before ``now``'s calendar day are removed.
    - On ``now``'s calendar day only times not before ``now``'s
      (hour, minute) are kept; the day is removed if none remain.
    - Later dates are kept with all their times in their original order.

    Raises:
        CalendarParseError: a date key or time string is malformed.
    """
    today = now.date()
    current = (now.hour, now.minute)
    normalized: AvailabilityCalendar = {}

    for date_key, times in calendar.items():
        day = parse_date_key(date_key)
        if day < today:
            continue

        parsed = [(t, parse_time_of_day(t, date_key)) for t in times]
        if day == today:
            kept = [t for t, hm in parsed if not hm < current]
        else:
            kept = list(times)

        if kept:
            normalized[date_key] = kept

    return normalized


def resolve_next_slot(
    calendar: AvailabilityCalendar,
    now: datetime,
    cutoff_hour: int = DEFAULT_CUTOFF_HOUR,
) -> Optional[Slot]:
    """
    Return the earliest bookable slot in a normalized calendar, or None.

    Dates are walked in lexicographic (= chronological) order. Today is
    skipped entirely once ``now`` has reached ``cutoff_hour``; before that,
    the first of today's times strictly after ``now`` is returned, taken in
    list order. Later dates yield their first listed time.

    NOTE: today's remaining times are not re-sorted, so an unsorted list
    such as ``["17:00", "16:00"]`` resolves to ``17:00``. This matches the
    next-available time patients have always been shown.
    """
    today = now.date().isoformat()
    after_cutoff = now.hour >= cutoff_hour
    current = (now.hour, now.minute)

    for date_key in sorted(calendar):
        if date_key < today:
            continue

        times = calendar[date_key]

        if date_key == today:
            if after_cutoff:
                continue
            upcoming = [t for t in times if parse_time_of_day(t, date_key) > current]
            if upcoming:
                return Slot(date=date_key, time=upcoming[0])
        elif times:
            return Slot(date=date_key, time=times[0])

    return None


def format_next_available(slot: Optional[Slot]) -> str:
    """Short label for a slot's day, e.g. ``"Thu, Oct 17"``."""
    if slot is None:
        return NO_AVAILABILITY_TEXT
    starts_at = slot.starts_at
    return f"{starts_at:%a}, {starts_at:%b} {starts_at.day}"


def next_available(
    calendar: AvailabilityCalendar,
    now: datetime,
    cutoff_hour: int = DEFAULT_CUTOFF_HOUR,
) -> tuple[AvailabilityCalendar, Optional[Slot]]:
    """Normalize a raw calendar and resolve its next slot in one pass."""
    normalized = normalize(calendar, now)
    slot = resolve_next_slot(normalized, now, cutoff_hour=cutoff_hour)

    logger.debug(
        "next_slot_resolved",
        dates_in=len(calendar),
        dates_kept=len(normalized),
        slot=f"{slot.date} {slot.time}" if slot else None,
    )
    return normalized, slot
