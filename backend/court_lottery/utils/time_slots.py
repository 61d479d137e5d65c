"""
Canonical handling of time-slot keys.

Requests and bookings reference a slot by its start time as "HH:MM"
(24h, zero padded). Incoming keys on the request, booking and lottery
paths are checked strictly with is_valid_time_slot_key, so "9:00" is
rejected there. time_slot_key builds the key for a TimeSlot template
from its start time and also accepts loose strings such as "9:00".
"""
import re
from datetime import time
from typing import Optional, Union

TIME_SLOT_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")


def is_valid_time_slot_key(value: Optional[str]) -> bool:
    """True for zero-padded 24h "HH:MM" strings."""
    if not value:
        return False
    return bool(TIME_SLOT_PATTERN.match(value.strip()))


def time_slot_key(value: Union[str, time]) -> str:
    """
    Return the "HH:MM" key for a time or a loosely formatted string.

    - time(9, 0) -> "09:00"
    - "9:00" -> "09:00"
    - " 18:30 " -> "18:30"

    Raises ValueError if the value can't be read as a time of day.
    """
    if isinstance(value, time):
        return value.strftime("%H:%M")
    s = (value or "").strip()
    parts = s.split(":")
    if len(parts) != 2 or not parts[0].isdigit() or not parts[1].isdigit():
        raise ValueError(f"Time slot must be in HH:MM format, got '{value}'")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Time slot out of range: '{value}'")
    return f"{hour:02d}:{minute:02d}"
