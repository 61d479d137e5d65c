"""
Temporal and shape rules shared by lottery requests and direct bookings.

Windows are measured in whole calendar days from "today":

- Request window: today+min_days <= date <= today+max_days (both ends
  inclusive, defaults 2 and 5).
- Direct booking window: today <= date < today+min_days.

Pure checks: nothing here touches the database.
"""
from datetime import date, datetime, time
from typing import Callable, Optional

from court_lottery.config import LotterySettings, get_settings
from court_lottery.errors import (
    DirectBookingWindowError,
    InvalidTimeSlotError,
    PlayerCountError,
    RequestWindowError,
)
from court_lottery.utils.time_slots import is_valid_time_slot_key

MIN_PLAYERS = 2
MAX_PLAYERS = 4


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


class RequestWindowValidator:
    def __init__(
        self,
        settings: Optional[LotterySettings] = None,
        today_provider: Callable[[], date] = date.today,
    ):
        self.settings = settings or get_settings()
        self.today_provider = today_provider

    def days_ahead(self, target: date) -> int:
        return (_as_date(target) - self.today_provider()).days

    def validate_request_window(self, target: date) -> None:
        lo = self.settings.request_window_min_days
        hi = self.settings.request_window_max_days
        ahead = self.days_ahead(target)
        if not (lo <= ahead <= hi):
            raise RequestWindowError(
                f"Requests must be made between {lo} and {hi} days in advance "
                f"({_as_date(target).isoformat()} is {ahead} days ahead)"
            )

    def validate_direct_booking_window(self, target: date) -> None:
        lo = self.settings.request_window_min_days
        ahead = self.days_ahead(target)
        if not (0 <= ahead < lo):
            raise DirectBookingWindowError(
                f"Direct bookings are only allowed less than {lo} days in advance "
                f"({_as_date(target).isoformat()} is {ahead} days ahead)"
            )

    def validate_player_count(self, number_of_players: int) -> None:
        if not isinstance(number_of_players, int) or not (MIN_PLAYERS <= number_of_players <= MAX_PLAYERS):
            raise PlayerCountError(
                f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {number_of_players}"
            )

    def validate_time_range(self, start: time, end: time) -> None:
        if start is None or end is None or end <= start:
            raise InvalidTimeSlotError(f"End time ({end}) must be after start time ({start})")

    def validate_time_slot_key(self, value: str) -> str:
        """Return the stripped key, or raise InvalidTimeSlotError if it isn't "HH:MM"."""
        if not is_valid_time_slot_key(value):
            raise InvalidTimeSlotError(f"Time slot must be in HH:MM format, got '{value}'")
        return value.strip()
