"""
Court availability checks. Read-only against the current unit of work.
"""
from datetime import date
from typing import List

from court_lottery.errors import (
    CourtHasActiveBookingsError,
    CourtInactiveError,
    CourtNotAvailableError,
    CourtNotFoundError,
)
from court_lottery.models.court import Court
from court_lottery.repositories.unit_of_work import UnitOfWork


class ConflictChecker:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def check_court_available(self, court_id: int, day: date, time_slot: str) -> Court:
        """
        Verify a court can take a booking for (day, time_slot).

        Raises:
            CourtNotFoundError: unknown court
            CourtInactiveError: court switched off
            CourtNotAvailableError: a CONFIRMED/COMPLETED booking holds the slot
        """
        court = self.uow.courts.get(court_id)
        if court is None:
            raise CourtNotFoundError(f"Court {court_id} not found")
        if not court.is_active:
            raise CourtInactiveError(f"Court {court_id} ({court.name}) is not active")
        if self.uow.bookings.is_occupied(court_id, day, time_slot):
            raise CourtNotAvailableError(
                f"Court {court_id} ({court.name}) is already booked on {day.isoformat()} at {time_slot}"
            )
        return court

    def check_deletable(self, court_id: int) -> Court:
        court = self.uow.courts.get(court_id)
        if court is None:
            raise CourtNotFoundError(f"Court {court_id} not found")
        active = self.uow.courts.count_active_bookings(court_id)
        if active:
            raise CourtHasActiveBookingsError(f"Court {court_id} has {active} active booking(s)")
        return court

    def available_courts(self, day: date, time_slot: str) -> List[Court]:
        """Active courts with no occupying booking for the slot, ordered by id."""
        occupied = self.uow.bookings.occupied_court_ids(day, time_slot)
        return [c for c in self.uow.courts.list_active() if c.id not in occupied]
