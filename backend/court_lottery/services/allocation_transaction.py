"""
Persist the outcome of one lottery draw.

Runs inside the caller's unit of work; the caller owns commit/rollback.
Each drawn (request, court) pair is applied in its own SAVEPOINT:

1. re-check the court is still active and free (a direct booking may have
   landed after the draw was computed)
2. create the CONFIRMED booking linked to the request
3. mark the request CONFIRMED
4. bump the requester's usage counter

A pair whose re-check fails, or whose insert trips the occupied-slot
unique index, is skipped and its request stays REQUESTED for the next run.
Any other database error propagates and the caller rolls back the batch.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from court_lottery.models.booking import Booking, BookingStatus
from court_lottery.models.booking_request import RequestStatus
from court_lottery.repositories.unit_of_work import UnitOfWork
from court_lottery.services.lottery_engine import DrawPair
from court_lottery.services.usage_counter_service import UsageCounterService

logger = logging.getLogger(__name__)

SKIP_COURT_INACTIVE = "COURT_INACTIVE"
SKIP_COURT_TAKEN = "COURT_TAKEN"
SKIP_CONSTRAINT = "UNIQUE_CONSTRAINT"


@dataclass
class SkippedPair:
    request_id: int
    court_id: int
    reason: str


@dataclass
class AllocationOutcome:
    bookings: List[Booking] = field(default_factory=list)
    skipped: List[SkippedPair] = field(default_factory=list)

    @property
    def assigned_request_ids(self) -> List[int]:
        return [b.request_id for b in self.bookings]


class AllocationTransaction:
    def __init__(self, uow: UnitOfWork, usage_service: UsageCounterService):
        self.uow = uow
        self.usage_service = usage_service

    def _recheck(self, court_id: int, day: date, time_slot: str) -> Optional[str]:
        """Reason the court can no longer be used, or None if still free."""
        if not self.uow.courts.is_active(court_id):
            return SKIP_COURT_INACTIVE
        if self.uow.bookings.is_occupied(court_id, day, time_slot):
            return SKIP_COURT_TAKEN
        return None

    def apply(self, day: date, time_slot: str, pairs: List[DrawPair]) -> AllocationOutcome:
        outcome = AllocationOutcome()

        for pair in pairs:
            request = pair.request
            court = pair.court

            reason = self._recheck(court.id, day, time_slot)
            if reason:
                logger.warning(
                    "Lottery %s %s: skipping request %s on court %s (%s)",
                    day.isoformat(), time_slot, request.id, court.id, reason,
                )
                outcome.skipped.append(SkippedPair(request.id, court.id, reason))
                continue

            try:
                with self.uow.savepoint():
                    booking = Booking(
                        user_id=request.user_id,
                        court_id=court.id,
                        date=day,
                        time_slot=time_slot,
                        number_of_players=request.number_of_players,
                        status=BookingStatus.CONFIRMED,
                        request_id=request.id,
                        participant_ids=list(request.participant_ids or []),
                    )
                    self.uow.bookings.add(booking)

                    request.status = RequestStatus.CONFIRMED
                    self.uow.add(request)
                    self.uow.flush()

                    self.usage_service.increment_usage(request.user_id)
            except IntegrityError as e:
                logger.warning(
                    "Lottery %s %s: court %s taken at insert time, request %s left pending: %s",
                    day.isoformat(), time_slot, court.id, request.id, e.orig,
                )
                outcome.skipped.append(SkippedPair(request.id, court.id, SKIP_CONSTRAINT))
                continue

            outcome.bookings.append(booking)

        return outcome
