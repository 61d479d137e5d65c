"""
Lottery orchestration for one (date, time_slot).

execute_lottery:
  1. take the per-slot LotteryLock (reject if another run holds it)
  2. load REQUESTED entries; nothing pending means nothing to do
  3. reset-if-due each requester's usage counter, compute and store weights
  4. collect free active courts, draw, persist via AllocationTransaction
  5. record a LotteryRun audit row, commit, release the lock

Partial assignment is a normal outcome. Requests that lose the draw stay
REQUESTED and enter the next run for the same slot.
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from court_lottery.config import LotterySettings, get_settings
from court_lottery.errors import (
    AllocationConflictError,
    LotteryInProgressError,
    NoActiveCourtsError,
    UserNotFoundError,
)
from court_lottery.models.booking import Booking
from court_lottery.models.booking_request import BookingRequest
from court_lottery.models.lottery_lock import LotteryLock
from court_lottery.models.lottery_run import LotteryRun
from court_lottery.repositories.unit_of_work import UnitOfWorkFactory
from court_lottery.services.allocation_transaction import AllocationTransaction
from court_lottery.services.conflict_checker import ConflictChecker
from court_lottery.services.lottery_engine import LotteryEngine, RandomSource, make_rng
from court_lottery.services.request_window import RequestWindowValidator
from court_lottery.services.usage_counter_service import UsageCounterService
from court_lottery.services.weight_calculator import WeightCalculator
from court_lottery.utils.clock import as_utc, utcnow

logger = logging.getLogger(__name__)

RngFactory = Callable[[Optional[int]], Tuple[RandomSource, int]]


def booking_to_dict(booking: Booking) -> Dict[str, Any]:
    return {
        "id": booking.id,
        "user_id": booking.user_id,
        "court_id": booking.court_id,
        "date": booking.date.isoformat(),
        "time_slot": booking.time_slot,
        "number_of_players": booking.number_of_players,
        "status": booking.status,
        "request_id": booking.request_id,
        "participant_ids": list(booking.participant_ids or []),
    }


def request_to_dict(request: BookingRequest) -> Dict[str, Any]:
    return {
        "id": request.id,
        "user_id": request.user_id,
        "date": request.date.isoformat(),
        "time_slot": request.time_slot,
        "number_of_players": request.number_of_players,
        "status": request.status,
        "weight": request.weight,
        "participant_ids": list(request.participant_ids or []),
    }


def run_to_dict(run: LotteryRun) -> Dict[str, Any]:
    return {
        "id": run.id,
        "seed": run.seed,
        "total_requests": run.total_requests,
        "assigned_bookings": run.assigned_bookings,
        "skipped_conflicts": run.skipped_conflicts,
        "available_courts": run.available_courts,
        "duration_ms": run.duration_ms,
        "created_at": run.created_at.isoformat() if run.created_at else None,
    }


@dataclass
class LotteryResult:
    """Outcome of one execute_lottery call."""
    date: date
    time_slot: str
    total_requests: int = 0
    assigned_bookings: int = 0
    bookings: List[Booking] = field(default_factory=list)
    unassigned_request_ids: List[int] = field(default_factory=list)
    skipped_conflicts: int = 0
    available_courts: int = 0
    seed: Optional[str] = None  # None when nothing was drawn
    duration_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "time_slot": self.time_slot,
            "total_requests": self.total_requests,
            "assigned_bookings": self.assigned_bookings,
            "bookings": [booking_to_dict(b) for b in self.bookings],
            "unassigned_request_ids": self.unassigned_request_ids,
            "skipped_conflicts": self.skipped_conflicts,
            "available_courts": self.available_courts,
            "seed": self.seed,
            "duration_ms": self.duration_ms,
        }


class LotteryService:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        settings: Optional[LotterySettings] = None,
        today_provider: Callable[[], date] = date.today,
        now_provider: Callable[[], datetime] = utcnow,
        rng_factory: RngFactory = make_rng,
        weight_calculator: Optional[WeightCalculator] = None,
    ):
        self.uow_factory = uow_factory
        self.settings = settings or get_settings()
        self.today_provider = today_provider
        self.now_provider = now_provider
        self.rng_factory = rng_factory
        self.weight_calculator = weight_calculator or WeightCalculator(self.settings)
        self.validator = RequestWindowValidator(self.settings, today_provider)

    # ------------------------------------------------------------------
    # Per-slot execution lock
    # ------------------------------------------------------------------

    def _acquire_lock(self, day: date, time_slot: str) -> str:
        owner = uuid.uuid4().hex
        ttl = timedelta(seconds=self.settings.lock_ttl_seconds)

        # Second pass covers a holder releasing between our insert and our read
        for _ in range(2):
            with self.uow_factory() as uow:
                now = as_utc(self.now_provider())
                try:
                    uow.locks.add(LotteryLock(date=day, time_slot=time_slot, owner=owner, acquired_at=now))
                    uow.commit()
                    return owner
                except IntegrityError:
                    uow.rollback()

                held = uow.locks.find(day, time_slot)
                if held is None:
                    continue
                if now - as_utc(held.acquired_at) < ttl:
                    raise LotteryInProgressError(
                        f"Lottery for {day.isoformat()} {time_slot} is already running"
                    )
                logger.warning(
                    "Taking over stale lottery lock for %s %s (held by %s since %s)",
                    day.isoformat(), time_slot, held.owner, held.acquired_at,
                )
                if uow.locks.take_over(held.id, held.owner, owner, now):
                    uow.commit()
                    return owner
                raise LotteryInProgressError(
                    f"Lottery for {day.isoformat()} {time_slot} is already running"
                )

        raise LotteryInProgressError(f"Lottery for {day.isoformat()} {time_slot} is already running")

    def _release_lock(self, day: date, time_slot: str, owner: str) -> None:
        with self.uow_factory() as uow:
            if not uow.locks.release(day, time_slot, owner):
                logger.warning(
                    "Lottery lock for %s %s was no longer held by %s at release",
                    day.isoformat(), time_slot, owner,
                )
            uow.commit()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def execute_lottery(self, day: date, time_slot: str, seed: Optional[int] = None) -> LotteryResult:
        """
        Run the weighted draw for one (date, time_slot) and persist the result.

        Args:
            day: booking date
            time_slot: slot key "HH:MM"
            seed: replay a recorded draw; a fresh seed is used when omitted

        Raises:
            InvalidTimeSlotError: malformed slot key
            LotteryInProgressError: another execution holds the slot
            NoActiveCourtsError: requests are pending but no court is active
            AllocationConflictError: every drawn court was taken before commit
        """
        time_slot = self.validator.validate_time_slot_key(time_slot)
        owner = self._acquire_lock(day, time_slot)
        try:
            return self._run(day, time_slot, seed)
        finally:
            self._release_lock(day, time_slot, owner)

    def _run(self, day: date, time_slot: str, seed: Optional[int]) -> LotteryResult:
        start = utcnow()
        label = f"{day.isoformat()} {time_slot}"

        with self.uow_factory() as uow:
            pending = uow.requests.list_pending(day, time_slot)
            if not pending:
                logger.info("Lottery %s: no pending requests", label)
                return LotteryResult(date=day, time_slot=time_slot)

            if not uow.courts.list_active():
                raise NoActiveCourtsError(
                    f"{len(pending)} request(s) pending for {label} but no courts are active"
                )

            usage = UsageCounterService(uow, self.settings, self.today_provider)
            template = uow.time_slots.find_template(day.weekday(), time_slot)
            slot_type = template.type if template else None
            users = uow.users.get_many(r.user_id for r in pending)

            for request in pending:
                user = users.get(request.user_id)
                if user is None:
                    raise UserNotFoundError(f"User {request.user_id} for request {request.id} not found")
                usage.reset_if_due(user.id)
                count = usage.get_usage_count(user.id)
                request.weight = self.weight_calculator.compute_weight(
                    user, request, slot_type, usage_count=count
                )
                uow.add(request)

            available = ConflictChecker(uow).available_courts(day, time_slot)
            rng, used_seed = self.rng_factory(seed)

            # Written before the first SAVEPOINT so the batch already has an open transaction
            run = uow.runs.add(
                LotteryRun(
                    date=day,
                    time_slot=time_slot,
                    seed=str(used_seed),
                    total_requests=len(pending),
                    available_courts=len(available),
                )
            )

            pairs = LotteryEngine(rng).draw(pending, available)
            try:
                outcome = AllocationTransaction(uow, usage).apply(day, time_slot, pairs)
            except SQLAlchemyError:
                logger.exception("Lottery %s: allocation failed, rolling back", label)
                uow.rollback()
                raise

            if pairs and not outcome.bookings:
                uow.rollback()
                raise AllocationConflictError(
                    f"All {len(pairs)} drawn court(s) for {label} were taken before commit"
                )

            assigned = set(outcome.assigned_request_ids)
            duration_ms = int((utcnow() - start).total_seconds() * 1000)
            run.assigned_bookings = len(outcome.bookings)
            run.skipped_conflicts = len(outcome.skipped)
            run.duration_ms = duration_ms
            uow.add(run)
            uow.commit()

            result = LotteryResult(
                date=day,
                time_slot=time_slot,
                total_requests=len(pending),
                assigned_bookings=len(outcome.bookings),
                bookings=outcome.bookings,
                unassigned_request_ids=[r.id for r in pending if r.id not in assigned],
                skipped_conflicts=len(outcome.skipped),
                available_courts=len(available),
                seed=run.seed,
                duration_ms=duration_ms,
            )

        logger.info(
            "Lottery %s complete: %d requests, %d courts free, %d assigned, %d skipped, seed=%s, %d ms",
            label, result.total_requests, result.available_courts, result.assigned_bookings,
            result.skipped_conflicts, result.seed, result.duration_ms,
        )
        return result

    def get_pending_count(self, day: date, time_slot: str) -> int:
        time_slot = self.validator.validate_time_slot_key(time_slot)
        with self.uow_factory() as uow:
            return uow.requests.count_pending(day, time_slot)

    def get_lottery_results(self, day: date, time_slot: str) -> Dict[str, Any]:
        """Lottery-assigned bookings, still-pending requests and the latest run for a slot."""
        time_slot = self.validator.validate_time_slot_key(time_slot)
        with self.uow_factory() as uow:
            bookings = uow.bookings.list_lottery_bookings(day, time_slot)
            pending = uow.requests.list_pending(day, time_slot)
            last_run = uow.runs.latest(day, time_slot)
            return {
                "date": day.isoformat(),
                "time_slot": time_slot,
                "bookings": [booking_to_dict(b) for b in bookings],
                "pending_requests": [request_to_dict(r) for r in pending],
                "total_bookings": len(bookings),
                "total_pending": len(pending),
                "last_run": run_to_dict(last_run) if last_run else None,
            }
