"""
Unit of work over a single SQLModel session.

Services never commit implicitly: they receive a UnitOfWork, work through
its repositories, and the caller (or the service itself at a documented
boundary) decides when to commit. Leaving the ``with`` block without a
commit rolls everything back.
"""
from typing import Callable, ContextManager

from sqlmodel import Session

from court_lottery.repositories.booking_requests import BookingRequestRepository
from court_lottery.repositories.bookings import BookingRepository
from court_lottery.repositories.courts import CourtRepository
from court_lottery.repositories.lottery_locks import LotteryLockRepository
from court_lottery.repositories.lottery_runs import LotteryRunRepository
from court_lottery.repositories.time_slots import TimeSlotRepository
from court_lottery.repositories.usage_counters import UsageCounterRepository
from court_lottery.repositories.users import UserRepository


class UnitOfWork:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory
        self.session: Session = None  # type: ignore[assignment]

    def __enter__(self) -> "UnitOfWork":
        self.session = self._session_factory()
        self.users = UserRepository(self.session)
        self.courts = CourtRepository(self.session)
        self.time_slots = TimeSlotRepository(self.session)
        self.requests = BookingRequestRepository(self.session)
        self.bookings = BookingRepository(self.session)
        self.usage_counters = UsageCounterRepository(self.session)
        self.locks = LotteryLockRepository(self.session)
        self.runs = LotteryRunRepository(self.session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # Closing ends any open transaction without committing it; loaded
        # objects are detached with their current state.
        self.session.close()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def flush(self) -> None:
        self.session.flush()

    def savepoint(self) -> ContextManager:
        """Nested transaction; an exception inside rolls back only this block."""
        return self.session.begin_nested()

    def add(self, obj) -> None:
        self.session.add(obj)


UnitOfWorkFactory = Callable[[], UnitOfWork]


def make_uow_factory(session_factory: Callable[[], Session]) -> UnitOfWorkFactory:
    def _factory() -> UnitOfWork:
        return UnitOfWork(session_factory)

    return _factory
