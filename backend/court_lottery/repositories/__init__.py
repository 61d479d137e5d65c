from court_lottery.repositories.booking_requests import BookingRequestRepository
from court_lottery.repositories.bookings import BookingRepository
from court_lottery.repositories.courts import CourtRepository
from court_lottery.repositories.lottery_locks import LotteryLockRepository
from court_lottery.repositories.lottery_runs import LotteryRunRepository
from court_lottery.repositories.time_slots import TimeSlotRepository
from court_lottery.repositories.unit_of_work import UnitOfWork, UnitOfWorkFactory, make_uow_factory
from court_lottery.repositories.usage_counters import UsageCounterRepository
from court_lottery.repositories.users import UserRepository

__all__ = [
    "UserRepository",
    "CourtRepository",
    "TimeSlotRepository",
    "BookingRequestRepository",
    "BookingRepository",
    "UsageCounterRepository",
    "LotteryLockRepository",
    "LotteryRunRepository",
    "UnitOfWork",
    "UnitOfWorkFactory",
    "make_uow_factory",
]
