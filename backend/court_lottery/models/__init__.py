from court_lottery.models.booking import Booking, BookingStatus
from court_lottery.models.booking_request import BookingRequest, RequestStatus
from court_lottery.models.court import Court
from court_lottery.models.lottery_lock import LotteryLock
from court_lottery.models.lottery_run import LotteryRun
from court_lottery.models.time_slot import TimeSlot, TimeSlotType
from court_lottery.models.usage_counter import UsageCounter
from court_lottery.models.user import User, UserType

__all__ = [
    "User",
    "UserType",
    "Court",
    "TimeSlot",
    "TimeSlotType",
    "BookingRequest",
    "RequestStatus",
    "Booking",
    "BookingStatus",
    "UsageCounter",
    "LotteryLock",
    "LotteryRun",
]
