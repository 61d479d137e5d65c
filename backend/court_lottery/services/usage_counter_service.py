from datetime import date
from typing import Callable, Optional

from court_lottery.config import (
    RESET_PERIOD_MONTHLY,
    RESET_PERIOD_WEEKLY,
    LotterySettings,
    get_settings,
)
from court_lottery.errors import UserNotFoundError
from court_lottery.models.usage_counter import UsageCounter
from court_lottery.repositories.unit_of_work import UnitOfWork


def is_reset_due(last_reset: date, today: date, period: str) -> bool:
    """
    Whether a counter last reset on ``last_reset`` should be zeroed on ``today``.

    monthly: first check in a later calendar month
    weekly: 7 or more days since the last reset
    none: never
    """
    if today <= last_reset:
        return False
    if period == RESET_PERIOD_MONTHLY:
        return (today.year, today.month) != (last_reset.year, last_reset.month)
    if period == RESET_PERIOD_WEEKLY:
        return (today - last_reset).days >= 7
    return False


class UsageCounterService:
    """Recent-allocation counts per user, the fairness signal for the draw."""

    def __init__(
        self,
        uow: UnitOfWork,
        settings: Optional[LotterySettings] = None,
        today_provider: Callable[[], date] = date.today,
    ):
        self.uow = uow
        self.settings = settings or get_settings()
        self.today_provider = today_provider

    def _require_user(self, user_id: int) -> None:
        if self.uow.users.get(user_id) is None:
            raise UserNotFoundError(f"User {user_id} not found")

    def _counter(self, user_id: int) -> UsageCounter:
        self._require_user(user_id)
        return self.uow.usage_counters.get_or_create(user_id, self.today_provider())

    def get_usage_count(self, user_id: int) -> int:
        return self._counter(user_id).count

    def increment_usage(self, user_id: int) -> int:
        self._require_user(user_id)
        return self.uow.usage_counters.increment(user_id, self.today_provider())

    def reset_if_due(self, user_id: int) -> bool:
        """Zero the counter if the reset period has elapsed. Returns True when a reset happened."""
        counter = self._counter(user_id)
        today = self.today_provider()
        if not is_reset_due(counter.last_reset_date, today, self.settings.usage_reset_period):
            return False
        self.uow.usage_counters.reset(counter, today)
        return True

    def reset_all(self) -> int:
        return self.uow.usage_counters.reset_all(self.today_provider())
