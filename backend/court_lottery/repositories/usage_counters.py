from datetime import date
from typing import Optional

from sqlalchemy import update
from sqlmodel import Session, func, select

from court_lottery.models.usage_counter import UsageCounter
from court_lottery.models.user import User
from court_lottery.utils.sql import scalar_int


class UsageCounterRepository:
    """
    Per-user usage counters.

    Increments are issued as ``count = count + 1`` UPDATE statements so two
    lotteries for different slots that touch the same user cannot lose an
    increment, whatever the isolation level.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_by_user(self, user_id: int) -> Optional[UsageCounter]:
        return self.session.exec(select(UsageCounter).where(UsageCounter.user_id == user_id)).first()

    def get_or_create(self, user_id: int, today: date) -> UsageCounter:
        counter = self.get_by_user(user_id)
        if counter is None:
            counter = UsageCounter(user_id=user_id, count=0, last_reset_date=today)
            self.session.add(counter)
            self.session.flush()
        return counter

    def increment(self, user_id: int, today: date) -> int:
        """Atomically add one to the user's counter and cached User.usage_count. Returns the new count."""
        self.get_or_create(user_id, today)
        self.session.execute(
            update(UsageCounter)
            .where(UsageCounter.user_id == user_id)
            .values(count=UsageCounter.count + 1)
            .execution_options(synchronize_session="fetch")
        )
        self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(usage_count=User.usage_count + 1)
            .execution_options(synchronize_session="fetch")
        )
        return self.session.exec(select(UsageCounter.count).where(UsageCounter.user_id == user_id)).one()

    def reset(self, counter: UsageCounter, today: date) -> UsageCounter:
        counter.count = 0
        counter.last_reset_date = today
        self.session.add(counter)
        user = self.session.get(User, counter.user_id)
        if user is not None:
            user.usage_count = 0
            self.session.add(user)
        self.session.flush()
        return counter

    def reset_all(self, today: date) -> int:
        touched = scalar_int(self.session.exec(select(func.count(UsageCounter.id))).one())
        self.session.execute(
            update(UsageCounter)
            .values(count=0, last_reset_date=today)
            .execution_options(synchronize_session="fetch")
        )
        self.session.execute(
            update(User).values(usage_count=0).execution_options(synchronize_session="fetch")
        )
        return touched
