from datetime import date, datetime
from typing import Optional

from sqlalchemy import delete, update
from sqlmodel import Session, select

from court_lottery.models.lottery_lock import LotteryLock


class LotteryLockRepository:
    """
    Per-(date, time_slot) execution locks.

    Take-over and release are conditional on the owner token so a process
    that lost its lock can never remove or refresh someone else's.
    """

    def __init__(self, session: Session):
        self.session = session

    def find(self, day: date, time_slot: str) -> Optional[LotteryLock]:
        return self.session.exec(
            select(LotteryLock).where(LotteryLock.date == day, LotteryLock.time_slot == time_slot)
        ).first()

    def add(self, lock: LotteryLock) -> LotteryLock:
        self.session.add(lock)
        self.session.flush()
        return lock

    def take_over(self, lock_id: int, previous_owner: str, new_owner: str, now: datetime) -> bool:
        """Swap the owner of a stale lock. False if someone else got there first."""
        result = self.session.execute(
            update(LotteryLock)
            .where(LotteryLock.id == lock_id, LotteryLock.owner == previous_owner)
            .values(owner=new_owner, acquired_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def release(self, day: date, time_slot: str, owner: str) -> bool:
        result = self.session.execute(
            delete(LotteryLock)
            .where(
                LotteryLock.date == day,
                LotteryLock.time_slot == time_slot,
                LotteryLock.owner == owner,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
