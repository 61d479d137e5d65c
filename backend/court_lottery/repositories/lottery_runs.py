from datetime import date
from typing import Optional

from sqlmodel import Session, select

from court_lottery.models.lottery_run import LotteryRun


class LotteryRunRepository:
    def __init__(self, session: Session):
        self.session = session

    def add(self, run: LotteryRun) -> LotteryRun:
        self.session.add(run)
        self.session.flush()
        return run

    def latest(self, day: date, time_slot: str) -> Optional[LotteryRun]:
        return self.session.exec(
            select(LotteryRun)
            .where(LotteryRun.date == day, LotteryRun.time_slot == time_slot)
            .order_by(LotteryRun.id.desc())
        ).first()
