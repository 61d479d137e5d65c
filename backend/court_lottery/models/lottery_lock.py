from datetime import date, datetime
from typing import Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, SQLModel

from court_lottery.utils.clock import utcnow


class LotteryLock(SQLModel, table=True):
    """Presence of a row means a lottery for (date, time_slot) is in flight."""

    __tablename__ = "lotterylock"
    __table_args__ = (SAUniqueConstraint("date", "time_slot", name="uq_lotterylock_date_slot"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    date: date
    time_slot: str = Field(max_length=5)
    owner: str = Field(max_length=32)
    acquired_at: datetime = Field(default_factory=utcnow)
