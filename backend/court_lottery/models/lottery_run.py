from datetime import date, datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from court_lottery.utils.clock import utcnow


class LotteryRun(SQLModel, table=True):
    __tablename__ = "lotteryrun"

    id: Optional[int] = Field(default=None, primary_key=True)
    date: date
    time_slot: str = Field(max_length=5, index=True)
    seed: str = Field(max_length=24)  # stored as text, 64-bit seeds overflow SQLite INTEGER
    total_requests: int = Field(default=0)
    assigned_bookings: int = Field(default=0)
    skipped_conflicts: int = Field(default=0)
    available_courts: int = Field(default=0)
    duration_ms: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow)
