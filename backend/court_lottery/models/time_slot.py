from datetime import time
from enum import Enum
from typing import Optional

from sqlalchemy import String
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, SQLModel

from court_lottery.utils.time_slots import time_slot_key


class TimeSlotType(str, Enum):
    PEAK = "PEAK"
    OFF_PEAK = "OFF_PEAK"


class TimeSlot(SQLModel, table=True):
    """Weekly slot template. Requests and bookings reference it by start time ("HH:MM")."""

    __tablename__ = "timeslot"
    __table_args__ = (SAUniqueConstraint("day_of_week", "start_time", name="uq_timeslot_day_start"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    day_of_week: int = Field(ge=0, le=6)  # 0=Monday, 6=Sunday (date.weekday())
    start_time: time
    end_time: time
    duration: int  # minutes
    type: TimeSlotType = Field(default=TimeSlotType.OFF_PEAK, sa_column=Column(String, nullable=False))

    @property
    def key(self) -> str:
        return time_slot_key(self.start_time)
