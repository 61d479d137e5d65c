from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, Index, String, text
from sqlmodel import Column, Field, SQLModel

from court_lottery.utils.clock import utcnow


class BookingStatus(str, Enum):
    REQUESTED = "REQUESTED"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Statuses that hold a court for their (date, time_slot)
OCCUPYING_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.COMPLETED)
# Statuses that block deleting a court
ACTIVE_STATUSES = (BookingStatus.REQUESTED, BookingStatus.CONFIRMED)

_OCCUPYING_ONLY = "status IN ('CONFIRMED', 'COMPLETED')"


class Booking(SQLModel, table=True):
    __table_args__ = (
        # A court can hold at most one live booking per slot
        Index(
            "uq_booking_court_slot_occupied",
            "court_id",
            "date",
            "time_slot",
            unique=True,
            sqlite_where=text(_OCCUPYING_ONLY),
            postgresql_where=text(_OCCUPYING_ONLY),
        ),
        Index("ix_booking_date_slot", "date", "time_slot"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    court_id: int = Field(foreign_key="court.id", index=True)
    date: date
    time_slot: str = Field(max_length=5)  # "HH:MM"
    number_of_players: int
    status: BookingStatus = Field(default=BookingStatus.CONFIRMED, sa_column=Column(String, nullable=False))
    # Null for direct bookings; set when created by a lottery draw
    request_id: Optional[int] = Field(default=None, foreign_key="bookingrequest.id", unique=True)
    participant_ids: List[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utcnow)
    completed_at: Optional[datetime] = Field(default=None)
    cancelled_at: Optional[datetime] = Field(default=None)
