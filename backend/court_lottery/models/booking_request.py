from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, Index, String, text
from sqlmodel import Column, Field, SQLModel

from court_lottery.utils.clock import utcnow


class RequestStatus(str, Enum):
    REQUESTED = "REQUESTED"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


_PENDING_ONLY = "status = 'REQUESTED'"


class BookingRequest(SQLModel, table=True):
    """A lottery entry for one (date, time_slot). Court is decided by the draw."""

    __tablename__ = "bookingrequest"
    __table_args__ = (
        # One pending request per user per slot
        Index(
            "uq_request_pending_user_slot",
            "user_id",
            "date",
            "time_slot",
            unique=True,
            sqlite_where=text(_PENDING_ONLY),
            postgresql_where=text(_PENDING_ONLY),
        ),
        Index("ix_request_date_slot_status", "date", "time_slot", "status"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    date: date
    time_slot: str = Field(max_length=5)  # "HH:MM"
    number_of_players: int
    status: RequestStatus = Field(default=RequestStatus.REQUESTED, sa_column=Column(String, nullable=False))
    weight: Optional[float] = Field(default=None)
    # Other players besides the requester
    participant_ids: List[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow})
