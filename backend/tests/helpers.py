"""
Row builders shared by the test modules.

Everything is added and committed through the given session so services
opening their own sessions see the rows.
"""
from datetime import date, time, timedelta
from typing import List, Optional

from sqlmodel import Session

from court_lottery.models import (
    Booking,
    BookingRequest,
    BookingStatus,
    Court,
    RequestStatus,
    TimeSlot,
    TimeSlotType,
    UsageCounter,
    User,
    UserType,
)

# A Monday; the lottery target two days later is a Wednesday
TODAY = date(2026, 3, 2)
LOTTERY_DAY = TODAY + timedelta(days=2)
SLOT = "18:00"


class ScriptedRandom:
    """Random source returning a fixed sequence of floats in [0, 1)."""

    def __init__(self, values: List[float]):
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls]
        self.calls += 1
        return value


def scripted_rng_factory(values: List[float], seed: int = 1234):
    def _factory(_seed=None):
        return ScriptedRandom(values), seed

    return _factory


def make_user(
    session: Session,
    name: str,
    user_type: UserType = UserType.MEMBER,
    usage: int = 0,
    last_reset: Optional[date] = None,
) -> User:
    user = User(name=name, email=f"{name.lower()}@example.com", type=user_type, usage_count=usage)
    session.add(user)
    session.commit()
    session.add(UsageCounter(user_id=user.id, count=usage, last_reset_date=last_reset or TODAY))
    session.commit()
    return user


def make_court(session: Session, name: str, is_active: bool = True) -> Court:
    court = Court(name=name, is_active=is_active)
    session.add(court)
    session.commit()
    return court


def make_time_slot(
    session: Session,
    day_of_week: int,
    start: time,
    end: time,
    slot_type: TimeSlotType = TimeSlotType.OFF_PEAK,
) -> TimeSlot:
    duration = (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
    slot = TimeSlot(day_of_week=day_of_week, start_time=start, end_time=end, duration=duration, type=slot_type)
    session.add(slot)
    session.commit()
    return slot


def make_request(
    session: Session,
    user: User,
    day: date = LOTTERY_DAY,
    time_slot: str = SLOT,
    number_of_players: int = 2,
    participant_ids: Optional[List[int]] = None,
    status: RequestStatus = RequestStatus.REQUESTED,
) -> BookingRequest:
    request = BookingRequest(
        user_id=user.id,
        date=day,
        time_slot=time_slot,
        number_of_players=number_of_players,
        status=status,
        participant_ids=participant_ids or [],
    )
    session.add(request)
    session.commit()
    return request


def make_booking(
    session: Session,
    user: User,
    court: Court,
    day: date = LOTTERY_DAY,
    time_slot: str = SLOT,
    status: BookingStatus = BookingStatus.CONFIRMED,
    number_of_players: int = 2,
) -> Booking:
    booking = Booking(
        user_id=user.id,
        court_id=court.id,
        date=day,
        time_slot=time_slot,
        number_of_players=number_of_players,
        status=status,
    )
    session.add(booking)
    session.commit()
    return booking
