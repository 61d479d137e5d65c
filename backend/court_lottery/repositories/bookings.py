from datetime import date
from typing import List, Optional, Set

from sqlmodel import Session, select

from court_lottery.models.booking import OCCUPYING_STATUSES, Booking, BookingStatus

_OCCUPYING = [s.value for s in OCCUPYING_STATUSES]


class BookingRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, booking_id: int) -> Optional[Booking]:
        return self.session.get(Booking, booking_id)

    def add(self, booking: Booking) -> Booking:
        self.session.add(booking)
        self.session.flush()
        return booking

    def is_occupied(self, court_id: int, day: date, time_slot: str) -> bool:
        existing = self.session.exec(
            select(Booking.id).where(
                Booking.court_id == court_id,
                Booking.date == day,
                Booking.time_slot == time_slot,
                Booking.status.in_(_OCCUPYING),
            )
        ).first()
        return existing is not None

    def occupied_court_ids(self, day: date, time_slot: str) -> Set[int]:
        rows = self.session.exec(
            select(Booking.court_id).where(
                Booking.date == day,
                Booking.time_slot == time_slot,
                Booking.status.in_(_OCCUPYING),
            )
        ).all()
        return set(rows)

    def list_lottery_bookings(self, day: date, time_slot: str) -> List[Booking]:
        """Bookings for the slot that came out of a draw (request_id set)."""
        return list(
            self.session.exec(
                select(Booking)
                .where(
                    Booking.date == day,
                    Booking.time_slot == time_slot,
                    Booking.request_id.is_not(None),
                )
                .order_by(Booking.court_id, Booking.id)
            ).all()
        )

    def list_elapsed_confirmed(self, today: date, now_key: str) -> List[Booking]:
        """CONFIRMED bookings dated before today, or today with a start time <= now_key."""
        return list(
            self.session.exec(
                select(Booking)
                .where(
                    Booking.status == BookingStatus.CONFIRMED.value,
                    (Booking.date < today) | ((Booking.date == today) & (Booking.time_slot <= now_key)),
                )
                .order_by(Booking.date, Booking.time_slot, Booking.id)
            ).all()
        )
