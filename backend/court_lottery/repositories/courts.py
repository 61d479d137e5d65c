from typing import List, Optional

from sqlmodel import Session, func, select

from court_lottery.models.booking import ACTIVE_STATUSES, Booking
from court_lottery.models.court import Court
from court_lottery.utils.sql import scalar_int


class CourtRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, court_id: int) -> Optional[Court]:
        return self.session.get(Court, court_id)

    def list_active(self) -> List[Court]:
        return list(self.session.exec(select(Court).where(Court.is_active == True).order_by(Court.id)).all())  # noqa: E712

    def is_active(self, court_id: int) -> bool:
        """Fresh read of the flag, bypassing any copy already in the session."""
        flag = self.session.exec(select(Court.is_active).where(Court.id == court_id)).first()
        return bool(flag)

    def count_active_bookings(self, court_id: int) -> int:
        return scalar_int(
            self.session.exec(
                select(func.count(Booking.id)).where(
                    Booking.court_id == court_id,
                    Booking.status.in_([s.value for s in ACTIVE_STATUSES]),
                )
            ).one()
        )
