from datetime import date
from typing import List, Optional

from sqlmodel import Session, func, select

from court_lottery.models.booking_request import BookingRequest, RequestStatus
from court_lottery.utils.sql import scalar_int


class BookingRequestRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, request_id: int) -> Optional[BookingRequest]:
        return self.session.get(BookingRequest, request_id)

    def add(self, request: BookingRequest) -> BookingRequest:
        self.session.add(request)
        self.session.flush()
        return request

    def list_pending(self, day: date, time_slot: str) -> List[BookingRequest]:
        """REQUESTED entries for one slot, ordered by id (stable draw input)."""
        return list(
            self.session.exec(
                select(BookingRequest)
                .where(
                    BookingRequest.date == day,
                    BookingRequest.time_slot == time_slot,
                    BookingRequest.status == RequestStatus.REQUESTED.value,
                )
                .order_by(BookingRequest.id)
            ).all()
        )

    def count_pending(self, day: date, time_slot: str) -> int:
        return scalar_int(
            self.session.exec(
                select(func.count(BookingRequest.id)).where(
                    BookingRequest.date == day,
                    BookingRequest.time_slot == time_slot,
                    BookingRequest.status == RequestStatus.REQUESTED.value,
                )
            ).one()
        )

    def find_pending_for_user(self, user_id: int, day: date, time_slot: str) -> Optional[BookingRequest]:
        return self.session.exec(
            select(BookingRequest).where(
                BookingRequest.user_id == user_id,
                BookingRequest.date == day,
                BookingRequest.time_slot == time_slot,
                BookingRequest.status == RequestStatus.REQUESTED.value,
            )
        ).first()

    def list_for_user(self, user_id: int) -> List[BookingRequest]:
        return list(
            self.session.exec(
                select(BookingRequest)
                .where(BookingRequest.user_id == user_id)
                .order_by(BookingRequest.date.desc(), BookingRequest.time_slot, BookingRequest.id)
            ).all()
        )
