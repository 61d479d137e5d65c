"""
Booking-creation path: lottery requests and direct bookings.

Shares the window, player-count and court checks with the lottery.
Each public method runs in its own unit of work and commits on success.
"""
import logging
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError

from court_lottery.config import LotterySettings, get_settings
from court_lottery.errors import (
    BookingNotFoundError,
    CannotCancelCompletedBookingError,
    CourtNotAvailableError,
    DuplicateRequestError,
    InvalidStateTransitionError,
    ParticipantError,
    RequestNotFoundError,
    UserNotFoundError,
)
from court_lottery.models.booking import Booking, BookingStatus
from court_lottery.models.booking_request import BookingRequest, RequestStatus
from court_lottery.repositories.unit_of_work import UnitOfWork, UnitOfWorkFactory
from court_lottery.services.conflict_checker import ConflictChecker
from court_lottery.services.request_window import RequestWindowValidator
from court_lottery.utils.clock import as_utc, utcnow

logger = logging.getLogger(__name__)


def _check_participants(
    uow: UnitOfWork,
    user_id: int,
    number_of_players: int,
    participant_ids: Optional[Iterable[int]],
) -> List[int]:
    """Validate the other players for a request or booking; returns them as a list."""
    if uow.users.get(user_id) is None:
        raise UserNotFoundError(f"User {user_id} not found")

    others = list(participant_ids or [])
    if len(others) != number_of_players - 1:
        raise ParticipantError(
            f"{number_of_players} players need {number_of_players - 1} participant(s) "
            f"besides the requester, got {len(others)}"
        )
    if len(set(others)) != len(others):
        raise ParticipantError("Participant list contains duplicates")
    if user_id in others:
        raise ParticipantError("The requester must not be listed as a participant")

    found = uow.users.get_many(others)
    missing = sorted(set(others) - set(found))
    if missing:
        raise UserNotFoundError(f"Participant user(s) not found: {missing}")
    return others


class BookingRequestService:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        settings: Optional[LotterySettings] = None,
        today_provider: Callable[[], date] = date.today,
    ):
        self.uow_factory = uow_factory
        self.validator = RequestWindowValidator(settings or get_settings(), today_provider)

    def create_request(
        self,
        user_id: int,
        day: date,
        time_slot: str,
        number_of_players: int,
        participant_ids: Optional[Iterable[int]] = None,
    ) -> BookingRequest:
        time_slot = self.validator.validate_time_slot_key(time_slot)
        self.validator.validate_request_window(day)
        self.validator.validate_player_count(number_of_players)

        with self.uow_factory() as uow:
            others = _check_participants(uow, user_id, number_of_players, participant_ids)

            if uow.requests.find_pending_for_user(user_id, day, time_slot) is not None:
                raise DuplicateRequestError(
                    f"User {user_id} already has a pending request for {day.isoformat()} {time_slot}"
                )

            request = BookingRequest(
                user_id=user_id,
                date=day,
                time_slot=time_slot,
                number_of_players=number_of_players,
                status=RequestStatus.REQUESTED,
                participant_ids=others,
            )
            try:
                uow.requests.add(request)
                uow.commit()
            except IntegrityError:
                uow.rollback()
                raise DuplicateRequestError(
                    f"User {user_id} already has a pending request for {day.isoformat()} {time_slot}"
                )

            logger.info("Request %s created: user %s for %s %s", request.id, user_id, day.isoformat(), time_slot)
            return request

    def cancel_request(self, request_id: int) -> BookingRequest:
        """Withdraw a pending request. The row is kept with status CANCELLED."""
        with self.uow_factory() as uow:
            request = uow.requests.get(request_id)
            if request is None:
                raise RequestNotFoundError(f"Booking request {request_id} not found")
            if request.status != RequestStatus.REQUESTED:
                raise InvalidStateTransitionError(
                    f"Only pending requests can be cancelled (request {request_id} is {request.status})"
                )
            request.status = RequestStatus.CANCELLED
            uow.add(request)
            uow.commit()
            return request

    def list_user_requests(self, user_id: int) -> List[BookingRequest]:
        with self.uow_factory() as uow:
            if uow.users.get(user_id) is None:
                raise UserNotFoundError(f"User {user_id} not found")
            return uow.requests.list_for_user(user_id)


class BookingService:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        settings: Optional[LotterySettings] = None,
        today_provider: Callable[[], date] = date.today,
        now_provider: Callable[[], datetime] = utcnow,
    ):
        self.uow_factory = uow_factory
        self.validator = RequestWindowValidator(settings or get_settings(), today_provider)
        self.now_provider = now_provider

    def create_direct_booking(
        self,
        user_id: int,
        court_id: int,
        day: date,
        time_slot: str,
        number_of_players: int,
        participant_ids: Optional[Iterable[int]] = None,
    ) -> Booking:
        """
        Book a specific court inside the short-notice window.

        Raises:
            DirectBookingWindowError, PlayerCountError, InvalidTimeSlotError,
            ParticipantError, UserNotFoundError, CourtNotFoundError,
            CourtInactiveError, CourtNotAvailableError
        """
        time_slot = self.validator.validate_time_slot_key(time_slot)
        self.validator.validate_direct_booking_window(day)
        self.validator.validate_player_count(number_of_players)

        with self.uow_factory() as uow:
            others = _check_participants(uow, user_id, number_of_players, participant_ids)
            ConflictChecker(uow).check_court_available(court_id, day, time_slot)

            booking = Booking(
                user_id=user_id,
                court_id=court_id,
                date=day,
                time_slot=time_slot,
                number_of_players=number_of_players,
                status=BookingStatus.CONFIRMED,
                participant_ids=others,
            )
            try:
                uow.bookings.add(booking)
                uow.commit()
            except IntegrityError:
                # Lost a race with a lottery or another direct booking
                uow.rollback()
                raise CourtNotAvailableError(
                    f"Court {court_id} was booked for {day.isoformat()} {time_slot} by another request"
                )

            logger.info(
                "Direct booking %s: user %s court %s %s %s",
                booking.id, user_id, court_id, day.isoformat(), time_slot,
            )
            return booking

    def _get(self, uow: UnitOfWork, booking_id: int) -> Booking:
        booking = uow.bookings.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(f"Booking {booking_id} not found")
        return booking

    def cancel_booking(self, booking_id: int) -> Booking:
        with self.uow_factory() as uow:
            booking = self._get(uow, booking_id)
            if booking.status == BookingStatus.COMPLETED:
                raise CannotCancelCompletedBookingError(f"Booking {booking_id} is already completed")
            if booking.status != BookingStatus.CONFIRMED:
                raise InvalidStateTransitionError(
                    f"Only confirmed bookings can be cancelled (booking {booking_id} is {booking.status})"
                )
            booking.status = BookingStatus.CANCELLED
            booking.cancelled_at = as_utc(self.now_provider())
            uow.add(booking)
            uow.commit()
            return booking

    def complete_booking(self, booking_id: int) -> Booking:
        """CONFIRMED -> COMPLETED. Usage was already counted when the court was assigned."""
        with self.uow_factory() as uow:
            booking = self._get(uow, booking_id)
            if booking.status != BookingStatus.CONFIRMED:
                raise InvalidStateTransitionError(
                    f"Only confirmed bookings can be completed (booking {booking_id} is {booking.status})"
                )
            booking.status = BookingStatus.COMPLETED
            booking.completed_at = as_utc(self.now_provider())
            uow.add(booking)
            uow.commit()
            return booking
