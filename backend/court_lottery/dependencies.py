"""
FastAPI dependencies.

Routes get their services through these so tests can swap the storage by
overriding ``get_uow_factory`` alone.
"""
from fastapi import Depends, HTTPException

from court_lottery.database import make_session_factory
from court_lottery.errors import CourtBookingError
from court_lottery.repositories.unit_of_work import UnitOfWorkFactory, make_uow_factory
from court_lottery.services.booking_service import BookingRequestService, BookingService
from court_lottery.services.lottery_service import LotteryService


def get_uow_factory() -> UnitOfWorkFactory:
    return make_uow_factory(make_session_factory())


def get_lottery_service(uow_factory: UnitOfWorkFactory = Depends(get_uow_factory)) -> LotteryService:
    return LotteryService(uow_factory)


def get_booking_request_service(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> BookingRequestService:
    return BookingRequestService(uow_factory)


def get_booking_service(uow_factory: UnitOfWorkFactory = Depends(get_uow_factory)) -> BookingService:
    return BookingService(uow_factory)


def http_error(e: CourtBookingError) -> HTTPException:
    """Translate a domain error into the HTTPException the route raises."""
    return HTTPException(status_code=e.status_code, detail=e.to_dict())
