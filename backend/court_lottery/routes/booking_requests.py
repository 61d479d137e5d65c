from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from court_lottery.dependencies import get_booking_request_service, http_error
from court_lottery.errors import CourtBookingError
from court_lottery.models.booking_request import RequestStatus
from court_lottery.services.booking_service import BookingRequestService

router = APIRouter()


class BookingRequestCreate(BaseModel):
    user_id: int
    date: date
    time_slot: str
    number_of_players: int
    participant_ids: List[int] = []


class BookingRequestResponse(BaseModel):
    id: int
    user_id: int
    date: date
    time_slot: str
    number_of_players: int
    status: RequestStatus
    weight: Optional[float] = None
    participant_ids: List[int] = []
    created_at: datetime

    class Config:
        from_attributes = True


@router.post("/booking-requests", response_model=BookingRequestResponse, status_code=201)
def create_booking_request(
    payload: BookingRequestCreate,
    service: BookingRequestService = Depends(get_booking_request_service),
):
    """Enter the lottery for a date and time slot"""
    try:
        return service.create_request(
            payload.user_id,
            payload.date,
            payload.time_slot,
            payload.number_of_players,
            payload.participant_ids,
        )
    except CourtBookingError as e:
        raise http_error(e)


@router.post("/booking-requests/{request_id}/cancel", response_model=BookingRequestResponse)
def cancel_booking_request(
    request_id: int,
    service: BookingRequestService = Depends(get_booking_request_service),
):
    """Withdraw a pending request"""
    try:
        return service.cancel_request(request_id)
    except CourtBookingError as e:
        raise http_error(e)


@router.get("/users/{user_id}/booking-requests", response_model=List[BookingRequestResponse])
def list_user_booking_requests(
    user_id: int,
    service: BookingRequestService = Depends(get_booking_request_service),
):
    try:
        return service.list_user_requests(user_id)
    except CourtBookingError as e:
        raise http_error(e)
