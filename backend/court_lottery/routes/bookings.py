from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from court_lottery.dependencies import get_booking_service, http_error
from court_lottery.errors import CourtBookingError
from court_lottery.models.booking import BookingStatus
from court_lottery.services.booking_service import BookingService

router = APIRouter()


class BookingCreate(BaseModel):
    user_id: int
    court_id: int
    date: date
    time_slot: str
    number_of_players: int
    participant_ids: List[int] = []


class BookingResponse(BaseModel):
    id: int
    user_id: int
    court_id: int
    date: date
    time_slot: str
    number_of_players: int
    status: BookingStatus
    request_id: Optional[int] = None
    participant_ids: List[int] = []
    created_at: datetime
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    class Config:
        from_attributes = True


@router.post("/bookings", response_model=BookingResponse, status_code=201)
def create_direct_booking(payload: BookingCreate, service: BookingService = Depends(get_booking_service)):
    """Book a specific court inside the short-notice window"""
    try:
        return service.create_direct_booking(
            payload.user_id,
            payload.court_id,
            payload.date,
            payload.time_slot,
            payload.number_of_players,
            payload.participant_ids,
        )
    except CourtBookingError as e:
        raise http_error(e)


@router.post("/bookings/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(booking_id: int, service: BookingService = Depends(get_booking_service)):
    try:
        return service.cancel_booking(booking_id)
    except CourtBookingError as e:
        raise http_error(e)


@router.post("/bookings/{booking_id}/complete", response_model=BookingResponse)
def complete_booking(booking_id: int, service: BookingService = Depends(get_booking_service)):
    try:
        return service.complete_booking(booking_id)
    except CourtBookingError as e:
        raise http_error(e)
