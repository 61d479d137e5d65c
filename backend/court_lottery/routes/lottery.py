from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator

from court_lottery.dependencies import get_lottery_service, http_error
from court_lottery.errors import CourtBookingError
from court_lottery.models.booking import BookingStatus
from court_lottery.services.lottery_service import LotteryService

router = APIRouter()


class LotteryExecuteRequest(BaseModel):
    date: date
    time_slot: str

    @field_validator("time_slot")
    @classmethod
    def strip_time_slot(cls, v):
        return v.strip()


class LotteryBookingResponse(BaseModel):
    id: int
    user_id: int
    court_id: int
    date: date
    time_slot: str
    number_of_players: int
    status: BookingStatus
    request_id: Optional[int] = None
    participant_ids: List[int] = []


class LotteryResultResponse(BaseModel):
    date: date
    time_slot: str
    total_requests: int
    assigned_bookings: int
    bookings: List[LotteryBookingResponse]
    unassigned_request_ids: List[int]
    skipped_conflicts: int
    available_courts: int
    seed: Optional[str] = None
    duration_ms: int


class PendingCountResponse(BaseModel):
    date: date
    time_slot: str
    pending: int


@router.post("/lottery/execute", response_model=LotteryResultResponse)
def execute_lottery(payload: LotteryExecuteRequest, service: LotteryService = Depends(get_lottery_service)):
    """Run the weighted draw for one date and time slot"""
    try:
        result = service.execute_lottery(payload.date, payload.time_slot)
    except CourtBookingError as e:
        raise http_error(e)
    return result.to_dict()


@router.get("/lottery/pending/{day}/{time_slot}", response_model=PendingCountResponse)
def get_pending_count(day: date, time_slot: str, service: LotteryService = Depends(get_lottery_service)):
    """Number of REQUESTED entries waiting for a draw"""
    try:
        pending = service.get_pending_count(day, time_slot)
    except CourtBookingError as e:
        raise http_error(e)
    return PendingCountResponse(date=day, time_slot=time_slot, pending=pending)


@router.get("/lottery/results/{day}/{time_slot}")
def get_lottery_results(
    day: date, time_slot: str, service: LotteryService = Depends(get_lottery_service)
) -> Dict[str, Any]:
    """Assigned bookings, remaining pending requests and the latest run for a slot"""
    try:
        return service.get_lottery_results(day, time_slot)
    except CourtBookingError as e:
        raise http_error(e)
