"""
Persisting a draw: per-pair rechecks and savepoint isolation.
"""
from sqlmodel import select

from court_lottery.config import LotterySettings
from court_lottery.models import Booking, BookingRequest, BookingStatus, LotteryRun, RequestStatus, User
from court_lottery.services.allocation_transaction import (
    SKIP_CONSTRAINT,
    SKIP_COURT_INACTIVE,
    SKIP_COURT_TAKEN,
    AllocationTransaction,
)
from court_lottery.services.lottery_engine import DrawPair
from court_lottery.services.usage_counter_service import UsageCounterService
from tests.helpers import LOTTERY_DAY, SLOT, TODAY, make_booking, make_court, make_request, make_user


def _apply(uow, pairs):
    # The audit row opens the transaction before the first SAVEPOINT, as in a real run
    uow.runs.add(LotteryRun(date=LOTTERY_DAY, time_slot=SLOT, seed="1"))
    usage = UsageCounterService(uow, LotterySettings(), today_provider=lambda: TODAY)
    return AllocationTransaction(uow, usage).apply(LOTTERY_DAY, SLOT, pairs)


def _pairs(uow, assignments):
    return [
        DrawPair(request=uow.requests.get(request_id), court=uow.courts.get(court_id), position=i + 1)
        for i, (request_id, court_id) in enumerate(assignments)
    ]


def test_pair_becomes_confirmed_booking(session, uow_factory):
    ann = make_user(session, "Ann", usage=1)
    ben = make_user(session, "Ben")
    court = make_court(session, "Court 1")
    request = make_request(session, ann, number_of_players=2, participant_ids=[ben.id])

    with uow_factory() as uow:
        outcome = _apply(uow, _pairs(uow, [(request.id, court.id)]))
        uow.commit()

    assert len(outcome.bookings) == 1
    assert outcome.skipped == []
    session.expire_all()
    booking = session.exec(select(Booking).where(Booking.request_id == request.id)).one()
    assert booking.status == BookingStatus.CONFIRMED
    assert booking.court_id == court.id
    assert (booking.date, booking.time_slot) == (LOTTERY_DAY, SLOT)
    assert booking.number_of_players == 2
    assert booking.participant_ids == [ben.id]
    assert session.get(BookingRequest, request.id).status == RequestStatus.CONFIRMED
    assert session.get(User, ann.id).usage_count == 2


def test_court_taken_after_draw_is_skipped(session, uow_factory):
    ann = make_user(session, "Ann")
    walk_in = make_user(session, "Walk")
    court = make_court(session, "Court 1")
    request = make_request(session, ann)

    with uow_factory() as uow:
        pairs = _pairs(uow, [(request.id, court.id)])
        # Direct booking lands between the draw and the commit
        make_booking(session, walk_in, court)
        outcome = _apply(uow, pairs)
        uow.commit()

    assert outcome.bookings == []
    assert [(s.request_id, s.reason) for s in outcome.skipped] == [(request.id, SKIP_COURT_TAKEN)]
    session.expire_all()
    assert session.get(BookingRequest, request.id).status == RequestStatus.REQUESTED
    assert session.get(User, ann.id).usage_count == 0


def test_court_deactivated_after_draw_is_skipped(session, uow_factory):
    ann = make_user(session, "Ann")
    court = make_court(session, "Court 1")
    request = make_request(session, ann)

    with uow_factory() as uow:
        pairs = _pairs(uow, [(request.id, court.id)])
        court.is_active = False
        session.add(court)
        session.commit()
        outcome = _apply(uow, pairs)

    assert [s.reason for s in outcome.skipped] == [SKIP_COURT_INACTIVE]


def test_unique_index_violation_only_skips_that_pair(session, uow_factory, monkeypatch):
    """A conflict the recheck misses is caught by the index; later pairs still commit."""
    ann = make_user(session, "Ann")
    ben = make_user(session, "Ben")
    walk_in = make_user(session, "Walk")
    c1 = make_court(session, "Court 1")
    c2 = make_court(session, "Court 2")
    r1 = make_request(session, ann)
    r2 = make_request(session, ben)
    make_booking(session, walk_in, c1)

    monkeypatch.setattr(AllocationTransaction, "_recheck", lambda self, court_id, day, time_slot: None)

    with uow_factory() as uow:
        outcome = _apply(uow, _pairs(uow, [(r1.id, c1.id), (r2.id, c2.id)]))
        uow.commit()

    assert [(s.request_id, s.reason) for s in outcome.skipped] == [(r1.id, SKIP_CONSTRAINT)]
    assert outcome.assigned_request_ids == [r2.id]
    session.expire_all()
    assert session.get(BookingRequest, r1.id).status == RequestStatus.REQUESTED
    assert session.get(BookingRequest, r2.id).status == RequestStatus.CONFIRMED
    assert session.get(User, ann.id).usage_count == 0
    assert session.get(User, ben.id).usage_count == 1
    occupying = session.exec(
        select(Booking).where(Booking.court_id == c1.id, Booking.status == BookingStatus.CONFIRMED.value)
    ).all()
    assert len(occupying) == 1
