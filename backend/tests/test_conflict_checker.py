"""
Court availability checks used by direct bookings and the lottery.
"""
import pytest

from court_lottery.errors import (
    CourtHasActiveBookingsError,
    CourtInactiveError,
    CourtNotAvailableError,
    CourtNotFoundError,
)
from court_lottery.models import BookingStatus
from court_lottery.services.conflict_checker import ConflictChecker
from tests.helpers import LOTTERY_DAY, SLOT, make_booking, make_court, make_user


def test_free_court_is_available(session, uow_factory):
    court = make_court(session, "Court 1")
    with uow_factory() as uow:
        assert ConflictChecker(uow).check_court_available(court.id, LOTTERY_DAY, SLOT).id == court.id


def test_unknown_court(uow_factory):
    with uow_factory() as uow:
        with pytest.raises(CourtNotFoundError):
            ConflictChecker(uow).check_court_available(42, LOTTERY_DAY, SLOT)


def test_inactive_court(session, uow_factory):
    court = make_court(session, "Court 1", is_active=False)
    with uow_factory() as uow:
        with pytest.raises(CourtInactiveError):
            ConflictChecker(uow).check_court_available(court.id, LOTTERY_DAY, SLOT)


@pytest.mark.parametrize("status", [BookingStatus.CONFIRMED, BookingStatus.COMPLETED])
def test_occupied_court(session, uow_factory, status):
    user = make_user(session, "Ann")
    court = make_court(session, "Court 1")
    make_booking(session, user, court, status=status)

    with uow_factory() as uow:
        with pytest.raises(CourtNotAvailableError) as exc_info:
            ConflictChecker(uow).check_court_available(court.id, LOTTERY_DAY, SLOT)
    assert exc_info.value.status_code == 409


def test_cancelled_booking_frees_court(session, uow_factory):
    user = make_user(session, "Ann")
    court = make_court(session, "Court 1")
    make_booking(session, user, court, status=BookingStatus.CANCELLED)

    with uow_factory() as uow:
        ConflictChecker(uow).check_court_available(court.id, LOTTERY_DAY, SLOT)


def test_other_slot_does_not_conflict(session, uow_factory):
    user = make_user(session, "Ann")
    court = make_court(session, "Court 1")
    make_booking(session, user, court, time_slot="19:00")

    with uow_factory() as uow:
        ConflictChecker(uow).check_court_available(court.id, LOTTERY_DAY, SLOT)


def test_available_courts_excludes_inactive_and_occupied(session, uow_factory):
    user = make_user(session, "Ann")
    c1 = make_court(session, "Court 1")
    make_court(session, "Court 2", is_active=False)
    c3 = make_court(session, "Court 3")
    c4 = make_court(session, "Court 4")
    make_booking(session, user, c3)

    with uow_factory() as uow:
        available = ConflictChecker(uow).available_courts(LOTTERY_DAY, SLOT)
    assert [c.id for c in available] == [c1.id, c4.id]


def test_check_deletable(session, uow_factory):
    user = make_user(session, "Ann")
    busy = make_court(session, "Court 1")
    idle = make_court(session, "Court 2")
    make_booking(session, user, busy)
    make_booking(session, user, idle, status=BookingStatus.COMPLETED)

    with uow_factory() as uow:
        checker = ConflictChecker(uow)
        with pytest.raises(CourtHasActiveBookingsError):
            checker.check_deletable(busy.id)
        assert checker.check_deletable(idle.id).id == idle.id
        with pytest.raises(CourtNotFoundError):
            checker.check_deletable(99)
