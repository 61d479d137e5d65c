"""
Periodic jobs, run through ``court-lottery-jobs`` (court_lottery.jobs) from cron,
a systemd timer or a worker. Each function is safe to re-run.

- run_due_lotteries: daily, for the date that just closed its request window
- complete_elapsed_bookings: hourly
- reset_usage_counters: start of each reset period
"""
import logging
from datetime import date, datetime
from typing import List, Optional

from court_lottery.config import RESET_PERIOD_MONTHLY, RESET_PERIOD_WEEKLY
from court_lottery.errors import LotteryConflictError, NoActiveCourtsError
from court_lottery.models.booking import BookingStatus
from court_lottery.repositories.unit_of_work import UnitOfWorkFactory
from court_lottery.services.lottery_service import LotteryResult, LotteryService
from court_lottery.services.usage_counter_service import UsageCounterService
from court_lottery.utils.clock import utcnow

logger = logging.getLogger(__name__)


def run_due_lotteries(service: LotteryService, target_date: date) -> List[LotteryResult]:
    """
    Execute the lottery for every slot template of ``target_date``'s weekday
    that has pending requests.

    A slot whose lottery is already running, or whose every drawn court was
    taken, is logged and skipped; the remaining slots still run.
    """
    with service.uow_factory() as uow:
        keys = [slot.key for slot in uow.time_slots.list_for_day(target_date.weekday())]

    results: List[LotteryResult] = []
    for key in keys:
        if service.get_pending_count(target_date, key) == 0:
            continue
        try:
            results.append(service.execute_lottery(target_date, key))
        except LotteryConflictError as e:
            logger.warning("Skipping lottery %s %s: %s", target_date.isoformat(), key, e.message)
        except NoActiveCourtsError as e:
            logger.error("Cannot run lottery %s %s: %s", target_date.isoformat(), key, e.message)

    logger.info(
        "run_due_lotteries %s: %d slot(s) configured, %d executed, %d booking(s) assigned",
        target_date.isoformat(), len(keys), len(results), sum(r.assigned_bookings for r in results),
    )
    return results


def complete_elapsed_bookings(uow_factory: UnitOfWorkFactory, now: Optional[datetime] = None) -> int:
    """
    Mark CONFIRMED bookings whose slot has started as COMPLETED.

    ``now`` is club wall-clock time (local time when omitted). A booking has
    elapsed when its date is before today, or it is today and its start time
    is at or before ``now``. Returns the number completed.
    """
    now = now or datetime.now()
    now_key = now.strftime("%H:%M")
    completed_at = utcnow()

    with uow_factory() as uow:
        elapsed = uow.bookings.list_elapsed_confirmed(now.date(), now_key)
        for booking in elapsed:
            booking.status = BookingStatus.COMPLETED
            booking.completed_at = completed_at
            uow.add(booking)
        uow.commit()

    if elapsed:
        logger.info("Completed %d elapsed booking(s) as of %s", len(elapsed), now.isoformat(timespec="minutes"))
    return len(elapsed)


def is_period_start(today: date, period: str) -> bool:
    """First day of a usage period: the 1st of the month, or Monday for weekly."""
    if period == RESET_PERIOD_MONTHLY:
        return today.day == 1
    if period == RESET_PERIOD_WEEKLY:
        return today.weekday() == 0
    return False


def reset_usage_counters(uow_factory: UnitOfWorkFactory, today: Optional[date] = None) -> int:
    """Zero every usage counter. Returns the number of counters reset."""
    today = today or date.today()
    with uow_factory() as uow:
        touched = UsageCounterService(uow, today_provider=lambda: today).reset_all()
        uow.commit()
    logger.info("Reset %d usage counter(s) on %s", touched, today.isoformat())
    return touched
