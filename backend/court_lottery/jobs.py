"""
Command-line entry point for the scheduled jobs.

Meant to be run from cron or a systemd timer:

    court-lottery-jobs daily            # once a day, shortly after midnight
    court-lottery-jobs complete         # hourly
    court-lottery-jobs lotteries --date 2026-03-04
    court-lottery-jobs reset-usage

``daily`` completes elapsed bookings, resets usage counters on the first
day of a period, then draws every slot of the date whose request window
has just closed (today + REQUEST_WINDOW_MIN_DAYS).
"""
import argparse
import logging
import os
import sys
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Sequence

from court_lottery.config import get_settings
from court_lottery.database import init_db, make_session_factory
from court_lottery.repositories.unit_of_work import UnitOfWorkFactory, make_uow_factory
from court_lottery.services.lottery_service import LotteryService
from court_lottery.services.maintenance import (
    complete_elapsed_bookings,
    is_period_start,
    reset_usage_counters,
    run_due_lotteries,
)

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got '{value}'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="court-lottery-jobs", description="Court lottery scheduled jobs")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("daily", help="complete bookings, reset counters if due, run due lotteries")
    lotteries = sub.add_parser("lotteries", help="run every lottery with pending requests for a date")
    lotteries.add_argument("--date", type=_parse_date, default=None, help="defaults to the date whose window just closed")
    sub.add_parser("complete", help="mark elapsed CONFIRMED bookings COMPLETED")
    sub.add_parser("reset-usage", help="zero every usage counter now")
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    uow_factory: Optional[UnitOfWorkFactory] = None,
    today_provider: Callable[[], date] = date.today,
    now_provider: Callable[[], datetime] = datetime.now,
) -> int:
    args = build_parser().parse_args(argv)
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    if uow_factory is None:
        init_db()
        uow_factory = make_uow_factory(make_session_factory())

    settings = get_settings()
    today = today_provider()
    due_date = today + timedelta(days=settings.request_window_min_days)

    if args.command in ("daily", "complete"):
        complete_elapsed_bookings(uow_factory, now_provider())

    if args.command == "reset-usage" or (
        args.command == "daily" and is_period_start(today, settings.usage_reset_period)
    ):
        reset_usage_counters(uow_factory, today)

    if args.command in ("daily", "lotteries"):
        target = getattr(args, "date", None) or due_date
        service = LotteryService(uow_factory, settings, today_provider=lambda: today)
        results = run_due_lotteries(service, target)
        for result in results:
            print(
                f"{result.date.isoformat()} {result.time_slot}: "
                f"{result.assigned_bookings}/{result.total_requests} assigned (seed {result.seed})"
            )

    return 0


if __name__ == "__main__":
    sys.exit(main())
