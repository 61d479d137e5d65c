import os
from pathlib import Path
from typing import Callable, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./court_lottery.db")

_is_sqlite = DATABASE_URL.startswith("sqlite")
_connect_args = {"check_same_thread": False} if _is_sqlite else {}
_echo = os.getenv("SQL_ECHO", "false").lower() in ("true", "1", "yes")

if _is_sqlite and ":memory:" not in DATABASE_URL:
    db_path = DATABASE_URL.replace("sqlite:///", "", 1)
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

engine: Engine = create_engine(
    DATABASE_URL,
    echo=_echo,
    connect_args=_connect_args,
)

SessionFactory = Callable[[], Session]


def make_session_factory(bind: Optional[Engine] = None) -> SessionFactory:
    """Return a zero-arg callable that opens a new Session on ``bind``."""
    target = bind if bind is not None else engine

    def _factory() -> Session:
        # Keep loaded attributes readable after commit; results outlive the session
        return Session(target, expire_on_commit=False)

    return _factory


def init_db(bind: Optional[Engine] = None) -> None:
    """Initialize database - create all tables"""
    # Import all models to ensure they're registered with SQLModel metadata
    from court_lottery.models.booking import Booking  # noqa: F401
    from court_lottery.models.booking_request import BookingRequest  # noqa: F401
    from court_lottery.models.court import Court  # noqa: F401
    from court_lottery.models.lottery_lock import LotteryLock  # noqa: F401
    from court_lottery.models.lottery_run import LotteryRun  # noqa: F401
    from court_lottery.models.time_slot import TimeSlot  # noqa: F401
    from court_lottery.models.usage_counter import UsageCounter  # noqa: F401
    from court_lottery.models.user import User  # noqa: F401

    SQLModel.metadata.create_all(bind if bind is not None else engine)


def dispose_engine() -> None:
    """Close pooled connections (application shutdown)."""
    engine.dispose()
