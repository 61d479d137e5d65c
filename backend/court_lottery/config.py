"""
Lottery policy settings.

All values come from the environment (a .env file is honoured) so the
weighting curve, booking windows and lock lifetime can be tuned per club
without code changes.
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

RESET_PERIOD_MONTHLY = "monthly"
RESET_PERIOD_WEEKLY = "weekly"
RESET_PERIOD_NONE = "none"

VALID_RESET_PERIODS = (RESET_PERIOD_MONTHLY, RESET_PERIOD_WEEKLY, RESET_PERIOD_NONE)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


@dataclass(frozen=True)
class LotterySettings:
    member_base_weight: float = 2.0
    non_member_base_weight: float = 1.0
    usage_penalty: float = 0.15
    peak_multiplier: float = 1.0
    off_peak_multiplier: float = 1.0
    usage_reset_period: str = RESET_PERIOD_MONTHLY
    lock_ttl_seconds: int = 300
    request_window_min_days: int = 2
    request_window_max_days: int = 5

    def __post_init__(self):
        if self.usage_reset_period not in VALID_RESET_PERIODS:
            raise ValueError(
                f"usage_reset_period must be one of {VALID_RESET_PERIODS}, got '{self.usage_reset_period}'"
            )
        if self.member_base_weight <= 0 or self.non_member_base_weight <= 0:
            raise ValueError("base weights must be > 0")
        if self.peak_multiplier <= 0 or self.off_peak_multiplier <= 0:
            raise ValueError("slot multipliers must be > 0")
        if self.usage_penalty < 0:
            raise ValueError("usage_penalty must be >= 0")
        if self.request_window_min_days > self.request_window_max_days:
            raise ValueError("request_window_min_days must be <= request_window_max_days")

    @classmethod
    def from_env(cls) -> "LotterySettings":
        return cls(
            member_base_weight=_env_float("LOTTERY_MEMBER_BASE_WEIGHT", 2.0),
            non_member_base_weight=_env_float("LOTTERY_NON_MEMBER_BASE_WEIGHT", 1.0),
            usage_penalty=_env_float("LOTTERY_USAGE_PENALTY", 0.15),
            peak_multiplier=_env_float("LOTTERY_PEAK_MULTIPLIER", 1.0),
            off_peak_multiplier=_env_float("LOTTERY_OFF_PEAK_MULTIPLIER", 1.0),
            usage_reset_period=os.getenv("USAGE_RESET_PERIOD", RESET_PERIOD_MONTHLY).strip().lower(),
            lock_ttl_seconds=_env_int("LOTTERY_LOCK_TTL_SECONDS", 300),
            request_window_min_days=_env_int("REQUEST_WINDOW_MIN_DAYS", 2),
            request_window_max_days=_env_int("REQUEST_WINDOW_MAX_DAYS", 5),
        )


def get_settings() -> LotterySettings:
    """Settings as currently configured in the environment."""
    return LotterySettings.from_env()
