import pytest

from court_lottery.config import LotterySettings


def test_defaults():
    settings = LotterySettings()
    assert settings.member_base_weight == 2.0
    assert settings.non_member_base_weight == 1.0
    assert settings.usage_penalty == 0.15
    assert settings.usage_reset_period == "monthly"
    assert settings.lock_ttl_seconds == 300
    assert (settings.request_window_min_days, settings.request_window_max_days) == (2, 5)


def test_from_env(monkeypatch):
    monkeypatch.setenv("LOTTERY_MEMBER_BASE_WEIGHT", "3")
    monkeypatch.setenv("LOTTERY_USAGE_PENALTY", "0.5")
    monkeypatch.setenv("USAGE_RESET_PERIOD", " Weekly ")
    monkeypatch.setenv("LOTTERY_LOCK_TTL_SECONDS", "60")

    settings = LotterySettings.from_env()

    assert settings.member_base_weight == 3.0
    assert settings.usage_penalty == 0.5
    assert settings.usage_reset_period == "weekly"
    assert settings.lock_ttl_seconds == 60


@pytest.mark.parametrize(
    "kwargs",
    [
        {"usage_reset_period": "yearly"},
        {"member_base_weight": 0},
        {"peak_multiplier": -1},
        {"usage_penalty": -0.1},
        {"request_window_min_days": 6, "request_window_max_days": 5},
    ],
)
def test_invalid_settings_rejected(kwargs):
    with pytest.raises(ValueError):
        LotterySettings(**kwargs)
