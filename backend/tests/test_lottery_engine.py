"""
Tests for the weighted draw: ordering, determinism, bias toward low usage.
"""
import random

import pytest

from court_lottery.config import LotterySettings
from court_lottery.errors import WeightPolicyError
from court_lottery.models import BookingRequest, Court, UserType
from court_lottery.services.lottery_engine import LotteryEngine, make_rng, pick_index
from court_lottery.services.weight_calculator import WeightCalculator
from tests.helpers import LOTTERY_DAY, SLOT, ScriptedRandom


def _request(request_id: int, weight: float, user_id: int = None) -> BookingRequest:
    return BookingRequest(
        id=request_id,
        user_id=user_id or request_id,
        date=LOTTERY_DAY,
        time_slot=SLOT,
        number_of_players=2,
        weight=weight,
    )


def _court(court_id: int) -> Court:
    return Court(id=court_id, name=f"Court {court_id}")


def _order(pairs):
    return [(p.request.id, p.court.id) for p in pairs]


class TestPickIndex:
    def test_first_bucket(self):
        assert pick_index([3.0, 1.0, 1.0], ScriptedRandom([0.0])) == 0

    def test_second_bucket(self):
        # u = 0.7 * 5 = 3.5 falls in [3, 4)
        assert pick_index([3.0, 1.0, 1.0], ScriptedRandom([0.7])) == 1

    def test_top_of_range_lands_on_last(self):
        assert pick_index([3.0, 1.0, 1.0], ScriptedRandom([0.999999])) == 2


class TestDraw:
    def test_weights_3_1_1_two_courts_exact_order(self):
        """Scripted draws 0.5 then 0.9 over weights [3, 1, 1] and two courts.

        Round 1: u = 2.5 of 5 -> request 1 -> court 1
        Round 2: u = 1.8 of 2 over requests [2, 3] -> request 3 -> court 2
        """
        requests = [_request(1, 3.0), _request(2, 1.0), _request(3, 1.0)]
        courts = [_court(1), _court(2)]

        pairs = LotteryEngine(ScriptedRandom([0.5, 0.9])).draw(requests, courts)

        assert _order(pairs) == [(1, 1), (3, 2)]
        assert [p.position for p in pairs] == [1, 2]

    def test_input_order_does_not_matter(self):
        requests = [_request(3, 1.0), _request(1, 3.0), _request(2, 1.0)]
        courts = [_court(2), _court(1)]

        pairs = LotteryEngine(ScriptedRandom([0.5, 0.9])).draw(requests, courts)

        assert _order(pairs) == [(1, 1), (3, 2)]

    def test_same_seed_same_assignment(self):
        requests = [_request(i, w) for i, w in [(1, 3.0), (2, 1.0), (3, 1.0), (4, 2.0)]]
        courts = [_court(1), _court(2)]

        first = LotteryEngine(random.Random(20260304)).draw(requests, courts)
        second = LotteryEngine(random.Random(20260304)).draw(requests, courts)

        assert _order(first) == _order(second)

    def test_seed_42_exact_order(self):
        """random.Random(42) yields 0.6394... then 0.0250...

        Round 1: u = 3.197 of 5 falls in [3, 4) -> request 2 -> court 1
        Round 2: u = 0.100 of 4 over requests [1, 3] -> request 1 -> court 2
        """
        requests = [_request(1, 3.0), _request(2, 1.0), _request(3, 1.0)]
        courts = [_court(1), _court(2)]

        rng, seed = make_rng(42)
        pairs = LotteryEngine(rng).draw(requests, courts)

        assert seed == 42
        assert _order(pairs) == [(2, 1), (1, 2)]

    def test_make_rng_replays_recorded_seed(self):
        requests = [_request(i, 1.0 + i) for i in range(1, 6)]
        courts = [_court(1), _court(2), _court(3)]

        rng, seed = make_rng()
        original = LotteryEngine(rng).draw(requests, courts)
        replay_rng, replay_seed = make_rng(seed)
        replay = LotteryEngine(replay_rng).draw(requests, courts)

        assert replay_seed == seed
        assert _order(original) == _order(replay)

    def test_more_courts_than_requests_assigns_everyone(self):
        requests = [_request(1, 1.0), _request(2, 1.0)]
        courts = [_court(1), _court(2), _court(3)]

        pairs = LotteryEngine(random.Random(7)).draw(requests, courts)

        assert sorted(p.request.id for p in pairs) == [1, 2]
        assert [p.court.id for p in pairs] == [1, 2]

    def test_no_courts_no_pairs(self):
        assert LotteryEngine(random.Random(1)).draw([_request(1, 1.0)], []) == []

    def test_no_requests_no_pairs(self):
        assert LotteryEngine(random.Random(1)).draw([], [_court(1)]) == []

    def test_each_request_and_court_used_once(self):
        requests = [_request(i, float(i)) for i in range(1, 9)]
        courts = [_court(i) for i in range(1, 5)]

        pairs = LotteryEngine(random.Random(99)).draw(requests, courts)

        assert len(pairs) == 4
        assert len({p.request.id for p in pairs}) == 4
        assert len({p.court.id for p in pairs}) == 4

    @pytest.mark.parametrize("bad", [0.0, -1.0, None, float("nan"), float("inf")])
    def test_invalid_weight_rejected(self, bad):
        with pytest.raises(WeightPolicyError):
            LotteryEngine(random.Random(1)).draw([_request(1, 1.0), _request(2, bad)], [_court(1)])


def test_lower_usage_wins_more_often():
    """With one court, the user with fewer recent bookings should win more draws."""
    calculator = WeightCalculator(LotterySettings())
    low = calculator.weight_for(UserType.MEMBER, 0)
    high = calculator.weight_for(UserType.MEMBER, 5)
    requests = [_request(1, low), _request(2, high)]
    courts = [_court(1)]

    wins = {1: 0, 2: 0}
    for seed in range(2000):
        pairs = LotteryEngine(random.Random(seed)).draw(requests, courts)
        wins[pairs[0].request.id] += 1

    assert wins[1] > wins[2]
    # Expected share is low / (low + high), about 0.64
    assert 0.55 < wins[1] / 2000 < 0.72
