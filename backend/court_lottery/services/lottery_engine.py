"""
Weighted lottery draw.

Weighted sampling without replacement: each round picks one remaining
request with probability weight / sum(remaining weights) by inverse-CDF
over the cumulative weights, removes it, and gives it the next unused
court. Stops when either requests or courts run out.

Determinism:
- requests are ordered by id and courts by id before drawing, so the draw
  depends only on the inputs and the random source, never on query order
- the random source is injected; production builds one from a fresh
  64-bit seed (see make_rng) and records the seed with the run

No database access and no side effects.
"""
import math
import random
import secrets
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

from court_lottery.errors import WeightPolicyError
from court_lottery.models.booking_request import BookingRequest
from court_lottery.models.court import Court


class RandomSource(Protocol):
    def random(self) -> float: ...


@dataclass(frozen=True)
class DrawPair:
    request: BookingRequest
    court: Court
    position: int  # 1-based order in which the request was drawn


def make_rng(seed: Optional[int] = None) -> Tuple[random.Random, int]:
    """Seeded generator for one draw. A fresh unpredictable seed is used when none is given."""
    if seed is None:
        seed = secrets.randbits(64)
    return random.Random(seed), seed


def pick_index(weights: Sequence[float], rng: RandomSource) -> int:
    """Index i with probability weights[i] / sum(weights)."""
    total = math.fsum(weights)
    u = rng.random() * total
    cumulative = 0.0
    for i, w in enumerate(weights):
        cumulative += w
        if u < cumulative:
            return i
    # Float rounding can leave u == total; the last entry absorbs it
    return len(weights) - 1


class LotteryEngine:
    def __init__(self, rng: RandomSource):
        self.rng = rng

    @staticmethod
    def _check_weight(request: BookingRequest) -> float:
        w = request.weight
        if w is None or not math.isfinite(w) or w <= 0:
            raise WeightPolicyError(f"Request {request.id} has invalid weight {w!r}; weights must be > 0")
        return float(w)

    def draw(self, requests: Sequence[BookingRequest], courts: Sequence[Court]) -> List[DrawPair]:
        """
        Draw an assignment order for one (date, time_slot).

        Args:
            requests: pending requests, each with ``weight`` already set (> 0)
            courts: free active courts for the slot

        Returns:
            min(len(requests), len(courts)) pairs in draw order. Court n goes
            to the n-th drawn request.
        """
        pool = sorted(requests, key=lambda r: r.id)
        weights = [self._check_weight(r) for r in pool]
        supply = sorted(courts, key=lambda c: c.id)

        pairs: List[DrawPair] = []
        for court in supply:
            if not pool:
                break
            idx = pick_index(weights, self.rng)
            chosen = pool.pop(idx)
            weights.pop(idx)
            pairs.append(DrawPair(request=chosen, court=court, position=len(pairs) + 1))
        return pairs
