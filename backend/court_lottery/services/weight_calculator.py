"""
Draw weights.

    weight = base(user type) * slot_multiplier(slot type) * curve(usage_count)

The default curve is ``1 / (1 + penalty * usage_count)``: strictly positive
and strictly decreasing while penalty > 0, so every recent allocation makes
the next one less likely. Members start from a higher base than
non-members. Any other curve can be injected; it is checked at use.
"""
import math
from typing import Callable, Optional

from court_lottery.config import LotterySettings, get_settings
from court_lottery.errors import WeightPolicyError
from court_lottery.models.booking_request import BookingRequest
from court_lottery.models.time_slot import TimeSlotType
from court_lottery.models.user import User, UserType

UsageCurve = Callable[[int], float]


def inverse_usage_curve(penalty: float) -> UsageCurve:
    def _curve(usage_count: int) -> float:
        return 1.0 / (1.0 + penalty * max(usage_count, 0))

    return _curve


class WeightCalculator:
    def __init__(self, settings: Optional[LotterySettings] = None, curve: Optional[UsageCurve] = None):
        self.settings = settings or get_settings()
        self.curve = curve or inverse_usage_curve(self.settings.usage_penalty)

    def base_weight(self, user_type) -> float:
        if user_type == UserType.MEMBER:
            return self.settings.member_base_weight
        return self.settings.non_member_base_weight

    def slot_multiplier(self, slot_type) -> float:
        if slot_type == TimeSlotType.PEAK:
            return self.settings.peak_multiplier
        if slot_type == TimeSlotType.OFF_PEAK:
            return self.settings.off_peak_multiplier
        return 1.0

    def weight_for(self, user_type, usage_count: int, slot_type=None) -> float:
        weight = self.base_weight(user_type) * self.slot_multiplier(slot_type) * self.curve(usage_count)
        if not math.isfinite(weight) or weight <= 0:
            raise WeightPolicyError(f"Weight curve produced {weight!r} for usage_count={usage_count}")
        return weight

    def compute_weight(
        self,
        user: User,
        request: BookingRequest,
        slot_type=None,
        usage_count: Optional[int] = None,
    ) -> float:
        """
        Weight for ``request`` made by ``user``.

        ``usage_count`` should come from the usage counter after its reset
        check; when omitted the cached ``user.usage_count`` is used.
        """
        if request.user_id is not None and user.id is not None and request.user_id != user.id:
            raise WeightPolicyError(f"Request {request.id} does not belong to user {user.id}")
        count = user.usage_count if usage_count is None else usage_count
        return self.weight_for(user.type, count, slot_type)
