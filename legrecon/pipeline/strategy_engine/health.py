"""Structure health: does a trade group still have every leg its shape needs?"""

from typing import Optional

from .constants import STRATEGY_SHAPES
from .types import GroupHealth, HealthStatus, StrategyType


def expected_leg_count(strategy_type) -> Optional[int]:
    """Expected legs for a strategy tag; None for custom, unknown or missing tags."""
    st = StrategyType.parse(strategy_type)
    if st is None:
        return None
    return STRATEGY_SHAPES[st].expected_legs


def strategy_display_name(strategy_type) -> str:
    if not strategy_type:
        return "Position"
    st = StrategyType.parse(strategy_type)
    if st is None:
        return str(strategy_type)
    return STRATEGY_SHAPES[st].display_name


def compute_group_health(strategy_type, observed_legs: int) -> GroupHealth:
    expected = expected_leg_count(strategy_type)

    if expected is None:
        return GroupHealth(
            status=HealthStatus.UNKNOWN,
            reason="No expected leg count defined for this strategy type",
            expected_legs=None,
            observed_legs=observed_legs,
        )

    if observed_legs == expected:
        return GroupHealth(
            status=HealthStatus.OK,
            reason=f"All {expected} legs present",
            expected_legs=expected,
            observed_legs=observed_legs,
        )

    return GroupHealth(
        status=HealthStatus.BROKEN,
        reason=f"Expected {expected} legs, found {observed_legs} — structure broken",
        expected_legs=expected,
        observed_legs=observed_legs,
    )
