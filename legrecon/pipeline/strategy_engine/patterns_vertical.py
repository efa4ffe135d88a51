"""Vertical credit spread patterns (2-leg, same option type)."""

import logging
from typing import List

from .legs import by_strike, failure, infer_leg, parse_legs, success
from .types import InferenceResult, LegRecord, OpenSide, OptionKind

logger = logging.getLogger(__name__)


def infer_credit_spread_legs(legs: List[LegRecord], spread_kind: OptionKind) -> InferenceResult:
    """Assign sides to the two legs of a credit spread.

    Credit call spread: sell the lower strike, buy the higher strike.
    Credit put spread:  sell the higher strike, buy the lower strike.

    Each leg keeps the option kind parsed from its own symbol; it is not
    forced to match ``spread_kind``. A mismatch is only logged.
    """
    if len(legs) != 2:
        return failure(f"Expected 2 legs for credit spread, got {len(legs)}")

    parsed = parse_legs(legs)
    if parsed is None:
        return failure("Could not parse all leg symbols")

    low, high = by_strike(parsed)

    if spread_kind is OptionKind.CALL:
        inferred = [infer_leg(low, OpenSide.SELL_TO_OPEN), infer_leg(high, OpenSide.BUY_TO_OPEN)]
    else:
        inferred = [infer_leg(low, OpenSide.BUY_TO_OPEN), infer_leg(high, OpenSide.SELL_TO_OPEN)]

    mismatched = [leg.symbol for leg in inferred if leg.option_kind is not spread_kind]
    if mismatched:
        logger.warning(
            "Credit %s spread contains legs of the other kind: %s",
            "call" if spread_kind is OptionKind.CALL else "put", ", ".join(mismatched),
        )

    return success(inferred)
