"""Four-leg patterns: Iron Condor (and Iron Fly, which shares its construction)."""

import logging
from typing import List

from .legs import by_strike, failure, infer_leg, parse_legs, success
from .types import InferenceResult, LegRecord, OpenSide, OptionKind

logger = logging.getLogger(__name__)


def infer_iron_condor_legs(legs: List[LegRecord]) -> InferenceResult:
    """Assign sides to the four legs of a short iron condor.

    Construction is fixed, not read from the data:
    - Calls: lower strike = sell to open, higher strike = buy to open
    - Puts:  higher strike = sell to open, lower strike = buy to open
    Reversed (debit) condors are not detected.

    Legs come back ordered low call, high call, low put, high put.
    """
    if len(legs) != 4:
        return failure(f"Expected 4 legs for iron condor, got {len(legs)}")

    parsed = parse_legs(legs)
    if parsed is None:
        return failure("Could not parse all leg symbols")

    calls = [p for p in parsed if p[1].kind is OptionKind.CALL]
    puts = [p for p in parsed if p[1].kind is OptionKind.PUT]

    if len(calls) != 2 or len(puts) != 2:
        return failure(
            f"Expected 2 calls and 2 puts, got {len(calls)} calls and {len(puts)} puts"
        )

    short_call, long_call = by_strike(calls)
    long_put, short_put = by_strike(puts)

    inferred = [
        infer_leg(short_call, OpenSide.SELL_TO_OPEN),
        infer_leg(long_call, OpenSide.BUY_TO_OPEN),
        infer_leg(long_put, OpenSide.BUY_TO_OPEN),
        infer_leg(short_put, OpenSide.SELL_TO_OPEN),
    ]
    logger.debug(
        "Iron condor inferred: short call %s / long call %s / long put %s / short put %s",
        short_call[1].strike, long_call[1].strike, long_put[1].strike, short_put[1].strike,
    )
    return success(inferred)
