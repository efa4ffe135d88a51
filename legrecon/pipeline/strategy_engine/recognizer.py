"""Main leg-side inference dispatcher."""

from decimal import Decimal
from functools import partial
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .constants import OPTION_MULTIPLIER
from .legs import failure
from .patterns_multi import infer_iron_condor_legs
from .patterns_vertical import infer_credit_spread_legs
from .types import (
    CloseSide, InferenceResult, InferredLeg, LegRecord, OpenSide, OptionKind, StrategyType,
)

Inferrer = Callable[[List[LegRecord]], InferenceResult]

# Every StrategyType must appear here; None marks shapes without side inference.
_INFERRERS: Dict[StrategyType, Optional[Inferrer]] = {
    StrategyType.IRON_CONDOR: infer_iron_condor_legs,
    StrategyType.IRON_FLY: infer_iron_condor_legs,
    StrategyType.CREDIT_PUT_SPREAD: partial(infer_credit_spread_legs, spread_kind=OptionKind.PUT),
    StrategyType.CREDIT_CALL_SPREAD: partial(infer_credit_spread_legs, spread_kind=OptionKind.CALL),
    StrategyType.BUTTERFLY: None,
    StrategyType.STRADDLE: None,
    StrategyType.STRANGLE: None,
    StrategyType.CUSTOM: None,
}

_missing = set(StrategyType) - set(_INFERRERS)
if _missing:
    raise RuntimeError(f"No inference entry for: {sorted(m.value for m in _missing)}")


def supports_inference(strategy_type) -> bool:
    st = StrategyType.parse(strategy_type)
    return st is not None and _INFERRERS[st] is not None


def infer_leg_sides(legs: Sequence[LegRecord], strategy_type) -> InferenceResult:
    """Recover open/close sides for a group of legs from its strategy shape.

    Algorithm:
    1. Reject missing strategy type or empty legs
    2. iron_condor / iron_fly -> four-leg condor construction
    3. credit_put_spread / credit_call_spread -> vertical construction
    4. Anything else is unsupported
    """
    if not strategy_type or not legs:
        return failure("Missing strategy type or legs")

    st = StrategyType.parse(strategy_type)
    inferrer = _INFERRERS.get(st) if st is not None else None
    if inferrer is None:
        tag = strategy_type.value if isinstance(strategy_type, StrategyType) else strategy_type
        return failure(f"Unsupported strategy type: {tag}")

    return inferrer(list(legs))


def get_inferred_side(
    legs: Sequence[InferredLeg], symbol: str,
) -> Optional[Tuple[OpenSide, CloseSide]]:
    """Look up the inferred (open_side, close_side) for one leg symbol."""
    for leg in legs:
        if leg.symbol == symbol:
            return leg.open_side, leg.close_side
    return None


def compute_realized_pnl(
    result: InferenceResult, contracts: int, multiplier: int = OPTION_MULTIPLIER,
) -> Optional[Decimal]:
    """Dollar P&L of a closed structure: (entry credit - exit debit) x size.

    None when inference failed or the exit debit is not yet known.
    """
    if not result.success or result.net_exit_debit is None:
        return None
    per_share = result.net_entry_credit - result.net_exit_debit
    return per_share * abs(contracts) * multiplier
