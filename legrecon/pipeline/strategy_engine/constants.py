"""Strategy registry — single source of truth for strategy shape metadata."""

from types import MappingProxyType
from typing import Mapping

from .types import StrategyShape, StrategyType

STRATEGY_SHAPES: Mapping[StrategyType, StrategyShape] = MappingProxyType({
    # -- Four-leg structures --
    StrategyType.IRON_CONDOR:        StrategyShape(StrategyType.IRON_CONDOR,        "Iron Condor", 4),
    StrategyType.IRON_FLY:           StrategyShape(StrategyType.IRON_FLY,           "Iron Fly",    4),
    # -- Verticals --
    StrategyType.CREDIT_PUT_SPREAD:  StrategyShape(StrategyType.CREDIT_PUT_SPREAD,  "Put Spread",  2),
    StrategyType.CREDIT_CALL_SPREAD: StrategyShape(StrategyType.CREDIT_CALL_SPREAD, "Call Spread", 2),
    # -- Other shapes --
    StrategyType.BUTTERFLY:          StrategyShape(StrategyType.BUTTERFLY,          "Butterfly",   3),
    StrategyType.STRADDLE:           StrategyShape(StrategyType.STRADDLE,           "Straddle",    2),
    StrategyType.STRANGLE:           StrategyShape(StrategyType.STRANGLE,           "Strangle",    2),
    StrategyType.CUSTOM:             StrategyShape(StrategyType.CUSTOM,             "Custom",      None),
})

_missing = set(StrategyType) - set(STRATEGY_SHAPES)
if _missing:
    raise RuntimeError(f"No strategy shape registered for: {sorted(m.value for m in _missing)}")

# Standard equity option contract size
OPTION_MULTIPLIER = 100
