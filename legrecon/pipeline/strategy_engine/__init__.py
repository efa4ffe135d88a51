"""Strategy Engine — leg-side inference and structure health for trade groups.

Public API:
    parse_option_symbol(symbol) -> Optional[OptionIdentifier]
    infer_leg_sides(legs, strategy_type) -> InferenceResult
    compute_group_health(strategy_type, observed_legs) -> GroupHealth
"""

from .constants import OPTION_MULTIPLIER, STRATEGY_SHAPES
from .health import compute_group_health, expected_leg_count, strategy_display_name
from .legs import compute_net_exit_debit
from .recognizer import compute_realized_pnl, get_inferred_side, infer_leg_sides, supports_inference
from .symbols import build_option_symbol, is_option_symbol, normalize_option_symbol, parse_option_symbol
from .types import (
    CloseSide, GroupHealth, HealthStatus, InferenceResult, InferredLeg, LegRecord,
    OpenSide, OptionIdentifier, OptionKind, StrategyShape, StrategyType,
)

__all__ = [
    "parse_option_symbol", "is_option_symbol", "normalize_option_symbol", "build_option_symbol",
    "infer_leg_sides", "supports_inference", "get_inferred_side", "compute_net_exit_debit",
    "compute_realized_pnl", "compute_group_health", "expected_leg_count", "strategy_display_name",
    "STRATEGY_SHAPES", "OPTION_MULTIPLIER",
    "CloseSide", "GroupHealth", "HealthStatus", "InferenceResult", "InferredLeg", "LegRecord",
    "OpenSide", "OptionIdentifier", "OptionKind", "StrategyShape", "StrategyType",
]
