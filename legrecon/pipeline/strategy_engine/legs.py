"""Helpers shared by the shape-specific leg inference patterns."""

from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from .symbols import parse_option_symbol
from .types import (
    CloseSide, InferenceResult, InferredLeg, LegRecord, OpenSide, OptionIdentifier,
)

ParsedLeg = Tuple[LegRecord, OptionIdentifier]


def failure(error: str) -> InferenceResult:
    return InferenceResult(success=False, error=error)


def parse_legs(legs: Sequence[LegRecord]) -> Optional[List[ParsedLeg]]:
    """Pair every leg with its parsed symbol, or None if any symbol fails."""
    parsed = []
    for leg in legs:
        ident = parse_option_symbol(leg.symbol)
        if ident is None:
            return None
        parsed.append((leg, ident))
    return parsed


def by_strike(parsed: List[ParsedLeg]) -> List[ParsedLeg]:
    # Stable: equal strikes keep caller order
    return sorted(parsed, key=lambda p: p[1].strike)


def infer_leg(parsed: ParsedLeg, open_side: OpenSide) -> InferredLeg:
    leg, ident = parsed
    return InferredLeg(
        symbol=leg.symbol,
        entry_price=leg.entry_price,
        exit_price=leg.exit_price,
        open_side=open_side,
        option_kind=ident.kind,
        strike=ident.strike,
    )


def net_entry_credit(legs: Sequence[InferredLeg]) -> Decimal:
    """Premium received on sold legs minus premium paid on bought legs."""
    credit = Decimal("0")
    for leg in legs:
        if leg.open_side is OpenSide.SELL_TO_OPEN:
            credit += leg.entry_price
        else:
            credit -= leg.entry_price
    return credit


def compute_net_exit_debit(legs: Sequence[InferredLeg]) -> Optional[Decimal]:
    """Net cost to flatten the legs at their exit prices.

    Short legs are bought back (+exit), long legs are sold (-exit).
    None unless every leg has an exit price; a known zero is returned as 0.
    """
    if any(leg.exit_price is None for leg in legs):
        return None

    debit = Decimal("0")
    for leg in legs:
        if leg.close_side is CloseSide.BUY_TO_CLOSE:
            debit += leg.exit_price
        else:
            debit -= leg.exit_price
    return debit


def success(legs: List[InferredLeg]) -> InferenceResult:
    return InferenceResult(
        success=True,
        legs=tuple(legs),
        net_entry_credit=net_entry_credit(legs),
        net_exit_debit=compute_net_exit_debit(legs),
    )
