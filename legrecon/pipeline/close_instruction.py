"""
Close-Instruction Engine — the order (side + size) that flattens one position.

Public API:
    get_close_instruction(position, symbol) -> CloseInstruction | CloseInstructionError
    get_close_instructions(positions)       -> List[...]   (one per position)

Truth table (first decisive signal wins):
    side:       stated "long"/"short" -> sign of quantity -> sign of cost basis
    instrument: stated type containing option/equity/stock -> symbol parses as option

When side stays unknown or quantity is zero the engine refuses and returns a
CloseInstructionError; it never guesses a side.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional, Union

from legrecon.models.position import BrokerPosition, InstrumentType, PositionSide
from legrecon.pipeline.strategy_engine import CloseSide, is_option_symbol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CloseInstruction:
    instrument_type: InstrumentType
    position_side: PositionSide     # LONG or SHORT, never UNKNOWN
    close_side: CloseSide
    close_quantity: int             # Always > 0
    ok: bool = True


@dataclass(frozen=True)
class CloseInstructionError:
    instrument_type: InstrumentType
    position_side: PositionSide
    quantity: int
    cost_basis: Decimal
    error: str
    ok: bool = False


CloseResult = Union[CloseInstruction, CloseInstructionError]

_CLOSE_SIDES = {
    (InstrumentType.OPTION, PositionSide.SHORT): CloseSide.BUY_TO_CLOSE,
    (InstrumentType.OPTION, PositionSide.LONG): CloseSide.SELL_TO_CLOSE,
    (InstrumentType.EQUITY, PositionSide.SHORT): CloseSide.BUY_TO_COVER,
    (InstrumentType.EQUITY, PositionSide.LONG): CloseSide.SELL,
}


def infer_side(position: BrokerPosition, quantity: int) -> PositionSide:
    """Side from the broker's stated side, else from the sign of quantity."""
    if position.side in (PositionSide.LONG, PositionSide.SHORT):
        return position.side
    if quantity < 0:
        return PositionSide.SHORT
    if quantity > 0:
        return PositionSide.LONG
    return PositionSide.UNKNOWN


def infer_side_from_cost_basis(cost_basis: Decimal) -> PositionSide:
    """Negative cost basis reads as a credit (short), positive as a debit (long)."""
    if cost_basis < 0:
        return PositionSide.SHORT
    if cost_basis > 0:
        return PositionSide.LONG
    return PositionSide.UNKNOWN


def detect_instrument_type(position: BrokerPosition, symbol: str) -> InstrumentType:
    if position.instrument_type is not None:
        return position.instrument_type
    return InstrumentType.OPTION if is_option_symbol(symbol) else InstrumentType.EQUITY


def _as_position(
    position: Union[BrokerPosition, Mapping[str, Any]], symbol: Optional[str] = None,
) -> BrokerPosition:
    if isinstance(position, BrokerPosition):
        return position
    raw = dict(position)
    if raw.get("symbol") is None and symbol:
        raw["symbol"] = symbol
    return BrokerPosition.from_raw(raw)


def get_close_instruction(
    position: Union[BrokerPosition, Mapping[str, Any]],
    symbol: Optional[str] = None,
) -> CloseResult:
    """Classify how to close ``position``; no order is submitted.

    ``symbol`` defaults to the position's own symbol, and fills a raw
    position that carries none.
    """
    position = _as_position(position, symbol)
    symbol = symbol or position.symbol
    qty = position.quantity
    cost_basis = position.cost_basis
    instrument_type = detect_instrument_type(position, symbol)

    side = infer_side(position, qty)
    if side is PositionSide.UNKNOWN:
        side = infer_side_from_cost_basis(cost_basis)

    if side is PositionSide.UNKNOWN or qty == 0:
        logger.debug(
            "Refusing close for %s: side=%s quantity=%s cost_basis=%s",
            symbol, side.value, qty, cost_basis,
        )
        return CloseInstructionError(
            instrument_type=instrument_type,
            position_side=side,
            quantity=qty,
            cost_basis=cost_basis,
            error=f"Unable to determine reliable side/size for {symbol}",
        )

    return CloseInstruction(
        instrument_type=instrument_type,
        position_side=side,
        close_side=_CLOSE_SIDES[(instrument_type, side)],
        close_quantity=abs(qty),
    )


def get_close_instructions(
    positions: Iterable[Union[BrokerPosition, Mapping[str, Any]]],
) -> List[CloseResult]:
    """Batch form; each position is classified independently, in input order."""
    return [get_close_instruction(p) for p in positions]
