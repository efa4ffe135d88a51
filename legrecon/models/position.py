"""
Broker position and group mapping records.

Raw broker/mapping rows are validated once (see legrecon.schemas) and their
free-form side / instrument type strings are normalized into closed enums
here, so nothing downstream re-interprets the raw text.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from legrecon.pipeline.strategy_engine import OpenSide, StrategyType, normalize_option_symbol
from legrecon.schemas import BrokerPositionPayload, MappingRowPayload


class PositionSide(str, Enum):
    LONG = "long"
    SHORT = "short"
    UNKNOWN = "unknown"


class InstrumentType(str, Enum):
    OPTION = "option"
    EQUITY = "equity"


def normalize_side(raw: Optional[str]) -> Optional[PositionSide]:
    """Only the literal "long"/"short" counts as a stated side; anything else is ignored."""
    if raw == "long":
        return PositionSide.LONG
    if raw == "short":
        return PositionSide.SHORT
    return None


def normalize_instrument_type(raw: Optional[str]) -> Optional[InstrumentType]:
    """Classify a broker instrument type string; None when it says nothing usable.

    "option" is checked first so "EQUITY_OPTION" / "Equity Option" are options.
    """
    if not raw:
        return None
    text = raw.lower()
    if "option" in text:
        return InstrumentType.OPTION
    if "equity" in text or "stock" in text:
        return InstrumentType.EQUITY
    return None


def normalize_leg_side(raw: Optional[str]) -> Optional[OpenSide]:
    """Map a stored leg-side hint ("sell_to_open", "short", "STO", ...) to OpenSide."""
    if not raw:
        return None
    text = raw.strip().lower().replace("-", "_").replace(" ", "_")
    if text in ("sell_to_open", "sto", "short", "sell"):
        return OpenSide.SELL_TO_OPEN
    if text in ("buy_to_open", "bto", "long", "buy"):
        return OpenSide.BUY_TO_OPEN
    return None


@dataclass(frozen=True)
class BrokerPosition:
    """A broker-reported position, normalized at the boundary."""
    symbol: str
    quantity: int               # Signed; negative for short when the broker says so
    cost_basis: Decimal         # Signed; secondary side signal only
    side: Optional[PositionSide] = None
    instrument_type: Optional[InstrumentType] = None

    @classmethod
    def from_payload(cls, payload: BrokerPositionPayload) -> "BrokerPosition":
        return cls(
            symbol=normalize_option_symbol(payload.symbol),
            quantity=payload.quantity,
            cost_basis=payload.cost_basis,
            side=normalize_side(payload.side),
            instrument_type=normalize_instrument_type(payload.instrument_type),
        )

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "BrokerPosition":
        """Validate and normalize a raw broker dict (raises pydantic.ValidationError)."""
        return cls.from_payload(BrokerPositionPayload.model_validate(raw))


@dataclass(frozen=True)
class GroupMapping:
    """One symbol's entry in the trade group mapping snapshot."""
    symbol: str
    trade_group_id: str
    strategy_type: Optional[StrategyType] = None
    strategy_label: Optional[str] = None    # Raw tag as stored, kept for display
    strategy_name: Optional[str] = None
    entry_credit: Optional[Decimal] = None  # Group-level, dollars
    entry_price: Optional[Decimal] = None   # Per-leg, per share
    exit_price: Optional[Decimal] = None
    expiration: Optional[date] = None
    leg_side: Optional[OpenSide] = None

    @classmethod
    def from_payload(cls, payload: MappingRowPayload) -> "GroupMapping":
        return cls(
            symbol=normalize_option_symbol(payload.symbol),
            trade_group_id=payload.trade_group_id,
            strategy_type=StrategyType.parse(payload.strategy_type),
            strategy_label=payload.strategy_type,
            strategy_name=payload.strategy_name,
            entry_credit=payload.entry_credit,
            entry_price=payload.entry_price,
            exit_price=payload.exit_price,
            expiration=payload.expiration,
            leg_side=normalize_leg_side(payload.leg_side),
        )

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "GroupMapping":
        return cls.from_payload(MappingRowPayload.model_validate(raw))
