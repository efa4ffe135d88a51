"""Data types for the strategy engine."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


class OptionKind(str, Enum):
    CALL = "C"
    PUT = "P"


class OpenSide(str, Enum):
    SELL_TO_OPEN = "sell_to_open"
    BUY_TO_OPEN = "buy_to_open"

    @property
    def close_side(self) -> "CloseSide":
        """The order action that neutralizes a leg opened on this side."""
        if self is OpenSide.SELL_TO_OPEN:
            return CloseSide.BUY_TO_CLOSE
        return CloseSide.SELL_TO_CLOSE


class CloseSide(str, Enum):
    BUY_TO_CLOSE = "buy_to_close"
    SELL_TO_CLOSE = "sell_to_close"
    BUY_TO_COVER = "buy_to_cover"
    SELL = "sell"


class StrategyType(str, Enum):
    """Closed set of strategy tags used by the grouping store."""
    IRON_CONDOR = "iron_condor"
    IRON_FLY = "iron_fly"
    CREDIT_PUT_SPREAD = "credit_put_spread"
    CREDIT_CALL_SPREAD = "credit_call_spread"
    BUTTERFLY = "butterfly"
    STRADDLE = "straddle"
    STRANGLE = "strangle"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value) -> Optional["StrategyType"]:
        """Exact tag lookup; None when blank or unknown ("IRON_CONDOR" is unknown)."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class HealthStatus(str, Enum):
    OK = "ok"
    BROKEN = "broken"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class OptionIdentifier:
    """Structural fields decoded from an OCC-style option symbol."""
    root: str
    expiry_digits: str          # Raw YYMMDD
    expiry: Optional[date]      # None when the digits are not a real calendar date
    kind: OptionKind
    strike: Decimal


def as_decimal(value) -> Decimal:
    """Coerce a price/amount to Decimal without picking up float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class LegRecord:
    """One leg's economics as known to the caller, side not yet assigned."""
    symbol: str
    entry_price: Decimal
    exit_price: Optional[Decimal] = None

    def __post_init__(self):
        object.__setattr__(self, "entry_price", as_decimal(self.entry_price))
        if self.exit_price is not None:
            object.__setattr__(self, "exit_price", as_decimal(self.exit_price))


@dataclass(frozen=True)
class InferredLeg:
    """A LegRecord with its side recovered from the strategy shape."""
    symbol: str
    entry_price: Decimal
    exit_price: Optional[Decimal]
    open_side: OpenSide
    option_kind: OptionKind
    strike: Decimal

    @property
    def close_side(self) -> CloseSide:
        return self.open_side.close_side


@dataclass(frozen=True)
class InferenceResult:
    success: bool
    legs: Tuple[InferredLeg, ...] = ()
    net_entry_credit: Decimal = Decimal("0")
    net_exit_debit: Optional[Decimal] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class StrategyShape:
    """Registry entry defining a strategy's structural metadata."""
    strategy_type: StrategyType
    display_name: str
    expected_legs: Optional[int]    # None when the structure is open-ended


@dataclass(frozen=True)
class GroupHealth:
    status: HealthStatus
    reason: str
    expected_legs: Optional[int]
    observed_legs: int
