"""OCC-style option symbol parsing.

Format: ROOT (uppercase letters) + YYMMDD + C/P + 8-digit strike * 1000
Example: SPY260115C00693000 -> SPY, 2026-01-15, Call, 693.000
"""

import re
from datetime import date
from decimal import Decimal
from typing import Optional

from .types import OptionIdentifier, OptionKind

_OCC_PATTERN = re.compile(r"([A-Z]+)([0-9]{6})([CP])([0-9]{8})")


def parse_option_symbol(symbol) -> Optional[OptionIdentifier]:
    """Decode an option symbol, or return None if it is not one.

    None is the normal answer for equities and malformed input; callers use
    it to tell options from stock. The date digits are matched structurally
    only, so a calendar-invalid expiry (e.g. "300230") still parses with
    ``expiry`` left as None.
    """
    if not isinstance(symbol, str):
        return None
    match = _OCC_PATTERN.fullmatch(symbol)
    if not match:
        return None

    root, date_str, kind, strike_str = match.groups()

    try:
        expiry = date(2000 + int(date_str[:2]), int(date_str[2:4]), int(date_str[4:6]))
    except ValueError:
        expiry = None

    return OptionIdentifier(
        root=root,
        expiry_digits=date_str,
        expiry=expiry,
        kind=OptionKind(kind),
        strike=Decimal(int(strike_str)) / 1000,
    )


def is_option_symbol(symbol) -> bool:
    return parse_option_symbol(symbol) is not None


def normalize_option_symbol(symbol: str) -> str:
    """Strip broker padding ("SPY   260115C00693000") from an option symbol.

    Symbols that still don't parse once compacted are returned unchanged.
    """
    compact = symbol.replace(" ", "")
    if compact != symbol and is_option_symbol(compact):
        return compact
    return symbol


def build_option_symbol(root: str, expiry: date, kind: OptionKind, strike) -> str:
    """Render the canonical symbol for (root, expiry, kind, strike)."""
    scaled = Decimal(str(strike)) * 1000
    if scaled != scaled.to_integral_value() or scaled < 0:
        raise ValueError(f"Strike {strike} is not a non-negative multiple of 0.001")
    return f"{root}{expiry:%y%m%d}{OptionKind(kind).value}{int(scaled):08d}"
