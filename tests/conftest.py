"""
Shared pytest fixtures and factory helpers for legrecon tests.

Everything under test is pure; no database or broker connection is needed.
"""

import pytest
from datetime import date
from decimal import Decimal

from legrecon.config import Settings
from legrecon.models.position import BrokerPosition, GroupMapping
from legrecon.pipeline.strategy_engine import LegRecord, OptionKind, build_option_symbol
from legrecon.services.close_service import ClosePlanner


# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings():
    return Settings(allow_broken_close=False, option_multiplier=100, log_level="DEBUG")


@pytest.fixture
def planner(settings):
    return ClosePlanner(settings)


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------

def occ(kind, strike, root="SPY", expiry=date(2026, 1, 15)):
    """Build an option symbol, e.g. occ("C", 440) -> "SPY260115C00440000"."""
    return build_option_symbol(root, expiry, OptionKind(kind), strike)


def leg(kind, strike, entry, exit=None, root="SPY"):
    return LegRecord(symbol=occ(kind, strike, root=root), entry_price=entry, exit_price=exit)


def make_broker_position(
    *,
    symbol="SPY260115C00440000",
    quantity=-1,
    cost_basis=-120.0,
    side=None,
    instrument_type=None,
):
    """Build a raw broker position dict (what the account API hands us)."""
    raw = {"symbol": symbol, "quantity": quantity, "cost_basis": cost_basis}
    if side is not None:
        raw["side"] = side
    if instrument_type is not None:
        raw["instrument_type"] = instrument_type
    return raw


def make_position(**kwargs) -> BrokerPosition:
    return BrokerPosition.from_raw(make_broker_position(**kwargs))


def make_mapping_row(
    *,
    symbol="SPY260115C00440000",
    trade_group_id="grp-1",
    strategy_type="iron_condor",
    strategy_name="SPY IC",
    entry_credit=None,
    entry_price=None,
    exit_price=None,
    expiration="2026-01-15",
    leg_side=None,
):
    """Build a raw mapping-store row dict."""
    return {
        "symbol": symbol,
        "trade_group_id": trade_group_id,
        "strategy_type": strategy_type,
        "strategy_name": strategy_name,
        "entry_credit": entry_credit,
        "entry_price": entry_price,
        "exit_price": exit_price,
        "expiration": expiration,
        "leg_side": leg_side,
    }


def make_mapping(**kwargs) -> GroupMapping:
    return GroupMapping.from_raw(make_mapping_row(**kwargs))


def iron_condor_snapshot(trade_group_id="grp-1", quantity=1, drop=None):
    """A short 380/400/440/460 SPY iron condor: (positions, mappings).

    Entry prices per share: put 380 @0.30, put 400 @1.00, call 440 @1.20, call 460 @0.40.
    ``drop`` removes the broker position for that symbol (mapping kept).
    """
    condor = [
        ("P", 380, +1, "0.30"),
        ("P", 400, -1, "1.00"),
        ("C", 440, -1, "1.20"),
        ("C", 460, +1, "0.40"),
    ]
    positions, mappings = [], []
    for kind, strike, sign, price in condor:
        symbol = occ(kind, strike)
        mappings.append(make_mapping(symbol=symbol, trade_group_id=trade_group_id))
        if symbol == drop:
            continue
        positions.append(make_position(
            symbol=symbol,
            quantity=sign * quantity,
            cost_basis=Decimal(price) * 100 * sign * quantity,
        ))
    return positions, mappings
