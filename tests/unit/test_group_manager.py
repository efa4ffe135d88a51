"""Unit tests for the Group Manager — pure grouping of positions by mapping snapshot."""

import pytest
from decimal import Decimal

from legrecon.pipeline.group_manager import (
    GroupMember, group_positions, leg_entry_price, legs_for_group, underlying_of,
)
from legrecon.pipeline.strategy_engine import HealthStatus, StrategyType, infer_leg_sides
from tests.conftest import iron_condor_snapshot, make_mapping, make_position, occ


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------

class TestGroupPositions:
    def test_complete_condor(self):
        positions, mappings = iron_condor_snapshot()
        groups, ungrouped = group_positions(positions, mappings)
        assert ungrouped == []
        assert len(groups) == 1
        g = groups[0]
        assert g.trade_group_id == "grp-1"
        assert g.underlying == "SPY"
        assert g.strategy_type is StrategyType.IRON_CONDOR
        assert g.strategy_name == "SPY IC"
        assert g.health.status is HealthStatus.OK
        assert len(g.positions) == 4
        assert g.missing_symbols == []

    def test_missing_leg_breaks_health(self):
        positions, mappings = iron_condor_snapshot(drop=occ("P", 380))
        groups, _ = group_positions(positions, mappings)
        g = groups[0]
        assert g.health.status is HealthStatus.BROKEN
        assert g.health.observed_legs == 3
        assert g.missing_symbols == [occ("P", 380)]

    def test_unmapped_positions_are_ungrouped(self):
        positions, mappings = iron_condor_snapshot()
        stock = make_position(symbol="AAPL", quantity=100, cost_basis=15000)
        groups, ungrouped = group_positions(positions + [stock], mappings)
        assert ungrouped == [stock]
        assert len(groups) == 1

    def test_two_groups_keep_first_seen_order(self):
        ic_pos, ic_map = iron_condor_snapshot(trade_group_id="ic")
        spread_syms = [occ("P", 300, root="QQQ"), occ("P", 295, root="QQQ")]
        spread_pos = [
            make_position(symbol=spread_syms[0], quantity=-1, cost_basis=-150),
            make_position(symbol=spread_syms[1], quantity=1, cost_basis=90),
        ]
        spread_map = [
            make_mapping(symbol=s, trade_group_id="ps", strategy_type="credit_put_spread")
            for s in spread_syms
        ]
        groups, _ = group_positions(spread_pos + ic_pos, ic_map + spread_map)
        assert [g.trade_group_id for g in groups] == ["ps", "ic"]
        assert groups[0].underlying == "QQQ"
        assert groups[0].strategy_type is StrategyType.CREDIT_PUT_SPREAD

    def test_strategy_from_first_member_with_one(self):
        sym_a, sym_b = occ("C", 500), occ("P", 500)
        mappings = [
            make_mapping(symbol=sym_a, trade_group_id="g", strategy_type=None),
            make_mapping(symbol=sym_b, trade_group_id="g", strategy_type="straddle"),
        ]
        positions = [make_position(symbol=sym_a), make_position(symbol=sym_b)]
        groups, _ = group_positions(positions, mappings)
        assert groups[0].strategy_type is StrategyType.STRADDLE
        assert groups[0].health.status is HealthStatus.OK

    def test_unrecognized_strategy_is_unknown_health(self):
        sym = occ("C", 500)
        groups, _ = group_positions(
            [make_position(symbol=sym)],
            [make_mapping(symbol=sym, trade_group_id="g", strategy_type="jade_lizard")],
        )
        assert groups[0].strategy_type is None
        assert groups[0].strategy_label == "jade_lizard"
        assert groups[0].health.status is HealthStatus.UNKNOWN

    def test_empty(self):
        assert group_positions([], []) == ([], [])

    def test_deterministic(self):
        positions, mappings = iron_condor_snapshot()
        assert group_positions(positions, mappings) == group_positions(positions, mappings)


# ---------------------------------------------------------------------------
# Leg construction
# ---------------------------------------------------------------------------

class TestLegs:
    def test_entry_price_from_cost_basis(self):
        member = GroupMember(make_position(symbol=occ("C", 440), quantity=-2, cost_basis=-240))
        assert leg_entry_price(member) == Decimal("1.2")

    def test_entry_price_hint_wins(self):
        sym = occ("C", 440)
        member = GroupMember(
            make_position(symbol=sym, quantity=-2, cost_basis=-240),
            make_mapping(symbol=sym, entry_price="1.25"),
        )
        assert leg_entry_price(member) == Decimal("1.25")

    def test_entry_price_zero_quantity(self):
        member = GroupMember(make_position(symbol=occ("C", 440), quantity=0, cost_basis=-240))
        assert leg_entry_price(member) == 0

    def test_legs_feed_inference(self):
        positions, mappings = iron_condor_snapshot(quantity=3)
        groups, _ = group_positions(positions, mappings)
        result = infer_leg_sides(legs_for_group(groups[0]), groups[0].strategy_type)
        assert result.success
        assert result.net_entry_credit == Decimal("1.50")

    @pytest.mark.parametrize("symbol, expected", [
        ("SPY260115C00440000", "SPY"),
        ("AAPL", "AAPL"),
    ])
    def test_underlying_of(self, symbol, expected):
        assert underlying_of(symbol) == expected
