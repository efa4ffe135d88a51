"""Unit tests for boundary validation and normalization of broker/mapping rows."""

import pytest
from datetime import date
from decimal import Decimal
from pydantic import ValidationError

from legrecon.models.position import (
    BrokerPosition, GroupMapping, InstrumentType, PositionSide,
    normalize_instrument_type, normalize_leg_side, normalize_side,
)
from legrecon.pipeline.strategy_engine import OpenSide, StrategyType
from tests.conftest import make_mapping_row


class TestNormalizers:
    @pytest.mark.parametrize("raw, expected", [
        ("long", PositionSide.LONG),
        ("short", PositionSide.SHORT),
        (" short ", None),
        ("LONG", None),
        ("Short", None),
        ("buy", None),
        ("", None),
        (None, None),
    ])
    def test_side(self, raw, expected):
        assert normalize_side(raw) is expected

    @pytest.mark.parametrize("raw, expected", [
        ("EQUITY_OPTION", InstrumentType.OPTION),
        ("Index Option", InstrumentType.OPTION),
        ("Equity", InstrumentType.EQUITY),
        ("common stock", InstrumentType.EQUITY),
        ("future", None),
        (None, None),
    ])
    def test_instrument_type(self, raw, expected):
        assert normalize_instrument_type(raw) is expected

    @pytest.mark.parametrize("raw, expected", [
        ("sell_to_open", OpenSide.SELL_TO_OPEN),
        ("Sell to Open", OpenSide.SELL_TO_OPEN),
        ("STO", OpenSide.SELL_TO_OPEN),
        ("buy-to-open", OpenSide.BUY_TO_OPEN),
        ("long", OpenSide.BUY_TO_OPEN),
        ("roll", None),
        (None, None),
    ])
    def test_leg_side(self, raw, expected):
        assert normalize_leg_side(raw) is expected


class TestBrokerPosition:
    def test_from_raw(self):
        pos = BrokerPosition.from_raw({
            "symbol": "SPY260115C00440000",
            "quantity": -2,
            "cost_basis": "-240.00",
            "side": "short",
            "instrument_type": "option",
        })
        assert pos == BrokerPosition(
            symbol="SPY260115C00440000",
            quantity=-2,
            cost_basis=Decimal("-240.00"),
            side=PositionSide.SHORT,
            instrument_type=InstrumentType.OPTION,
        )

    def test_camel_case_keys(self):
        pos = BrokerPosition.from_raw({"symbol": "AAPL", "quantity": 10, "costBasis": 1500, "instrumentType": "equity"})
        assert pos.cost_basis == Decimal("1500")
        assert pos.instrument_type is InstrumentType.EQUITY

    def test_padded_option_symbol_is_compacted(self):
        pos = BrokerPosition.from_raw({"symbol": "SPY   260115C00440000", "quantity": 1})
        assert pos.symbol == "SPY260115C00440000"

    def test_null_numbers_become_zero(self):
        pos = BrokerPosition.from_raw({"symbol": "AAPL", "quantity": None, "cost_basis": ""})
        assert pos.quantity == 0
        assert pos.cost_basis == 0

    def test_whole_float_quantity_accepted(self):
        assert BrokerPosition.from_raw({"symbol": "AAPL", "quantity": -3.0}).quantity == -3

    def test_fractional_quantity_rejected(self):
        with pytest.raises(ValidationError):
            BrokerPosition.from_raw({"symbol": "AAPL", "quantity": 1.5})

    def test_padded_side_is_not_trusted(self):
        pos = BrokerPosition.from_raw({"symbol": " AAPL ", "quantity": 0, "side": " long "})
        assert pos.symbol == "AAPL"
        assert pos.side is None

    def test_missing_symbol_rejected(self):
        with pytest.raises(ValidationError):
            BrokerPosition.from_raw({"quantity": 1})


class TestGroupMapping:
    def test_from_raw(self):
        m = GroupMapping.from_raw(make_mapping_row(entry_price="1.20", leg_side="sell_to_open"))
        assert m.strategy_type is StrategyType.IRON_CONDOR
        assert m.strategy_label == "iron_condor"
        assert m.entry_price == Decimal("1.20")
        assert m.expiration == date(2026, 1, 15)
        assert m.leg_side is OpenSide.SELL_TO_OPEN

    def test_unrecognized_strategy_keeps_label(self):
        m = GroupMapping.from_raw(make_mapping_row(strategy_type="jade_lizard"))
        assert m.strategy_type is None
        assert m.strategy_label == "jade_lizard"

    def test_blank_optional_fields(self):
        m = GroupMapping.from_raw(make_mapping_row(strategy_type="", expiration="", leg_side=" "))
        assert m.strategy_type is None
        assert m.strategy_label is None
        assert m.expiration is None
        assert m.leg_side is None

    def test_missing_group_id_rejected(self):
        with pytest.raises(ValidationError):
            GroupMapping.from_raw({"symbol": "SPY260115C00440000"})
