"""Pydantic models validating raw payloads from the broker and the mapping store."""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class BrokerPositionPayload(BaseModel):
    """One position row as reported by the broker account."""
    # No blanket stripping: the stated side is trusted only when literal
    model_config = ConfigDict(extra="ignore")

    symbol: str
    quantity: int = 0
    cost_basis: Decimal = Field(
        default=Decimal("0"), validation_alias=AliasChoices("cost_basis", "costBasis"),
    )
    side: Optional[str] = None
    instrument_type: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("instrument_type", "instrumentType"),
    )

    @field_validator("symbol")
    @classmethod
    def _strip_symbol(cls, value):
        return value.strip()

    @field_validator("quantity", "cost_basis", mode="before")
    @classmethod
    def _missing_is_zero(cls, value):
        value = _blank_to_none(value)
        return 0 if value is None else value

    @field_validator("side", "instrument_type", mode="before")
    @classmethod
    def _blank_text(cls, value):
        return _blank_to_none(value)


class MappingRowPayload(BaseModel):
    """One row of the symbol -> trade group mapping store."""
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    symbol: str
    trade_group_id: str = Field(validation_alias=AliasChoices("trade_group_id", "tradeGroupId"))
    strategy_type: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("strategy_type", "strategyType"),
    )
    strategy_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("strategy_name", "strategyName"),
    )
    entry_credit: Optional[Decimal] = Field(
        default=None, validation_alias=AliasChoices("entry_credit", "entryCredit"),
    )
    entry_price: Optional[Decimal] = Field(
        default=None, validation_alias=AliasChoices("entry_price", "entryPrice"),
    )
    exit_price: Optional[Decimal] = Field(
        default=None, validation_alias=AliasChoices("exit_price", "exitPrice"),
    )
    expiration: Optional[date] = None
    leg_side: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("leg_side", "legSide"),
    )

    @field_validator(
        "strategy_type", "strategy_name", "entry_credit", "entry_price", "exit_price",
        "expiration", "leg_side", mode="before",
    )
    @classmethod
    def _blank_text(cls, value):
        return _blank_to_none(value)


class SnapshotPayload(BaseModel):
    """A consistent snapshot of positions and group mappings for one decision."""
    positions: List[BrokerPositionPayload] = []
    mappings: List[MappingRowPayload] = []


class CloseOrderOut(BaseModel):
    symbol: str
    close_side: str
    quantity: int


class ClosePlanOut(BaseModel):
    trade_group_id: Optional[str]
    strategy_type: Optional[str]
    display_name: str
    status: str
    health: Optional[str]
    health_reason: Optional[str]
    orders: List[CloseOrderOut] = []
    release_symbols: List[str] = []
    errors: List[str] = []
    warnings: List[str] = []
    net_entry_credit: Optional[Decimal] = None
    net_exit_debit: Optional[Decimal] = None
