"""
Group Manager — rebuild trade groups from broker positions + a mapping snapshot.

Public API:
    group_positions(positions, mappings) -> (List[PositionGroup], List[BrokerPosition])
    legs_for_group(group, multiplier)    -> List[LegRecord]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from legrecon.models.position import BrokerPosition, GroupMapping
from legrecon.pipeline.strategy_engine import (
    OPTION_MULTIPLIER, GroupHealth, LegRecord, StrategyType,
    compute_group_health, parse_option_symbol,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GroupMember:
    """A broker position together with its mapping row (None when ungrouped)."""
    position: BrokerPosition
    mapping: Optional[GroupMapping] = None

    @property
    def symbol(self) -> str:
        return self.position.symbol


@dataclass
class PositionGroup:
    trade_group_id: str
    members: List[GroupMember]
    underlying: str
    strategy_type: Optional[StrategyType]
    strategy_label: Optional[str]           # Raw stored tag, even if unrecognized
    strategy_name: Optional[str]
    health: GroupHealth
    mapped_symbols: List[str] = field(default_factory=list)

    @property
    def positions(self) -> List[BrokerPosition]:
        return [m.position for m in self.members]

    @property
    def missing_symbols(self) -> List[str]:
        """Mapped symbols with no live broker position (closed or assigned legs)."""
        present = {m.symbol for m in self.members}
        return [s for s in self.mapped_symbols if s not in present]


def underlying_of(symbol: str) -> str:
    ident = parse_option_symbol(symbol)
    return ident.root if ident else symbol


# ---------------------------------------------------------------------------
# Pure grouping function
# ---------------------------------------------------------------------------

def group_positions(
    positions: Iterable[BrokerPosition],
    mappings: Iterable[GroupMapping],
) -> Tuple[List[PositionGroup], List[BrokerPosition]]:
    """Pure function: positions + mapping snapshot -> groups with health.

    Algorithm:
    1. Index mappings by symbol (last row wins on duplicates)
    2. Bucket positions by their mapping's trade_group_id, first-seen order
    3. Strategy type/name come from the first member whose mapping has one
    4. Health compares the live member count to the shape's expected legs
    """
    by_symbol: Dict[str, GroupMapping] = {}
    mapped_by_group: Dict[str, List[str]] = {}
    for mapping in mappings:
        if mapping.symbol in by_symbol:
            logger.debug("Duplicate mapping for %s; keeping the later row", mapping.symbol)
        by_symbol[mapping.symbol] = mapping
    for mapping in by_symbol.values():
        mapped_by_group.setdefault(mapping.trade_group_id, []).append(mapping.symbol)

    buckets: Dict[str, List[GroupMember]] = {}
    ungrouped: List[BrokerPosition] = []

    for position in positions:
        mapping = by_symbol.get(position.symbol)
        if mapping is None:
            ungrouped.append(position)
            continue
        buckets.setdefault(mapping.trade_group_id, []).append(GroupMember(position, mapping))

    groups = []
    for trade_group_id, members in buckets.items():
        source = next((m.mapping for m in members if m.mapping.strategy_label), None)
        strategy_type = source.strategy_type if source else None
        strategy_label = source.strategy_label if source else None

        groups.append(PositionGroup(
            trade_group_id=trade_group_id,
            members=members,
            underlying=underlying_of(members[0].symbol),
            strategy_type=strategy_type,
            strategy_label=strategy_label,
            strategy_name=source.strategy_name if source else None,
            health=compute_group_health(strategy_type, len(members)),
            mapped_symbols=mapped_by_group.get(trade_group_id, []),
        ))

    logger.debug("Grouped %d groups, %d ungrouped positions", len(groups), len(ungrouped))
    return groups, ungrouped


def leg_entry_price(member: GroupMember, multiplier: int = OPTION_MULTIPLIER) -> Decimal:
    """Per-share entry price for a leg.

    The mapping's stored entry price wins; otherwise it is derived from the
    broker cost basis as |cost_basis| / |quantity| / multiplier.
    """
    if member.mapping is not None and member.mapping.entry_price is not None:
        return member.mapping.entry_price
    qty = abs(member.position.quantity)
    if qty == 0:
        return Decimal("0")
    return abs(member.position.cost_basis) / qty / multiplier


def legs_for_group(group: PositionGroup, multiplier: int = OPTION_MULTIPLIER) -> List[LegRecord]:
    return [
        LegRecord(
            symbol=m.symbol,
            entry_price=leg_entry_price(m, multiplier),
            exit_price=m.mapping.exit_price if m.mapping else None,
        )
        for m in group.members
    ]
