"""Close service — turn a trade group snapshot into a safe, all-or-nothing close plan."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from legrecon.config import Settings, load_settings
from legrecon.models.position import BrokerPosition, GroupMapping, InstrumentType
from legrecon.pipeline.close_instruction import CloseInstruction, get_close_instruction
from legrecon.pipeline.group_manager import PositionGroup, group_positions, legs_for_group
from legrecon.pipeline.strategy_engine import (
    CloseSide, GroupHealth, HealthStatus, InferenceResult,
    get_inferred_side, infer_leg_sides, strategy_display_name, supports_inference,
)
from legrecon.schemas import ClosePlanOut, CloseOrderOut, SnapshotPayload


class PlanStatus(str, Enum):
    READY = "ready"         # Every leg has a trusted close instruction
    BLOCKED = "blocked"     # Broken structure, operator override required
    REJECTED = "rejected"   # Side/size could not be determined or signals conflict


@dataclass(frozen=True)
class CloseOrder:
    symbol: str
    instrument_type: InstrumentType
    close_side: CloseSide
    quantity: int


@dataclass
class ClosePlan:
    trade_group_id: Optional[str]
    strategy_type: Optional[str]
    display_name: str
    status: PlanStatus
    health: Optional[GroupHealth] = None
    orders: List[CloseOrder] = field(default_factory=list)
    release_symbols: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    inference: Optional[InferenceResult] = None

    @property
    def ready(self) -> bool:
        return self.status is PlanStatus.READY

    def to_out(self) -> ClosePlanOut:
        return ClosePlanOut(
            trade_group_id=self.trade_group_id,
            strategy_type=self.strategy_type,
            display_name=self.display_name,
            status=self.status.value,
            health=self.health.status.value if self.health else None,
            health_reason=self.health.reason if self.health else None,
            orders=[
                CloseOrderOut(symbol=o.symbol, close_side=o.close_side.value, quantity=o.quantity)
                for o in self.orders
            ],
            release_symbols=list(self.release_symbols),
            errors=list(self.errors),
            warnings=list(self.warnings),
            net_entry_credit=self.inference.net_entry_credit if self._inferred else None,
            net_exit_debit=self.inference.net_exit_debit if self._inferred else None,
        )

    @property
    def _inferred(self) -> bool:
        return self.inference is not None and self.inference.success


def load_snapshot(raw: Dict[str, Any]) -> Tuple[List[BrokerPosition], List[GroupMapping]]:
    """Validate a {"positions": [...], "mappings": [...]} snapshot (raises ValidationError)."""
    snapshot = SnapshotPayload.model_validate(raw)
    positions = [BrokerPosition.from_payload(p) for p in snapshot.positions]
    mappings = [GroupMapping.from_payload(m) for m in snapshot.mappings]
    return positions, mappings


class ClosePlanner:
    """Builds close plans; holds settings only, no per-call state."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or load_settings()

    def plan_group(self, group: PositionGroup, allow_broken: Optional[bool] = None) -> ClosePlan:
        """Close plan for one trade group.

        Status precedence: REJECTED (untrusted side/size or conflicting
        signals) over BLOCKED (broken structure without override) over READY.
        Orders and release symbols are filled only for READY plans.
        """
        if allow_broken is None:
            allow_broken = self.settings.allow_broken_close

        plan = ClosePlan(
            trade_group_id=group.trade_group_id,
            strategy_type=group.strategy_label,
            display_name=f"{group.underlying} {strategy_display_name(group.strategy_label)}",
            status=PlanStatus.READY,
            health=group.health,
        )

        if group.missing_symbols:
            plan.warnings.append(
                f"Mapped legs with no live position: {', '.join(group.missing_symbols)}"
            )

        if group.health.status is HealthStatus.UNKNOWN:
            plan.warnings.append(group.health.reason)
        elif group.health.status is HealthStatus.BROKEN and allow_broken:
            plan.warnings.append(f"{group.health.reason}; closing under operator override")

        orders = self._collect_orders(group.positions, plan)
        self._cross_check(group, orders, plan)

        if plan.errors:
            plan.status = PlanStatus.REJECTED
        elif group.health.status is HealthStatus.BROKEN and not allow_broken:
            plan.status = PlanStatus.BLOCKED
            plan.errors.append(f"{group.health.reason}; operator override required")
        else:
            plan.orders = orders
            plan.release_symbols = list(group.mapped_symbols)

        self._log(plan)
        return plan

    def plan_position(self, position: BrokerPosition) -> ClosePlan:
        """Close plan for a position that belongs to no trade group."""
        plan = ClosePlan(
            trade_group_id=None,
            strategy_type=None,
            display_name=f"{position.symbol} {strategy_display_name(None)}",
            status=PlanStatus.READY,
        )
        orders = self._collect_orders([position], plan)
        if plan.errors:
            plan.status = PlanStatus.REJECTED
        else:
            plan.orders = orders
        self._log(plan)
        return plan

    def plan_snapshot(
        self,
        positions: List[BrokerPosition],
        mappings: List[GroupMapping],
        allow_broken: Optional[bool] = None,
    ) -> List[ClosePlan]:
        """Plans for every group in the snapshot, then one per ungrouped position."""
        groups, ungrouped = group_positions(positions, mappings)
        plans = [self.plan_group(g, allow_broken=allow_broken) for g in groups]
        plans.extend(self.plan_position(p) for p in ungrouped)
        return plans

    # -- internals ----------------------------------------------------------

    @staticmethod
    def _collect_orders(positions: List[BrokerPosition], plan: ClosePlan) -> List[CloseOrder]:
        orders = []
        for position in positions:
            result = get_close_instruction(position)
            if isinstance(result, CloseInstruction):
                orders.append(CloseOrder(
                    symbol=position.symbol,
                    instrument_type=result.instrument_type,
                    close_side=result.close_side,
                    quantity=result.close_quantity,
                ))
            else:
                plan.errors.append(result.error)
        return orders

    def _cross_check(self, group: PositionGroup, orders: List[CloseOrder], plan: ClosePlan) -> None:
        """Compare broker-derived close sides with the strategy shape's sides."""
        if not supports_inference(group.strategy_type):
            return

        result = infer_leg_sides(legs_for_group(group, self.settings.option_multiplier),
                                 group.strategy_type)
        plan.inference = result
        if not result.success:
            plan.warnings.append(f"Leg inference failed: {result.error}")
            return

        for order in orders:
            if order.instrument_type is not InstrumentType.OPTION:
                continue
            inferred = get_inferred_side(result.legs, order.symbol)
            if inferred is not None and inferred[1] is not order.close_side:
                plan.errors.append(
                    f"Close side conflict for {order.symbol}: broker position implies "
                    f"{order.close_side.value}, {group.strategy_label} structure implies "
                    f"{inferred[1].value}"
                )

        for member in group.members:
            hint = member.mapping.leg_side if member.mapping else None
            inferred = get_inferred_side(result.legs, member.symbol)
            if hint is not None and inferred is not None and hint is not inferred[0]:
                plan.warnings.append(
                    f"Stored leg side {hint.value} for {member.symbol} disagrees with "
                    f"inferred {inferred[0].value}"
                )

        sizes = {o.quantity for o in orders}
        if len(sizes) > 1:
            plan.warnings.append(f"Legs have unequal sizes: {sorted(sizes)}")

    @staticmethod
    def _log(plan: ClosePlan) -> None:
        label = plan.trade_group_id or plan.display_name
        if plan.ready:
            logger.info(f"Close plan {label}: ready, {len(plan.orders)} orders")
        else:
            logger.warning(f"Close plan {label}: {plan.status.value} ({'; '.join(plan.errors)})")
        for warning in plan.warnings:
            logger.warning(f"Close plan {label}: {warning}")
