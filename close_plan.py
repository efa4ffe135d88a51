#!/usr/bin/env python3
"""
Close Plan CLI
Reads a positions + mappings snapshot and prints the close plan for each trade group
"""

import json
import sys
import os

# Add parent directory to path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from loguru import logger
from pydantic import ValidationError

from legrecon.config import configure_logging, load_settings
from legrecon.services.close_service import ClosePlanner, load_snapshot


def display_plan(plan):
    """Display a summary of a close plan"""
    print(f"\n{'='*60}")
    print(f"Group: {plan.trade_group_id or '(ungrouped)'}")
    print(f"Strategy: {plan.display_name}")
    print(f"Status: {plan.status.value.upper()}")
    if plan.health:
        print(f"Health: {plan.health.status.value} ({plan.health.reason})")
    if plan.inference is not None and plan.inference.success:
        print(f"Net Entry Credit: {plan.inference.net_entry_credit}")
        if plan.inference.net_exit_debit is not None:
            print(f"Net Exit Debit: {plan.inference.net_exit_debit}")

    if plan.orders:
        print("\nOrders:")
        for i, order in enumerate(plan.orders, 1):
            print(f"  {i}. {order.close_side.value} {order.quantity} {order.symbol}")

    for error in plan.errors:
        print(f"  ERROR: {error}")
    for warning in plan.warnings:
        print(f"  WARNING: {warning}")
    print(f"{'='*60}")


def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description='Build close plans from a positions snapshot')
    parser.add_argument('snapshot', help='JSON file with "positions" and "mappings" lists')
    parser.add_argument('--group', help='Only plan this trade group ID')
    parser.add_argument('--allow-broken', action='store_true',
                        help='Operator override: allow closing broken structures')
    parser.add_argument('--json', action='store_true', help='Print plans as JSON')

    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(settings)

    try:
        with open(args.snapshot, 'r') as f:
            positions, mappings = load_snapshot(json.load(f))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Could not read snapshot {args.snapshot}: {e}")
        return 2

    planner = ClosePlanner(settings)
    plans = planner.plan_snapshot(positions, mappings, allow_broken=args.allow_broken or None)
    if args.group:
        plans = [p for p in plans if p.trade_group_id == args.group]
        if not plans:
            logger.error(f"Trade group {args.group} not found in snapshot")
            return 1

    if args.json:
        print(json.dumps([p.to_out().model_dump(mode='json') for p in plans], indent=2))
    else:
        for plan in plans:
            display_plan(plan)

    return 0 if all(p.ready for p in plans) else 1


if __name__ == "__main__":
    sys.exit(main())
