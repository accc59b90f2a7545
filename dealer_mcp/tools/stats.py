"""Inventory summary tool implementation."""

from __future__ import annotations

import json

from dealer_mcp.data.inventory import get_manager


def get_inventory_summary_impl() -> str:
    """Inventory totals, per-type and per-dealer counts and dealer ids, as JSON."""
    manager = get_manager()
    payload = manager.inventory_summary().to_dict()
    payload["dealers"] = manager.dealer_ids()
    payload["acquisition_disabled"] = manager.registry.disabled_dealers()
    return json.dumps(payload, indent=2)
