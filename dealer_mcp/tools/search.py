"""Inventory search tool implementation."""

from __future__ import annotations

from dealer_mcp.data.inventory import get_manager
from dealer_mcp.tools.stock import format_vehicles


def search_inventory_impl(*, query: str = "", field: str = "all") -> str:
    """Filter the inventory by a case-insensitive substring on one field or all."""
    try:
        matches = get_manager().search(query, field)
    except ValueError as exc:
        return f"Error: {exc}"
    if not query.strip():
        return format_vehicles("Current Inventory", matches, "The inventory is empty.")
    return format_vehicles(
        "Search Results", matches, "No vehicles match your search criteria.",
    )
