"""Dealership MCP server: FastMCP entry point for the inventory engine."""

from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from dealer_mcp.config import load_settings
from dealer_mcp.errors import log_and_return_tool_error as _log_and_return_tool_error
from dealer_mcp.tools.acquisition import set_acquisition_impl
from dealer_mcp.tools.bulk import clear_export_impl, export_inventory_impl, import_xml_impl
from dealer_mcp.tools.rentals import rent_vehicle_impl, return_vehicle_impl
from dealer_mcp.tools.search import search_inventory_impl
from dealer_mcp.tools.stats import get_inventory_summary_impl
from dealer_mcp.tools.stock import (
    add_vehicle_impl,
    list_dealer_vehicles_impl,
    list_inventory_impl,
    remove_vehicle_impl,
)
from dealer_mcp.tools.transfer import transfer_vehicle_impl

mcp = FastMCP("DealershipInventory")
logger = logging.getLogger(__name__)


def _tool_error(tool_name: str, exc: Exception, action: str) -> str:
    return _log_and_return_tool_error(
        tool_name=tool_name,
        exc=exc,
        user_message=f"I am having trouble {action} right now. Please try again in a moment.",
        logger=logger,
    )


# ── Tool registrations ──────────────────────────────────────────────


@mcp.tool()
def add_vehicle(
    dealer_id: str,
    vehicle_type: str,
    vehicle_id: str,
    manufacturer: str,
    model: str,
    price: float,
    dealer_name: str = "",
) -> str:
    """Add brand-new stock to a dealer.

    vehicle_type: 'SUV', 'Sedan', 'Pickup' or 'Sports Car'.
    Fails when acquisition is disabled for the dealer.
    """
    try:
        return add_vehicle_impl(
            dealer_id=dealer_id,
            vehicle_type=vehicle_type,
            vehicle_id=vehicle_id,
            manufacturer=manufacturer,
            model=model,
            price=price,
            dealer_name=dealer_name,
        )
    except Exception as exc:
        return _tool_error("add_vehicle", exc, "adding that vehicle")


@mcp.tool()
def remove_vehicle(
    dealer_id: str,
    vehicle_id: str,
    manufacturer: str,
    model: str,
    price: float,
) -> str:
    """Remove a vehicle. Manufacturer, model and price must match the stored record."""
    try:
        return remove_vehicle_impl(
            dealer_id=dealer_id,
            vehicle_id=vehicle_id,
            manufacturer=manufacturer,
            model=model,
            price=price,
        )
    except Exception as exc:
        return _tool_error("remove_vehicle", exc, "removing that vehicle")


@mcp.tool()
def rent_vehicle(dealer_id: str, vehicle_id: str, start_date: str, end_date: str) -> str:
    """Rent an available vehicle. Dates as MM/DD/YYYY or YYYY-MM-DD. Sports cars are not rentable."""
    try:
        return rent_vehicle_impl(
            dealer_id=dealer_id,
            vehicle_id=vehicle_id,
            start_date=start_date,
            end_date=end_date,
        )
    except Exception as exc:
        return _tool_error("rent_vehicle", exc, "renting that vehicle")


@mcp.tool()
def return_vehicle(dealer_id: str, vehicle_id: str) -> str:
    """Return a rented vehicle to available stock."""
    try:
        return return_vehicle_impl(dealer_id=dealer_id, vehicle_id=vehicle_id)
    except Exception as exc:
        return _tool_error("return_vehicle", exc, "returning that vehicle")


@mcp.tool()
def transfer_vehicle(source_dealer_id: str, target_dealer_id: str, vehicle_id: str) -> str:
    """Move an available vehicle to another dealer. Rented vehicles cannot be transferred."""
    try:
        return transfer_vehicle_impl(
            source_dealer_id=source_dealer_id,
            target_dealer_id=target_dealer_id,
            vehicle_id=vehicle_id,
        )
    except Exception as exc:
        return _tool_error("transfer_vehicle", exc, "transferring that vehicle")


@mcp.tool()
def import_xml(path: str) -> str:
    """Import vehicles from a third-party XML document on the server's filesystem."""
    try:
        return import_xml_impl(path=path)
    except Exception as exc:
        return _tool_error("import_xml", exc, "importing that document")


@mcp.tool()
def export_inventory(path: str = "") -> str:
    """Write the full inventory to the export document (default path when blank)."""
    try:
        return export_inventory_impl(path=path)
    except Exception as exc:
        return _tool_error("export_inventory", exc, "exporting the inventory")


@mcp.tool()
def clear_export(path: str = "") -> str:
    """Reset the export document to an empty inventory."""
    try:
        return clear_export_impl(path=path)
    except Exception as exc:
        return _tool_error("clear_export", exc, "clearing the export document")


@mcp.tool()
def enable_acquisition(dealer_id: str) -> str:
    """Allow a dealer to add brand-new stock."""
    try:
        return set_acquisition_impl(dealer_id=dealer_id, enabled=True)
    except Exception as exc:
        return _tool_error("enable_acquisition", exc, "updating acquisition")


@mcp.tool()
def disable_acquisition(dealer_id: str) -> str:
    """Block a dealer from adding brand-new stock. Transfers and imports are unaffected."""
    try:
        return set_acquisition_impl(dealer_id=dealer_id, enabled=False)
    except Exception as exc:
        return _tool_error("disable_acquisition", exc, "updating acquisition")


@mcp.tool()
def list_inventory() -> str:
    """List every vehicle with its rental status."""
    try:
        return list_inventory_impl()
    except Exception as exc:
        return _tool_error("list_inventory", exc, "listing the inventory")


@mcp.tool()
def list_dealer_vehicles(dealer_id: str, status: str = "available") -> str:
    """List a dealer's 'available' (rentable) or 'rented' vehicles."""
    try:
        return list_dealer_vehicles_impl(dealer_id=dealer_id, status=status)
    except Exception as exc:
        return _tool_error("list_dealer_vehicles", exc, "listing dealer vehicles")


@mcp.tool()
def search_inventory(query: str = "", field: str = "all") -> str:
    """Search by substring. field: all, id, manufacturer, model, dealer or type."""
    try:
        return search_inventory_impl(query=query, field=field)
    except Exception as exc:
        return _tool_error("search_inventory", exc, "searching the inventory")


@mcp.tool()
def get_inventory_summary() -> str:
    """Inventory totals, rented/available split, and counts per type and per dealer."""
    try:
        return get_inventory_summary_impl()
    except Exception as exc:
        return _tool_error("get_inventory_summary", exc, "summarizing the inventory")


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Serving inventory from %s", settings.inventory_path)
    mcp.run()


if __name__ == "__main__":
    main()
