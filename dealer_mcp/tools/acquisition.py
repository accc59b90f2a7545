"""Acquisition gate tool implementations."""

from __future__ import annotations

from dealer_mcp.data.inventory import get_manager
from dealer_mcp.errors import VehicleValidationError
from dealer_mcp.tools.common import require_text


def set_acquisition_impl(*, dealer_id: str, enabled: bool) -> str:
    try:
        dealer = require_text(dealer_id, "Dealer ID")
    except VehicleValidationError as exc:
        return f"Error: {exc}"

    manager = get_manager()
    if enabled:
        manager.enable_acquisition(dealer)
        return f"Acquisition enabled for dealer: {dealer}"
    manager.disable_acquisition(dealer)
    return f"Acquisition disabled for dealer: {dealer}"
