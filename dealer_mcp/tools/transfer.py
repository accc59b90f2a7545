"""Inter-dealer transfer tool implementation."""

from __future__ import annotations

from dealer_mcp.data.inventory import get_manager
from dealer_mcp.data.manager import Outcome
from dealer_mcp.errors import VehicleValidationError
from dealer_mcp.tools.common import outcome_message, require_text


def transfer_vehicle_impl(
    *,
    source_dealer_id: str,
    target_dealer_id: str,
    vehicle_id: str,
) -> str:
    try:
        source = require_text(source_dealer_id, "Source dealer ID")
        target = require_text(target_dealer_id, "Target dealer ID")
        vid = require_text(vehicle_id, "Vehicle ID")
    except VehicleValidationError as exc:
        return f"Error: {exc}"

    outcome = get_manager().transfer_vehicle(source, target, vid)
    return outcome_message(
        outcome,
        f"Vehicle {vid} transferred from dealer {source} to dealer {target}.",
        {
            Outcome.NOT_FOUND: f"Vehicle {vid} not found for dealer {source}.",
            Outcome.RENTED: f"Vehicle {vid} is currently rented and cannot be transferred.",
            Outcome.DUPLICATE: f"Dealer {target} already has a vehicle with ID {vid}.",
            Outcome.INVALID: "Error: source and target dealers must differ.",
        },
    )
