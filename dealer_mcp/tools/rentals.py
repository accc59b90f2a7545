"""Rental tool implementations: rent and return."""

from __future__ import annotations

from dealer_mcp.data.inventory import get_manager
from dealer_mcp.data.manager import Outcome
from dealer_mcp.errors import VehicleValidationError
from dealer_mcp.tools.common import outcome_message, require_date, require_text


def rent_vehicle_impl(
    *,
    dealer_id: str,
    vehicle_id: str,
    start_date: str,
    end_date: str,
) -> str:
    """Rent available stock for a date range (``MM/DD/YYYY`` or ``YYYY-MM-DD``)."""
    try:
        dealer = require_text(dealer_id, "Dealer ID")
        vid = require_text(vehicle_id, "Vehicle ID")
        start = require_date(start_date, "Start date")
        end = require_date(end_date, "End date")
    except VehicleValidationError as exc:
        return f"Error: {exc}"
    if end < start:
        return "Error: End date must not be before the start date."

    outcome = get_manager().rent_vehicle(dealer, vid, start, end)
    return outcome_message(
        outcome,
        f"Vehicle {vid} rented from {start:%m/%d/%Y} to {end:%m/%d/%Y}.",
        {
            Outcome.NOT_FOUND: f"Vehicle {vid} not found.",
            Outcome.WRONG_DEALER: f"Vehicle {vid} does not belong to dealer {dealer}.",
            Outcome.NOT_RENTABLE: f"Vehicle {vid} is a sports car and cannot be rented.",
            Outcome.ALREADY_RENTED: f"Vehicle {vid} is already rented.",
            Outcome.INVALID: "Error: rental dates are invalid.",
        },
    )


def return_vehicle_impl(*, dealer_id: str, vehicle_id: str) -> str:
    try:
        dealer = require_text(dealer_id, "Dealer ID")
        vid = require_text(vehicle_id, "Vehicle ID")
    except VehicleValidationError as exc:
        return f"Error: {exc}"

    outcome = get_manager().return_vehicle(dealer, vid)
    return outcome_message(
        outcome,
        f"Vehicle {vid} returned successfully.",
        {
            Outcome.NOT_FOUND: f"Vehicle {vid} not found.",
            Outcome.WRONG_DEALER: f"Vehicle {vid} does not belong to dealer {dealer}.",
            Outcome.NOT_RENTABLE: f"Vehicle {vid} is a sports car and is never rented.",
            Outcome.NOT_RENTED: f"Vehicle {vid} is not currently rented.",
        },
    )
