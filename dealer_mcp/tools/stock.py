"""Stock tool implementations: add, remove and list vehicles."""

from __future__ import annotations

from dealer_mcp.data.inventory import get_manager
from dealer_mcp.data.manager import Outcome
from dealer_mcp.data.vehicle import Vehicle, create_vehicle
from dealer_mcp.errors import VehicleValidationError
from dealer_mcp.tools.common import outcome_message, require_price, require_text


def add_vehicle_impl(
    *,
    dealer_id: str,
    vehicle_type: str,
    vehicle_id: str,
    manufacturer: str,
    model: str,
    price: float | str,
    dealer_name: str = "",
) -> str:
    """Validate the form fields and add brand-new stock."""
    try:
        dealer = require_text(dealer_id, "Dealer ID")
        metadata = {"dealer_name": dealer_name.strip()} if dealer_name.strip() else {}
        vehicle = create_vehicle(
            require_text(vehicle_type, "Vehicle type"),
            vehicle_id=require_text(vehicle_id, "Vehicle ID"),
            manufacturer=require_text(manufacturer, "Manufacturer"),
            model=require_text(model, "Model"),
            price=require_price(price),
            dealer_id=dealer,
            metadata=metadata,
        )
    except ValueError as exc:
        return f"Error: {exc}"

    outcome = get_manager().add_vehicle(vehicle)
    return outcome_message(
        outcome,
        f"Vehicle {vehicle.vehicle_id} added to dealer {dealer} inventory successfully.",
        {
            Outcome.ACQUISITION_DISABLED: (
                f"Cannot add vehicle: acquisition is disabled for dealer {dealer}."
            ),
            Outcome.DUPLICATE: (
                f"Cannot add vehicle: dealer {dealer} already has a vehicle "
                f"with ID {vehicle.vehicle_id}."
            ),
            Outcome.INVALID: "Error: vehicle details are invalid.",
        },
    )


def remove_vehicle_impl(
    *,
    dealer_id: str,
    vehicle_id: str,
    manufacturer: str,
    model: str,
    price: float | str,
) -> str:
    """Remove stock after matching every descriptive field."""
    try:
        dealer = require_text(dealer_id, "Dealer ID")
        vid = require_text(vehicle_id, "Vehicle ID")
        make = require_text(manufacturer, "Manufacturer")
        model_name = require_text(model, "Model")
        amount = require_price(price)
    except VehicleValidationError as exc:
        return f"Error: {exc}"

    outcome = get_manager().remove_vehicle(dealer, vid, make, model_name, amount)
    not_found = f"Vehicle {vid} not found for dealer {dealer}."
    return outcome_message(
        outcome,
        f"Vehicle {vid} removed from dealer {dealer} inventory successfully.",
        {
            Outcome.NOT_FOUND: not_found,
            Outcome.WRONG_DEALER: not_found,
            Outcome.MISMATCH: (
                f"Vehicle {vid} details do not match the stored record; nothing removed."
            ),
            Outcome.RENTED: f"Vehicle {vid} is currently rented and cannot be removed.",
        },
    )


def format_vehicles(title: str, vehicles: list[Vehicle], empty: str) -> str:
    lines = [f"{title}:", ""]
    if not vehicles:
        lines.append(empty)
    else:
        ordered = sorted(vehicles, key=lambda v: (v.dealer_id, v.vehicle_id))
        lines.extend(v.describe() for v in ordered)
    return "\n".join(lines)


def list_inventory_impl() -> str:
    return format_vehicles(
        "Current Inventory",
        get_manager().list_for_display(),
        "The inventory is empty.",
    )


def list_dealer_vehicles_impl(*, dealer_id: str, status: str = "available") -> str:
    """List a dealer's available (rentable) or rented stock."""
    try:
        dealer = require_text(dealer_id, "Dealer ID")
    except VehicleValidationError as exc:
        return f"Error: {exc}"

    normalized = status.strip().lower()
    manager = get_manager()
    if normalized == "available":
        vehicles = manager.available_for_dealer(dealer)
    elif normalized == "rented":
        vehicles = manager.rented_for_dealer(dealer)
    else:
        return "Error: status must be 'available' or 'rented'."
    return format_vehicles(
        f"{normalized.title()} vehicles for dealer {dealer}",
        vehicles,
        f"No {normalized} vehicles for dealer {dealer}.",
    )
