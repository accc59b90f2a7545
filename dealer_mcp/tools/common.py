"""Boundary validation and message helpers shared by the tool modules."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from dealer_mcp.data.manager import Outcome
from dealer_mcp.errors import VehicleValidationError
from dealer_mcp.normalization import parse_price, parse_rental_date


def require_text(value: Any, label: str) -> str:
    if value is None or not str(value).strip():
        raise VehicleValidationError(f"{label} is required.")
    return str(value).strip()


def require_price(value: Any) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise VehicleValidationError("Price is required.")
    price = parse_price(value)
    if price is None:
        raise VehicleValidationError("Invalid price format. Enter a valid number.")
    if price <= 0:
        raise VehicleValidationError("Price must be greater than 0.")
    return price


def require_date(value: Any, label: str) -> datetime:
    require_text(value, label)
    parsed = parse_rental_date(value)
    if parsed is None:
        raise VehicleValidationError(
            f"{label} '{value}' is not a valid date. Use MM/DD/YYYY or YYYY-MM-DD."
        )
    return parsed


def outcome_message(outcome: Outcome, success: str, failures: dict[Outcome, str]) -> str:
    """Pick the user-facing message for an engine outcome."""
    if outcome:
        return success
    if outcome is Outcome.WRITE_FAILED:
        return "Error: the inventory file could not be written. No changes were made."
    return failures.get(outcome, f"Error: operation failed ({outcome.value}).")
