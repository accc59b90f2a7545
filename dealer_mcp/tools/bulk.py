"""Bulk tool implementations: XML import, export and export reset."""

from __future__ import annotations

from dealer_mcp.data.inventory import get_manager
from dealer_mcp.data.manager import Outcome
from dealer_mcp.errors import VehicleValidationError
from dealer_mcp.tools.common import outcome_message, require_text


def import_xml_impl(*, path: str) -> str:
    """Import a third-party XML document into the inventory."""
    try:
        source = require_text(path, "XML file path")
    except VehicleValidationError as exc:
        return f"Error: {exc}"

    result = get_manager().import_xml_file(source)
    if result.write_failed:
        return "Error: the inventory file could not be written. No vehicles were imported."
    if result.imported == 0:
        if result.errors:
            preview = "; ".join(result.errors[:3])
            return f"No vehicles were imported from XML: {preview}"
        return "No vehicles were imported from XML."

    message = f"Successfully imported {result.imported} vehicle(s) from XML."
    if result.skipped:
        preview = "; ".join(result.errors[:3])
        suffix = " ..." if len(result.errors) > 3 else ""
        message += f" Skipped {result.skipped} record(s): {preview}{suffix}"
    return message


def export_inventory_impl(*, path: str = "") -> str:
    destination = path.strip() or None
    outcome = get_manager().export_inventory(destination)
    return outcome_message(
        outcome,
        "Successfully exported the inventory.",
        {
            Outcome.EMPTY_INVENTORY: "Failed to export: no vehicles found in inventory.",
            Outcome.INVALID: (
                "Error: choose an export destination other than the inventory file."
            ),
        },
    )


def clear_export_impl(*, path: str = "") -> str:
    destination = path.strip() or None
    outcome = get_manager().clear_export_document(destination)
    return outcome_message(
        outcome,
        "The export document has been cleared.",
        {
            Outcome.INVALID: (
                "Error: choose an export destination other than the inventory file."
            ),
        },
    )
