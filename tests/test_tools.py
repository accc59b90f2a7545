"""Tool implementation tests: boundary validation and user-facing messages."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dealer_mcp.data.inventory import get_manager
from dealer_mcp.errors import VehicleValidationError
from dealer_mcp.tools.acquisition import set_acquisition_impl
from dealer_mcp.tools.bulk import clear_export_impl, export_inventory_impl, import_xml_impl
from dealer_mcp.tools.common import require_date, require_price, require_text
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


def _add(vehicle_id="V1", *, dealer_id="D1", vehicle_type="SUV", model="CR-V", price=25000):
    return add_vehicle_impl(
        dealer_id=dealer_id,
        vehicle_type=vehicle_type,
        vehicle_id=vehicle_id,
        manufacturer="Honda",
        model=model,
        price=price,
    )


def _rent(vehicle_id="V1", *, dealer_id="D1", start="01/01/2024", end="01/10/2024"):
    return rent_vehicle_impl(
        dealer_id=dealer_id, vehicle_id=vehicle_id, start_date=start, end_date=end,
    )


# ── Boundary helpers ────────────────────────────────────────────


class TestBoundaryValidation:
    def test_require_text(self):
        assert require_text("  D1 ", "Dealer ID") == "D1"
        with pytest.raises(VehicleValidationError, match="Dealer ID is required."):
            require_text("   ", "Dealer ID")

    @pytest.mark.parametrize(
        ("raw", "message"),
        [
            ("", "Price is required."),
            (None, "Price is required."),
            ("abc", "Invalid price format"),
            ("0", "Price must be greater than 0."),
            (-3, "Price must be greater than 0."),
        ],
    )
    def test_require_price_errors(self, raw, message):
        with pytest.raises(VehicleValidationError, match=message):
            require_price(raw)

    def test_require_price_accepts_text(self):
        assert require_price("$25,000.50") == 25_000.5

    def test_require_date(self):
        assert require_date("01/10/2024", "End date").day == 10
        assert require_date("2024-01-10", "End date").month == 1
        with pytest.raises(VehicleValidationError, match="not a valid date"):
            require_date("10th of Jan", "End date")


# ── Stock ───────────────────────────────────────────────────────


class TestStockTools:
    def test_add_vehicle(self):
        assert _add() == "Vehicle V1 added to dealer D1 inventory successfully."
        assert get_manager().count() == 1

    def test_add_vehicle_records_dealer_name(self):
        add_vehicle_impl(
            dealer_id="D1", vehicle_type="Sedan", vehicle_id="G1", manufacturer="Genesis",
            model="G70", price="41000", dealer_name=" Downtown Motors ",
        )
        assert get_manager().get_vehicle("D1", "G1").dealer_name == "Downtown Motors"

    def test_add_vehicle_validation_errors(self):
        assert _add(price="lots").startswith("Error: Invalid price format")
        assert _add(vehicle_type="hovercraft").startswith("Error: Unknown vehicle type")
        assert _add(dealer_id="").startswith("Error: Dealer ID is required.")
        assert get_manager().count() == 0

    def test_add_vehicle_acquisition_disabled(self):
        set_acquisition_impl(dealer_id="D1", enabled=False)
        assert _add() == "Cannot add vehicle: acquisition is disabled for dealer D1."

    def test_add_vehicle_duplicate(self):
        _add()
        assert "already has a vehicle with ID V1" in _add()

    def test_remove_vehicle(self):
        _add()
        result = remove_vehicle_impl(
            dealer_id="D1", vehicle_id="V1", manufacturer="Honda", model="CR-V", price="25000",
        )
        assert result == "Vehicle V1 removed from dealer D1 inventory successfully."

    def test_remove_vehicle_failures(self):
        _add()
        common = {"dealer_id": "D1", "vehicle_id": "V1", "manufacturer": "Honda"}
        assert "do not match" in remove_vehicle_impl(**common, model="Pilot", price=25000)
        assert "not found for dealer D2" in remove_vehicle_impl(
            dealer_id="D2", vehicle_id="V1", manufacturer="Honda", model="CR-V", price=25000,
        )
        _rent()
        assert "currently rented" in remove_vehicle_impl(**common, model="CR-V", price=25000)

    def test_list_inventory(self):
        assert list_inventory_impl().endswith("The inventory is empty.")
        _add("V2")
        _add("V1")
        lines = list_inventory_impl().splitlines()
        assert lines[0] == "Current Inventory:"
        assert "ID: V1" in lines[2]
        assert "ID: V2" in lines[3]
        assert "Status: AVAILABLE" in lines[2]

    def test_list_dealer_vehicles(self):
        _add("V1")
        _add("V2")
        _add("S1", vehicle_type="Sports Car", model="Supra")
        _rent("V2")
        available = list_dealer_vehicles_impl(dealer_id="D1")
        assert "ID: V1" in available
        assert "ID: V2" not in available
        assert "ID: S1" not in available
        rented = list_dealer_vehicles_impl(dealer_id="D1", status="Rented")
        assert "ID: V2" in rented
        assert list_dealer_vehicles_impl(dealer_id="D1", status="sold").startswith("Error:")


# ── Rentals ─────────────────────────────────────────────────────


class TestRentalTools:
    def test_rent_and_return(self):
        _add()
        assert _rent() == "Vehicle V1 rented from 01/01/2024 to 01/10/2024."
        assert _rent() == "Vehicle V1 is already rented."
        assert return_vehicle_impl(dealer_id="D1", vehicle_id="V1") == (
            "Vehicle V1 returned successfully."
        )
        assert return_vehicle_impl(dealer_id="D1", vehicle_id="V1") == (
            "Vehicle V1 is not currently rented."
        )

    def test_rent_accepts_iso_dates(self):
        _add()
        assert _rent(start="2024-01-01", end="2024-01-10").startswith("Vehicle V1 rented")

    def test_rent_rejects_bad_dates(self):
        _add()
        assert _rent(start="01/10/2024", end="01/01/2024") == (
            "Error: End date must not be before the start date."
        )
        assert "not a valid date" in _rent(end="13/45/2024")

    def test_sports_car_cannot_be_rented(self):
        _add("S1", vehicle_type="Sports Car", model="Supra")
        assert _rent("S1") == "Vehicle S1 is a sports car and cannot be rented."

    def test_rent_unknown_or_foreign_vehicle(self):
        _add(dealer_id="D2")
        assert _rent("V1") == "Vehicle V1 does not belong to dealer D1."
        assert _rent("V9") == "Vehicle V9 not found."


# ── Transfer and acquisition ────────────────────────────────────


class TestTransferTools:
    def test_transfer(self):
        _add()
        result = transfer_vehicle_impl(
            source_dealer_id="D1", target_dealer_id="D2", vehicle_id="V1",
        )
        assert result == "Vehicle V1 transferred from dealer D1 to dealer D2."
        assert get_manager().get_vehicle("D2", "V1") is not None

    def test_transfer_rented(self):
        _add()
        _rent()
        result = transfer_vehicle_impl(
            source_dealer_id="D1", target_dealer_id="D2", vehicle_id="V1",
        )
        assert result == "Vehicle V1 is currently rented and cannot be transferred."

    def test_transfer_same_dealer(self):
        _add()
        result = transfer_vehicle_impl(
            source_dealer_id="D1", target_dealer_id="D1", vehicle_id="V1",
        )
        assert result.startswith("Error:")

    def test_acquisition_messages(self):
        assert set_acquisition_impl(dealer_id="D1", enabled=False) == (
            "Acquisition disabled for dealer: D1"
        )
        assert set_acquisition_impl(dealer_id="D1", enabled=True) == (
            "Acquisition enabled for dealer: D1"
        )
        assert set_acquisition_impl(dealer_id=" ", enabled=True).startswith("Error:")


# ── Bulk ────────────────────────────────────────────────────────


class TestBulkTools:
    def test_import_xml(self, tmp_path: Path):
        path = tmp_path / "dealers.xml"
        path.write_text(
            '<Dealer id="D5"><Name>Lakeside</Name>'
            '<Vehicle type="pickup" id="P1"><Make>Chevrolet</Make><Model>Silverado</Model>'
            "<Price>42000</Price></Vehicle>"
            '<Vehicle type="boat" id="B1"><Make>X</Make><Model>Y</Model>'
            "<Price>1000</Price></Vehicle></Dealer>"
        )
        result = import_xml_impl(path=str(path))
        assert result.startswith("Successfully imported 1 vehicle(s) from XML. Skipped 1")
        assert get_manager().get_vehicle("D5", "P1").dealer_name == "Lakeside"

    def test_import_missing_file(self, tmp_path: Path):
        result = import_xml_impl(path=str(tmp_path / "absent.xml"))
        assert result.startswith("No vehicles were imported from XML")

    def test_import_requires_path(self):
        assert import_xml_impl(path="") == "Error: XML file path is required."

    def test_export_and_clear(self, export_path: Path):
        assert export_inventory_impl() == "Failed to export: no vehicles found in inventory."
        _add()
        assert export_inventory_impl() == "Successfully exported the inventory."
        assert len(json.loads(export_path.read_text())["car_inventory"]) == 1
        assert clear_export_impl() == "The export document has been cleared."
        assert json.loads(export_path.read_text()) == {"car_inventory": []}

    def test_export_refuses_inventory_file(self, inventory_path: Path):
        _add()
        assert export_inventory_impl(path=str(inventory_path)).startswith("Error:")


# ── Queries ─────────────────────────────────────────────────────


class TestQueryTools:
    def test_search(self):
        _add("V1")
        _add("P1", vehicle_type="Pickup", model="Tundra")
        result = search_inventory_impl(query="tundra", field="model")
        assert result.startswith("Search Results:")
        assert "ID: P1" in result
        assert "ID: V1" not in result
        assert search_inventory_impl(query="civic").endswith(
            "No vehicles match your search criteria."
        )
        assert search_inventory_impl().startswith("Current Inventory:")

    def test_search_unknown_field(self):
        assert search_inventory_impl(query="x", field="colour").startswith(
            "Error: Unknown search field"
        )

    def test_summary(self):
        _add("V1")
        _add("V2", dealer_id="D2")
        _rent("V1")
        set_acquisition_impl(dealer_id="D3", enabled=False)
        payload = json.loads(get_inventory_summary_impl())
        assert payload["total"] == 2
        assert payload["rented"] == 1
        assert payload["available"] == 1
        assert payload["by_type"] == {"SUV": 2}
        assert payload["acquisition_disabled"] == ["D3"]
        assert payload["dealers"] == ["D1", "D2"]
