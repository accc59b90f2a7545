"""Shared test fixtures — isolated on-disk inventory and manager injection."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from dealer_mcp.data.inventory import set_manager
from dealer_mcp.data.manager import DealershipManager
from dealer_mcp.data.store import JsonInventoryStore
from dealer_mcp.data.vehicle import Vehicle, VehicleKind

ACQUIRED = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_vehicle(
    vehicle_id: str = "V1",
    *,
    kind: VehicleKind = VehicleKind.SUV,
    manufacturer: str = "Honda",
    model: str = "CR-V",
    price: float = 25_000.0,
    dealer_id: str = "D1",
    **extra,
) -> Vehicle:
    return Vehicle(
        vehicle_id=vehicle_id,
        kind=kind,
        manufacturer=manufacturer,
        model=model,
        price=price,
        dealer_id=dealer_id,
        acquired_at=extra.pop("acquired_at", ACQUIRED),
        **extra,
    )


@pytest.fixture()
def inventory_path(tmp_path: Path) -> Path:
    return tmp_path / "inventory.json"


@pytest.fixture()
def export_path(tmp_path: Path) -> Path:
    return tmp_path / "export.json"


@pytest.fixture()
def store(inventory_path: Path) -> JsonInventoryStore:
    return JsonInventoryStore(inventory_path)


@pytest.fixture()
def manager(store: JsonInventoryStore, export_path: Path) -> DealershipManager:
    """A fresh manager over an empty, not-yet-written inventory file."""
    mgr = DealershipManager(store, export_path=export_path)
    mgr.reload()
    return mgr


@pytest.fixture(autouse=True)
def _inject_test_manager(manager: DealershipManager):
    """Give every test a fresh, isolated manager behind the tool facade."""
    set_manager(manager)
    yield
    set_manager(None)


@pytest.fixture()
def vehicle_factory():
    """The :func:`make_vehicle` builder, for tests that need several units."""
    return make_vehicle
