"""Unit tests for the InventoryStore protocol and JsonInventoryStore."""

from __future__ import annotations

import json
from pathlib import Path

from dealer_mcp.data.store import InventoryStore, JsonInventoryStore, LoadStatus


class TestProtocolCompliance:
    def test_json_store_satisfies_protocol(self, store: JsonInventoryStore):
        assert isinstance(store, InventoryStore)


class TestLoad:
    def test_missing_file_loads_empty(self, store: JsonInventoryStore):
        result = store.load()
        assert result.status is LoadStatus.MISSING
        assert result.ok
        assert result.vehicles == []
        assert store.count() == 0

    def test_malformed_file_is_an_error_not_an_exception(
        self, store: JsonInventoryStore, inventory_path: Path,
    ):
        inventory_path.write_text("[[[")
        result = store.load()
        assert result.status is LoadStatus.ERROR
        assert not result.ok
        assert "malformed" in result.error
        assert store.count() == 0

    def test_load_replaces_contents(
        self, store: JsonInventoryStore, inventory_path: Path, vehicle_factory,
    ):
        store.put(vehicle_factory("STALE"))
        store.save([vehicle_factory("V1"), vehicle_factory("V2", dealer_id="D2")])
        result = store.load()
        assert result.status is LoadStatus.LOADED
        assert sorted(v.key for v in result.vehicles) == [("D1", "V1"), ("D2", "V2")]
        assert store.find_by_dealer_and_id("D1", "STALE") is None

    def test_load_counts_skipped_records(
        self, store: JsonInventoryStore, inventory_path: Path,
    ):
        inventory_path.write_text(json.dumps({"car_inventory": [{"vehicle_id": "X"}]}))
        result = store.load()
        assert result.status is LoadStatus.LOADED
        assert result.skipped == 1

    def test_loaded_vehicles_are_detached(self, store: JsonInventoryStore, vehicle_factory):
        store.save([vehicle_factory()])
        result = store.load()
        result.vehicles[0].price = 1.0
        assert store.find_by_dealer_and_id("D1", "V1").price == 25_000.0

    def test_trust_type_tag_option(self, inventory_path: Path, vehicle_factory):
        from dealer_mcp.data.vehicle import VehicleKind

        JsonInventoryStore(inventory_path).save(
            [vehicle_factory(kind=VehicleKind.SEDAN, model="Civic")]
        )
        inferred = JsonInventoryStore(inventory_path)
        inferred.load()
        assert inferred.find_by_dealer_and_id("D1", "V1").kind is VehicleKind.SUV

        trusted = JsonInventoryStore(inventory_path, trust_type_tag=True)
        trusted.load()
        assert trusted.find_by_dealer_and_id("D1", "V1").kind is VehicleKind.SEDAN


class TestLookup:
    def test_lookup_by_dealer_and_id(self, store: JsonInventoryStore, vehicle_factory):
        store.put(vehicle_factory("V1", dealer_id="D1"))
        store.put(vehicle_factory("V1", dealer_id="D2", model="Explorer"))
        assert store.find_by_dealer_and_id("D2", "V1").model == "Explorer"
        assert store.find_by_dealer_and_id("D3", "V1") is None
        assert len(store.find_by_vehicle_id("V1")) == 2
        assert store.count() == 2

    def test_discard(self, store: JsonInventoryStore, vehicle_factory):
        store.put(vehicle_factory())
        assert store.discard("D1", "V1") is not None
        assert store.discard("D1", "V1") is None
        assert store.find_all() == []

    def test_snapshot_and_restore(self, store: JsonInventoryStore, vehicle_factory):
        store.put(vehicle_factory())
        snap = store.snapshot()
        store.find_by_dealer_and_id("D1", "V1").price = 1.0
        store.put(vehicle_factory("V2"))
        store.restore(snap)
        assert store.count() == 1
        assert store.find_by_dealer_and_id("D1", "V1").price == 25_000.0
