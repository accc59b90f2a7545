#!/usr/bin/env python3
"""Performance benchmark for the dealership inventory hot paths."""

from __future__ import annotations

import argparse
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path

from dealer_mcp.data.manager import DealershipManager
from dealer_mcp.data.store import JsonInventoryStore
from dealer_mcp.data.vehicle import Vehicle, VehicleKind

MAKES = ["Toyota", "Honda", "Ford", "Tesla", "Chevrolet"]
MODELS = ["Supra", "CR-V", "Explorer", "Model 3", "Silverado"]
KINDS = [
    VehicleKind.SPORTS_CAR,
    VehicleKind.SUV,
    VehicleKind.SUV,
    VehicleKind.SEDAN,
    VehicleKind.PICKUP,
]
JAN_1 = datetime(2024, 1, 1, tzinfo=timezone.utc)
JAN_10 = datetime(2024, 1, 10, tzinfo=timezone.utc)


def make_vehicle(i: int, dealers: int) -> Vehicle:
    return Vehicle(
        vehicle_id=f"BM-{i:07d}",
        kind=KINDS[i % 5],
        manufacturer=MAKES[i % 5],
        model=MODELS[i % 5],
        price=18_000 + (i % 200) * 300,
        dealer_id=f"D{i % dealers:03d}",
        metadata={"dealer_name": "Benchmark Auto"},
    )


def _make_manager(path: Path, records: int, dealers: int) -> DealershipManager:
    store = JsonInventoryStore(path)
    store.save([make_vehicle(i, dealers) for i in range(records)])
    manager = DealershipManager(store, export_path=path.with_name("export.json"))
    manager.reload()
    return manager


# ── Benchmarks ────────────────────────────────────────────────────────


def bench_save(path: Path, records: int, dealers: int) -> tuple[float, float]:
    vehicles = [make_vehicle(i, dealers) for i in range(records)]
    store = JsonInventoryStore(path)
    start = time.perf_counter()
    store.save(vehicles)
    elapsed = time.perf_counter() - start
    return elapsed, records / max(elapsed, 1e-9)


def bench_load(path: Path, records: int) -> tuple[float, float]:
    store = JsonInventoryStore(path)
    start = time.perf_counter()
    result = store.load()
    elapsed = time.perf_counter() - start
    assert len(result.vehicles) == records
    return elapsed, records / max(elapsed, 1e-9)


def bench_mutations(path: Path, records: int, dealers: int, repeats: int) -> dict[str, float]:
    """Each mutation rewrites the whole document, so cost scales with inventory size."""
    manager = _make_manager(path, records, dealers)

    start = time.perf_counter()
    for i in range(repeats):
        manager.add_vehicle(make_vehicle(records + i, dealers))
    add_elapsed = time.perf_counter() - start

    # SUVs only: every fifth vehicle starting at index 1
    rentable = [make_vehicle(i, dealers) for i in range(1, records, 5)][:repeats]
    start = time.perf_counter()
    for v in rentable:
        manager.rent_vehicle(v.dealer_id, v.vehicle_id, JAN_1, JAN_10)
        manager.return_vehicle(v.dealer_id, v.vehicle_id)
    rental_elapsed = time.perf_counter() - start

    return {
        "add_ms": (add_elapsed / max(repeats, 1)) * 1000,
        "rent_return_ms": (rental_elapsed / max(len(rentable), 1)) * 1000,
    }


def bench_queries(path: Path, records: int, dealers: int, repeats: int) -> dict[str, float]:
    manager = _make_manager(path, records, dealers)

    start = time.perf_counter()
    for i in range(repeats):
        manager.search(MAKES[i % 5], "manufacturer")
    search_elapsed = time.perf_counter() - start

    start = time.perf_counter()
    for _ in range(repeats):
        manager.inventory_summary()
    summary_elapsed = time.perf_counter() - start

    return {
        "search_ms": (search_elapsed / max(repeats, 1)) * 1000,
        "summary_ms": (summary_elapsed / max(repeats, 1)) * 1000,
    }


# ── Main ──────────────────────────────────────────────────────────────


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark dealership inventory hot paths.")
    parser.add_argument("--records", type=int, default=20_000)
    parser.add_argument("--dealers", type=int, default=25)
    parser.add_argument("--repeats", type=int, default=50)
    args = parser.parse_args()

    print("dealership_hot_path_benchmark")
    print(f"records={args.records}")
    print(f"dealers={args.dealers}")
    print(f"repeats={args.repeats}")
    print()

    with tempfile.TemporaryDirectory(prefix="dealer-bench-") as tmp:
        path = Path(tmp) / "inventory.json"

        save_elapsed, save_rps = bench_save(path, args.records, args.dealers)
        print(f"save_seconds={save_elapsed:.6f}")
        print(f"save_rows_per_sec={save_rps:.0f}")

        load_elapsed, load_rps = bench_load(path, args.records)
        print(f"load_seconds={load_elapsed:.6f}")
        print(f"load_rows_per_sec={load_rps:.0f}")
        print()

        mutations = bench_mutations(path, args.records, args.dealers, args.repeats)
        print(f"add_vehicle_ms_per_op={mutations['add_ms']:.3f}")
        print(f"rent_return_ms_per_cycle={mutations['rent_return_ms']:.3f}")
        print()

        queries = bench_queries(path, args.records, args.dealers, args.repeats)
        print(f"search_ms_per_query={queries['search_ms']:.3f}")
        print(f"summary_ms_per_call={queries['summary_ms']:.3f}")


if __name__ == "__main__":
    main()
