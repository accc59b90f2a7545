"""InventoryStore protocol and the JSON-document implementation."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable

from dealer_mcp.codecs.json_document import read_document, write_document
from dealer_mcp.data.vehicle import Vehicle
from dealer_mcp.errors import DocumentError

logger = logging.getLogger(__name__)

VehicleKey = tuple[str, str]


class LoadStatus(str, Enum):
    LOADED = "loaded"
    MISSING = "missing"
    ERROR = "error"


@dataclass
class LoadResult:
    """Outcome of reading the canonical document.

    ``MISSING`` and ``ERROR`` both leave an empty inventory; they are kept
    apart so callers can tell a fresh install from a damaged file.
    """
    status: LoadStatus
    vehicles: list[Vehicle] = field(default_factory=list)
    skipped: int = 0
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status is not LoadStatus.ERROR


# ── Protocol ────────────────────────────────────────────────────────


@runtime_checkable
class InventoryStore(Protocol):
    """Minimal interface for inventory persistence."""

    def load(self) -> LoadResult: ...
    def save(self, vehicles: Iterable[Vehicle]) -> None: ...
    def find_by_dealer_and_id(self, dealer_id: str, vehicle_id: str) -> Vehicle | None: ...
    def find_by_vehicle_id(self, vehicle_id: str) -> list[Vehicle]: ...
    def find_all(self) -> list[Vehicle]: ...
    def put(self, vehicle: Vehicle) -> None: ...
    def discard(self, dealer_id: str, vehicle_id: str) -> Vehicle | None: ...
    def count(self) -> int: ...
    def snapshot(self) -> dict[VehicleKey, Vehicle]: ...
    def restore(self, snapshot: dict[VehicleKey, Vehicle]) -> None: ...


class JsonInventoryStore:
    """In-memory vehicle map backed by a single JSON document on disk."""

    def __init__(self, path: str | Path, *, trust_type_tag: bool = False) -> None:
        self._lock = threading.RLock()
        self._path = Path(path)
        self._trust_type_tag = trust_type_tag
        self._vehicles: dict[VehicleKey, Vehicle] = {}

    @property
    def path(self) -> Path:
        return self._path

    # ── Persistence ────────────────────────────────────────────────

    def load(self) -> LoadResult:
        """Replace the in-memory inventory with the document's contents.  Never raises."""
        try:
            vehicles, skipped = read_document(self._path, trust_type_tag=self._trust_type_tag)
        except FileNotFoundError:
            logger.info("Inventory file %s not found; starting empty", self._path)
            result = LoadResult(LoadStatus.MISSING)
        except DocumentError as exc:
            logger.error("Inventory file %s unreadable: %s", self._path, exc)
            result = LoadResult(LoadStatus.ERROR, error=str(exc))
        else:
            result = LoadResult(LoadStatus.LOADED, vehicles=vehicles, skipped=skipped)

        with self._lock:
            self._vehicles = {}
            for vehicle in result.vehicles:
                if vehicle.key in self._vehicles:
                    logger.warning(
                        "Duplicate vehicle %s/%s in %s; keeping the last record",
                        vehicle.dealer_id, vehicle.vehicle_id, self._path,
                    )
                self._vehicles[vehicle.key] = vehicle
            result.vehicles = [v.clone() for v in self._vehicles.values()]
        if result.status is LoadStatus.LOADED:
            logger.info(
                "Loaded %d vehicle(s) from %s (%d skipped)",
                len(result.vehicles), self._path, result.skipped,
            )
        return result

    def save(self, vehicles: Iterable[Vehicle]) -> None:
        """Overwrite the document with ``vehicles``.  Raises ``OSError`` on failure."""
        write_document(self._path, list(vehicles))

    # ── Lookup ─────────────────────────────────────────────────────

    def find_by_dealer_and_id(self, dealer_id: str, vehicle_id: str) -> Vehicle | None:
        with self._lock:
            return self._vehicles.get((dealer_id, vehicle_id))

    def find_by_vehicle_id(self, vehicle_id: str) -> list[Vehicle]:
        with self._lock:
            return [v for v in self._vehicles.values() if v.vehicle_id == vehicle_id]

    def find_all(self) -> list[Vehicle]:
        with self._lock:
            return list(self._vehicles.values())

    def count(self) -> int:
        with self._lock:
            return len(self._vehicles)

    # ── Mutation (engine only) ─────────────────────────────────────

    def put(self, vehicle: Vehicle) -> None:
        with self._lock:
            self._vehicles[vehicle.key] = vehicle

    def discard(self, dealer_id: str, vehicle_id: str) -> Vehicle | None:
        with self._lock:
            return self._vehicles.pop((dealer_id, vehicle_id), None)

    def snapshot(self) -> dict[VehicleKey, Vehicle]:
        with self._lock:
            return {key: v.clone() for key, v in self._vehicles.items()}

    def restore(self, snapshot: dict[VehicleKey, Vehicle]) -> None:
        with self._lock:
            self._vehicles = dict(snapshot)
