"""DealershipManager: the rule engine every inventory mutation flows through.

Each operation validates against the dealer registry and the inventory
store, mutates the store and rewrites the canonical document before
returning.  When the write fails the in-memory mutation is rolled back, so
memory and disk always agree.  Operations report an :class:`Outcome` rather
than raising.
"""

from __future__ import annotations

import logging
import math
import threading
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from dealer_mcp.codecs.json_document import write_document
from dealer_mcp.codecs.xml_import import parse_import_document
from dealer_mcp.constants import PRICE_TOLERANCE, SEARCH_FIELDS
from dealer_mcp.data.registry import DealerRegistry
from dealer_mcp.data.store import InventoryStore, LoadResult
from dealer_mcp.data.vehicle import Vehicle, create_vehicle, validate_vehicle
from dealer_mcp.errors import DocumentError, VehicleValidationError

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    """Result of an engine operation.  Truthy only for ``OK``."""

    OK = "ok"
    INVALID = "invalid"
    ACQUISITION_DISABLED = "acquisition_disabled"
    DUPLICATE = "duplicate"
    NOT_FOUND = "not_found"
    WRONG_DEALER = "wrong_dealer"
    MISMATCH = "mismatch"
    ALREADY_RENTED = "already_rented"
    NOT_RENTED = "not_rented"
    NOT_RENTABLE = "not_rentable"
    RENTED = "rented"
    EMPTY_INVENTORY = "empty_inventory"
    WRITE_FAILED = "write_failed"

    def __bool__(self) -> bool:
        return self is Outcome.OK


@dataclass
class ImportResult:
    """Outcome of a bulk import.  Bad records are skipped, never fatal."""
    imported: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
    write_failed: bool = False

    @property
    def partial(self) -> bool:
        return self.skipped > 0


@dataclass(frozen=True)
class DealerStats:
    dealer_id: str
    vehicle_count: int


@dataclass
class InventorySummary:
    total: int
    rented: int
    available: int
    by_type: dict[str, int]
    by_dealer: list[DealerStats]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "rented": self.rented,
            "available": self.available,
            "by_type": dict(self.by_type),
            "by_dealer": [
                {"dealer_id": s.dealer_id, "vehicle_count": s.vehicle_count}
                for s in self.by_dealer
            ],
        }


class DealershipManager:
    """Owns the inventory store and the dealer registry."""

    def __init__(
        self,
        store: InventoryStore,
        registry: DealerRegistry | None = None,
        *,
        export_path: str | Path | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._store = store
        self._registry = registry or DealerRegistry()
        self._export_path = Path(export_path) if export_path is not None else None

    @property
    def registry(self) -> DealerRegistry:
        return self._registry

    # ── Helpers ────────────────────────────────────────────────────

    def _commit(self, snapshot: dict, action: str) -> Outcome:
        """Persist the current inventory, rolling back to ``snapshot`` on failure."""
        try:
            self._store.save(self._store.find_all())
        except OSError as exc:
            logger.error("Failed to persist inventory after %s: %s", action, exc)
            self._store.restore(snapshot)
            return Outcome.WRITE_FAILED
        return Outcome.OK

    def _locate(self, dealer_id: str, vehicle_id: str) -> tuple[Vehicle | None, Outcome]:
        vehicle = self._store.find_by_dealer_and_id(dealer_id, vehicle_id)
        if vehicle is not None:
            return vehicle, Outcome.OK
        if self._store.find_by_vehicle_id(vehicle_id):
            return None, Outcome.WRONG_DEALER
        return None, Outcome.NOT_FOUND

    def _resolve_export_path(self, destination: str | Path | None) -> Path | None:
        if destination is not None:
            return Path(destination)
        return self._export_path

    def _is_canonical(self, path: Path) -> bool:
        canonical = getattr(self._store, "path", None)
        if canonical is None:
            return False
        return Path(canonical).resolve() == path.resolve()

    # ── Lifecycle ──────────────────────────────────────────────────

    def reload(self) -> LoadResult:
        """Re-read the canonical document, replacing the in-memory inventory."""
        with self._lock:
            return self._store.load()

    # ── Acquisition ────────────────────────────────────────────────

    def is_acquisition_enabled(self, dealer_id: str) -> bool:
        return self._registry.is_acquisition_enabled(dealer_id)

    def enable_acquisition(self, dealer_id: str) -> Outcome:
        self._registry.set_acquisition_enabled(dealer_id, True)
        logger.info("Acquisition enabled for dealer %s", dealer_id)
        return Outcome.OK

    def disable_acquisition(self, dealer_id: str) -> Outcome:
        self._registry.set_acquisition_enabled(dealer_id, False)
        logger.info("Acquisition disabled for dealer %s", dealer_id)
        return Outcome.OK

    # ── Mutations ──────────────────────────────────────────────────

    def add_vehicle(self, vehicle: Vehicle) -> Outcome:
        """Insert brand-new stock, subject to the dealer's acquisition gate."""
        try:
            validate_vehicle(vehicle)
        except VehicleValidationError as exc:
            logger.warning("Rejected invalid vehicle %r: %s", vehicle.vehicle_id, exc)
            return Outcome.INVALID

        with self._lock:
            if not self._registry.is_acquisition_enabled(vehicle.dealer_id):
                logger.info(
                    "Add of %s refused: acquisition disabled for dealer %s",
                    vehicle.vehicle_id, vehicle.dealer_id,
                )
                return Outcome.ACQUISITION_DISABLED
            if self._store.find_by_dealer_and_id(vehicle.dealer_id, vehicle.vehicle_id):
                return Outcome.DUPLICATE

            snapshot = self._store.snapshot()
            self._store.put(vehicle.clone())
            outcome = self._commit(snapshot, "add")
            if outcome:
                logger.info("Added vehicle %s/%s", vehicle.dealer_id, vehicle.vehicle_id)
            return outcome

    def remove_vehicle(
        self,
        dealer_id: str,
        vehicle_id: str,
        manufacturer: str,
        model: str,
        price: float,
    ) -> Outcome:
        """Delete stock after double-checking the descriptive fields match."""
        with self._lock:
            vehicle, outcome = self._locate(dealer_id, vehicle_id)
            if vehicle is None:
                return outcome

            try:
                price_matches = math.isclose(
                    float(price), vehicle.price, abs_tol=PRICE_TOLERANCE,
                )
            except (TypeError, ValueError):
                price_matches = False
            if (
                str(manufacturer).strip() != vehicle.manufacturer.strip()
                or str(model).strip() != vehicle.model.strip()
                or not price_matches
            ):
                logger.warning(
                    "Remove of %s/%s refused: details do not match the stored record",
                    dealer_id, vehicle_id,
                )
                return Outcome.MISMATCH
            if vehicle.is_rented:
                return Outcome.RENTED

            snapshot = self._store.snapshot()
            self._store.discard(dealer_id, vehicle_id)
            outcome = self._commit(snapshot, "remove")
            if outcome:
                logger.info("Removed vehicle %s/%s", dealer_id, vehicle_id)
            return outcome

    def rent_vehicle(
        self,
        dealer_id: str,
        vehicle_id: str,
        start: datetime,
        end: datetime,
    ) -> Outcome:
        if not isinstance(start, datetime) or not isinstance(end, datetime):
            return Outcome.INVALID
        try:
            if end < start:
                return Outcome.INVALID
        except TypeError:
            # naive vs aware
            return Outcome.INVALID

        with self._lock:
            vehicle, outcome = self._locate(dealer_id, vehicle_id)
            if vehicle is None:
                return outcome
            if not vehicle.is_rentable():
                return Outcome.NOT_RENTABLE
            if vehicle.is_rented:
                return Outcome.ALREADY_RENTED

            snapshot = self._store.snapshot()
            vehicle.start_rental(start, end)
            outcome = self._commit(snapshot, "rent")
            if outcome:
                logger.info(
                    "Rented vehicle %s/%s from %s to %s",
                    dealer_id, vehicle_id, start.date(), end.date(),
                )
            return outcome

    def return_vehicle(self, dealer_id: str, vehicle_id: str) -> Outcome:
        with self._lock:
            vehicle, outcome = self._locate(dealer_id, vehicle_id)
            if vehicle is None:
                return outcome
            if not vehicle.is_rentable():
                return Outcome.NOT_RENTABLE
            if not vehicle.is_rented:
                return Outcome.NOT_RENTED

            snapshot = self._store.snapshot()
            vehicle.end_rental()
            outcome = self._commit(snapshot, "return")
            if outcome:
                logger.info("Returned vehicle %s/%s", dealer_id, vehicle_id)
            return outcome

    def transfer_vehicle(
        self, source_dealer_id: str, target_dealer_id: str, vehicle_id: str,
    ) -> Outcome:
        """Move available stock between dealers.

        The target dealer's acquisition gate is not consulted: the gate only
        blocks brand-new stock.
        """
        if not target_dealer_id or not str(target_dealer_id).strip():
            return Outcome.INVALID
        if target_dealer_id == source_dealer_id:
            return Outcome.INVALID

        with self._lock:
            vehicle = self._store.find_by_dealer_and_id(source_dealer_id, vehicle_id)
            if vehicle is None:
                return Outcome.NOT_FOUND
            if vehicle.is_rented:
                return Outcome.RENTED
            if self._store.find_by_dealer_and_id(target_dealer_id, vehicle_id):
                return Outcome.DUPLICATE

            snapshot = self._store.snapshot()
            self._store.discard(source_dealer_id, vehicle_id)
            vehicle.dealer_id = target_dealer_id
            # The source dealer's name no longer describes the new owner.
            vehicle.metadata.pop("dealer_name", None)
            self._store.put(vehicle)
            outcome = self._commit(snapshot, "transfer")
            if outcome:
                logger.info(
                    "Transferred vehicle %s from %s to %s",
                    vehicle_id, source_dealer_id, target_dealer_id,
                )
            return outcome

    # ── Bulk import / export ───────────────────────────────────────

    @staticmethod
    def _record_to_vehicle(record: Any) -> Vehicle:
        if isinstance(record, Vehicle):
            vehicle = record.clone()
        elif isinstance(record, dict):
            metadata = {}
            if record.get("dealer_name"):
                metadata["dealer_name"] = str(record["dealer_name"])
            vehicle = create_vehicle(
                record["vehicle_type"],
                vehicle_id=record["vehicle_id"],
                manufacturer=record["manufacturer"],
                model=record["model"],
                price=record["price"],
                dealer_id=record["dealer_id"],
                metadata=metadata,
            )
        else:
            raise TypeError(f"unsupported record type {type(record).__name__}")
        validate_vehicle(vehicle)
        return vehicle

    def import_records(self, records: Iterable[Any]) -> ImportResult:
        """Upsert externally supplied records without the acquisition gate.

        Records that do not map to a valid vehicle are skipped and reported.
        The inventory is persisted once, after the whole batch.
        """
        result = ImportResult()
        with self._lock:
            snapshot = self._store.snapshot()
            seen: set[tuple[str, str]] = set()
            for i, record in enumerate(records):
                try:
                    vehicle = self._record_to_vehicle(record)
                except (KeyError, TypeError, ValueError) as exc:
                    result.skipped += 1
                    result.errors.append(f"record {i}: {exc}")
                    logger.warning("Skipping import record %d: %s", i, exc)
                    continue

                existing = self._store.find_by_dealer_and_id(*vehicle.key)
                if existing is not None and existing.is_rented:
                    result.skipped += 1
                    result.errors.append(
                        f"record {i}: vehicle {vehicle.dealer_id}/{vehicle.vehicle_id} "
                        "is currently rented"
                    )
                    continue
                self._store.put(vehicle)
                # A repeated key within the batch replaces the earlier record.
                if vehicle.key not in seen:
                    seen.add(vehicle.key)
                    result.imported += 1

            if result.imported == 0:
                return result
            if not self._commit(snapshot, "import"):
                result.write_failed = True
                result.imported = 0
                return result

        logger.info(
            "Imported %d vehicle(s), skipped %d", result.imported, result.skipped,
        )
        return result

    def import_xml_file(self, path: str | Path) -> ImportResult:
        try:
            records = parse_import_document(Path(path))
        except DocumentError as exc:
            logger.error("XML import failed: %s", exc)
            return ImportResult(errors=[str(exc)])
        return self.import_records(records)

    def export_inventory(self, destination: str | Path | None = None) -> Outcome:
        """Copy the live inventory to a separate export document."""
        path = self._resolve_export_path(destination)
        if path is None or self._is_canonical(path):
            return Outcome.INVALID
        with self._lock:
            vehicles = self._store.find_all()
            if not vehicles:
                return Outcome.EMPTY_INVENTORY
            try:
                write_document(path, vehicles)
            except OSError as exc:
                logger.error("Export to %s failed: %s", path, exc)
                return Outcome.WRITE_FAILED
        logger.info("Exported %d vehicle(s) to %s", len(vehicles), path)
        return Outcome.OK

    def clear_export_document(self, destination: str | Path | None = None) -> Outcome:
        path = self._resolve_export_path(destination)
        if path is None or self._is_canonical(path):
            return Outcome.INVALID
        try:
            write_document(path, [])
        except OSError as exc:
            logger.error("Clearing export %s failed: %s", path, exc)
            return Outcome.WRITE_FAILED
        return Outcome.OK

    # ── Read-only queries ──────────────────────────────────────────

    def list_for_display(self) -> list[Vehicle]:
        """Detached copies; mutate through the operations above instead."""
        with self._lock:
            return [v.clone() for v in self._store.find_all()]

    def count(self) -> int:
        return self._store.count()

    def get_vehicle(self, dealer_id: str, vehicle_id: str) -> Vehicle | None:
        with self._lock:
            vehicle = self._store.find_by_dealer_and_id(dealer_id, vehicle_id)
            return vehicle.clone() if vehicle is not None else None

    def dealer_ids(self) -> list[str]:
        with self._lock:
            return sorted({v.dealer_id for v in self._store.find_all()})

    def available_for_dealer(self, dealer_id: str) -> list[Vehicle]:
        return [
            v for v in self.list_for_display()
            if v.dealer_id == dealer_id and v.is_rentable() and not v.is_rented
        ]

    def rented_for_dealer(self, dealer_id: str) -> list[Vehicle]:
        return [
            v for v in self.list_for_display()
            if v.dealer_id == dealer_id and v.is_rented
        ]

    def search(self, query: str, field: str = "all") -> list[Vehicle]:
        """Case-insensitive substring search.  A blank query matches everything."""
        field = (field or "all").strip().lower()
        if field not in SEARCH_FIELDS:
            raise ValueError(
                f"Unknown search field '{field}'. "
                f"Must be one of: {', '.join(sorted(SEARCH_FIELDS))}."
            )
        vehicles = self.list_for_display()
        needle = (query or "").strip().lower()
        if not needle:
            return vehicles

        def values(v: Vehicle) -> dict[str, str]:
            return {
                "id": v.vehicle_id,
                "manufacturer": v.manufacturer,
                "model": v.model,
                "dealer": v.dealer_id,
                "type": v.kind.display_name,
            }

        matches = []
        for v in vehicles:
            fields = values(v)
            haystack = fields.values() if field == "all" else (fields[field],)
            if any(needle in value.lower() for value in haystack):
                matches.append(v)
        return matches

    def inventory_summary(self) -> InventorySummary:
        vehicles = self.list_for_display()
        rented = sum(1 for v in vehicles if v.is_rented)
        by_type = Counter(v.kind.display_name for v in vehicles)
        by_dealer = Counter(v.dealer_id for v in vehicles)
        return InventorySummary(
            total=len(vehicles),
            rented=rented,
            available=len(vehicles) - rented,
            by_type=dict(sorted(by_type.items())),
            by_dealer=[DealerStats(d, n) for d, n in sorted(by_dealer.items())],
        )
