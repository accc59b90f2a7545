"""Canonical inventory document codec (``{"car_inventory": [...]}``).

Reads tolerate malformed individual records (they are skipped and counted);
writes are atomic: the full document is rendered in memory, written to a
temporary sibling file and moved over the destination with ``os.replace``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from dealer_mcp.constants import INVENTORY_ROOT_KEY
from dealer_mcp.data.vehicle import Vehicle, VehicleKind
from dealer_mcp.errors import DocumentError
from dealer_mcp.normalization import (
    infer_kind_from_model,
    parse_bool,
    parse_epoch_millis,
    parse_price,
    to_epoch_millis,
)

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = (
    "vehicle_id",
    "vehicle_manufacturer",
    "vehicle_model",
    "price",
    "dealership_id",
    "acquisition_date",
)


# ── Record mapping ──────────────────────────────────────────────────


def vehicle_to_record(vehicle: Vehicle) -> dict[str, Any]:
    record: dict[str, Any] = {
        "vehicle_id": vehicle.vehicle_id,
        "vehicle_manufacturer": vehicle.manufacturer,
        "vehicle_model": vehicle.model,
        "acquisition_date": to_epoch_millis(vehicle.acquired_at),
        "price": vehicle.price,
        "dealership_id": vehicle.dealer_id,
        "vehicle_type": vehicle.kind.value,
        "is_rented": vehicle.is_rented,
    }
    if vehicle.rental_start is not None:
        record["rental_start_date"] = to_epoch_millis(vehicle.rental_start)
    if vehicle.rental_end is not None:
        record["rental_end_date"] = to_epoch_millis(vehicle.rental_end)
    if "dealer_name" in vehicle.metadata:
        record["dealer_name"] = vehicle.metadata["dealer_name"]
    return record


def _resolve_kind(record: dict[str, Any], trust_type_tag: bool) -> VehicleKind:
    model = str(record["vehicle_model"])
    if trust_type_tag:
        tag = record.get("vehicle_type")
        if isinstance(tag, str):
            try:
                return VehicleKind.from_tag(tag)
            except ValueError:
                logger.warning("Unknown vehicle_type %r, inferring from model %r", tag, model)
    return VehicleKind(infer_kind_from_model(model))


def record_to_vehicle(record: Any, *, trust_type_tag: bool = False) -> Vehicle:
    """Map one document record to a Vehicle.  Raises ``ValueError`` when malformed."""
    if not isinstance(record, dict):
        raise ValueError("record is not an object")
    missing = [f for f in _REQUIRED_FIELDS if record.get(f) is None]
    if missing:
        raise ValueError(f"missing field(s): {', '.join(missing)}")

    price = parse_price(record["price"])
    if price is None or price <= 0:
        raise ValueError(f"invalid price {record['price']!r}")
    acquired_at = parse_epoch_millis(record["acquisition_date"])
    if acquired_at is None:
        raise ValueError(f"invalid acquisition_date {record['acquisition_date']!r}")

    vehicle = Vehicle(
        vehicle_id=str(record["vehicle_id"]),
        kind=_resolve_kind(record, trust_type_tag),
        manufacturer=str(record["vehicle_manufacturer"]),
        model=str(record["vehicle_model"]),
        price=price,
        dealer_id=str(record["dealership_id"]),
        acquired_at=acquired_at,
    )

    if parse_bool(record.get("is_rented"), default=False):
        if vehicle.is_rentable():
            vehicle.is_rented = True
            vehicle.rental_start = parse_epoch_millis(record.get("rental_start_date"))
            vehicle.rental_end = parse_epoch_millis(record.get("rental_end_date"))
        else:
            logger.warning(
                "Vehicle %s/%s is not rentable; ignoring stored rental state",
                vehicle.dealer_id, vehicle.vehicle_id,
            )

    dealer_name = record.get("dealer_name")
    if dealer_name is not None:
        vehicle.metadata["dealer_name"] = str(dealer_name)
    return vehicle


# ── Documents ───────────────────────────────────────────────────────


def read_document(path: Path, *, trust_type_tag: bool = False) -> tuple[list[Vehicle], int]:
    """Return ``(vehicles, skipped)``.

    Raises ``FileNotFoundError`` when the file is absent and
    :class:`DocumentError` when it cannot be read or is not an inventory.
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentError(f"cannot read {path}: {exc}") from exc

    if not raw.strip():
        return [], 0
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DocumentError(f"malformed JSON in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise DocumentError(f"{path} is not a JSON object")

    records = payload.get(INVENTORY_ROOT_KEY)
    if records is None:
        return [], 0
    if not isinstance(records, list):
        raise DocumentError(f"'{INVENTORY_ROOT_KEY}' in {path} is not an array")

    vehicles: list[Vehicle] = []
    skipped = 0
    for i, record in enumerate(records):
        try:
            vehicles.append(record_to_vehicle(record, trust_type_tag=trust_type_tag))
        except (ValueError, TypeError) as exc:
            skipped += 1
            logger.warning("Skipping inventory record %d in %s: %s", i, path, exc)
    return vehicles, skipped


def render_document(vehicles: Iterable[Vehicle]) -> str:
    payload = {INVENTORY_ROOT_KEY: [vehicle_to_record(v) for v in vehicles]}
    return json.dumps(payload, indent=2) + "\n"


def write_document(path: Path, vehicles: Iterable[Vehicle]) -> None:
    """Atomically replace ``path`` with a document holding exactly ``vehicles``.

    Raises ``OSError`` on failure; the previous file is left untouched.
    """
    content = render_document(vehicles)
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=target.parent,
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.remove(tmp_name)
        except OSError:
            pass
        raise
