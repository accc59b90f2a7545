"""Vehicle entity, the closed set of vehicle kinds, and boundary validation."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from dealer_mcp.errors import VehicleValidationError
from dealer_mcp.normalization import now_millis


class VehicleKind(str, Enum):
    """Vehicle kinds.  The value is the tag written to ``vehicle_type``."""

    SUV = "suv"
    SEDAN = "sedan"
    PICKUP = "pickup"
    SPORTS_CAR = "sports car"

    @property
    def rentable(self) -> bool:
        return self is not VehicleKind.SPORTS_CAR

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_tag(cls, tag: str) -> VehicleKind:
        """Resolve a tag or display spelling (``'Sports Car'``, ``'SportsCar'``...)."""
        if isinstance(tag, VehicleKind):
            return tag
        key = "".join(c for c in str(tag).lower() if c.isalnum())
        try:
            return _TAG_ALIASES[key]
        except KeyError:
            raise ValueError(f"Unknown vehicle type '{tag}'.") from None


_DISPLAY_NAMES = {
    VehicleKind.SUV: "SUV",
    VehicleKind.SEDAN: "Sedan",
    VehicleKind.PICKUP: "Pickup",
    VehicleKind.SPORTS_CAR: "SportsCar",
}

_TAG_ALIASES = {
    "suv": VehicleKind.SUV,
    "sedan": VehicleKind.SEDAN,
    "pickup": VehicleKind.PICKUP,
    "sportscar": VehicleKind.SPORTS_CAR,
}


@dataclass
class Vehicle:
    """One physical unit of stock, identified by ``(dealer_id, vehicle_id)``."""
    vehicle_id: str
    kind: VehicleKind
    manufacturer: str
    model: str
    price: float
    dealer_id: str
    acquired_at: datetime = field(default_factory=now_millis)
    is_rented: bool = False
    rental_start: datetime | None = None
    rental_end: datetime | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def key(self) -> tuple[str, str]:
        return (self.dealer_id, self.vehicle_id)

    @property
    def dealer_name(self) -> str | None:
        return self.metadata.get("dealer_name")

    @property
    def status(self) -> str:
        if not self.is_rentable():
            return "NOT RENTABLE"
        return "RENTED" if self.is_rented else "AVAILABLE"

    def is_rentable(self) -> bool:
        return self.kind.rentable

    def start_rental(self, start: datetime, end: datetime) -> None:
        self.is_rented = True
        self.rental_start = start
        self.rental_end = end

    def end_rental(self) -> None:
        self.is_rented = False
        self.rental_start = None
        self.rental_end = None

    def clone(self) -> Vehicle:
        return copy.deepcopy(self)

    def describe(self) -> str:
        """One-line summary used by list and search output."""
        dealer_info = self.dealer_id
        if self.dealer_name:
            dealer_info += f" ({self.dealer_name})"
        return (
            f"Type: {self.kind.display_name}, ID: {self.vehicle_id}, "
            f"Manufacturer: {self.manufacturer}, Model: {self.model}, "
            f"Price: ${self.price:,.2f}, Dealer: {dealer_info}, Status: {self.status}"
        )


def create_vehicle(
    kind_tag: str,
    *,
    vehicle_id: str,
    manufacturer: str,
    model: str,
    price: float,
    dealer_id: str,
    acquired_at: datetime | None = None,
    metadata: dict[str, str] | None = None,
    **extra: Any,
) -> Vehicle:
    """Build a vehicle from a kind tag.  Raises ``ValueError`` for unknown tags."""
    vehicle = Vehicle(
        vehicle_id=vehicle_id,
        kind=VehicleKind.from_tag(kind_tag),
        manufacturer=manufacturer,
        model=model,
        price=price,
        dealer_id=dealer_id,
        metadata=dict(metadata or {}),
        **extra,
    )
    if acquired_at is not None:
        vehicle.acquired_at = acquired_at
    return vehicle


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_vehicle(vehicle: Vehicle) -> None:
    """Raise :class:`VehicleValidationError` listing every invalid field."""
    problems: list[str] = []
    for label, value in (
        ("Dealer ID", vehicle.dealer_id),
        ("Vehicle ID", vehicle.vehicle_id),
        ("Manufacturer", vehicle.manufacturer),
        ("Model", vehicle.model),
    ):
        if _is_blank(value):
            problems.append(f"{label} is required.")

    price = vehicle.price
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        problems.append("Price must be a number.")
    elif not math.isfinite(price) or price <= 0:
        problems.append("Price must be greater than 0.")

    if not isinstance(vehicle.kind, VehicleKind):
        problems.append("Vehicle type is invalid.")

    if problems:
        raise VehicleValidationError(" ".join(problems))
