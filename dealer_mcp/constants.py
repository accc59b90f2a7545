"""Shared constants used across the codecs, the engine and the tools.

Single source of truth for document keys, the pounds conversion rate and
the model-name table used for kind inference.
"""

from __future__ import annotations

INVENTORY_ROOT_KEY = "car_inventory"

POUNDS_TO_DOLLARS = 1.25

# Substrings checked in order against the lowercased model name.
MODEL_KIND_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("cr-v", "explorer", "range rover"), "suv"),
    (("model 3", "g70"), "sedan"),
    (("silverado", "tundra"), "pickup"),
    (("supra", "miata"), "sports car"),
)
DEFAULT_INFERRED_KIND = "suv"

RENTAL_DATE_FORMATS: tuple[str, ...] = ("%m/%d/%Y", "%Y-%m-%d")

SEARCH_FIELDS: frozenset[str] = frozenset({
    "all",
    "id",
    "manufacturer",
    "model",
    "dealer",
    "type",
})

PRICE_TOLERANCE = 0.005
