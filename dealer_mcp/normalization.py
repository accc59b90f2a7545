"""Shared canonical normalization functions for vehicle data.

Single source of truth, imported by both codecs and by the tool layer's
boundary validation.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from dealer_mcp.constants import (
    DEFAULT_INFERRED_KIND,
    MODEL_KIND_HINTS,
    RENTAL_DATE_FORMATS,
)

_PRICE_NOISE = frozenset("$£€, \t")


def clean_numeric_string(raw: str) -> str:
    """Drop currency symbols, thousands separators and whitespace."""
    return "".join(c for c in raw if c not in _PRICE_NOISE)


def parse_price(value: Any) -> float | None:
    """Best-effort price parsing.  Returns ``None`` for unparseable input."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        parsed = float(value)
        return parsed if math.isfinite(parsed) else None
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        cleaned = clean_numeric_string(stripped)
        if not cleaned:
            return None
        try:
            parsed = float(cleaned)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def parse_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "y", "on"}:
            return True
        if lowered in {"false", "0", "no", "n", "off", ""}:
            return False
    return default


# ── Timestamps ──────────────────────────────────────────────────────


def now_millis() -> datetime:
    """Current UTC time truncated to the millisecond precision the document keeps."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def to_epoch_millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(round(value.timestamp() * 1000))


def parse_epoch_millis(value: Any) -> datetime | None:
    """Epoch milliseconds (int, float or numeric string) to an aware UTC datetime."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            value = float(stripped)
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    try:
        return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_rental_date(raw: Any) -> datetime | None:
    """Parse ``MM/DD/YYYY`` or ``YYYY-MM-DD`` into midnight UTC.  ``None`` if malformed."""
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    if not isinstance(raw, str):
        return None
    stripped = raw.strip()
    if not stripped:
        return None
    for fmt in RENTAL_DATE_FORMATS:
        try:
            parsed = datetime.strptime(stripped, fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=timezone.utc)
    return None


# ── Kind inference ──────────────────────────────────────────────────


def infer_kind_from_model(model: str | None) -> str:
    """Guess the kind tag from a model name.  Unrecognized models are SUVs."""
    if not model:
        return DEFAULT_INFERRED_KIND
    lowered = model.lower()
    for needles, kind in MODEL_KIND_HINTS:
        if any(needle in lowered for needle in needles):
            return kind
    return DEFAULT_INFERRED_KIND
