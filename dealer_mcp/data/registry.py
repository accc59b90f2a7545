"""Per-dealer acquisition gate.  Dealers never toggled are open for acquisition."""

from __future__ import annotations

import threading


class DealerRegistry:
    """Thread-safe mapping of dealer id to an explicit acquisition flag."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._acquisition: dict[str, bool] = {}

    def is_acquisition_enabled(self, dealer_id: str) -> bool:
        with self._lock:
            return self._acquisition.get(dealer_id, True)

    def set_acquisition_enabled(self, dealer_id: str, enabled: bool) -> None:
        with self._lock:
            self._acquisition[dealer_id] = bool(enabled)

    def disabled_dealers(self) -> list[str]:
        with self._lock:
            return sorted(d for d, enabled in self._acquisition.items() if not enabled)
