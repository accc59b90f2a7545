"""Process-wide engine facade.

Tool modules call :func:`get_manager`; tests inject an isolated instance
with :func:`set_manager`.
"""

from __future__ import annotations

from dealer_mcp.config import Settings, load_settings
from dealer_mcp.data.manager import DealershipManager
from dealer_mcp.data.store import JsonInventoryStore

_manager: DealershipManager | None = None


def build_manager(settings: Settings) -> DealershipManager:
    """Create a manager for ``settings`` and load the canonical document."""
    store = JsonInventoryStore(settings.inventory_path, trust_type_tag=settings.trust_type_tag)
    manager = DealershipManager(store, export_path=settings.export_path)
    manager.reload()
    return manager


def get_manager() -> DealershipManager:
    """Return the active DealershipManager singleton, creating + loading if needed."""
    global _manager  # noqa: PLW0603
    if _manager is None:
        _manager = build_manager(load_settings())
    return _manager


def set_manager(manager: DealershipManager | None) -> None:
    """Inject a manager instance for testing."""
    global _manager  # noqa: PLW0603
    _manager = manager
