"""Runtime settings for the dealership engine, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dealer_mcp.normalization import parse_bool

_PACKAGE_DIR = Path(__file__).resolve().parent
_ENV_FILE = _PACKAGE_DIR.parent / ".env"

DEFAULT_INVENTORY_PATH = _PACKAGE_DIR / "data" / "inventory.json"
DEFAULT_EXPORT_PATH = _PACKAGE_DIR / "data" / "export.json"


@dataclass(frozen=True)
class Settings:
    """Where the documents live and how the canonical document is read."""
    inventory_path: Path = DEFAULT_INVENTORY_PATH
    export_path: Path = DEFAULT_EXPORT_PATH
    trust_type_tag: bool = False
    log_level: str = "INFO"


def load_env_file(path: Path = _ENV_FILE) -> None:
    """Load ``KEY=VALUE`` lines from a .env file (no extra dependency).

    Existing environment variables win.
    """
    if not path.is_file():
        return
    for line in path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            k, _, v = line.partition("=")
            os.environ.setdefault(k.strip(), v.strip())


def load_settings() -> Settings:
    load_env_file()
    env = os.environ
    return Settings(
        inventory_path=Path(env.get("DEALERSHIP_INVENTORY_PATH", DEFAULT_INVENTORY_PATH)),
        export_path=Path(env.get("DEALERSHIP_EXPORT_PATH", DEFAULT_EXPORT_PATH)),
        trust_type_tag=parse_bool(env.get("DEALERSHIP_TRUST_TYPE_TAG"), default=False),
        log_level=env.get("DEALERSHIP_LOG_LEVEL", "INFO").upper(),
    )
