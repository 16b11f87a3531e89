"""
Printer address caching for remembering last-used printer.

Stores the last printer that answered successfully so CLI commands can omit
--host.
"""

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .connection import DEFAULT_PORT, Printer

# Default cache TTL: 30 days (network printers rarely move)
DEFAULT_TTL_SECONDS = 30 * 24 * 60 * 60

# Config directory location
CONFIG_DIR = Path.home() / ".config" / "zplprinter"
CACHE_FILE = CONFIG_DIR / "last_printer"


@dataclass
class CachedPrinter:
    """Cached printer information."""

    host: str
    port: int
    name: str
    last_used: float  # Unix timestamp

    def to_printer(self) -> Printer:
        return Printer(self.host, self.port, self.name)


def load_cached_printer(ttl_seconds: int = DEFAULT_TTL_SECONDS) -> Optional[CachedPrinter]:
    """Load the cached printer if it exists and hasn't expired.

    Args:
        ttl_seconds: Maximum age of cache in seconds. Default 30 days.

    Returns:
        CachedPrinter if valid cache exists, None otherwise.
    """
    if not CACHE_FILE.exists():
        return None

    try:
        data = json.loads(CACHE_FILE.read_text())
        cached = CachedPrinter(
            host=data["host"],
            port=int(data.get("port", DEFAULT_PORT)),
            name=data.get("name", ""),
            last_used=data["last_used"],
        )

        age = time.time() - cached.last_used
        if age > ttl_seconds:
            return None

        return cached
    except (json.JSONDecodeError, KeyError, TypeError, ValueError):
        # Invalid cache file - treat as missing
        return None


def save_printer(printer: Printer) -> None:
    """Save printer to cache."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    data = {
        "host": printer.host,
        "port": printer.port,
        "name": printer.name,
        "last_used": time.time(),
    }
    CACHE_FILE.write_text(json.dumps(data, indent=2))


def clear_cache() -> bool:
    """Clear the cached printer.

    Returns:
        True if cache was cleared, False if no cache existed.
    """
    if CACHE_FILE.exists():
        CACHE_FILE.unlink()
        return True
    return False
