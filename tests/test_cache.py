"""Tests for printer cache functionality."""

import json
import time

import pytest

from zplprinter.cache import (
    CachedPrinter,
    clear_cache,
    load_cached_printer,
    save_printer,
)
from zplprinter.connection import Printer


class TestCacheModule:
    """Test printer caching functionality."""

    @pytest.fixture(autouse=True)
    def setup_cache_dir(self, tmp_path, monkeypatch):
        """Set up temporary cache directory for each test."""
        test_config_dir = tmp_path / ".config" / "zplprinter"
        test_cache_file = test_config_dir / "last_printer"

        monkeypatch.setattr("zplprinter.cache.CONFIG_DIR", test_config_dir)
        monkeypatch.setattr("zplprinter.cache.CACHE_FILE", test_cache_file)

        self.config_dir = test_config_dir
        self.cache_file = test_cache_file

    def write_cache(self, data):
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.cache_file.write_text(json.dumps(data))

    def test_load_returns_none_when_no_cache(self):
        assert load_cached_printer() is None

    def test_save_creates_config_dir(self):
        """save_printer creates the config directory if needed."""
        assert not self.config_dir.exists()
        save_printer(Printer("10.0.0.20"))
        assert self.cache_file.exists()

    def test_save_and_load_roundtrip(self):
        save_printer(Printer("10.0.0.20", 6101, "Dock 3"))
        cached = load_cached_printer()

        assert cached is not None
        assert cached.host == "10.0.0.20"
        assert cached.port == 6101
        assert cached.name == "Dock 3"
        assert cached.last_used <= time.time()
        assert cached.to_printer() == Printer("10.0.0.20", 6101, "Dock 3")

    def test_load_returns_none_for_expired_cache(self):
        """Entries older than the TTL are ignored."""
        self.write_cache({
            "host": "10.0.0.20",
            "port": 9100,
            "name": "Old",
            "last_used": time.time() - 31 * 24 * 60 * 60,
        })
        assert load_cached_printer() is None

    def test_custom_ttl(self):
        self.write_cache({"host": "10.0.0.20", "last_used": time.time() - 120})
        assert load_cached_printer(ttl_seconds=60) is None
        assert load_cached_printer(ttl_seconds=600) is not None

    def test_missing_port_defaults(self):
        """Older entries without a port fall back to 9100."""
        self.write_cache({"host": "10.0.0.20", "last_used": time.time()})
        assert load_cached_printer().port == 9100

    def test_invalid_json(self):
        self.config_dir.mkdir(parents=True)
        self.cache_file.write_text("not json{")
        assert load_cached_printer() is None

    def test_missing_host(self):
        self.write_cache({"port": 9100, "last_used": time.time()})
        assert load_cached_printer() is None

    def test_clear(self):
        save_printer(Printer("10.0.0.20"))
        assert clear_cache() is True
        assert not self.cache_file.exists()
        assert clear_cache() is False


class TestCachedPrinter:
    """Test CachedPrinter dataclass."""

    def test_to_printer_empty_name(self):
        """An empty cached name gets the default display name."""
        cached = CachedPrinter(host="10.0.0.20", port=9100, name="", last_used=0.0)
        assert cached.to_printer().name == "ZPL Printer @ 10.0.0.20"
