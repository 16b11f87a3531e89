"""Tests for CLI functionality."""

import click
import pytest
from click.testing import CliRunner
from PIL import Image

from zplprinter import cache
from zplprinter.cli import example_commands, main, validate_host
from zplprinter.connection import Printer
from zplprinter.exceptions import TimeoutError
from zplprinter.zpl import serialize_sequence

STATUS_OK = "ERRORS: 0 00000000 00000000\r\nWARNINGS: 0 00000000 00000000\r\n"
STATUS_RIBBON_OUT = "ERRORS: 1 00000000 00000002\r\nWARNINGS: 1 00000000 00000002\r\n"


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_cache(tmp_path, monkeypatch):
    """Keep the printer cache out of the real home directory."""
    config_dir = tmp_path / ".config" / "zplprinter"
    monkeypatch.setattr("zplprinter.cache.CONFIG_DIR", config_dir)
    monkeypatch.setattr("zplprinter.cache.CACHE_FILE", config_dir / "last_printer")


@pytest.fixture
def transport(fake_transport, monkeypatch):
    """Route every CLI connection through the fake transport."""
    monkeypatch.setattr("zplprinter.cli.SocketTransport", lambda **kwargs: fake_transport)
    return fake_transport


class TestHostValidation:
    """Test --host validation."""

    @pytest.mark.parametrize("host", ["10.0.0.20", "zebra-01", "zebra-01.example.com"])
    def test_valid(self, host):
        assert validate_host(None, None, host) == host

    @pytest.mark.parametrize("host", ["300.1.1.1", "bad_host", "-zebra", "1.2.3"])
    def test_invalid(self, host):
        with pytest.raises(click.BadParameter):
            validate_host(None, None, host)

    def test_none(self):
        """No host means use the cache."""
        assert validate_host(None, None, None) is None

    def test_command_rejects_invalid_host(self, runner):
        result = runner.invoke(main, ["status", "--host", "bad_host"])
        assert result.exit_code != 0
        assert "Invalid printer host" in result.output


class TestHello:
    """Test the example label command."""

    def test_dry_run(self, runner):
        """ZPL is printed instead of sent."""
        result = runner.invoke(main, ["hello", "--dry-run", "--text", "Hi"])
        assert result.exit_code == 0
        assert result.output.strip() == serialize_sequence(example_commands("Hi"))
        assert result.output.startswith("^XA^FO50,50^A0N,50,50^FDHi^FS")

    def test_send(self, runner, transport):
        result = runner.invoke(main, ["hello", "--host", "10.0.0.20"])
        assert result.exit_code == 0
        assert "Label sent." in result.output
        printer, payload = transport.sent[0]
        assert printer == Printer("10.0.0.20", 9100)
        assert payload.endswith("^XZ")


class TestStatus:
    """Test the status command."""

    def test_ok(self, runner, transport):
        transport.replies["~HQES\r\n"] = STATUS_OK
        result = runner.invoke(main, ["status", "--host", "10.0.0.20"])
        assert result.exit_code == 0
        assert "Printer Status: OK" in result.output

    def test_errors_exit_nonzero(self, runner, transport):
        """Reported errors give exit status 1."""
        transport.replies["~HQES\r\n"] = STATUS_RIBBON_OUT
        result = runner.invoke(main, ["status", "--host", "10.0.0.20"])
        assert result.exit_code == 1
        assert "Ribbon out or not loaded" in result.output
        assert "Clean printhead" in result.output

    def test_timeout(self, runner, transport):
        transport.replies["~HQES\r\n"] = TimeoutError("No response within 5.0s")
        result = runner.invoke(main, ["status", "--host", "10.0.0.20"])
        assert result.exit_code == 1
        assert "Connection error: No response" in result.output

    def test_malformed_shows_raw(self, runner, transport):
        transport.replies["~HQES\r\n"] = "ERRORS: 1\r\n"
        result = runner.invoke(main, ["status", "--host", "10.0.0.20"])
        assert result.exit_code == 1
        assert "Parse error" in result.output
        assert "Raw response" in result.output

    def test_success_caches_printer(self, runner, transport):
        transport.replies["~HQES\r\n"] = STATUS_OK
        runner.invoke(main, ["status", "--host", "10.0.0.20", "--port", "6101"])
        cached = cache.load_cached_printer()
        assert (cached.host, cached.port) == ("10.0.0.20", 6101)

    def test_failure_does_not_cache(self, runner, transport):
        transport.replies["~HQES\r\n"] = TimeoutError("silent")
        runner.invoke(main, ["status", "--host", "10.0.0.20"])
        assert cache.load_cached_printer() is None


class TestPrinterResolution:
    """Test --host fallback to the cached printer."""

    def test_no_host_no_cache(self, runner, transport):
        result = runner.invoke(main, ["status"])
        assert result.exit_code == 1
        assert "none cached" in result.output

    def test_uses_cached_printer(self, runner, transport):
        cache.save_printer(Printer("10.0.0.30", 9100, "Dock 3"))
        transport.replies["~HQES\r\n"] = STATUS_OK

        result = runner.invoke(main, ["status"])

        assert result.exit_code == 0
        assert "Using cached printer: Dock 3" in result.output
        assert transport.queries[0][0].host == "10.0.0.30"

    def test_no_sockets(self, runner, monkeypatch):
        monkeypatch.setattr("zplprinter.cli.SOCKETS_AVAILABLE", False)
        result = runner.invoke(main, ["status", "--host", "10.0.0.20"])
        assert result.exit_code == 1
        assert "not available" in result.output


class TestQueries:
    """Test memory, query and info commands."""

    def test_memory(self, runner, transport):
        transport.replies["~HM\r\n"] = "1024,780,779\r\n"
        result = runner.invoke(main, ["memory", "--host", "10.0.0.20"])
        assert result.exit_code == 0
        assert "Total RAM: 1024 KB" in result.output

    def test_query_raw(self, runner, transport):
        """Query codes are case-insensitive."""
        transport.replies["~HQSN\r\n"] = "XXZ1234567"
        result = runner.invoke(main, ["query", "sn", "--host", "10.0.0.20"])
        assert result.exit_code == 0
        assert "> ~HQSN" in result.output
        assert "XXZ1234567" in result.output

    def test_info(self, runner, transport):
        transport.replies.update({
            "~HQSN\r\n": "XXZ1234567",
            "~HQHA\r\n": "00074D2C5A1B",
            "~HQOD\r\n": "1234 INCHES\r\n567 LABELS",
            "~HQPH\r\n": "100\r\n20",
            "~HQPP\r\n": "MODEL:ZT410;",
            "~HM\r\n": "1024,780,779",
        })
        result = runner.invoke(main, ["info", "--host", "10.0.0.20"])
        assert result.exit_code == 0
        assert "Hardware Address: 00:07:4D:2C:5A:1B" in result.output


class TestFiles:
    """Test commands that read or write files."""

    def test_send_file(self, runner, transport, tmp_path):
        """Files are sent byte for byte."""
        path = tmp_path / "label.zpl"
        path.write_bytes(b"^XA^FDHi^FS^XZ")

        result = runner.invoke(main, ["send", str(path), "--host", "10.0.0.20"])

        assert result.exit_code == 0
        assert transport.sent[0][1] == b"^XA^FDHi^FS^XZ"

    def test_image(self, runner, tmp_path):
        path = tmp_path / "logo.png"
        Image.new("1", (8, 1), color=0).save(path)

        result = runner.invoke(main, ["image", str(path), "--x", "10", "--y", "20"])

        assert result.exit_code == 0
        assert result.output.strip() == "^XA^FO10,20^GFA,1,1,1,FF^FS^XZ"

    def test_image_download(self, runner, tmp_path):
        path = tmp_path / "logo.png"
        Image.new("1", (8, 1), color=0).save(path)

        result = runner.invoke(main, ["image", str(path), "--name", "R:LOGO.GRF"])

        assert result.output.strip() == "~DGR:LOGO.GRF,1,1,FF"

    def test_image_invalid(self, runner, tmp_path):
        path = tmp_path / "logo.png"
        path.write_bytes(b"fake png")
        result = runner.invoke(main, ["image", str(path)])
        assert result.exit_code == 1
        assert "Image error" in result.output

    def test_render(self, runner, tmp_path, monkeypatch):
        source = tmp_path / "label.zpl"
        source.write_text("^XA^XZ")
        output = tmp_path / "label.png"
        monkeypatch.setattr(
            "zplprinter.cli.LabelaryClient.render", lambda self, zpl: b"PNGDATA"
        )

        result = runner.invoke(main, ["render", str(source), "-o", str(output)])

        assert result.exit_code == 0
        assert output.read_bytes() == b"PNGDATA"


class TestForget:
    """Test the forget command."""

    def test_forget(self, runner):
        cache.save_printer(Printer("10.0.0.20"))
        result = runner.invoke(main, ["forget"])
        assert "Cached printer cleared." in result.output
        assert cache.load_cached_printer() is None

    def test_forget_empty(self, runner):
        result = runner.invoke(main, ["forget"])
        assert "No cached printer." in result.output
