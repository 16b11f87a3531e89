"""
Integration tests for network ZPL printers.

These tests require real hardware to run. By default, tests marked with
@pytest.mark.hardware are skipped. To run them, use:

    pytest tests/ -m hardware --host=10.0.0.20

Where 10.0.0.20 is the address of a Zebra printer listening on port 9100.
The print tests feed real labels.
"""

import pytest

from zplprinter import MemoryStatus, PrinterStatus, ZPLLabel
from zplprinter.image import create_test_pattern


# Fixtures (printer_host, hardware_printer) are defined in conftest.py


class TestQueries:
    """Read-only queries against a real printer."""

    @pytest.mark.hardware
    def test_status(self, hardware_printer):
        """Status decodes into known flag sets."""
        status = hardware_printer.get_status()
        assert isinstance(status, PrinterStatus)
        assert "ERRORS:" in [field.upper() for field in status.raw_fields]

    @pytest.mark.hardware
    def test_memory(self, hardware_printer):
        """Memory figures are consistent."""
        mem = hardware_printer.get_memory_status()
        assert isinstance(mem, MemoryStatus)
        assert mem.current_available_kb <= mem.max_available_kb <= mem.total_ram_kb

    @pytest.mark.hardware
    def test_info(self, hardware_printer):
        info = hardware_printer.get_info()
        assert info.serial_number
        assert info.memory_status is not None


class TestPrinting:
    """Tests that print labels."""

    @pytest.mark.hardware
    def test_print_text_label(self, hardware_printer):
        label = (
            ZPLLabel()
            .text(50, 50, "zplprinter integration")
            .field_origin(50, 100)
            .graphic_box(400, 3, 3)
            .field_separator()
        )
        hardware_printer.print_label(label)

    @pytest.mark.hardware
    def test_print_image(self, hardware_printer):
        hardware_printer.print_image(create_test_pattern(96, 96), x=50, y=50)
