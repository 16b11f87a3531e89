"""
High-Level ZPL Printer Interface.

Provides a simple API for printing labels and reading status from a Zebra
network printer. Each method is one self-contained round trip; there is no
session to open or close.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from PIL import Image

from .commands import QueryType, ZPLQueries
from .connection import DEFAULT_PORT, Printer, Transport, default_transport
from .image import DEFAULT_THRESHOLD, graphic_field_from_image, load_image
from .responses import (
    MemoryStatus,
    OdometerInfo,
    PrinterInfo,
    PrintheadInfo,
    parse_hardware_address,
    parse_plug_and_play,
    parse_serial_number,
)
from .status import PrinterStatus
from .zpl import (
    CutNow,
    EndFormat,
    FieldOrigin,
    FieldSeparator,
    StartFormat,
    ZPLCommand,
    ZPLLabel,
    serialize_sequence,
)

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "zplprinter"


class ZPLPrinter:
    """
    High-level interface to a ZPL label printer.

    Example:
        >>> printer = ZPLPrinter("10.0.0.20")
        >>> printer.print_label(ZPLLabel().text(50, 50, "Hello"))
        >>> printer.get_status().is_ok()
        True
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        transport: Optional[Transport] = None,
        name: str = "",
    ):
        """
        Initialize printer interface.

        Args:
            host: Printer IP address or hostname
            port: Raw ZPL port (default 9100)
            transport: Transport to use (default: sockets where available)
            name: Optional display name
        """
        self.printer = Printer(host, port, name)
        self.transport = transport or default_transport()

    @property
    def is_available(self) -> bool:
        """False where the platform cannot open raw sockets."""
        return self.transport.available

    @staticmethod
    def set_debug(enabled: bool):
        """Enable/disable debug logging for the whole package."""
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.setLevel(logging.DEBUG if enabled else logging.NOTSET)
        if enabled and not package_logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))
            package_logger.addHandler(handler)

    # ---- Printing ----

    def print_zpl(self, zpl: Union[str, bytes]) -> None:
        """Send raw ZPL text."""
        logger.debug("Sending %d characters of ZPL to %s", len(zpl), self.printer)
        self.transport.send(self.printer, zpl)

    def print_commands(self, commands: Iterable[ZPLCommand]) -> None:
        """Serialize commands in order and send them."""
        self.print_zpl(serialize_sequence(commands))

    def print_label(self, label: ZPLLabel) -> None:
        """Send a finished label builder."""
        self.print_zpl(label.build())

    def print_image(
        self,
        image: Union[str, Path, bytes, Image.Image],
        x: int = 0,
        y: int = 0,
        threshold: int = DEFAULT_THRESHOLD,
    ) -> None:
        """
        Print an image as an inline ^GFA graphic.

        Raises:
            ImageError: If image cannot be loaded
            ImageSizeError: If image exceeds size limits
        """
        img = load_image(image)
        logger.debug("Image size: %dx%d pixels", img.width, img.height)
        self.print_commands([
            StartFormat(),
            FieldOrigin(x, y),
            graphic_field_from_image(img, threshold),
            FieldSeparator(),
            EndFormat(),
        ])

    def cut(self) -> None:
        """Cut now (printer must be in delayed cut mode, ^MMD)."""
        self.print_commands([CutNow()])

    # ---- Queries ----

    def query(self, query_type: QueryType) -> str:
        """Run a host query and return the raw reply."""
        return self.transport.query(self.printer, ZPLQueries.for_type(query_type))

    def get_status(self) -> PrinterStatus:
        """Query and decode error/warning flags (~HQES)."""
        return PrinterStatus.parse(self.query(QueryType.STATUS))

    def get_memory_status(self) -> MemoryStatus:
        """Query and decode RAM status (~HM)."""
        return MemoryStatus.parse(self.query(QueryType.MEMORY))

    def get_info(self) -> PrinterInfo:
        """
        Run every informational query.

        Stops at the first failing query; its exception propagates.
        """
        return PrinterInfo(
            serial_number=parse_serial_number(self.query(QueryType.SERIAL_NUMBER)),
            hardware_address=parse_hardware_address(self.query(QueryType.HARDWARE_ADDRESS)),
            odometer=OdometerInfo.parse(self.query(QueryType.ODOMETER)),
            printhead_life=PrintheadInfo.parse(self.query(QueryType.PRINTHEAD_LIFE)),
            plug_and_play=parse_plug_and_play(self.query(QueryType.PLUG_AND_PLAY)),
            memory_status=self.get_memory_status(),
        )

    def __repr__(self) -> str:
        return f"ZPLPrinter({self.printer.host!r}, {self.printer.port})"
