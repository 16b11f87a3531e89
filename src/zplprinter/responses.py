"""
Response Parsers for ZPL Host Queries.

This module parses replies to ~HM (memory) and the informational ~HQ queries
(serial number, MAC address, odometer, ...). The ~HQES status reply has its
own decoder in status.py.

Every parser either returns a complete record or raises ParseError carrying
the raw reply; nothing is ever half-filled.
"""

from dataclasses import dataclass
from typing import Optional

from .exceptions import IncompleteResponseError, MalformedResponseError


def _lines(response: str) -> list[str]:
    """Trimmed lines with STX/ETX framing removed (empty lines kept)."""
    return [
        line.replace("\x02", "").replace("\x03", "").strip()
        for line in response.splitlines()
    ]


def _content_lines(response: str) -> list[str]:
    return [line for line in _lines(response) if line]


def _is_number(text: str) -> bool:
    """Unsigned ASCII decimal; str.isdigit() alone also takes other scripts."""
    return text.isascii() and text.isdigit()


def _require_lines(response: str, count: int, what: str) -> list[str]:
    lines = _content_lines(response)
    if len(lines) < count:
        raise IncompleteResponseError(
            f"{what} response needs {count} line(s), got {len(lines)}", raw=response
        )
    return lines


@dataclass(frozen=True)
class MemoryStatus:
    """
    Parsed ~HM response.

    Response structure (single line, values in KB):
        total_ram,max_available,current_available
    Example: "1024,780,779"
    """

    total_ram_kb: int
    max_available_kb: int
    current_available_kb: int

    @classmethod
    def parse(cls, response: str) -> "MemoryStatus":
        """
        Parse ~HM response text.

        Raises:
            IncompleteResponseError: Fewer than three fields
            MalformedResponseError: A field is not a decimal integer
        """
        lines = _content_lines(response)
        if not lines:
            raise IncompleteResponseError("Empty memory status response", raw=response)

        parts = [part.strip() for part in lines[0].split(",")]
        if len(parts) < 3:
            raise IncompleteResponseError(
                f"Memory status needs 3 fields, got {len(parts)}", raw=response
            )
        if len(parts) > 3 or not all(_is_number(part) for part in parts):
            raise MalformedResponseError(
                f"Memory status fields must be 3 integers: {lines[0]!r}", raw=response
            )

        total, max_available, current = (int(part) for part in parts)
        return cls(
            total_ram_kb=total,
            max_available_kb=max_available,
            current_available_kb=current,
        )

    @property
    def used_kb(self) -> int:
        return max(self.max_available_kb - self.current_available_kb, 0)

    def usage_percent(self) -> float:
        """
        Share of available memory in use.

        Raises:
            MalformedResponseError: max_available_kb is zero
        """
        if self.max_available_kb == 0:
            raise MalformedResponseError(
                "Memory usage undefined: printer reported 0 KB available",
                raw=f"{self.total_ram_kb},{self.max_available_kb},{self.current_available_kb}",
            )
        return (self.max_available_kb - self.current_available_kb) / self.max_available_kb * 100

    def __str__(self) -> str:
        text = (
            f"Total RAM: {self.total_ram_kb} KB\n"
            f"Maximum Available: {self.max_available_kb} KB\n"
            f"Currently Available: {self.current_available_kb} KB"
        )
        if self.max_available_kb:
            text += f"\nMemory Usage: {self.usage_percent():.1f}%"
        return text


def parse_serial_number(response: str) -> str:
    """Parse ~HQSN. Quotes are stripped; <...> framing lines are skipped."""
    for line in _content_lines(response):
        if line.startswith('"') and line.endswith('"') and len(line) >= 2:
            return line.strip('"')
        if not line.startswith("<"):
            return line
    raise IncompleteResponseError("No serial number in response", raw=response)


def parse_hardware_address(response: str) -> str:
    """Parse ~HQHA. Bare 12-digit hex is formatted as AA:BB:CC:DD:EE:FF."""
    for line in _content_lines(response):
        if len(line) == 12 and all(c in "0123456789abcdefABCDEF" for c in line):
            return ":".join(line[i:i + 2] for i in range(0, 12, 2))
        if not line.startswith("<"):
            return line
    raise IncompleteResponseError("No hardware address in response", raw=response)


def parse_plug_and_play(response: str) -> str:
    """Parse ~HQPP: the device ID string, blank lines removed."""
    lines = _content_lines(response)
    if not lines:
        raise IncompleteResponseError("Empty plug and play response", raw=response)
    return "\n".join(lines)


def parse_firmware_version(response: str) -> str:
    """Parse a firmware version reply."""
    cleaned = response.replace("\x02", "").replace("\x03", "").strip()
    if not cleaned:
        raise IncompleteResponseError("Empty firmware version response", raw=response)
    return cleaned


@dataclass(frozen=True)
class OdometerInfo:
    """Parsed ~HQOD response (first two lines)."""

    total_print_length: str
    total_labels: str

    @classmethod
    def parse(cls, response: str) -> "OdometerInfo":
        lines = _require_lines(response, 2, "Odometer")
        return cls(total_print_length=lines[0], total_labels=lines[1])


@dataclass(frozen=True)
class PrintheadInfo:
    """Parsed ~HQPH response (first two lines)."""

    used_inches: str
    total_labels: str

    @classmethod
    def parse(cls, response: str) -> "PrintheadInfo":
        lines = _require_lines(response, 2, "Printhead life")
        return cls(used_inches=lines[0], total_labels=lines[1])


@dataclass(frozen=True)
class HostStatus:
    """Line-per-field host status summary."""

    communication_mode: str
    paper_out: bool
    pause: bool
    label_length: str
    labels_remaining: str

    @classmethod
    def parse(cls, response: str) -> "HostStatus":
        lines = _require_lines(response, 4, "Host status")
        return cls(
            communication_mode=lines[0],
            paper_out=lines[1] == "1",
            pause=lines[2] == "1",
            label_length=lines[3],
            labels_remaining=lines[4] if len(lines) > 4 else "0",
        )


@dataclass(frozen=True)
class SensorMediaStatus:
    """Media type, sensor profile and media/ribbon detection."""

    media_type: str
    sensor_profile: str
    media_detected: bool
    ribbon_detected: bool

    @classmethod
    def parse(cls, response: str) -> "SensorMediaStatus":
        lines = _require_lines(response, 1, "Sensor media")

        def get(index: int, default: str) -> str:
            return lines[index] if len(lines) > index else default

        return cls(
            media_type=get(0, "Unknown"),
            sensor_profile=get(1, "Unknown"),
            media_detected=get(2, "0") == "1",
            ribbon_detected=get(3, "0") == "1",
        )


ALERT_CODES = {
    "1": "Head Open",
    "2": "Ribbon Out",
    "3": "Media Out",
    "4": "Cutter Fault",
}


@dataclass(frozen=True)
class AlertInfo:
    """Active alert codes, one per line; "0" means no alert."""

    active_alerts: tuple[str, ...]
    raw_codes: str

    @classmethod
    def parse(cls, response: str) -> "AlertInfo":
        """Unknown codes are kept verbatim. No alerts yields an empty tuple."""
        alerts = tuple(
            ALERT_CODES.get(line, line)
            for line in _content_lines(response)
            if line != "0"
        )
        return cls(active_alerts=alerts, raw_codes=response)


@dataclass(frozen=True)
class SuppliesStatus:
    """Media and ribbon status with optional remaining-media percentage."""

    media_status: str
    ribbon_status: str
    media_remaining_percent: Optional[int] = None

    @classmethod
    def parse(cls, response: str) -> "SuppliesStatus":
        lines = _require_lines(response, 1, "Supplies")
        percent = None
        if len(lines) > 2 and _is_number(lines[2]) and int(lines[2]) <= 255:
            percent = int(lines[2])
        return cls(
            media_status=lines[0],
            ribbon_status=lines[1] if len(lines) > 1 else "Unknown",
            media_remaining_percent=percent,
        )


@dataclass(frozen=True)
class BatteryInfo:
    """Battery charge text (e.g. "85%") and charging state."""

    charge_percent: str
    charging: bool

    @classmethod
    def parse(cls, response: str) -> "BatteryInfo":
        lines = _lines(response)
        line = lines[0] if lines else ""
        if not line:
            raise IncompleteResponseError("Empty battery response", raw=response)

        digits = "".join(c for c in line if c.isdigit())
        return cls(
            charge_percent=f"{digits}%" if digits else line,
            charging="CHARGING" in line or "CHG" in line,
        )


@dataclass(frozen=True)
class LabelDimensions:
    """Label width and height as reported (first two lines)."""

    width: str
    height: str

    @classmethod
    def parse(cls, response: str) -> "LabelDimensions":
        lines = _require_lines(response, 2, "Label dimensions")
        return cls(width=lines[0], height=lines[1])


@dataclass(frozen=True)
class PrinterInfo:
    """Snapshot of informational queries. Fields not queried stay None."""

    serial_number: Optional[str] = None
    hardware_address: Optional[str] = None
    odometer: Optional[OdometerInfo] = None
    printhead_life: Optional[PrintheadInfo] = None
    plug_and_play: Optional[str] = None
    memory_status: Optional[MemoryStatus] = None

    def __str__(self) -> str:
        rows = [
            ("Serial Number", self.serial_number),
            ("Hardware Address", self.hardware_address),
            ("Plug and Play", self.plug_and_play),
        ]
        if self.odometer:
            rows.append(("Print Length", self.odometer.total_print_length))
            rows.append(("Labels Printed", self.odometer.total_labels))
        if self.printhead_life:
            rows.append(("Printhead Used", self.printhead_life.used_inches))
        if self.memory_status:
            rows.append(("Free Memory", f"{self.memory_status.current_available_kb} KB"))
        return "\n".join(f"{label}: {value}" for label, value in rows if value is not None)
