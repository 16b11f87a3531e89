"""
Status Decoder for the ~HQES Host Query.

Actual response structure (verified from ZT/ZD series printers):

    <STX>
      PRINTER STATUS
       ERRORS:         1 00000000 00000005
       WARNINGS:       1 00000000 00000002
    <ETX>

Each ERRORS/WARNINGS line carries:
    token 1   "1" if any flag in the group is set, else "0"
    token 2   upper 32 bits of the bitmask, 8 hex digits
    token 3   lower 32 bits of the bitmask, 8 hex digits

Bit meanings come from the static tables below; flags are reported in table
order, never in the order they appear in the bitmask.
"""

import re
from dataclasses import dataclass, field
from enum import IntFlag
from typing import ClassVar, Iterator

from .exceptions import IncompleteResponseError, MalformedResponseError

HEX_GROUP = re.compile(r"[0-9A-Fa-f]{1,8}")


class ErrorFlag(IntFlag):
    """Error bits reported by ~HQES."""

    MEDIA_OUT = 0x00000001
    RIBBON_OUT = 0x00000002
    HEAD_OPEN = 0x00000004
    CUTTER_FAULT = 0x00000008
    PRINTHEAD_OVER_TEMPERATURE = 0x00000010
    MOTOR_OVER_TEMPERATURE = 0x00000020
    BAD_PRINTHEAD_ELEMENT = 0x00000040
    PRINTHEAD_DETECTION_ERROR = 0x00000080
    INVALID_FIRMWARE_CONFIG = 0x00000100
    PRINTHEAD_THERMISTOR_OPEN = 0x00000200
    PAUSED = 0x00001000
    # KR403 kiosk printers only
    RETRACT_FUNCTION_TIMED_OUT = 0x00002000
    BLACK_MARK_CALIBRATE_ERROR = 0x00004000
    BLACK_MARK_NOT_FOUND = 0x00008000
    PAPER_JAM_DURING_RETRACT = 0x00010000
    PRESENTER_NOT_RUNNING = 0x00020000
    PAPER_FEED_ERROR = 0x00040000
    CLEAR_PAPER_PATH_FAILED = 0x00080000


class WarningFlag(IntFlag):
    """Warning bits reported by ~HQES."""

    NEED_TO_CALIBRATE_MEDIA = 0x00000001
    CLEAN_PRINTHEAD = 0x00000002
    REPLACE_PRINTHEAD = 0x00000004
    # KR403 kiosk printers only
    PAPER_NEAR_END_SENSOR = 0x00000008
    SENSOR_1_PAPER_BEFORE_HEAD = 0x00000010
    SENSOR_2_BLACK_MARK = 0x00000020
    SENSOR_3_PAPER_AFTER_HEAD = 0x00000040
    SENSOR_4_LOOP_READY = 0x00000080
    SENSOR_5_PRESENTER = 0x00000100
    SENSOR_6_RETRACT_READY = 0x00000200
    SENSOR_7_IN_RETRACT = 0x00000400
    SENSOR_8_AT_BIN = 0x00000800


ERROR_DESCRIPTIONS: dict[ErrorFlag, str] = {
    ErrorFlag.MEDIA_OUT: "Media out or not loaded",
    ErrorFlag.RIBBON_OUT: "Ribbon out or not loaded",
    ErrorFlag.HEAD_OPEN: "Head open / Cover open",
    ErrorFlag.CUTTER_FAULT: "Cutter fault",
    ErrorFlag.PRINTHEAD_OVER_TEMPERATURE: "Printhead over temperature",
    ErrorFlag.MOTOR_OVER_TEMPERATURE: "Motor over temperature",
    ErrorFlag.BAD_PRINTHEAD_ELEMENT: "Bad printhead element",
    ErrorFlag.PRINTHEAD_DETECTION_ERROR: "Printhead detection error",
    ErrorFlag.INVALID_FIRMWARE_CONFIG: "Invalid firmware configuration",
    ErrorFlag.PRINTHEAD_THERMISTOR_OPEN: "Printhead thermistor open",
    ErrorFlag.PAUSED: "Printer paused",
    ErrorFlag.RETRACT_FUNCTION_TIMED_OUT: "Retract function timed out (KR403 only)",
    ErrorFlag.BLACK_MARK_CALIBRATE_ERROR: "Black mark calibrate error (KR403 only)",
    ErrorFlag.BLACK_MARK_NOT_FOUND: "Black mark not found (KR403 only)",
    ErrorFlag.PAPER_JAM_DURING_RETRACT: "Paper jam during retract (KR403 only)",
    ErrorFlag.PRESENTER_NOT_RUNNING: "Presenter not running (KR403 only)",
    ErrorFlag.PAPER_FEED_ERROR: "Paper feed error (KR403 only)",
    ErrorFlag.CLEAR_PAPER_PATH_FAILED: "Clear paper path failed (KR403 only)",
}

WARNING_DESCRIPTIONS: dict[WarningFlag, str] = {
    WarningFlag.NEED_TO_CALIBRATE_MEDIA: "Need to calibrate media",
    WarningFlag.CLEAN_PRINTHEAD: "Clean printhead",
    WarningFlag.REPLACE_PRINTHEAD: "Replace printhead",
    WarningFlag.PAPER_NEAR_END_SENSOR: "Paper near end sensor (KR403 only)",
    WarningFlag.SENSOR_1_PAPER_BEFORE_HEAD: "Sensor 1: Paper before head (KR403 only)",
    WarningFlag.SENSOR_2_BLACK_MARK: "Sensor 2: Black mark (KR403 only)",
    WarningFlag.SENSOR_3_PAPER_AFTER_HEAD: "Sensor 3: Paper after head (KR403 only)",
    WarningFlag.SENSOR_4_LOOP_READY: "Sensor 4: Loop ready (KR403 only)",
    WarningFlag.SENSOR_5_PRESENTER: "Sensor 5: Presenter (KR403 only)",
    WarningFlag.SENSOR_6_RETRACT_READY: "Sensor 6: Retract ready (KR403 only)",
    WarningFlag.SENSOR_7_IN_RETRACT: "Sensor 7: In retract (KR403 only)",
    WarningFlag.SENSOR_8_AT_BIN: "Sensor 8: At bin (KR403 only)",
}


@dataclass(frozen=True)
class _FlagSet:
    """Immutable set of status flags backed by the raw bitmask."""

    bits: int = 0

    descriptions: ClassVar[dict]

    @classmethod
    def from_bits(cls, bits: int):
        return cls(bits=bits)

    @classmethod
    def of(cls, *flags: IntFlag):
        bits = 0
        for flag in flags:
            bits |= int(flag)
        return cls(bits=bits)

    def is_empty(self) -> bool:
        return self.bits == 0

    def contains(self, flag: IntFlag) -> bool:
        return bool(self.bits & int(flag))

    def __contains__(self, flag: IntFlag) -> bool:
        return self.contains(flag)

    def __iter__(self) -> Iterator[IntFlag]:
        for flag in self.descriptions:
            if self.contains(flag):
                yield flag

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return not self.is_empty()

    @property
    def flags(self) -> tuple:
        return tuple(self)

    @property
    def unknown_bits(self) -> int:
        """Set bits with no entry in the description table."""
        known = 0
        for flag in self.descriptions:
            known |= int(flag)
        return self.bits & ~known

    def to_descriptions(self) -> list[str]:
        """Descriptions of all set flags, in table order."""
        return [self.descriptions[flag] for flag in self]


@dataclass(frozen=True)
class ErrorSet(_FlagSet):
    """Errors reported by ~HQES."""

    descriptions: ClassVar[dict] = ERROR_DESCRIPTIONS


@dataclass(frozen=True)
class WarningSet(_FlagSet):
    """Warnings reported by ~HQES."""

    descriptions: ClassVar[dict] = WARNING_DESCRIPTIONS


def _clean_lines(response: str) -> list[str]:
    """Split a reply into trimmed, non-empty lines without STX/ETX framing."""
    lines = []
    for line in response.splitlines():
        line = line.replace("\x02", "").replace("\x03", "").strip()
        if line:
            lines.append(line)
    return lines


def _parse_bitmask(line: str, response: str) -> int:
    tokens = line.split()
    if len(tokens) < 4:
        raise MalformedResponseError(
            f"Expected '<label> <flag> <hex> <hex>', got: {line!r}", raw=response
        )
    high, low = tokens[2], tokens[3]
    # int(x, 16) alone would also take signs, 0x prefixes and underscores
    if not (HEX_GROUP.fullmatch(high) and HEX_GROUP.fullmatch(low)):
        raise MalformedResponseError(f"Invalid hex value in {line!r}", raw=response)
    return (int(high, 16) << 32) | int(low, 16)


@dataclass(frozen=True)
class PrinterStatus:
    """
    Parsed ~HQES response.

    Attributes:
        errors: Error flags
        warnings: Warning flags
        raw_fields: Whitespace-separated tokens of every response line, in order
    """

    errors: ErrorSet = field(default_factory=ErrorSet)
    warnings: WarningSet = field(default_factory=WarningSet)
    raw_fields: tuple[str, ...] = ()

    @classmethod
    def parse(cls, response: str) -> "PrinterStatus":
        """
        Parse ~HQES response text.

        Raises:
            IncompleteResponseError: ERRORS or WARNINGS line missing
            MalformedResponseError: A line is truncated or not hex
        """
        lines = _clean_lines(response)
        error_bits = None
        warning_bits = None

        for line in lines:
            upper = line.upper()
            if upper.startswith("ERRORS:"):
                error_bits = _parse_bitmask(line, response)
            elif upper.startswith("WARNINGS:"):
                warning_bits = _parse_bitmask(line, response)

        if error_bits is None or warning_bits is None:
            missing = "ERRORS" if error_bits is None else "WARNINGS"
            raise IncompleteResponseError(
                f"Status response has no {missing} line", raw=response
            )

        raw_fields = tuple(token for line in lines for token in line.split())
        return cls(
            errors=ErrorSet.from_bits(error_bits),
            warnings=WarningSet.from_bits(warning_bits),
            raw_fields=raw_fields,
        )

    def is_ok(self) -> bool:
        return self.errors.is_empty() and self.warnings.is_empty()

    def has_errors(self) -> bool:
        return not self.errors.is_empty()

    def has_warnings(self) -> bool:
        return not self.warnings.is_empty()

    def __str__(self) -> str:
        if self.is_ok():
            return "Printer Status: OK"

        lines = ["Printer Status:"]
        for heading, flags in (("Errors:", self.errors), ("Warnings:", self.warnings)):
            if flags.is_empty():
                continue
            lines.append("")
            lines.append(heading)
            lines.extend(f"  - {d}" for d in flags.to_descriptions())
            if flags.unknown_bits:
                lines.append(f"  - Unknown flag bits 0x{flags.unknown_bits:X}")
        return "\n".join(lines)
