"""
ZPL (Zebra Programming Language) Command Model.

Every ZPL directive the library knows about is a small immutable value with a
single job: render itself to its wire text. A print job is an ordered list of
these values, and serializing the job is plain concatenation.

No grammar checking happens here. Unmatched ^XA/^XZ, negative sizes and ZPL
control characters inside field data are all passed through verbatim; the
printer validates its own input and reports problems via ~HQES.

Reference: ZPL II Programming Guide
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Iterable, Optional, Union


class FontOrientation(str, Enum):
    """Font rotation codes used by ^A."""
    NORMAL = "N"
    ROTATED_90 = "R"
    INVERTED = "I"      # 180 degrees
    ROTATED_270 = "B"   # Read bottom-up

    def __str__(self) -> str:
        return self.value


class FieldOrientation(str, Enum):
    """Field rotation codes used by ^FW and barcode commands."""
    NORMAL = "N"
    ROTATED_90 = "R"
    INVERTED = "I"
    ROTATED_270 = "B"

    def __str__(self) -> str:
        return self.value


def bytes_per_row(width: int) -> int:
    """Bytes needed for one row of a 1-bit graphic (8 pixels per byte)."""
    return (width + 7) // 8


def _yes_no(flag: bool) -> str:
    return "Y" if flag else "N"


class ZPLCommand:
    """Base class for all ZPL commands."""

    command_name: ClassVar[str] = ""

    def to_zpl(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.to_zpl()


# ---- Format Commands ----


@dataclass(frozen=True)
class StartFormat(ZPLCommand):
    """Begin a label format."""
    command_name: ClassVar[str] = "Start Format (^XA)"

    def to_zpl(self) -> str:
        return "^XA"


@dataclass(frozen=True)
class EndFormat(ZPLCommand):
    """End a label format and print it."""
    command_name: ClassVar[str] = "End Format (^XZ)"

    def to_zpl(self) -> str:
        return "^XZ"


# ---- Field Commands ----


@dataclass(frozen=True)
class FieldOrigin(ZPLCommand):
    """Position of the next field, in dots from the label home."""
    x: int
    y: int
    command_name: ClassVar[str] = "Field Origin (^FO)"

    def to_zpl(self) -> str:
        return f"^FO{self.x},{self.y}"


@dataclass(frozen=True)
class Font(ZPLCommand):
    """Scalable font 0 with orientation and size in dots."""
    orientation: FontOrientation
    height: int
    width: int
    command_name: ClassVar[str] = "Font (^A0)"

    def to_zpl(self) -> str:
        return f"^A0{self.orientation},{self.height},{self.width}"


@dataclass(frozen=True)
class FieldData(ZPLCommand):
    """
    Literal field text.

    Not escaped: data containing ^ or ~ will be interpreted by the printer
    as commands.
    """
    data: str
    command_name: ClassVar[str] = "Field Data (^FD)"

    def to_zpl(self) -> str:
        return f"^FD{self.data}"


@dataclass(frozen=True)
class FieldSeparator(ZPLCommand):
    """End of the current field."""
    command_name: ClassVar[str] = "Field Separator (^FS)"

    def to_zpl(self) -> str:
        return "^FS"


@dataclass(frozen=True)
class ChangeFont(ZPLCommand):
    """Change the default font."""
    font: str
    size: int
    command_name: ClassVar[str] = "Change Font (^CF)"

    def to_zpl(self) -> str:
        return f"^CF{self.font},{self.size}"


@dataclass(frozen=True)
class FieldDefaultOrientation(ZPLCommand):
    """Default rotation for all following fields."""
    rotation: FieldOrientation
    command_name: ClassVar[str] = "Field Orientation (^FW)"

    def to_zpl(self) -> str:
        return f"^FW{self.rotation}"


# ---- Drawing Commands ----


@dataclass(frozen=True)
class GraphicBox(ZPLCommand):
    """Box or line. A box with thickness equal to its height is a rule."""
    width: int
    height: int
    thickness: int
    command_name: ClassVar[str] = "Graphic Box (^GB)"

    def to_zpl(self) -> str:
        return f"^GB{self.width},{self.height},{self.thickness}"


# ---- Barcode Commands ----


@dataclass(frozen=True)
class BarcodeFieldDefault(ZPLCommand):
    """Module width, wide-to-narrow ratio and height for barcodes."""
    width: int
    ratio: float
    height: int
    command_name: ClassVar[str] = "Barcode Field Default (^BY)"

    def to_zpl(self) -> str:
        return f"^BY{self.width},{self.ratio:g},{self.height}"


@dataclass(frozen=True)
class Code128Barcode(ZPLCommand):
    """Code 128 barcode; the content follows in a FieldData."""
    orientation: FieldOrientation = FieldOrientation.NORMAL
    height: int = 100
    print_interpretation: bool = True
    print_above: bool = False
    check_digit: bool = False
    mode: FieldOrientation = FieldOrientation.NORMAL
    command_name: ClassVar[str] = "Code 128 Barcode (^BC)"

    def to_zpl(self) -> str:
        return (
            f"^BC{self.orientation},{self.height},"
            f"{_yes_no(self.print_interpretation)},"
            f"{_yes_no(self.print_above)},"
            f"{_yes_no(self.check_digit)},{self.mode}"
        )


# ---- Graphic Commands ----


@dataclass(frozen=True)
class GraphicField(ZPLCommand):
    """
    Inline ASCII-hex graphic (^GFA).

    Hex data is cleaned of separators and whitespace and uppercased, so data
    copied out of existing ZPL can be pasted back in.
    """
    width: int
    height: int
    data: str
    command_name: ClassVar[str] = "Graphic Field (^GFA)"

    def to_zpl(self) -> str:
        row_bytes = bytes_per_row(self.width)
        total_bytes = row_bytes * self.height
        clean = re.sub(r"[,\s]", "", self.data).upper()
        return f"^GFA,{total_bytes},{total_bytes},{row_bytes},{clean}"


@dataclass(frozen=True)
class DownloadGraphic(ZPLCommand):
    """
    Store a graphic in printer memory (~DG) for later ^XG recall.

    Args:
        name: Device path and name, e.g. "R:LOGO.GRF"
        width: Width in pixels
        height: Height in pixels
        data: ASCII hex, ceil(width/8) bytes per row
    """
    name: str
    width: int
    height: int
    data: str
    command_name: ClassVar[str] = "Download Graphic (~DG)"

    @property
    def bytes_per_row(self) -> int:
        return bytes_per_row(self.width)

    @property
    def total_bytes(self) -> int:
        return self.bytes_per_row * self.height

    def to_zpl(self) -> str:
        return f"~DG{self.name},{self.total_bytes},{self.bytes_per_row},{self.data}"


@dataclass(frozen=True)
class RecallGraphic(ZPLCommand):
    """Print a graphic previously stored with ~DG."""
    name: str
    magnification_x: int = 1
    magnification_y: int = 1
    command_name: ClassVar[str] = "Recall Graphic (^XG)"

    def to_zpl(self) -> str:
        return f"^XG{self.name},{self.magnification_x},{self.magnification_y}"


# ---- Media Commands ----


@dataclass(frozen=True)
class MediaModeDelayed(ZPLCommand):
    """Delayed cut mode: the label is cut on ~JK."""
    command_name: ClassVar[str] = "Media Mode Delayed (^MMD)"

    def to_zpl(self) -> str:
        return "^MMD"


@dataclass(frozen=True)
class CutNow(ZPLCommand):
    """Cut immediately (delayed cut mode only)."""
    command_name: ClassVar[str] = "Cut Now (~JK)"

    def to_zpl(self) -> str:
        return "~JK"


@dataclass(frozen=True)
class Raw(ZPLCommand):
    """Passthrough for directives without a dedicated type."""
    text: str
    command_name: ClassVar[str] = "Raw ZPL"

    def to_zpl(self) -> str:
        return self.text


Command = Union[
    StartFormat,
    EndFormat,
    FieldOrigin,
    Font,
    FieldData,
    FieldSeparator,
    ChangeFont,
    FieldDefaultOrientation,
    GraphicBox,
    BarcodeFieldDefault,
    Code128Barcode,
    GraphicField,
    DownloadGraphic,
    RecallGraphic,
    MediaModeDelayed,
    CutNow,
    Raw,
]


def serialize(command: ZPLCommand) -> str:
    """Render one command to its wire text."""
    return command.to_zpl()


def serialize_sequence(commands: Iterable[ZPLCommand]) -> str:
    """
    Render commands in order with nothing between them.

    Example:
        >>> serialize_sequence([StartFormat(), FieldOrigin(50, 50), EndFormat()])
        '^XA^FO50,50^XZ'
    """
    return "".join(command.to_zpl() for command in commands)


def all_command_types() -> list[tuple[str, ZPLCommand]]:
    """Commands with sensible defaults, for building labels interactively."""
    commands: list[ZPLCommand] = [
        StartFormat(),
        EndFormat(),
        FieldOrigin(0, 0),
        Font(FontOrientation.NORMAL, 30, 30),
        FieldData(""),
        FieldSeparator(),
        GraphicBox(100, 100, 1),
        GraphicField(32, 32, ""),
    ]
    return [(command.command_name, command) for command in commands]


class ZPLLabel:
    """
    Label builder.

    Starts with ^XA; build() appends ^XZ and returns the wire text.

    Example:
        >>> ZPLLabel().text(50, 50, "Hello").build()
        '^XA^FO50,50^A0N,30,30^FDHello^FS^XZ'
    """

    def __init__(self):
        self._commands: list[ZPLCommand] = [StartFormat()]

    @property
    def commands(self) -> tuple[ZPLCommand, ...]:
        return tuple(self._commands)

    def add(self, command: ZPLCommand) -> "ZPLLabel":
        self._commands.append(command)
        return self

    def field_origin(self, x: int, y: int) -> "ZPLLabel":
        return self.add(FieldOrigin(x, y))

    def font(self, orientation: FontOrientation, height: int, width: int) -> "ZPLLabel":
        return self.add(Font(orientation, height, width))

    def field_data(self, data: str) -> "ZPLLabel":
        return self.add(FieldData(data))

    def field_separator(self) -> "ZPLLabel":
        return self.add(FieldSeparator())

    def graphic_box(self, width: int, height: int, thickness: int) -> "ZPLLabel":
        return self.add(GraphicBox(width, height, thickness))

    def graphic_field(self, width: int, height: int, data: str) -> "ZPLLabel":
        return self.add(GraphicField(width, height, data))

    def text(
        self,
        x: int,
        y: int,
        data: str,
        height: int = 30,
        width: int = 30,
        orientation: FontOrientation = FontOrientation.NORMAL,
    ) -> "ZPLLabel":
        """Add a complete text field: origin, font, data and separator."""
        self.field_origin(x, y)
        self.font(orientation, height, width)
        self.field_data(data)
        return self.field_separator()

    def build(self) -> str:
        return serialize_sequence(self._commands + [EndFormat()])


def parse_graphic_field(zpl: str) -> Optional[tuple[int, int, str]]:
    """
    Extract the first ^GFA graphic from ZPL text.

    Width is recovered as bytes-per-row * 8, so padding bits count as pixels.

    Returns:
        (width, height, hex_data) or None if no parsable ^GFA is present
    """
    match = re.search(r"\^GFA,", zpl, re.IGNORECASE)
    if match is None:
        return None

    section = zpl[match.end():]
    end = section.find("^")
    if end >= 0:
        section = section[:end]

    parts = section.split(",")
    if len(parts) < 4:
        return None

    try:
        total_bytes = int(parts[0].strip())
        row_bytes = int(parts[2].strip())
    except ValueError:
        return None

    hex_data = re.sub(r"\s", "", "".join(parts[3:])).upper()
    height = total_bytes // row_bytes if row_bytes > 0 else 0
    return row_bytes * 8, height, hex_data
