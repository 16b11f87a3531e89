"""ZPL Label Printer Driver for network Zebra printers."""

__version__ = "0.1.0"

from .commands import QueryType, ZPLQueries
from .connection import (
    DEFAULT_PORT,
    SOCKETS_AVAILABLE,
    Printer,
    SocketTransport,
    Transport,
    UnavailableTransport,
    default_transport,
    query,
    send,
)
from .exceptions import (
    ConnectionError,
    ImageError,
    IncompleteResponseError,
    MalformedResponseError,
    ParseError,
    PrinterError,
    ReadError,
    RenderError,
    TimeoutError,
    TransportError,
    WriteError,
)
from .image import (
    MAX_IMAGE_DIMENSION,
    MAX_IMAGE_PIXELS,
    ImageSizeError,
    download_graphic_from_image,
    graphic_field_from_image,
    image_to_zpl_hex,
    load_image,
)
from .labelary import LabelaryClient
from .printer import ZPLPrinter
from .responses import MemoryStatus, PrinterInfo
from .status import ErrorFlag, ErrorSet, PrinterStatus, WarningFlag, WarningSet
from .zpl import (
    BarcodeFieldDefault,
    ChangeFont,
    Code128Barcode,
    CutNow,
    DownloadGraphic,
    EndFormat,
    FieldData,
    FieldDefaultOrientation,
    FieldOrientation,
    FieldOrigin,
    FieldSeparator,
    Font,
    FontOrientation,
    GraphicBox,
    GraphicField,
    MediaModeDelayed,
    Raw,
    RecallGraphic,
    StartFormat,
    ZPLCommand,
    ZPLLabel,
    serialize,
    serialize_sequence,
)

__all__ = [
    "ZPLPrinter",
    "Printer",
    "Transport",
    "SocketTransport",
    "UnavailableTransport",
    "SOCKETS_AVAILABLE",
    "DEFAULT_PORT",
    "default_transport",
    "send",
    "query",
    "PrinterError",
    "TransportError",
    "ConnectionError",
    "WriteError",
    "ReadError",
    "TimeoutError",
    "ParseError",
    "MalformedResponseError",
    "IncompleteResponseError",
    "ImageError",
    "ImageSizeError",
    "RenderError",
    "MAX_IMAGE_DIMENSION",
    "MAX_IMAGE_PIXELS",
    "image_to_zpl_hex",
    "graphic_field_from_image",
    "download_graphic_from_image",
    "load_image",
    "LabelaryClient",
    "QueryType",
    "ZPLQueries",
    "PrinterStatus",
    "ErrorFlag",
    "WarningFlag",
    "ErrorSet",
    "WarningSet",
    "MemoryStatus",
    "PrinterInfo",
    "ZPLCommand",
    "ZPLLabel",
    "StartFormat",
    "EndFormat",
    "FieldOrigin",
    "Font",
    "FontOrientation",
    "FieldOrientation",
    "FieldData",
    "FieldSeparator",
    "ChangeFont",
    "FieldDefaultOrientation",
    "GraphicBox",
    "BarcodeFieldDefault",
    "Code128Barcode",
    "GraphicField",
    "DownloadGraphic",
    "RecallGraphic",
    "MediaModeDelayed",
    "CutNow",
    "Raw",
    "serialize",
    "serialize_sequence",
]
