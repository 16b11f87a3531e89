"""
Exception hierarchy for the ZPL printer library.

Transport failures and response decoding failures are kept apart so callers
can tell "the printer did not answer" from "the printer answered nonsense".
"""

from typing import Optional


class PrinterError(Exception):
    """Base exception for all printer errors."""

    pass


# --- Transport ---


class TransportError(PrinterError):
    """Error talking to the printer over the network."""

    pass


class ConnectionError(TransportError):
    """Printer endpoint unreachable or connection refused."""

    pass


class WriteError(TransportError):
    """Payload could not be written completely."""

    pass


class ReadError(TransportError):
    """Reply could not be read."""

    pass


class TimeoutError(TransportError):
    """No reply arrived before the response timeout."""

    pass


# --- Decoding ---


class ParseError(PrinterError, ValueError):
    """A printer reply could not be decoded.

    Attributes:
        raw: The offending response text, unchanged
    """

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


class MalformedResponseError(ParseError):
    """Reply has the expected shape but invalid content."""

    pass


class IncompleteResponseError(ParseError):
    """Reply is missing fields or lines."""

    pass


# --- Collaborators ---


class ImageError(PrinterError):
    """Error processing image for printing."""

    pass


class RenderError(PrinterError):
    """Error from the remote label rendering service."""

    pass
