"""
TCP Connection Handler for ZPL Printers.

Zebra network printers accept raw ZPL on TCP port 9100 and handle one session
at a time, so every call here opens its own short-lived connection and closes
it before returning, whatever the outcome.

Replies carry no length prefix or reliable terminator. A reply is considered
complete when the printer closes the connection or stops sending for
idle_timeout seconds. Reading a reply never takes longer than
max_response_time; whatever has arrived by then is the reply.
"""

import logging
import socket
import sys
import time
from dataclasses import dataclass
from typing import Optional, Union

from .exceptions import ConnectionError, ReadError, TimeoutError, WriteError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 9100

Payload = Union[str, bytes]


def _sockets_available() -> bool:
    """Check whether raw TCP sockets can be created on this platform."""
    # Pyodide/WASI builds ship a socket module that cannot open connections
    if sys.platform in ("emscripten", "wasi"):
        return False
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError:
        return False
    sock.close()
    return True


SOCKETS_AVAILABLE = _sockets_available()


@dataclass(frozen=True)
class Printer:
    """Network address of a ZPL printer.

    Attributes:
        host: IP address or hostname
        port: TCP port (9100 for raw ZPL on Zebra printers)
        name: Display name, defaults to "ZPL Printer @ <host>"
    """
    host: str
    port: int = DEFAULT_PORT
    name: str = ""

    def __post_init__(self):
        if not self.name:
            object.__setattr__(self, "name", f"ZPL Printer @ {self.host}")

    @property
    def address(self) -> tuple[str, int]:
        return (self.host, self.port)

    def __str__(self) -> str:
        return f"{self.name} [{self.host}:{self.port}]"


class Transport:
    """Interface for printer communication."""

    available = True

    def send(self, printer: Printer, payload: Payload) -> None:
        raise NotImplementedError

    def query(self, printer: Printer, command_text: Payload) -> str:
        raise NotImplementedError


class UnavailableTransport(Transport):
    """Stand-in for platforms without raw socket access.

    The command model and decoders keep working; any attempt to reach a
    printer fails with ConnectionError.
    """

    available = False

    MESSAGE = "Printer communication is not available on this platform"

    def send(self, printer: Printer, payload: Payload) -> None:
        raise ConnectionError(self.MESSAGE)

    def query(self, printer: Printer, command_text: Payload) -> str:
        raise ConnectionError(self.MESSAGE)


class SocketTransport(Transport):
    """Blocking TCP transport, one connection per call."""

    DEFAULT_CONNECT_TIMEOUT = 5.0
    DEFAULT_WRITE_TIMEOUT = 5.0
    DEFAULT_RESPONSE_TIMEOUT = 5.0  # Wait for the first reply byte
    DEFAULT_IDLE_TIMEOUT = 0.5      # Silence that ends a reply
    DEFAULT_MAX_RESPONSE_TIME = 5.0  # Whole reply, however it trickles in

    # Response limit (security: prevent memory exhaustion from a misbehaving device)
    MAX_RESPONSE_SIZE = 65536
    READ_CHUNK_SIZE = 4096

    def __init__(
        self,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        response_timeout: float = DEFAULT_RESPONSE_TIMEOUT,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
        write_timeout: float = DEFAULT_WRITE_TIMEOUT,
        max_response_size: int = MAX_RESPONSE_SIZE,
        max_response_time: float = DEFAULT_MAX_RESPONSE_TIME,
        encoding: str = "latin-1",
    ):
        """
        Initialize transport.

        Args:
            connect_timeout: Seconds allowed for the TCP handshake
            response_timeout: Seconds to wait for the first byte of a reply
            idle_timeout: Seconds of silence after which a reply is complete
            write_timeout: Seconds allowed for writing the payload
            max_response_size: Largest reply accepted, in bytes
            max_response_time: Seconds allowed for reading a whole reply
            encoding: Encoding for str payloads (replies are read as Latin-1)
        """
        self.connect_timeout = connect_timeout
        self.response_timeout = response_timeout
        self.idle_timeout = idle_timeout
        self.write_timeout = write_timeout
        self.max_response_size = max_response_size
        self.max_response_time = max_response_time
        self.encoding = encoding

    def _encode(self, payload: Payload) -> bytes:
        if isinstance(payload, bytes):
            return payload
        try:
            return payload.encode(self.encoding)
        except UnicodeEncodeError as e:
            raise WriteError(f"Payload cannot be encoded as {self.encoding}: {e}") from e

    def _connect(self, printer: Printer) -> socket.socket:
        logger.debug("Connecting to %s:%s", printer.host, printer.port)
        try:
            return socket.create_connection(printer.address, timeout=self.connect_timeout)
        except socket.timeout as e:
            raise ConnectionError(
                f"Timed out connecting to printer at {printer.host}:{printer.port} "
                f"after {self.connect_timeout}s"
            ) from e
        except OSError as e:
            raise ConnectionError(
                f"Failed to connect to printer at {printer.host}:{printer.port}: {e}"
            ) from e

    def _write(self, sock: socket.socket, printer: Printer, data: bytes) -> None:
        sock.settimeout(self.write_timeout)
        try:
            sock.sendall(data)
        except OSError as e:
            raise WriteError(
                f"Failed to send {len(data)} bytes to {printer.host}:{printer.port}: {e}"
            ) from e
        logger.debug("Sent %d bytes to %s:%s", len(data), printer.host, printer.port)

    def _read_reply(self, sock: socket.socket, printer: Printer) -> bytes:
        buffer = bytearray()
        deadline = time.monotonic() + self.max_response_time
        wait = self.response_timeout

        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                if not buffer:
                    raise TimeoutError(
                        f"No response from printer at {printer.host}:{printer.port} "
                        f"within {self.max_response_time}s"
                    )
                logger.debug("Reply cut off after %ss", self.max_response_time)
                break

            sock.settimeout(min(wait, remaining))
            try:
                chunk = sock.recv(self.READ_CHUNK_SIZE)
            except socket.timeout as e:
                if not buffer:
                    raise TimeoutError(
                        f"No response from printer at {printer.host}:{printer.port} "
                        f"within {min(self.response_timeout, self.max_response_time)}s"
                    ) from e
                # Printer went quiet, or the reply ran out of time
                break
            except OSError as e:
                raise ReadError(
                    f"Failed to read from {printer.host}:{printer.port}: {e}"
                ) from e

            if not chunk:
                break

            buffer.extend(chunk)
            if len(buffer) > self.max_response_size:
                raise ReadError(
                    f"Response exceeds maximum size ({self.max_response_size} bytes)"
                )
            wait = self.idle_timeout

        if not buffer:
            raise ReadError(
                f"Printer at {printer.host}:{printer.port} closed the connection without replying"
            )

        logger.debug("Received %d bytes from %s:%s", len(buffer), printer.host, printer.port)
        return bytes(buffer)

    def send(self, printer: Printer, payload: Payload) -> None:
        """
        Write payload and close. No reply is read.

        Raises:
            ConnectionError: Printer unreachable within connect_timeout
            WriteError: Payload not fully written
        """
        data = self._encode(payload)
        with self._connect(printer) as sock:
            self._write(sock, printer, data)

    def query(self, printer: Printer, command_text: Payload) -> str:
        """
        Write a query and read the reply.

        Raises:
            ConnectionError: Printer unreachable within connect_timeout
            WriteError: Query not fully written
            TimeoutError: No reply byte within response_timeout
            ReadError: Socket error, empty reply or oversized reply
        """
        data = self._encode(command_text)
        with self._connect(printer) as sock:
            self._write(sock, printer, data)
            reply = self._read_reply(sock, printer)
        return reply.decode("latin-1")


def default_transport() -> Transport:
    """SocketTransport where sockets work, UnavailableTransport elsewhere."""
    if SOCKETS_AVAILABLE:
        return SocketTransport()
    return UnavailableTransport()


def send(printer: Printer, payload: Payload, transport: Optional[Transport] = None) -> None:
    """Send payload to printer (fire-and-forget)."""
    (transport or default_transport()).send(printer, payload)


def query(printer: Printer, command_text: Payload, transport: Optional[Transport] = None) -> str:
    """Send a query to printer and return its reply text."""
    return (transport or default_transport()).query(printer, command_text)
