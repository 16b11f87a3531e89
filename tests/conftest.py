"""
Pytest configuration for ZPL printer tests.

Provides fixtures and command-line options for hardware tests, an in-memory
transport double, and a loopback TCP server for socket-level tests.
"""

import socket
import threading

import pytest

from zplprinter import Printer, Transport, ZPLPrinter


def pytest_addoption(parser):
    """Add command-line options for hardware tests."""
    parser.addoption(
        "--host",
        action="store",
        default=None,
        help="IP address or hostname of the printer for hardware tests",
    )


@pytest.fixture
def printer_host(request):
    """Get the printer host from command line."""
    host = request.config.getoption("--host")
    if host is None:
        pytest.skip("No printer host provided (use --host=10.0.0.20)")
    return host


@pytest.fixture
def hardware_printer(printer_host):
    """Provide a printer interface for a real device."""
    return ZPLPrinter(printer_host)


class FakeTransport(Transport):
    """Records payloads and answers queries from a dict keyed by query text."""

    def __init__(self, replies=None):
        self.replies = dict(replies or {})
        self.sent = []
        self.queries = []

    def send(self, printer, payload):
        self.sent.append((printer, payload))

    def query(self, printer, command_text):
        self.queries.append((printer, command_text))
        reply = self.replies[command_text]
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_transport():
    return FakeTransport()


class LoopbackServer:
    """
    One-connection-at-a-time TCP server on 127.0.0.1.

    handler(server, conn) is called for every accepted connection; whatever it
    does with the socket is what the client sees. Call wait_handled() before
    checking what the handler recorded.
    """

    def __init__(self, handler):
        self.handler = handler
        self.received = []
        self._handled = 0
        self._handled_cond = threading.Condition()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(1)
        self._sock.settimeout(5.0)
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    @property
    def printer(self) -> Printer:
        return Printer("127.0.0.1", self._sock.getsockname()[1])

    def _serve(self):
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except OSError:
                return
            with conn:
                try:
                    self.handler(self, conn)
                except OSError:
                    pass
            with self._handled_cond:
                self._handled += 1
                self._handled_cond.notify_all()

    def wait_handled(self, count=1, timeout=5.0):
        """Block until count connections have been fully handled."""
        with self._handled_cond:
            done = self._handled_cond.wait_for(lambda: self._handled >= count, timeout)
        assert done, f"server handled {self._handled} of {count} connections"

    def close(self):
        self._stop.set()
        self._sock.close()
        self._thread.join(timeout=2.0)


def read_request(conn, size=4096, timeout=1.0) -> bytes:
    """Read whatever the client wrote (until it pauses)."""
    conn.settimeout(timeout)
    try:
        return conn.recv(size)
    except socket.timeout:
        return b""


@pytest.fixture
def loopback():
    """Factory for loopback servers, closed after the test."""
    servers = []

    def start(handler):
        server = LoopbackServer(handler)
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.close()
