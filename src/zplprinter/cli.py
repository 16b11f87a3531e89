"""
Command-Line Interface for ZPL Printers.

Usage:
    zpl send FILE            - Send a ZPL file
    zpl hello                - Print an example label
    zpl status               - Show errors and warnings
    zpl memory               - Show RAM status
    zpl query CODE           - Show a raw ~HQ reply
    zpl info                 - Show serial number, MAC, odometer, ...
    zpl image IMAGE          - Convert an image to ZPL
    zpl render FILE -o OUT   - Render ZPL to PNG via Labelary
    zpl forget               - Forget the cached printer

Commands that talk to a printer take --host/--port; without --host the last
printer used successfully is reused.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional

import click

from . import cache
from .commands import QueryType, ZPLQueries
from .connection import DEFAULT_PORT, SOCKETS_AVAILABLE, SocketTransport
from .exceptions import ImageError, ParseError, PrinterError, RenderError, TransportError
from .image import ImageSizeError, download_graphic_from_image, graphic_field_from_image, load_image
from .labelary import LabelaryClient
from .printer import ZPLPrinter
from .zpl import (
    EndFormat,
    FieldData,
    FieldOrigin,
    FieldSeparator,
    Font,
    FontOrientation,
    GraphicBox,
    StartFormat,
    serialize_sequence,
)

# IPv4 dotted quad
IPV4_PATTERN = re.compile(r"^(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})$")

# RFC 1123 hostname: labels of letters, digits and hyphens
HOSTNAME_PATTERN = re.compile(
    r"^(?=.{1,253}$)([A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?)"
    r"(\.[A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*$"
)


def validate_host(ctx, param, value):
    """Validate printer host.

    Accepts:
        - IPv4 address: 10.0.0.20
        - Hostname: zebra-01, zebra-01.example.com

    Raises:
        click.BadParameter: If the host format is invalid
    """
    if value is None:
        return None
    match = IPV4_PATTERN.match(value)
    if match:
        if all(0 <= int(octet) <= 255 for octet in match.groups()):
            return value
        raise click.BadParameter(f"Invalid IPv4 address: '{value}'")
    if HOSTNAME_PATTERN.match(value) and not value.replace(".", "").isdigit():
        return value
    raise click.BadParameter(
        f"Invalid printer host: '{value}'. Expected an IPv4 address or hostname"
    )


def host_options(func):
    """Attach --host/--port/--timeout to a command."""
    func = click.option(
        "--timeout",
        default=SocketTransport.DEFAULT_RESPONSE_TIMEOUT,
        show_default=True,
        help="Connect and response timeout in seconds",
    )(func)
    func = click.option(
        "--port", "-p", default=None, type=click.IntRange(1, 65535),
        help=f"Printer port (default {DEFAULT_PORT})",
    )(func)
    func = click.option(
        "--host", callback=validate_host,
        help="Printer IP address or hostname (default: last used printer)",
    )(func)
    return func


def resolve_printer(host: Optional[str], port: Optional[int], timeout: float) -> ZPLPrinter:
    """Build a ZPLPrinter from options or the cached printer, or exit."""
    if not SOCKETS_AVAILABLE:
        click.echo("Printer communication is not available on this platform.", err=True)
        sys.exit(1)

    transport = SocketTransport(connect_timeout=timeout, response_timeout=timeout)

    if host is None:
        cached = cache.load_cached_printer()
        if cached is None:
            click.echo("No printer given and none cached. Use --host.", err=True)
            sys.exit(1)
        click.echo(f"Using cached printer: {cached.name} ({cached.host}:{cached.port})")
        return ZPLPrinter(
            cached.host, port or cached.port, transport=transport, name=cached.name
        )

    return ZPLPrinter(host, port or DEFAULT_PORT, transport=transport)


def fail(prefix: str, error: Exception):
    click.echo(f"{prefix}: {error}", err=True)
    sys.exit(1)


def run(printer: ZPLPrinter, action):
    """Run action(printer), report errors, and cache the printer on success."""
    try:
        result = action(printer)
    except TransportError as e:
        fail("Connection error", e)
    except ParseError as e:
        click.echo(f"Parse error: {e}", err=True)
        if e.raw:
            click.echo(f"\nRaw response:\n{e.raw}", err=True)
        sys.exit(1)
    except PrinterError as e:
        fail("Printer error", e)
    cache.save_printer(printer.printer)
    return result


def example_commands(text: str) -> list:
    """The stock example label: a heading, a rule and a subtitle."""
    return [
        StartFormat(),
        FieldOrigin(50, 50),
        Font(FontOrientation.NORMAL, 50, 50),
        FieldData(text),
        FieldSeparator(),
        FieldOrigin(50, 150),
        GraphicBox(400, 3, 3),
        FieldSeparator(),
        FieldOrigin(50, 200),
        Font(FontOrientation.NORMAL, 30, 30),
        FieldData("Programmatic ZPL Generation"),
        FieldSeparator(),
        EndFormat(),
    ]


@click.group()
@click.option("--debug/--no-debug", default=False, help="Enable debug output")
@click.pass_context
def main(ctx, debug):
    """ZPL Label Printer CLI."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="[%(name)s] %(message)s")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@host_options
def send(file, host, port, timeout):
    """Send a ZPL file to the printer verbatim."""
    printer = resolve_printer(host, port, timeout)
    data = file.read_bytes()
    click.echo(f"Sending {len(data)} bytes to {printer.printer.host}:{printer.printer.port}...")
    run(printer, lambda p: p.print_zpl(data))
    click.echo("Sent.")


@main.command()
@click.option("--text", default="Hello from zplprinter!", help="Heading text")
@click.option("--dry-run", is_flag=True, help="Print the ZPL instead of sending it")
@host_options
def hello(text, dry_run, host, port, timeout):
    """Print an example label built from ZPL commands."""
    commands = example_commands(text)
    if dry_run:
        click.echo(serialize_sequence(commands))
        return

    printer = resolve_printer(host, port, timeout)
    run(printer, lambda p: p.print_commands(commands))
    click.echo("Label sent.")


@main.command()
@host_options
def status(host, port, timeout):
    """Show printer errors and warnings (~HQES).

    Exits with status 1 when the printer reports errors.
    """
    printer = resolve_printer(host, port, timeout)
    result = run(printer, lambda p: p.get_status())
    click.echo(str(result))
    if result.has_errors():
        sys.exit(1)


@main.command()
@host_options
def memory(host, port, timeout):
    """Show printer RAM status (~HM)."""
    printer = resolve_printer(host, port, timeout)
    result = run(printer, lambda p: p.get_memory_status())
    click.echo(str(result))


@main.command()
@click.argument("code", type=click.Choice([q.value for q in QueryType], case_sensitive=False))
@host_options
def query(code, host, port, timeout):
    """Send a host query and show the raw reply."""
    printer = resolve_printer(host, port, timeout)
    query_type = QueryType(code.upper())
    click.echo(f"> {ZPLQueries.for_type(query_type).strip()}")
    click.echo(run(printer, lambda p: p.query(query_type)))


@main.command()
@host_options
def info(host, port, timeout):
    """Show serial number, MAC address, odometer and memory."""
    printer = resolve_printer(host, port, timeout)
    click.echo(str(run(printer, lambda p: p.get_info())))


@main.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--threshold",
    type=click.IntRange(0, 255),
    default=128,
    show_default=True,
    help="Grayscale level below which a pixel prints black",
)
@click.option("--name", default=None, help="Store as ~DG graphic under this name (e.g. R:LOGO.GRF)")
@click.option("--x", default=0, help="Field origin X in dots")
@click.option("--y", default=0, help="Field origin Y in dots")
def image(image, threshold, name, x, y):
    """Convert an image to ZPL and print it to stdout."""
    try:
        img = load_image(image)
    except (ImageError, ImageSizeError) as e:
        fail("Image error", e)

    if name:
        click.echo(download_graphic_from_image(name, img, threshold).to_zpl())
        return

    click.echo(serialize_sequence([
        StartFormat(),
        FieldOrigin(x, y),
        graphic_field_from_image(img, threshold),
        FieldSeparator(),
        EndFormat(),
    ]))


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", required=True, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--dpmm", type=click.Choice(["6", "8", "12", "24"]), default="8", show_default=True)
@click.option("--width", default=4.0, show_default=True, help="Label width in inches")
@click.option("--height", default=6.0, show_default=True, help="Label height in inches")
def render(file, output, dpmm, width, height):
    """Render a ZPL file to PNG using the Labelary service."""
    client = LabelaryClient(dpmm=int(dpmm), width=width, height=height)
    try:
        png = client.render(file.read_text(encoding="utf-8"))
    except RenderError as e:
        fail("Render error", e)
    output.write_bytes(png)
    click.echo(f"Wrote {len(png)} bytes to {output}")


@main.command()
def forget():
    """Forget the cached printer."""
    if cache.clear_cache():
        click.echo("Cached printer cleared.")
    else:
        click.echo("No cached printer.")


if __name__ == "__main__":
    main()
