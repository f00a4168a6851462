"""One-shot TCP delivery of an encoded log record to the collector."""

import asyncio
import logging
import socket

from codectrl.config import DEFAULT_HOST, DEFAULT_PORT
from codectrl.models import LogRecord
from codectrl.serializer import encode_record

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when the record cannot be delivered to the collector."""


def _parse_port(port: str | int) -> int:
    try:
        value = int(port)
    except (TypeError, ValueError) as e:
        raise TransportError(f"Invalid collector port: {port!r}") from e
    if not 0 < value < 65536:
        raise TransportError(f"Invalid collector port: {port!r}")
    return value


def send(
    record: LogRecord,
    host: str = DEFAULT_HOST,
    port: str | int = DEFAULT_PORT,
    timeout: float | None = None,
) -> None:
    """Open a connection, write one encoded record and close.

    No response is read and nothing is retried. ``timeout`` bounds both the
    connect and the write; None blocks until the OS gives up.

    Args:
        record: The record to deliver.
        host: Collector host name or address.
        port: Collector TCP port, as a string or an int.
        timeout: Seconds allowed for connect and write, or None.

    Raises:
        TransportError: If the port is invalid or the connection or write fails.
        SerializationError: If the record cannot be encoded.
    """
    port_number = _parse_port(port)
    payload = encode_record(record)

    try:
        with socket.create_connection((host, port_number), timeout=timeout) as sock:
            sock.sendall(payload)
    except OSError as e:
        logger.warning("Failed to send record to %s:%d: %s", host, port_number, e)
        raise TransportError(f"Could not send record to {host}:{port_number}: {e}") from e

    logger.debug("Sent %d bytes to %s:%d", len(payload), host, port_number)


async def _write(host: str, port: int, payload: bytes) -> None:
    _, writer = await asyncio.open_connection(host, port)
    try:
        writer.write(payload)
        await writer.drain()
    finally:
        writer.close()
        await writer.wait_closed()


async def send_async(
    record: LogRecord,
    host: str = DEFAULT_HOST,
    port: str | int = DEFAULT_PORT,
    timeout: float | None = None,
) -> None:
    """Awaitable counterpart of :func:`send` for code already on an event loop.

    Args:
        record: The record to deliver.
        host: Collector host name or address.
        port: Collector TCP port, as a string or an int.
        timeout: Seconds allowed for connect and write, or None.

    Raises:
        TransportError: If the port is invalid, the connection or write fails,
            or ``timeout`` expires.
        SerializationError: If the record cannot be encoded.
    """
    port_number = _parse_port(port)
    payload = encode_record(record)

    try:
        await asyncio.wait_for(_write(host, port_number, payload), timeout)
    except (OSError, asyncio.TimeoutError) as e:
        logger.warning("Failed to send record to %s:%d: %s", host, port_number, e)
        raise TransportError(f"Could not send record to {host}:{port_number}: {e}") from e

    logger.debug("Sent %d bytes to %s:%d", len(payload), host, port_number)
