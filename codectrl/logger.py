"""Public capture entry points: build a record at the call site and send it."""

from collections.abc import Callable
from typing import Any

from codectrl.builder import LogRecordBuilder
from codectrl.config import CaptureConfig, default_config
from codectrl.models import LogRecord
from codectrl.transport import send, send_async


def _build(message: Any, surround: int | None, config: CaptureConfig) -> LogRecord:
    builder = LogRecordBuilder(debug_info=config.debug_info, address=config.address)
    return builder.build(
        message, config.surround if surround is None else surround
    )


def capture(
    message: Any,
    surround: int | None = None,
    host: str | None = None,
    port: str | int | None = None,
    *,
    config: CaptureConfig | None = None,
) -> None:
    """Capture the current call site and send it to the collector.

    Blocks until the record has been written or the send has failed.
    Arguments left as None fall back to ``config`` (the process-wide
    :func:`default_config` when not given).

    Raises:
        SourceUnavailableError: If a frame's source file cannot be read.
        TransportError: If the collector cannot be reached.
    """
    config = config or default_config()
    record = _build(message, surround, config)
    send(
        record,
        config.host if host is None else host,
        config.port if port is None else port,
        timeout=config.timeout,
    )


def capture_if(
    condition: Callable[[], bool],
    message: Any,
    surround: int | None = None,
    host: str | None = None,
    port: str | int | None = None,
    *,
    config: CaptureConfig | None = None,
) -> bool:
    """Capture only when ``condition()`` is true. Returns whether it fired."""
    if condition():
        capture(message, surround, host, port, config=config)
        return True
    return False


def capture_if_boxed(
    condition: Callable[[], bool],
    message: Any,
    surround: int | None = None,
    host: str | None = None,
    port: str | int | None = None,
    *,
    config: CaptureConfig | None = None,
) -> bool:
    """Like :func:`capture_if`, for a closure over outer-scope state.

    ``condition`` is called exactly once.
    """
    fired = bool(condition())
    if fired:
        capture(message, surround, host, port, config=config)
    return fired


async def capture_async(
    message: Any,
    surround: int | None = None,
    host: str | None = None,
    port: str | int | None = None,
    *,
    config: CaptureConfig | None = None,
) -> None:
    """Awaitable :func:`capture`; the stack walk and file reads stay synchronous."""
    config = config or default_config()
    record = _build(message, surround, config)
    await send_async(
        record,
        config.host if host is None else host,
        config.port if port is None else port,
        timeout=config.timeout,
    )
