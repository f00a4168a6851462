"""Assembles a LogRecord from a message, a collected stack and its code window."""

import builtins
import logging
import pprint
from typing import Any

from codectrl.config import DEFAULT_SURROUND
from codectrl.models import CaptureWarning, CodeSnippet, Frame, LogRecord, SupportsMessage
from codectrl.snippet import read_window
from codectrl.stack import StackTraceCollector

logger = logging.getLogger(__name__)

DEGRADED_CAPTURE_NOTICE = (
    "Capturing with the interpreter's optimizations enabled (python -O) "
    "produces limited information: the stack trace, file path and line number "
    "may be missing from the record sent to the collector. Consider guarding "
    "capture calls with `if __debug__:` so that this message does not re-appear."
)


def describe_message(message: Any) -> tuple[str, str]:
    """Return (rendered text, type tag) for a capture payload."""
    # A class passes the protocol check through its unbound methods.
    if isinstance(message, SupportsMessage) and not isinstance(message, type):
        return message.render_message(), message.message_type()

    cls = type(message)
    if cls.__module__ == builtins.__name__:
        type_tag = cls.__qualname__
    else:
        type_tag = f"{cls.__module__}.{cls.__qualname__}"
    return pprint.pformat(message), type_tag


class LogRecordBuilder:
    """Builds one LogRecord per call; holds no state between calls.

    ``debug_info`` is the process-wide build-mode flag. When it is False the
    record carries the COMPILED_WITHOUT_DEBUG_INFO warning and the operator is
    told through the ``codectrl.builder`` logger.
    """

    def __init__(
        self,
        collector: StackTraceCollector | None = None,
        debug_info: bool = True,
        address: str = "",
    ):
        self._collector = collector or StackTraceCollector()
        self._debug_info = debug_info
        self._address = address

    def build(
        self,
        message: Any,
        surround: int = DEFAULT_SURROUND,
        stack: list[Frame] | None = None,
    ) -> LogRecord:
        """Build a record; ``stack`` defaults to a fresh collection."""
        text, type_tag = describe_message(message)
        record = LogRecord(message=text, message_type=type_tag, address=self._address)

        if not self._debug_info:
            logger.warning(DEGRADED_CAPTURE_NOTICE)
            record.warnings.append(CaptureWarning.COMPILED_WITHOUT_DEBUG_INFO.description)

        record.stack = list(stack) if stack is not None else self._collector.collect()

        if record.stack:
            deepest = record.stack[-1]
            record.line_number = deepest.line_number
            record.file_name = deepest.file_path
            record.code_snippet = read_window(
                deepest.file_path, deepest.line_number, surround
            )
        else:
            record.code_snippet = CodeSnippet()

        return record
