"""codectrl: capture a call site's stack and source and ship it to a collector.

Quick start::

    from codectrl import capture

    capture({"user": 42, "state": "retrying"})          # 127.0.0.1:3001
    capture("checkpoint", surround=5, host="10.0.0.2", port="3001")
"""

from codectrl.builder import LogRecordBuilder, describe_message
from codectrl.config import CaptureConfig, default_config, load_config, load_config_file
from codectrl.logger import capture, capture_async, capture_if, capture_if_boxed
from codectrl.models import CaptureWarning, CodeSnippet, Frame, LogRecord, SupportsMessage
from codectrl.serializer import SerializationError, decode_record, encode_record
from codectrl.snippet import SourceUnavailableError, read_line, read_window
from codectrl.stack import (
    InspectStackWalker,
    RawFrame,
    RecordedStackWalker,
    StackTraceCollector,
    normalize_name,
)
from codectrl.transport import TransportError, send, send_async

__all__ = [
    "capture",
    "capture_if",
    "capture_if_boxed",
    "capture_async",
    "CaptureConfig",
    "default_config",
    "load_config",
    "load_config_file",
    "LogRecordBuilder",
    "describe_message",
    "CaptureWarning",
    "CodeSnippet",
    "Frame",
    "LogRecord",
    "SupportsMessage",
    "encode_record",
    "decode_record",
    "SerializationError",
    "read_line",
    "read_window",
    "SourceUnavailableError",
    "InspectStackWalker",
    "RawFrame",
    "RecordedStackWalker",
    "StackTraceCollector",
    "normalize_name",
    "send",
    "send_async",
    "TransportError",
]
__version__ = "0.1.0"
