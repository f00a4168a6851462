"""Serialize and deserialize log records as protobuf ``Struct`` documents.

``google.protobuf.Struct`` is field-tagged and carries a type for every value,
so a collector can decode a record without a record-specific schema and new
fields do not break older readers.
"""

from __future__ import annotations

from google.protobuf import json_format
from google.protobuf.struct_pb2 import Struct

from codectrl.models import LogRecord, record_from_dict, record_to_dict


class SerializationError(Exception):
    """Raised when serialization or deserialization fails."""


def _to_wire(record: LogRecord) -> dict:
    """Record dict with snippet keys as strings (Struct keys must be str)."""
    data = record_to_dict(record)
    data["code_snippet"] = {
        str(number): text for number, text in data["code_snippet"].items()
    }
    return data


def encode_record(record: LogRecord) -> bytes:
    """Serialize a LogRecord to protobuf binary bytes.

    Args:
        record: The record to encode.

    Returns:
        The serialized ``Struct`` document.

    Raises:
        SerializationError: If serialization fails.
    """
    try:
        document = Struct()
        document.update(_to_wire(record))
        return document.SerializeToString()
    except Exception as exc:
        raise SerializationError(f"Record serialization failed: {exc}") from exc


def decode_record(data: bytes) -> LogRecord:
    """Deserialize protobuf binary bytes back to a LogRecord.

    Args:
        data: Bytes previously produced by :func:`encode_record`.

    Returns:
        The decoded ``LogRecord``; absent fields take their defaults.

    Raises:
        SerializationError: If deserialization fails.
    """
    try:
        document = Struct()
        document.ParseFromString(data)
        return record_from_dict(json_format.MessageToDict(document))
    except Exception as exc:
        raise SerializationError(f"Record deserialization failed: {exc}") from exc
