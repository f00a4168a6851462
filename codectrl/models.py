"""Log record model: stack frames, code snippets and capture warnings."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Frame:
    name: str
    file_path: str
    line_number: int
    column_number: int
    code: str


class CodeSnippet(Mapping):
    """Read-only mapping of 1-based line number to source text, ascending."""

    def __init__(self, lines: Mapping[int, str] | None = None):
        self._lines: dict[int, str] = dict(sorted((lines or {}).items()))

    def __getitem__(self, line_number: int) -> str:
        return self._lines[line_number]

    def __iter__(self) -> Iterator[int]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __repr__(self) -> str:
        return f"CodeSnippet({self._lines!r})"


class CaptureWarning(Enum):
    COMPILED_WITHOUT_DEBUG_INFO = (
        "Code was compiled without debug info (python -O), "
        "meaning information was lost"
    )

    @property
    def description(self) -> str:
        return self.value


@runtime_checkable
class SupportsMessage(Protocol):
    """A payload that renders itself and names its own type."""

    def render_message(self) -> str: ...

    def message_type(self) -> str: ...


@dataclass
class LogRecord:
    stack: list[Frame] = field(default_factory=list)
    line_number: int = 0
    code_snippet: CodeSnippet = field(default_factory=CodeSnippet)
    message: str = ""
    message_type: str = ""
    file_name: str = ""
    address: str = ""
    warnings: list[str] = field(default_factory=list)


def frame_to_dict(frame: Frame) -> dict:
    return {
        "name": frame.name,
        "file_path": frame.file_path,
        "line_number": frame.line_number,
        "column_number": frame.column_number,
        "code": frame.code,
    }


def record_to_dict(record: LogRecord) -> dict:
    """Convert a LogRecord to plain Python types, snippet keys stay ``int``."""
    return {
        "stack": [frame_to_dict(frame) for frame in record.stack],
        "line_number": record.line_number,
        "code_snippet": dict(record.code_snippet),
        "message": record.message,
        "message_type": record.message_type,
        "file_name": record.file_name,
        "address": record.address,
        "warnings": list(record.warnings),
    }


def record_from_dict(data: dict) -> LogRecord:
    """Inverse of :func:`record_to_dict`; tolerates missing fields and
    numeric values that arrive as floats or strings."""
    stack = [
        Frame(
            name=item.get("name", ""),
            file_path=item.get("file_path", ""),
            line_number=int(item.get("line_number", 0)),
            column_number=int(item.get("column_number", 0)),
            code=item.get("code", ""),
        )
        for item in data.get("stack", [])
    ]
    snippet = CodeSnippet(
        {int(key): value for key, value in data.get("code_snippet", {}).items()}
    )
    return LogRecord(
        stack=stack,
        line_number=int(data.get("line_number", 0)),
        code_snippet=snippet,
        message=data.get("message", ""),
        message_type=data.get("message_type", ""),
        file_name=data.get("file_name", ""),
        address=data.get("address", ""),
        warnings=list(data.get("warnings", [])),
    )
