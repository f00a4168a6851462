"""Call stack walking and frame filtering.

A StackWalker returns the current call chain innermost first as RawFrame
tuples. StackTraceCollector normalizes each symbol name, drops frames that
belong to this package, to the interpreter's standard library or to non-Python
files, and reads the source line for every frame it keeps.

The collected list reads outermost caller first: its last element is the
deepest application frame, which the builder uses for the record's location.
"""

import inspect
import logging
import os
import sysconfig
import zlib
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol

from codectrl.models import Frame
from codectrl.snippet import read_line

logger = logging.getLogger(__name__)

SEPARATOR = "::"
PACKAGE = __name__.partition(".")[0]
SOURCE_SUFFIX = ".py"


@dataclass(frozen=True)
class RawFrame:
    """One unresolved entry of a walked call stack; any field may be missing."""

    name: str | None
    file_path: str | None
    line_number: int | None
    column_number: int | None


class StackWalker(Protocol):
    def walk(self) -> list[RawFrame]:
        """Return the current call chain, innermost frame first."""
        ...


def _symbol_for(frame_info: inspect.FrameInfo) -> str:
    code = frame_info.frame.f_code
    module = frame_info.frame.f_globals.get("__name__", "")
    qualname = code.co_qualname.replace(".", SEPARATOR)
    digest = zlib.crc32(f"{code.co_filename}:{code.co_firstlineno}".encode())
    return f"{module}{SEPARATOR}{qualname}{SEPARATOR}h{digest:08x}"


class InspectStackWalker:
    """Walks the interpreter's live frames with :func:`inspect.stack`.

    Symbols take the form ``module::Qual::name::h<crc32>``, where the suffix
    identifies the code object.
    """

    def walk(self) -> list[RawFrame]:
        frames = []
        for info in inspect.stack(context=0):
            col = info.positions.col_offset if info.positions else None
            frames.append(
                RawFrame(
                    name=_symbol_for(info),
                    file_path=info.filename,
                    line_number=info.lineno,
                    column_number=col + 1 if col is not None else 0,
                )
            )
        return frames


class RecordedStackWalker:
    """Replays an explicitly recorded call chain (innermost first).

    For callers that cannot introspect the live stack, or that want to
    describe a call chain by hand.
    """

    def __init__(self, frames: Iterable[RawFrame]):
        self._frames = list(frames)

    def walk(self) -> list[RawFrame]:
        return list(self._frames)


def normalize_name(symbol: str | None, separator: str = SEPARATOR) -> str:
    """Strip the final ``separator``-delimited segment of ``symbol``.

    >>> normalize_name("mod::Type::method::h1a2b3")
    'mod::Type::method'
    >>> normalize_name("main")
    'main'
    """
    if not symbol:
        return ""
    head, sep, _ = symbol.rpartition(separator)
    return head if sep else symbol


def is_capture_frame(name: str) -> bool:
    """True for frames inside this package (entry points and internals)."""
    module = name.partition(SEPARATOR)[0]
    return module == PACKAGE or module.startswith(PACKAGE + ".")


def _runtime_dirs() -> tuple[str, ...]:
    paths = sysconfig.get_paths()
    dirs = {
        os.path.normcase(os.path.realpath(paths[key]))
        for key in ("stdlib", "platstdlib")
        if paths.get(key)
    }
    return tuple(sorted(dirs))


_RUNTIME_DIRS = _runtime_dirs()


def is_runtime_frame(file_path: str) -> bool:
    """True for interpreter-internal code: the standard library and
    pseudo-files such as ``<frozen importlib._bootstrap>``."""
    if file_path.startswith("<"):
        return True
    path = os.path.normcase(os.path.realpath(file_path))
    if "site-packages" in path or "dist-packages" in path:
        return False
    return any(path == d or path.startswith(d + os.sep) for d in _RUNTIME_DIRS)


def is_source_file(file_path: str) -> bool:
    return file_path.endswith(SOURCE_SUFFIX)


class StackTraceCollector:
    """Builds the ordered, filtered frame list for one capture."""

    def __init__(
        self,
        walker: StackWalker | None = None,
        line_reader: Callable[[str, int], str] = read_line,
    ):
        self._walker = walker or InspectStackWalker()
        self._read_line = line_reader

    def collect(self) -> list[Frame]:
        raw_frames = self._walker.walk()
        stack: deque[Frame] = deque()

        for raw in raw_frames:
            if (
                raw.file_path is None
                or raw.line_number is None
                or raw.column_number is None
            ):
                continue

            name = normalize_name(raw.name)
            if is_capture_frame(name):
                continue
            if is_runtime_frame(raw.file_path) or not is_source_file(raw.file_path):
                continue

            stack.appendleft(
                Frame(
                    name=name,
                    file_path=raw.file_path,
                    line_number=raw.line_number,
                    column_number=raw.column_number,
                    code=self._read_line(raw.file_path, raw.line_number),
                )
            )

        logger.debug("Kept %d of %d stack frames", len(stack), len(raw_frames))
        return list(stack)
