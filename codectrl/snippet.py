"""Source line and code window extraction for captured frames."""

import logging
from collections.abc import Iterator

from codectrl.config import DEFAULT_SURROUND
from codectrl.models import CodeSnippet

logger = logging.getLogger(__name__)


class SourceUnavailableError(Exception):
    """Raised when a frame's source file cannot be opened."""


def _iter_lines(path: str) -> Iterator[tuple[int, str | None]]:
    """Yield (line_number, text) for every line, 1-based.

    Text is None for a line that is not valid UTF-8. The line terminator is
    removed, indentation is kept.
    """
    try:
        f = open(path, "rb")
    except OSError as e:
        raise SourceUnavailableError(f"Could not open source file: {path}") from e

    with f:
        for number, raw in enumerate(f, start=1):
            try:
                text = raw.decode("utf-8")
            except UnicodeDecodeError:
                yield number, None
                continue
            yield number, text.rstrip("\r\n")


def read_line(path: str, line_number: int) -> str:
    """Return the stripped text of line ``line_number`` in ``path``.

    Returns an empty string when the file is shorter than ``line_number``.

    Raises:
        SourceUnavailableError: If the file cannot be opened.
    """
    for number, text in _iter_lines(path):
        if number == line_number:
            return text.strip() if text is not None else ""
    return ""


def read_window(
    path: str, line_number: int, surround: int = DEFAULT_SURROUND
) -> CodeSnippet:
    """Return the lines in ``[line_number - surround, line_number + surround]``.

    The window starts at line 1 at the earliest and is clipped to the last
    line of the file. Undecodable lines are left out.

    Raises:
        SourceUnavailableError: If the file cannot be opened.
    """
    offset = max(1, line_number - surround)
    end = line_number + surround

    lines: dict[int, str] = {}
    for number, text in _iter_lines(path):
        if number > end:
            break
        if number >= offset and text is not None:
            lines[number] = text

    if lines:
        logger.debug(
            "Read window %d..%d of %s (%d lines)",
            min(lines), max(lines), path, len(lines),
        )
    else:
        logger.debug("Empty window around line %d of %s", line_number, path)
    return CodeSnippet(lines)
