"""Slice a changelog between two version headers."""

from __future__ import annotations

from relnotes.locate import line_for_version


def line_range(
    old_line: int, new_line: int, line_count: int
) -> tuple[int, int] | None:
    """Resolve two header lines (-1 = not found) into a ``[start, end)`` range.

    - both found, old above new (ascending doc): old line to end of document
    - both found, new above old (descending doc): new line up to old line
    - only old found: start of document up to old line, unless old is line 0
    - only new found: new line to end of document
    - neither found: None
    """
    if old_line >= 0 and new_line >= 0:
        if old_line < new_line:
            return old_line, line_count
        return new_line, old_line
    if old_line >= 0:
        if old_line == 0:
            return None
        return 0, old_line
    if new_line >= 0:
        return new_line, line_count
    return None


def between(content: str, old_version: str, new_version: str) -> str | None:
    """Return the text between the *old_version* and *new_version* headers.

    Either version may be empty to leave that end open. The slice keeps
    the original line breaks and is right-trimmed; None means not found.
    """
    lines = content.split("\n")
    span = line_range(
        line_for_version(content, old_version),
        line_for_version(content, new_version),
        len(lines),
    )
    if span is None:
        return None
    start, end = span
    return "\n".join(lines[start:end]).rstrip()
