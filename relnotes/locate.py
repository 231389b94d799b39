"""Find the line holding a version header.

Works on the raw document, independently of the pattern used to segment
it: a line is a header if it contains the version at a clean boundary and
has one of the shapes in :data:`HEADER_CHECKS`.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable

_DATE_LINE_RE = re.compile(r'^\d{4}-\d{2}-\d{2}', re.ASCII)
_UNDERLINE_RE = re.compile(r'^[=\-+]{3,}\s*$', re.ASCII)


class HeaderShape(Enum):
    """Line shapes that mark a version header."""

    MARKER = "marker"          # "# 1.0.0", "!1.0.0", "== 1.0.0"
    BARE = "bare"              # "1.0.0: Initial release", "v1.0.0 (2024-01-01)"
    BRACKETED = "bracketed"    # "[1.0.0] ..."
    BULLET = "bullet"          # "- version 1.0.0", "* 1.0.0"
    DATED = "dated"            # "2024-01-01 1.0.0"
    UNDERLINED = "underlined"  # "1.0.0" over "-----"


class _VersionProbe:
    """Per-version regexes shared by the line checks."""

    def __init__(self, version: str) -> None:
        escaped = re.escape(version)
        self.version = version
        self.occurrence = re.compile(escaped)
        self.range = re.compile(escaped + r'\.\.')
        self.bare = re.compile(r'^[vV]?' + escaped + r':?\s')
        self.bracketed = re.compile(r'^\[' + escaped + r'\]')
        self.bullet = re.compile(r'^[+*\-]\s+(?:version\s+)?' + escaped, re.IGNORECASE)


LineCheck = Callable[[_VersionProbe, str, "str | None"], bool]


def _is_marker(probe: _VersionProbe, line: str, next_line: str | None) -> bool:
    return line.startswith(("#", "!", "=="))


def _is_bare(probe: _VersionProbe, line: str, next_line: str | None) -> bool:
    return probe.bare.match(line) is not None


def _is_bracketed(probe: _VersionProbe, line: str, next_line: str | None) -> bool:
    return probe.bracketed.match(line) is not None


def _is_bullet(probe: _VersionProbe, line: str, next_line: str | None) -> bool:
    return probe.bullet.match(line) is not None


def _is_dated(probe: _VersionProbe, line: str, next_line: str | None) -> bool:
    return _DATE_LINE_RE.match(line) is not None


def _is_underlined(probe: _VersionProbe, line: str, next_line: str | None) -> bool:
    return next_line is not None and _UNDERLINE_RE.match(next_line) is not None


# Order matters: the first check that holds names the shape.
HEADER_CHECKS: tuple[tuple[HeaderShape, LineCheck], ...] = (
    (HeaderShape.MARKER, _is_marker),
    (HeaderShape.BARE, _is_bare),
    (HeaderShape.BRACKETED, _is_bracketed),
    (HeaderShape.BULLET, _is_bullet),
    (HeaderShape.DATED, _is_dated),
    (HeaderShape.UNDERLINED, _is_underlined),
)


def _is_word_char(ch: str) -> bool:
    return ch == "_" or (ch.isascii() and ch.isalnum())


def _strip_prefix(version: str) -> str:
    if version[:1] in ("v", "V"):
        return version[1:]
    return version


def _contains(line: str, probe: _VersionProbe) -> bool:
    for m in probe.occurrence.finditer(line):
        start, end = m.span()
        if start > 0:
            prev = line[start - 1]
            if prev == ".":
                continue
            if _is_word_char(prev) and prev not in ("v", "V"):
                continue
        if end < len(line):
            nxt = line[end]
            if nxt in (".", "-") or _is_word_char(nxt):
                continue
        return True
    return False


def contains_version(line: str, version: str) -> bool:
    """Check whether *line* mentions *version* as a whole token.

    ``1.0.1`` does not match inside ``1.0.10`` or ``1.0.1-beta``. A
    preceding ``v``/``V`` is allowed since headers often use that prefix.
    """
    if not version:
        return False
    return _contains(line, _VersionProbe(version))


def _classify(lines: list[str], index: int, probe: _VersionProbe) -> HeaderShape | None:
    line = lines[index]
    if not _contains(line, probe):
        return None
    # "1.0.0..2.0.0" is a range reference, not a header
    if probe.range.search(line):
        return None
    next_line = lines[index + 1] if index + 1 < len(lines) else None
    for shape, check in HEADER_CHECKS:
        if check(probe, line, next_line):
            return shape
    return None


def classify_line(lines: list[str], index: int, version: str) -> HeaderShape | None:
    """Return the header shape of ``lines[index]`` for *version*, or None.

    *version* is matched after stripping one leading ``v`` or ``V``.
    """
    version = _strip_prefix(version)
    if not version:
        return None
    return _classify(lines, index, _VersionProbe(version))


def line_for_version(content: str, version: str) -> int:
    """Return the 0-based line number of the header for *version*.

    Returns -1 when *version* is empty or no header line mentions it.
    """
    if not version:
        return -1
    version = _strip_prefix(version)
    if not version:
        return -1

    probe = _VersionProbe(version)
    lines = content.split("\n")
    for i in range(len(lines)):
        if _classify(lines, i, probe) is not None:
            return i
    return -1
