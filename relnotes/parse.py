"""Split a changelog document into ordered version records.

The parser is built from the document plus a header pattern (detected,
chosen by format, or supplied by the caller). Segmentation runs once, on
first access, and the resulting records never change afterwards.
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from datetime import date, datetime

from relnotes.locate import line_for_version
from relnotes.patterns import Format, detect_format, ensure_multiline, pattern_for_format
from relnotes.ranges import between

log = logging.getLogger(__name__)

_ISO_DATE_RE = re.compile(r'\d{4}-\d{2}-\d{2}', re.ASCII)


@dataclass(frozen=True)
class Entry:
    """Parsed data for a single changelog version."""

    date: date | None
    content: str


@dataclass(frozen=True)
class Record:
    """A version token and its entry, in document order."""

    version: str
    entry: Entry


def parse_date(text: str | None) -> date | None:
    """Parse a strict ``YYYY-MM-DD`` date. Anything else yields None."""
    if not text or not _ISO_DATE_RE.fullmatch(text):
        return None
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        return None


def segment(content: str, pattern: re.Pattern[str]) -> tuple[Record, ...]:
    """Partition *content* into records using the header *pattern*.

    Each record's content runs from the end of its header match to the start
    of the next header (or the end of the document), stripped of surrounding
    whitespace only.
    """
    if not content:
        return ()

    matches = list(pattern.finditer(content))
    records: list[Record] = []

    for i, match in enumerate(matches):
        version = match.group(1) or ""
        raw_date = match.group(2) if pattern.groups >= 2 else None

        body_end = matches[i + 1].start() if i + 1 < len(matches) else len(content)
        body = content[match.end():body_end].strip()

        records.append(Record(version, Entry(parse_date(raw_date), body)))

    return tuple(records)


class Parser:
    """Parsed changelog with lazy, compute-once segmentation.

    Parameters
    ----------
    content:
        Raw changelog text.
    pattern:
        Compiled header pattern (group 1 = version, group 2 = optional date).
    fmt:
        The built-in format *pattern* came from, or None for a custom one.

    Safe to share between threads: the first accessor call segments the
    document under a lock, later calls read the cached records.
    """

    def __init__(
        self,
        content: str,
        pattern: re.Pattern[str],
        fmt: Format | None = None,
    ) -> None:
        self._content = content
        self._pattern = pattern
        self._format = fmt
        self._records: tuple[Record, ...] | None = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        fmt = self._format.value if self._format else "custom"
        return f"Parser({fmt}, {len(self._content)} chars)"

    @property
    def content(self) -> str:
        return self._content

    @property
    def pattern(self) -> re.Pattern[str]:
        return self._pattern

    @property
    def format(self) -> Format | None:
        return self._format

    def _ensure_parsed(self) -> tuple[Record, ...]:
        records = self._records
        if records is not None:
            return records
        with self._lock:
            if self._records is None:
                self._records = segment(self._content, self._pattern)
                log.debug("Segmented %d record(s)", len(self._records))
            return self._records

    def records(self) -> list[Record]:
        """All records in document order, duplicates included."""
        return list(self._ensure_parsed())

    def versions(self) -> list[str]:
        """Version strings in the order they appear, duplicates included."""
        return [r.version for r in self._ensure_parsed()]

    def entry(self, version: str) -> Entry | None:
        """Return the entry for *version*, or None if absent.

        When a version is declared more than once, the first one wins.
        """
        for record in self._ensure_parsed():
            if record.version == version:
                return record.entry
        return None

    def entries(self) -> dict[str, Entry]:
        """All entries keyed by version, in document order.

        Uses the same first-occurrence-wins rule as :meth:`entry`; use
        :meth:`records` to see repeated versions.
        """
        result: dict[str, Entry] = {}
        for record in self._ensure_parsed():
            result.setdefault(record.version, record.entry)
        return result

    def line_for_version(self, version: str) -> int:
        """0-based line of the header for *version*, or -1."""
        return line_for_version(self._content, version)

    def between(self, old_version: str, new_version: str) -> str | None:
        """Document text between two version headers, or None.

        Either version may be empty to mean the start or end of the changelog.
        """
        return between(self._content, old_version, new_version)


def parse(content: str) -> Parser:
    """Parse a changelog, detecting its header format."""
    fmt = detect_format(content)
    return Parser(content, pattern_for_format(fmt), fmt)


def parse_with_format(content: str, fmt: Format | str) -> Parser:
    """Parse a changelog with an explicit format.

    ``Format.AUTO`` behaves like :func:`parse`. A string is converted with
    ``Format(fmt)`` and raises ValueError if it names no format.
    """
    fmt = Format(fmt)
    if fmt is Format.AUTO:
        return parse(content)
    return Parser(content, pattern_for_format(fmt), fmt)


def parse_with_pattern(content: str, pattern: str | re.Pattern[str]) -> Parser:
    """Parse a changelog with a custom header pattern.

    The pattern needs group 1 for the version and may use group 2 for a
    ``YYYY-MM-DD`` date. ``re.MULTILINE`` is added if missing so ``^`` and
    ``$`` bind to line boundaries.
    """
    return Parser(content, ensure_multiline(pattern), None)
