"""Header pattern catalog and format detection.

Three built-in header shapes are recognized:

- Keep a Changelog: ``## [1.0.0] - 2024-01-15``
- Markdown header: ``## 1.0.0 (2024-01-15)`` or ``### v1.0.0``
- Underline (setext): ``1.0.0`` followed by a line of ``===`` or ``---``

Every pattern exposes the version in group 1 and an optional
``YYYY-MM-DD`` date in group 2.
"""

from __future__ import annotations

import logging
import re
from enum import Enum

log = logging.getLogger(__name__)


class Format(str, Enum):
    """Changelog header format."""

    AUTO = "auto"
    KEEP_A_CHANGELOG = "keep-a-changelog"
    MARKDOWN = "markdown"
    UNDERLINE = "underline"


# ## [1.0.0] - 2024-01-15 (anything after the date is ignored)
KEEP_A_CHANGELOG_RE = re.compile(
    r'^##\s+\[([^\]]+)\](?:\s+-\s+(\d{4}-\d{2}-\d{2}))?',
    re.MULTILINE | re.ASCII,
)

# ## 1.0.0 (2024-01-15), ### v1.2.3
# The trailing [a-zA-Z0-9] means at least two characters after the first dot,
# so "## 1.0" does not match while "## [1.0]" does under Keep a Changelog.
MARKDOWN_HEADER_RE = re.compile(
    r'^#{1,3}\s+[vV]?([\w.+-]+\.[\w.+-]+[a-zA-Z0-9])'
    r'(?:\s+\((\d{4}-\d{2}-\d{2})\))?',
    re.MULTILINE | re.ASCII,
)

# 1.0.0
# =====
UNDERLINE_HEADER_RE = re.compile(
    r'^([\w.+-]+\.[\w.+-]+[a-zA-Z0-9])\n[=-]{3,}[ \t\r]*$',
    re.MULTILINE | re.ASCII,
)

CATALOG: dict[Format, re.Pattern[str]] = {
    Format.KEEP_A_CHANGELOG: KEEP_A_CHANGELOG_RE,
    Format.MARKDOWN: MARKDOWN_HEADER_RE,
    Format.UNDERLINE: UNDERLINE_HEADER_RE,
}

# Tried in order; the first one found anywhere in the document wins.
DETECTION_ORDER: tuple[Format, ...] = (
    Format.KEEP_A_CHANGELOG,
    Format.UNDERLINE,
)

FALLBACK_FORMAT = Format.MARKDOWN


def pattern_for_format(fmt: Format) -> re.Pattern[str]:
    """Return the built-in pattern for a concrete format.

    Raises ValueError for ``Format.AUTO``, which has no pattern of its own.
    """
    try:
        return CATALOG[fmt]
    except KeyError:
        raise ValueError(f"No built-in pattern for format '{fmt.value}'") from None


def detect_format(content: str) -> Format:
    """Pick the header format for a document.

    Detection is existence-based: a single Keep a Changelog header beats any
    number of markdown headers. Falls back to markdown even when nothing
    matches.
    """
    for fmt in DETECTION_ORDER:
        if CATALOG[fmt].search(content):
            log.debug("Detected changelog format: %s", fmt.value)
            return fmt
    log.debug("No distinctive headers found, using %s", FALLBACK_FORMAT.value)
    return FALLBACK_FORMAT


def ensure_multiline(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile a custom header pattern with ``re.MULTILINE`` turned on.

    Group 1 must capture the version; group 2, if present, the date.
    Raises ValueError when the pattern has no capture group.
    """
    if isinstance(pattern, re.Pattern):
        compiled = pattern
        if not compiled.flags & re.MULTILINE:
            compiled = re.compile(compiled.pattern, compiled.flags | re.MULTILINE)
    else:
        compiled = re.compile(pattern, re.MULTILINE)

    if compiled.groups < 1:
        raise ValueError(
            f"Header pattern {compiled.pattern!r} needs a capture group for the version"
        )
    return compiled
