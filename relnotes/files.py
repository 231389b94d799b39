"""Read changelog files and locate them inside a project directory."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Sequence

from relnotes.parse import Parser, parse_with_format, parse_with_pattern
from relnotes.patterns import Format

log = logging.getLogger(__name__)

# Changelog stems in priority order
CHANGELOG_FILENAMES: tuple[str, ...] = (
    "changelog",
    "news",
    "changes",
    "history",
    "release",
    "whatsnew",
    "releases",
)

# "" allows extensionless files such as CHANGES
CHANGELOG_EXTENSIONS: tuple[str, ...] = (".md", ".txt", ".rst", ".rdoc", ".markdown", "")

MIN_CHANGELOG_BYTES = 100
MAX_CHANGELOG_BYTES = 1_000_000


def parse_file(
    path: Path | str,
    fmt: Format | str = Format.AUTO,
    pattern: str | re.Pattern[str] | None = None,
) -> Parser:
    """Read and parse a changelog file.

    *pattern*, when given, takes precedence over *fmt*. OSError from reading
    the file propagates to the caller.
    """
    content = Path(path).read_text(encoding="utf-8")
    if pattern is not None:
        return parse_with_pattern(content, pattern)
    return parse_with_format(content, fmt)


def _candidates(names: list[str], stem: str, extensions: Sequence[str]) -> list[str]:
    matched = []
    for name in names:
        lower = name.lower()
        if lower.endswith(".sh"):
            continue
        base, ext = os.path.splitext(lower)
        if base == stem and ext in extensions:
            matched.append(name)
    return matched


def find_changelog(
    directory: Path | str,
    filenames: Sequence[str] = CHANGELOG_FILENAMES,
    extensions: Sequence[str] = CHANGELOG_EXTENSIONS,
    min_bytes: int = MIN_CHANGELOG_BYTES,
    max_bytes: int = MAX_CHANGELOG_BYTES,
) -> Path | None:
    """Locate a changelog file in *directory*.

    Stems are tried in priority order and matched case-insensitively. A
    single candidate for a stem is returned as-is; among several, the first
    one whose size lies within ``[min_bytes, max_bytes]`` wins.

    Returns None when nothing matches. A missing directory raises OSError.
    """
    root = Path(directory)
    names = sorted(p.name for p in root.iterdir() if not p.is_dir())
    stems = [s.lower() for s in filenames]
    exts = [e.lower() for e in extensions]

    for stem in stems:
        candidates = _candidates(names, stem, exts)
        if len(candidates) == 1:
            log.debug("Found changelog %s", candidates[0])
            return root / candidates[0]

        for name in candidates:
            path = root / name
            try:
                size = path.stat().st_size
            except OSError:
                continue
            if size < min_bytes or size > max_bytes:
                log.debug("Skipping %s (%d bytes)", name, size)
                continue
            log.debug("Found changelog %s among %d candidates", name, len(candidates))
            return path

    log.debug("No changelog found in %s", root)
    return None


def find_and_parse(
    directory: Path | str,
    fmt: Format | str = Format.AUTO,
    pattern: str | re.Pattern[str] | None = None,
    filenames: Sequence[str] = CHANGELOG_FILENAMES,
    extensions: Sequence[str] = CHANGELOG_EXTENSIONS,
    min_bytes: int = MIN_CHANGELOG_BYTES,
    max_bytes: int = MAX_CHANGELOG_BYTES,
) -> Parser | None:
    """Locate a changelog in *directory* and parse it, or return None."""
    path = find_changelog(
        directory,
        filenames=filenames,
        extensions=extensions,
        min_bytes=min_bytes,
        max_bytes=max_bytes,
    )
    if path is None:
        return None
    return parse_file(path, fmt=fmt, pattern=pattern)
