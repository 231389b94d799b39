"""relnotes: parse changelogs into ordered version records.

Supports Keep a Changelog (``## [1.0.0] - 2024-01-15``), markdown headers
(``## 1.0.0`` / ``### v1.0.0 (2024-01-15)``) and underline style
(``1.0.0`` over ``=====``), detected automatically by default::

    from relnotes import parse

    p = parse(text)
    for version in p.versions():
        print(version, p.entry(version).content)

    p.between("1.0.0", "2.0.0")   # notes newer than 1.0.0, up to 2.0.0
"""

from __future__ import annotations

from relnotes.fetch import (
    FetchError,
    MalformedRepositoryURLError,
    RepositoryURLError,
    UnsupportedHostError,
    fetch_and_parse,
    fetch_changelog,
    raw_content_url,
)
from relnotes.files import find_and_parse, find_changelog, parse_file
from relnotes.locate import HeaderShape, contains_version, line_for_version
from relnotes.parse import (
    Entry,
    Parser,
    Record,
    parse,
    parse_with_format,
    parse_with_pattern,
)
from relnotes.patterns import Format, detect_format
from relnotes.ranges import between

__all__ = [
    "Entry",
    "FetchError",
    "Format",
    "HeaderShape",
    "MalformedRepositoryURLError",
    "Parser",
    "Record",
    "RepositoryURLError",
    "UnsupportedHostError",
    "between",
    "contains_version",
    "detect_format",
    "fetch_and_parse",
    "fetch_changelog",
    "find_and_parse",
    "find_changelog",
    "line_for_version",
    "parse",
    "parse_file",
    "parse_with_format",
    "parse_with_pattern",
    "raw_content_url",
]
