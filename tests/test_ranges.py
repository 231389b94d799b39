"""Tests for relnotes.ranges."""

from __future__ import annotations

import pytest

from relnotes.parse import parse
from relnotes.ranges import between, line_range

DESCENDING = (
    "## [3.0.0] - 2024-03-01\n\nVersion 3 content\n\n"
    "## [2.0.0] - 2024-02-01\n\nVersion 2 content\n\n"
    "## [1.0.0] - 2024-01-01\n\nVersion 1 content\n"
)

ASCENDING = "## [1.0.0] - 2024-01-01\n\nFirst\n\n## [2.0.0] - 2024-02-01\n\nSecond\n"


class TestLineRange:
    @pytest.mark.parametrize("old,new,expected", [
        (2, 7, (2, 10)),     # ascending document
        (7, 2, (2, 7)),      # descending document
        (4, 4, (4, 4)),      # same header
        (0, -1, None),       # nothing before the first entry
        (5, -1, (0, 5)),
        (-1, 3, (3, 10)),
        (-1, -1, None),
    ])
    def test_decision_table(
        self, old: int, new: int, expected: tuple[int, int] | None
    ) -> None:
        assert line_range(old, new, 10) == expected


class TestBetween:
    def test_descending_between_versions(self) -> None:
        assert between(DESCENDING, "1.0.0", "3.0.0") == (
            "## [3.0.0] - 2024-03-01\n\nVersion 3 content\n\n"
            "## [2.0.0] - 2024-02-01\n\nVersion 2 content"
        )

    def test_new_version_to_end(self) -> None:
        result = between(DESCENDING, "", "2.0.0")
        assert result is not None
        assert result.startswith("## [2.0.0]")
        assert "Version 2 content" in result
        assert result.endswith("Version 1 content")

    def test_start_to_old_version(self) -> None:
        assert between(DESCENDING, "2.0.0", "") == "## [3.0.0] - 2024-03-01\n\nVersion 3 content"

    def test_old_version_on_first_line(self) -> None:
        assert between(DESCENDING, "3.0.0", "") is None

    def test_neither_found(self) -> None:
        assert between(DESCENDING, "9.0.0", "8.0.0") is None
        assert between(DESCENDING, "", "") is None

    def test_one_side_unknown(self) -> None:
        assert between(DESCENDING, "9.0.0", "2.0.0") == between(DESCENDING, "", "2.0.0")

    def test_same_version_is_empty(self) -> None:
        assert between(DESCENDING, "2.0.0", "2.0.0") == ""

    def test_ascending_changelog(self) -> None:
        result = between(ASCENDING, "1.0.0", "2.0.0")
        assert result is not None
        assert result.startswith("## [1.0.0]")
        assert result.endswith("Second")

    def test_v_prefixed_arguments(self) -> None:
        assert between(DESCENDING, "v1.0.0", "v3.0.0") == between(DESCENDING, "1.0.0", "3.0.0")

    def test_keeps_inner_formatting(self) -> None:
        doc = "## 2.0.0\n\n  - indented item\n\t- tabbed item\n\n## 1.0.0\n"
        assert between(doc, "1.0.0", "2.0.0") == "## 2.0.0\n\n  - indented item\n\t- tabbed item"

    def test_trims_trailing_whitespace_only(self) -> None:
        doc = "## 2.0.0\n   \nBody   \n\t\n\n## 1.0.0\n"
        assert between(doc, "1.0.0", "2.0.0") == "## 2.0.0\n   \nBody"


class TestParserBetween:
    def test_delegates(self) -> None:
        p = parse(DESCENDING)
        assert p.between("1.0.0", "3.0.0") == between(DESCENDING, "1.0.0", "3.0.0")

    def test_round_trip_bodies(self) -> None:
        p = parse(DESCENDING)
        result = p.between("1.0.0", "3.0.0")
        assert result is not None
        assert p.entry("3.0.0").content in result  # type: ignore[union-attr]
        assert p.entry("2.0.0").content in result  # type: ignore[union-attr]
        assert p.entry("1.0.0").content not in result  # type: ignore[union-attr]
