"""Tests for lah.table — grid building and box rendering."""

import stat
from datetime import datetime, timedelta

import pytest

from lah.layout import ColumnConstraint, measure, strip_ansi
from lah.listing import FileEntry
from lah.table import (
    COLUMNS,
    BoxRenderer,
    build_grid,
    columns_for,
    render_listing,
)

NOW = datetime(2026, 1, 15, 12, 0, 0)


def _entry(name: str, size: int = 100, is_dir: bool = False, git_status: str = "") -> FileEntry:
    mode = (stat.S_IFDIR | 0o755) if is_dir else (stat.S_IFREG | 0o644)
    return FileEntry(
        name=name,
        path=name,
        size=size,
        mode=mode,
        mtime=NOW - timedelta(hours=2),
        is_dir=is_dir,
        is_hidden=name.startswith("."),
        git_status=git_status,
    )


@pytest.fixture
def entries():
    return [
        _entry("src", is_dir=True),
        _entry("an_unreasonably_long_module_name_for_testing.py", size=2048),
        _entry("README.md", size=512),
    ]


class TestColumns:

    def test_default_columns(self):
        cols = columns_for(show_git=False)
        assert [c.header for c in cols] == ["Name", "Size", "Modified", "Perms"]
        assert [c.shrinkable for c in cols] == [True, False, True, False]

    def test_git_column_appended(self):
        cols = columns_for(show_git=True)
        assert cols[-1].header == "Git"
        assert cols[-1].constraint == ColumnConstraint(6, 12)

    def test_overrides_by_lowercase_header(self):
        cols = columns_for(False, {"name": ColumnConstraint(20, 30)})
        assert cols[0].constraint == ColumnConstraint(20, 30)
        assert cols[1].constraint == COLUMNS[1].constraint


class TestBuildGrid:

    def test_header_and_rows(self, entries):
        grid = build_grid(entries, NOW, columns_for(False), color=False)
        assert grid[0] == ["Name", "Size", "Modified", "Perms"]
        assert grid[1] == ["src", "-", "2 hours ago", "drwxr-xr-x"]
        assert grid[3] == ["README.md", "512 B", "2 hours ago", "-rw-r--r--"]

    def test_git_cells(self):
        grid = build_grid([_entry("a.py", git_status="+1 -0")], NOW, columns_for(True), color=False)
        assert grid[1][-1] == "+1 -0"


class TestBoxRenderer:

    def test_line_widths_match_overhead(self):
        grid = [["Name", "Size"], ["\x1b[32mfile.py\x1b[0m", "1 B"]]
        widths = [10, 6]
        lines = BoxRenderer().paint(grid, widths)
        overhead = (len(widths) - 1) * BoxRenderer.separator_width + BoxRenderer.edge_width
        for line in lines:
            assert measure(line) == sum(widths) + overhead

    def test_plain_box(self):
        lines = BoxRenderer(color=False).paint([["A", "B"], ["x", "y"]], [4, 4])
        assert lines == [
            "┌──────┬──────┐",
            "│ A    │ B    │",
            "├──────┼──────┤",
            "│ x    │ y    │",
            "└──────┴──────┘",
        ]

    def test_header_only(self):
        lines = BoxRenderer(color=False).paint([["A"]], [4])
        assert lines == ["┌──────┐", "│ A    │", "└──────┘"]

    def test_truncates_overflowing_cells(self):
        lines = BoxRenderer(color=False).paint([["Name"], ["abcdefghij"]], [6])
        assert lines[3] == "│ abcde… │"

    def test_right_alignment(self):
        lines = BoxRenderer(color=False).paint([["Size"], ["1 B"]], [5], ["right"])
        assert lines[3] == "│   1 B │"

    def test_empty_grid(self):
        assert BoxRenderer().paint([], []) == []


class TestRenderListing:

    def test_fits_budget(self, entries):
        lines = render_listing(entries, 60, now=NOW)
        assert lines is not None
        for line in lines:
            assert measure(line) <= 60

    def test_wide_budget_keeps_natural_widths(self, entries):
        lines = render_listing(entries, 200, now=NOW, color=False)
        # Every natural width already sits inside its constraint
        assert "an_unreasonably_long_module_name_for_testing.py" in lines[4]
        assert measure(lines[0]) == 47 + 6 + 11 + 10 + 3 * 3 + 4

    def test_long_name_truncated_when_narrow(self, entries):
        lines = render_listing(entries, 56, now=NOW, color=False)
        body = "\n".join(strip_ansi(line) for line in lines)
        assert "…" in body
        assert "drwxr-xr-x" in body

    def test_too_small_returns_none(self, entries):
        assert render_listing(entries, 40, now=NOW) is None

    def test_empty_listing(self):
        assert render_listing([], 80) == []

    def test_git_column_rendered(self):
        lines = render_listing([_entry("a.py", git_status="(clean)")], 120, now=NOW,
                               show_git=True, color=False)
        assert "Git" in lines[1]
        assert "(clean)" in lines[3]
