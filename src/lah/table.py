"""Box-drawn listing table: grid building and rendering."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from lah.display import (
    Color,
    colorize,
    format_git_status,
    format_modified,
    format_name,
    format_permissions,
    format_size,
    pad,
    truncate,
)
from lah.layout import ColumnConstraint, compute_layout
from lah.listing import FileEntry

logger = logging.getLogger(__name__)

TERMINAL_TOO_SMALL = (
    "Terminal is too small to display the table. Please widen your terminal window."
)


# ---------------------------------------------------------------------------
# Column layout
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ColumnDef:
    header: str
    constraint: ColumnConstraint
    shrinkable: bool = True
    align: str = "left"


COLUMNS = [
    ColumnDef("Name", ColumnConstraint(15, 50)),
    ColumnDef("Size", ColumnConstraint(6, 10), shrinkable=False, align="right"),
    ColumnDef("Modified", ColumnConstraint(10, 15)),
    ColumnDef("Perms", ColumnConstraint(10, 12), shrinkable=False),
]
GIT_COLUMN = ColumnDef("Git", ColumnConstraint(6, 12))


def columns_for(show_git: bool, overrides: Optional[dict[str, ColumnConstraint]] = None) -> list[ColumnDef]:
    """Active columns, with per-header constraint overrides applied."""
    cols = list(COLUMNS)
    if show_git:
        cols.append(GIT_COLUMN)
    if overrides:
        cols = [
            ColumnDef(c.header, overrides.get(c.header.lower(), c.constraint), c.shrinkable, c.align)
            for c in cols
        ]
    return cols


def build_grid(
    entries: Sequence[FileEntry],
    now: datetime,
    columns: Sequence[ColumnDef],
    color: bool = True,
) -> list[list[str]]:
    """Header row plus one formatted row per entry."""
    show_git = any(c.header == GIT_COLUMN.header for c in columns)
    grid = [[c.header for c in columns]]
    for e in entries:
        row = [
            format_name(e, color),
            format_size(e.size, e.is_dir, color),
            format_modified(e.mtime, now, color),
            format_permissions(e.mode, color),
        ]
        if show_git:
            row.append(format_git_status(e.git_status, color))
        grid.append(row)
    return grid


# ---------------------------------------------------------------------------
# Box renderer
# ---------------------------------------------------------------------------

class BoxRenderer:
    """Paints a cell grid as a single-line box table given final widths.

    Each rendered line is exactly sum(widths) + overhead display columns,
    where overhead = (n - 1) * separator_width + edge_width.
    """

    separator_width = 3  # " │ "
    edge_width = 4       # "│ " + " │"

    def __init__(self, color: bool = True) -> None:
        self.color = color

    def _border(self, text: str) -> str:
        return colorize(text, Color.GREEN, self.color)

    def _rule(self, widths: Sequence[int], left: str, mid: str, right: str) -> str:
        return self._border(left + mid.join("─" * (w + 2) for w in widths) + right)

    def _row(
        self,
        cells: Sequence[str],
        widths: Sequence[int],
        aligns: Sequence[str],
        header: bool = False,
    ) -> str:
        bar = self._border("│")
        parts = []
        for cell, width, align in zip(cells, widths, aligns):
            text = truncate(cell, width)
            if header:
                text = colorize(text, Color.CYAN + Color.BOLD, self.color)
            parts.append(pad(text, width, align))
        return f"{bar} " + f" {bar} ".join(parts) + f" {bar}"

    def paint(
        self,
        grid: Sequence[Sequence[str]],
        widths: Sequence[int],
        aligns: Optional[Sequence[str]] = None,
    ) -> list[str]:
        if not grid:
            return []
        if aligns is None:
            aligns = ["left"] * len(widths)
        lines = [self._rule(widths, "┌", "┬", "┐")]
        lines.append(self._row(grid[0], widths, ["left"] * len(widths), header=True))
        if len(grid) > 1:
            lines.append(self._rule(widths, "├", "┼", "┤"))
            for row in grid[1:]:
                lines.append(self._row(row, widths, aligns))
        lines.append(self._rule(widths, "└", "┴", "┘"))
        return lines


def render_listing(
    entries: Sequence[FileEntry],
    budget: int,
    *,
    now: Optional[datetime] = None,
    show_git: bool = False,
    color: bool = True,
    overrides: Optional[dict[str, ColumnConstraint]] = None,
    renderer: Optional[BoxRenderer] = None,
) -> Optional[list[str]]:
    """Render entries as table lines fitted to budget.

    Returns [] for an empty listing and None when the budget cannot hold
    even the minimum column widths.
    """
    if not entries:
        return []
    if now is None:
        now = datetime.now()
    if renderer is None:
        renderer = BoxRenderer(color=color)

    columns = columns_for(show_git, overrides)
    grid = build_grid(entries, now, columns, color)
    layout = compute_layout(
        grid,
        [c.constraint for c in columns],
        [c.shrinkable for c in columns],
        budget,
        separator_width=renderer.separator_width,
        edge_width=renderer.edge_width,
    )
    if not layout.ok:
        logger.info("Layout infeasible for budget %d", budget)
        return None
    logger.debug("Column widths %s for budget %d", layout.widths, budget)
    return renderer.paint(grid, layout.widths, [c.align for c in columns])
