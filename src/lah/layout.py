"""Adaptive table layout: fit column widths into a terminal width budget.

Pure functions with no side effects. Rendering and styling live in
display.py and table.py; this module only turns a grid of (possibly
styled) cell strings into a vector of column widths.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence

DEFAULT_MIN_WIDTH = 4
SEPARATOR_WIDTH = 3  # " │ " between adjacent columns
EDGE_WIDTH = 2       # left + right outer border


# ---------------------------------------------------------------------------
# Text measurement
# ---------------------------------------------------------------------------

# CSI sequences (ESC [ params letter) and bare ESC markers. An ESC [ with no
# terminating letter is left alone so real content is never swallowed.
RE_ANSI = re.compile(r"\x1b\[[^A-Za-z]*[A-Za-z]|\x1b(?!\[)")


def strip_ansi(text: str) -> str:
    """Remove embedded terminal styling sequences from text."""
    return RE_ANSI.sub("", text)


def measure(text: str) -> int:
    """Display width of text in character units, ignoring escape sequences."""
    return len(strip_ansi(text))


# ---------------------------------------------------------------------------
# Constraints
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ColumnConstraint:
    """Width bounds for one column. 0 means unconstrained in that direction."""
    min_width: int = 0
    max_width: int = 0


class Layout(NamedTuple):
    widths: list[int]
    ok: bool


def column_minimum(constraints: Sequence[ColumnConstraint], index: int) -> int:
    """Declared minimum for a column, falling back to DEFAULT_MIN_WIDTH."""
    if index < len(constraints) and constraints[index].min_width > 0:
        return constraints[index].min_width
    return DEFAULT_MIN_WIDTH


def border_overhead(
    column_count: int,
    separator_width: int = SEPARATOR_WIDTH,
    edge_width: int = EDGE_WIDTH,
) -> int:
    """Display columns consumed by separators and outer edges."""
    if column_count <= 0:
        return 0
    return (column_count - 1) * separator_width + edge_width


# ---------------------------------------------------------------------------
# Width calculation
# ---------------------------------------------------------------------------

def natural_widths(grid: Sequence[Sequence[str]]) -> list[int]:
    """Widest measured cell per column, header row included."""
    if not grid:
        return []
    columns = len(grid[0])
    widths = [0] * columns
    for row_index, row in enumerate(grid):
        if len(row) != columns:
            raise ValueError(
                f"row {row_index} has {len(row)} cells, header has {columns}"
            )
        for i, cell in enumerate(row):
            w = measure(cell)
            if w > widths[i]:
                widths[i] = w
    return widths


def clamp(widths: Sequence[int], constraints: Sequence[ColumnConstraint]) -> list[int]:
    """Clamp each width into its column's [min, max] range.

    The minimum wins when a column declares min > max. Columns without a
    constraint entry (or with a zero minimum) get DEFAULT_MIN_WIDTH, the
    same floor fit() works against.
    """
    result = []
    for i, w in enumerate(widths):
        if i < len(constraints) and constraints[i].max_width > 0:
            w = min(w, constraints[i].max_width)
        result.append(max(w, column_minimum(constraints, i)))
    return result


# ---------------------------------------------------------------------------
# Fit engine
# ---------------------------------------------------------------------------

def _is_shrinkable(shrinkable: Sequence[bool], index: int) -> bool:
    return shrinkable[index] if index < len(shrinkable) else True


def fit(
    widths: Sequence[int],
    constraints: Sequence[ColumnConstraint],
    shrinkable: Sequence[bool],
    budget: int,
    overhead: int,
) -> Layout:
    """Shrink shrinkable columns so the table fits within budget.

    Excess width is taken from each shrinkable column in proportion to its
    slack (width above its minimum). Integer rounding leftovers are then
    taken one unit at a time from the column with the most remaining slack,
    lowest index first on ties. Columns are never grown.

    Returns Layout(widths, ok). ok is False when even the column minimums
    plus overhead exceed the budget, or when shrinkable slack runs out.
    """
    final = list(widths)
    count = len(final)
    minimums = [column_minimum(constraints, i) for i in range(count)]

    floor = sum(minimums) + overhead
    if budget < floor:
        return Layout(final, False)

    total = sum(final) + overhead
    if total <= budget:
        return Layout(final, True)

    excess = total - budget
    slack = [0] * count
    for i in range(count):
        if _is_shrinkable(shrinkable, i):
            slack[i] = max(0, final[i] - minimums[i])
    total_slack = sum(slack)
    if total_slack == 0:
        return Layout(final, False)

    # Proportional pass
    for i in range(count):
        if slack[i] == 0:
            continue
        reduction = min(slack[i] * excess // total_slack, slack[i])
        final[i] -= reduction
        slack[i] -= reduction

    # Top-up pass for rounding leftovers
    remaining = sum(final) + overhead - budget
    while remaining > 0:
        widest = max(range(count), key=lambda i: (slack[i], -i))
        if slack[widest] == 0:
            return Layout(final, False)
        final[widest] -= 1
        slack[widest] -= 1
        remaining -= 1

    return Layout(final, True)


def compute_layout(
    grid: Sequence[Sequence[str]],
    constraints: Sequence[ColumnConstraint],
    shrinkable: Sequence[bool],
    budget: int,
    *,
    separator_width: int = SEPARATOR_WIDTH,
    edge_width: int = EDGE_WIDTH,
    overhead: Optional[int] = None,
) -> Layout:
    """Measure, clamp and fit a cell grid in one call."""
    natural = natural_widths(grid)
    if not natural:
        return Layout([], True)
    if overhead is None:
        overhead = border_overhead(len(natural), separator_width, edge_width)
    clamped = clamp(natural, constraints)
    return fit(clamped, constraints, shrinkable, budget, overhead)
