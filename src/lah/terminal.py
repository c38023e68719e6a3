"""Terminal width detection."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_COLUMNS = 70
DEFAULT_MARGIN = 10
MIN_BUDGET = 40


def _positive_int(value: str) -> Optional[int]:
    try:
        n = int(value.strip())
    except ValueError:
        return None
    return n if n > 0 else None


def terminal_columns() -> Optional[int]:
    """Detect the terminal width: $COLUMNS, then the stdout tty, then tput."""
    cols = _positive_int(os.environ.get("COLUMNS", ""))
    if cols:
        return cols

    try:
        cols = os.get_terminal_size().columns
        if cols > 0:
            return cols
    except (OSError, ValueError) as e:
        logger.debug("stdout is not a terminal: %s", e)

    try:
        out = subprocess.run(
            ["tput", "cols"], capture_output=True, text=True, timeout=2,
        ).stdout
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("tput cols failed: %s", e)
        return None
    return _positive_int(out)


def terminal_budget(
    margin: int = DEFAULT_MARGIN,
    floor: int = MIN_BUDGET,
    default: int = DEFAULT_COLUMNS,
) -> int:
    """Columns available to the table: terminal width minus margin.

    Falls back to ``default`` (no margin applied) when detection fails and
    never returns less than ``floor``.
    """
    cols = terminal_columns()
    if cols is None:
        logger.debug("Could not detect terminal width, using %d", default)
        budget = default
    else:
        budget = cols - margin
    return max(budget, floor)
