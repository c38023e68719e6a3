"""Cell formatting: colors, styled-text padding and file metadata strings."""

from __future__ import annotations

import stat
from datetime import datetime
from pathlib import PurePath
from typing import TYPE_CHECKING

from lah.layout import RE_ANSI, measure

if TYPE_CHECKING:
    from lah.listing import FileEntry

ELLIPSIS = "…"


# ---------------------------------------------------------------------------
# ANSI color helpers
# ---------------------------------------------------------------------------

class Color:
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    DIM = "\033[90m"
    BRIGHT_RED = "\033[91m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_WHITE = "\033[97m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


def colorize(text: str, color: str, enabled: bool = True) -> str:
    if not enabled or not color or not text:
        return text
    return f"{color}{text}{Color.RESET}"


# ---------------------------------------------------------------------------
# Styled-text padding / truncation
# ---------------------------------------------------------------------------

def pad(text: str, target_width: int, align: str = "left") -> str:
    """Pad styled text to target display width with spaces."""
    remaining = max(0, target_width - measure(text))
    if align == "right":
        return " " * remaining + text
    if align == "center":
        left = remaining // 2
        return " " * left + text + " " * (remaining - left)
    return text + " " * remaining


def truncate(text: str, max_width: int, suffix: str = ELLIPSIS) -> str:
    """Cut styled text to max display width, keeping escape sequences intact.

    A reset is appended when the cut text carried any styling so color does
    not bleed into the border.
    """
    if measure(text) <= max_width:
        return text
    if max_width <= 0:
        return ""
    keep = max(0, max_width - len(suffix))
    out = []
    width = 0
    styled = False
    pos = 0
    while pos < len(text) and width < keep:
        m = RE_ANSI.match(text, pos)
        if m:
            out.append(m.group())
            styled = True
            pos = m.end()
            continue
        out.append(text[pos])
        width += 1
        pos += 1
    result = "".join(out) + suffix[: max_width - keep]
    if styled:
        result += Color.RESET
    return result


# ---------------------------------------------------------------------------
# File metadata formatting
# ---------------------------------------------------------------------------

_SOURCE_EXTS = frozenset({".go", ".rs", ".py", ".js", ".ts", ".jsx", ".tsx"})
_DOC_EXTS = frozenset({".md", ".txt", ".rst"})
_CONFIG_EXTS = frozenset({".yml", ".yaml", ".json", ".toml", ".ini"})


def format_name(entry: FileEntry, color: bool = True) -> str:
    name = entry.name
    if entry.is_dir:
        c = Color.BLUE + Color.BOLD
    elif entry.mode & 0o111:
        c = Color.RED
    elif entry.is_hidden:
        c = Color.YELLOW
    else:
        ext = PurePath(name).suffix.lower()
        if ext in _SOURCE_EXTS:
            c = Color.GREEN
        elif ext in _DOC_EXTS:
            c = Color.YELLOW
        elif ext in _CONFIG_EXTS:
            c = Color.MAGENTA
        else:
            c = Color.WHITE
    return colorize(name, c, color)


_SIZE_UNITS = ("KB", "MB", "GB", "TB")


def format_size(size: int, is_dir: bool, color: bool = True) -> str:
    """Human-readable size, 1024-based with one decimal above bytes."""
    if is_dir:
        return colorize("-", Color.CYAN, color)
    if size < 1024:
        return f"{size} B"
    div, exp = 1024, 0
    n = size // 1024
    while n >= 1024 and exp < len(_SIZE_UNITS) - 1:
        div *= 1024
        exp += 1
        n //= 1024
    return colorize(f"{size / div:.1f} {_SIZE_UNITS[exp]}", Color.BRIGHT_WHITE, color)


_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR


def format_modified(mtime: datetime, now: datetime, color: bool = True) -> str:
    """Relative age such as "3 hours ago", colored from fresh to stale."""
    seconds = (now - mtime).total_seconds()
    if seconds < 0:
        c, text = Color.BLUE, "future"
    elif seconds < _MINUTE:
        c, text = Color.GREEN, f"{int(seconds)} seconds ago"
    elif seconds < _HOUR:
        c, text = Color.GREEN, f"{int(seconds // _MINUTE)} minutes ago"
    elif seconds < _DAY:
        c, text = Color.YELLOW, f"{int(seconds // _HOUR)} hours ago"
    elif seconds < 7 * _DAY:
        c, text = Color.BRIGHT_YELLOW, f"{int(seconds // _DAY)} days ago"
    elif seconds < 30 * _DAY:
        c, text = Color.RED, f"{int(seconds // (7 * _DAY))} weeks ago"
    elif seconds < 365 * _DAY:
        c, text = Color.BRIGHT_RED, f"{int(seconds // (30 * _DAY))} months ago"
    else:
        c, text = Color.DIM, f"{int(seconds // (365 * _DAY))} years ago"
    return colorize(text, c, color)


def _type_char(mode: int) -> tuple[str, str]:
    if stat.S_ISDIR(mode):
        return "d", Color.CYAN + Color.BOLD
    if stat.S_ISLNK(mode):
        return "l", Color.MAGENTA + Color.BOLD
    if stat.S_ISCHR(mode):
        return "c", Color.YELLOW + Color.BOLD
    if stat.S_ISBLK(mode):
        return "b", Color.YELLOW + Color.BOLD
    if stat.S_ISFIFO(mode):
        return "p", Color.YELLOW + Color.BOLD
    if stat.S_ISSOCK(mode):
        return "s", Color.YELLOW + Color.BOLD
    return "-", Color.CYAN


# (read bit, write bit, exec bit, special bit, special char) per triad
_TRIADS = (
    (stat.S_IRUSR, stat.S_IWUSR, stat.S_IXUSR, stat.S_ISUID, "s"),
    (stat.S_IRGRP, stat.S_IWGRP, stat.S_IXGRP, stat.S_ISGID, "s"),
    (stat.S_IROTH, stat.S_IWOTH, stat.S_IXOTH, stat.S_ISVTX, "t"),
)


def format_permissions(mode: int, color: bool = True) -> str:
    """ls -l style permission string, e.g. "-rw-r--r--"."""
    char, c = _type_char(mode)
    parts = [colorize(char, c, color)]
    off = colorize("-", Color.DIM, color)
    for read, write, execute, special, special_char in _TRIADS:
        parts.append(colorize("r", Color.GREEN + Color.BOLD, color) if mode & read else off)
        parts.append(colorize("w", Color.YELLOW + Color.BOLD, color) if mode & write else off)
        if mode & execute:
            if mode & special:
                sc = Color.RED + Color.BOLD if special_char == "t" else Color.MAGENTA + Color.BOLD
                parts.append(colorize(special_char, sc, color))
            else:
                parts.append(colorize("x", Color.RED + Color.BOLD, color))
        else:
            parts.append(off)
    return "".join(parts)


def format_git_status(status: str, color: bool = True) -> str:
    if not status:
        return ""
    if status == "(clean)":
        return colorize(status, Color.GREEN, color)
    if "+" in status:
        return colorize(status, Color.GREEN + Color.BOLD, color)
    return colorize(status, Color.YELLOW, color)
