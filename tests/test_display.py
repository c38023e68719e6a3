"""Unit tests for lah.display — cell formatting helpers."""

import stat
from datetime import datetime, timedelta

import pytest

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
from lah.layout import measure, strip_ansi
from lah.listing import FileEntry

NOW = datetime(2026, 1, 15, 12, 0, 0)


def _entry(name: str, mode: int = stat.S_IFREG | 0o644, is_dir: bool = False) -> FileEntry:
    return FileEntry(
        name=name,
        path=name,
        size=0,
        mode=mode,
        mtime=NOW,
        is_dir=is_dir,
        is_hidden=name.startswith("."),
    )


# ===================================================================
# pad() / truncate()
# ===================================================================

class TestPadTruncate:

    def test_pad_styled_text(self):
        text = colorize("abc", Color.RED)
        padded = pad(text, 6)
        assert measure(padded) == 6
        assert padded.startswith(Color.RED)

    def test_pad_right_and_center(self):
        assert pad("ab", 5, "right") == "   ab"
        assert pad("ab", 6, "center") == "  ab  "

    def test_pad_never_cuts(self):
        assert pad("abcdef", 3) == "abcdef"

    def test_truncate_short_text_unchanged(self):
        assert truncate("abc", 5) == "abc"

    def test_truncate_plain(self):
        assert truncate("abcdefgh", 5) == "abcd…"

    def test_truncate_styled_keeps_escapes_and_resets(self):
        text = colorize("abcdefgh", Color.GREEN)
        result = truncate(text, 5)
        assert measure(result) == 5
        assert strip_ansi(result) == "abcd…"
        assert result.startswith(Color.GREEN)
        assert result.endswith(Color.RESET)

    def test_truncate_zero_width(self):
        assert truncate("abc", 0) == ""

    def test_colorize_disabled(self):
        assert colorize("abc", Color.RED, enabled=False) == "abc"


# ===================================================================
# format_size()
# ===================================================================

class TestFormatSize:

    @pytest.mark.parametrize("size,is_dir,expected", [
        (0, True, "-"),
        (512, False, "512 B"),
        (1536, False, "1.5 KB"),
        (2097152, False, "2.0 MB"),
        (3 * 1024 ** 3, False, "3.0 GB"),
        (5 * 1024 ** 5, False, "5120.0 TB"),
    ])
    def test_sizes(self, size, is_dir, expected):
        assert strip_ansi(format_size(size, is_dir)) == expected

    def test_plain_output_has_no_escapes(self):
        assert format_size(1536, False, color=False) == "1.5 KB"


# ===================================================================
# format_permissions()
# ===================================================================

class TestFormatPermissions:

    @pytest.mark.parametrize("mode,expected", [
        (stat.S_IFREG | 0o644, "-rw-r--r--"),
        (stat.S_IFDIR | 0o755, "drwxr-xr-x"),
        (stat.S_IFREG | 0o755, "-rwxr-xr-x"),
        (stat.S_IFLNK | 0o777, "lrwxrwxrwx"),
        (stat.S_IFREG | stat.S_ISUID | 0o755, "-rwsr-xr-x"),
        (stat.S_IFDIR | stat.S_ISVTX | 0o777, "drwxrwxrwt"),
        (stat.S_IFIFO | 0o600, "prw-------"),
    ])
    def test_modes(self, mode, expected):
        assert strip_ansi(format_permissions(mode)) == expected

    def test_always_ten_wide(self):
        assert measure(format_permissions(stat.S_IFREG | 0o640)) == 10


# ===================================================================
# format_modified()
# ===================================================================

class TestFormatModified:

    @pytest.mark.parametrize("delta,expected", [
        (timedelta(seconds=-5), "future"),
        (timedelta(seconds=30), "30 seconds ago"),
        (timedelta(minutes=5), "5 minutes ago"),
        (timedelta(hours=3), "3 hours ago"),
        (timedelta(days=2), "2 days ago"),
        (timedelta(days=14), "2 weeks ago"),
        (timedelta(days=90), "3 months ago"),
        (timedelta(days=800), "2 years ago"),
    ])
    def test_buckets(self, delta, expected):
        assert strip_ansi(format_modified(NOW - delta, NOW)) == expected


# ===================================================================
# format_name() / format_git_status()
# ===================================================================

class TestFormatName:

    def test_directory_is_bold_blue(self):
        result = format_name(_entry("src", stat.S_IFDIR | 0o755, is_dir=True))
        assert result == f"{Color.BLUE}{Color.BOLD}src{Color.RESET}"

    def test_executable_is_red(self):
        assert format_name(_entry("build.sh", stat.S_IFREG | 0o755)).startswith(Color.RED)

    def test_hidden_is_yellow(self):
        assert format_name(_entry(".env")).startswith(Color.YELLOW)

    @pytest.mark.parametrize("name,color", [
        ("main.py", Color.GREEN),
        ("README.md", Color.YELLOW),
        ("config.YAML", Color.MAGENTA),
        ("photo.png", Color.WHITE),
    ])
    def test_extension_colors(self, name, color):
        assert format_name(_entry(name)).startswith(color)

    def test_plain(self):
        assert format_name(_entry("main.py"), color=False) == "main.py"


class TestFormatGitStatus:

    def test_empty(self):
        assert format_git_status("") == ""

    def test_clean(self):
        assert format_git_status("(clean)") == colorize("(clean)", Color.GREEN)

    def test_changes(self):
        assert strip_ansi(format_git_status("+2 -1")) == "+2 -1"
