"""Per-entry git status lookup via the git CLI."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

CLEAN = "(clean)"


@dataclass
class GitStatus:
    """Working tree changes for one directory listing.

    ``changes`` maps repo-root-relative paths to their two-letter porcelain
    code (index, worktree). ``prefix`` is the listed directory relative to
    the repo root, with a trailing slash (empty at the root).
    """
    in_repo: bool = False
    prefix: str = ""
    changes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def for_directory(cls, path: str | Path) -> GitStatus:
        if not shutil.which("git"):
            logger.debug("git not found on PATH, skipping git status.")
            return cls()
        directory = str(path)
        prefix = _run_git(directory, "rev-parse", "--show-prefix")
        if prefix is None:
            logger.debug("%s is not inside a git work tree.", directory)
            return cls()
        raw = _run_git(directory, "status", "--porcelain", "-z", "--untracked-files=all", ".")
        if raw is None:
            return cls(in_repo=True, prefix=prefix.strip())
        return cls(in_repo=True, prefix=prefix.strip(), changes=parse_porcelain(raw))

    def status_for(self, name: str, is_dir: bool = False) -> str:
        """Status string for an entry of the listed directory.

        "(clean)" when unchanged, "+A -D" when added/modified/deleted
        changes exist, "" when untracked or outside a repository.
        """
        if not self.in_repo:
            return ""
        key = self.prefix + name
        if is_dir:
            codes = [code for p, code in self.changes.items() if p.startswith(key + "/")]
        else:
            codes = [self.changes[key]] if key in self.changes else []
        if not codes:
            return CLEAN

        added = deleted = 0
        # Added and modified count separately, so "AM" counts twice
        for code in codes:
            if "A" in code:
                added += 1
            if "M" in code or "R" in code:
                added += 1
            if "D" in code:
                deleted += 1
        if added or deleted:
            return f"+{added} -{deleted}"
        return ""


def parse_porcelain(raw: str) -> dict[str, str]:
    """Parse ``git status --porcelain -z`` output into {path: code}."""
    changes: dict[str, str] = {}
    tokens = raw.split("\0")
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if len(token) < 4:
            continue
        code, path = token[:2], token[3:]
        changes[path] = code
        # Renames and copies carry the original path as the next token
        if code[0] in "RC" or code[1] in "RC":
            i += 1
    return changes


def _run_git(directory: str, *args: str) -> Optional[str]:
    try:
        proc = subprocess.run(
            ["git", "-C", directory, *args],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("git %s failed in %s: %s", " ".join(args), directory, e)
        return None
    if proc.returncode != 0:
        logger.debug("git %s exited %d: %s", " ".join(args), proc.returncode, proc.stderr.strip())
        return None
    return proc.stdout
