"""Directory reading: turn a path into FileEntry records."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from lah.gitstatus import GitStatus

logger = logging.getLogger(__name__)


@dataclass
class FileEntry:
    """Metadata for one directory entry, decoupled from os.DirEntry."""
    name: str
    path: str
    size: int
    mode: int
    mtime: datetime
    is_dir: bool
    is_hidden: bool
    git_status: str = ""


def read_directory(path: str | Path, show_git: bool = False) -> list[FileEntry]:
    """List a directory, skipping entries whose metadata cannot be read.

    Raises OSError if the directory itself cannot be opened.
    """
    git = GitStatus.for_directory(path) if show_git else None
    entries = []
    with os.scandir(path) as it:
        for d in it:
            try:
                st = d.stat(follow_symlinks=False)
                is_dir = d.is_dir(follow_symlinks=False)
            except OSError as e:
                logger.debug("Skipping %s: %s", d.path, e)
                continue
            entry = FileEntry(
                name=d.name,
                path=d.path,
                size=st.st_size,
                mode=st.st_mode,
                mtime=datetime.fromtimestamp(st.st_mtime),
                is_dir=is_dir,
                is_hidden=d.name.startswith("."),
            )
            if git is not None:
                entry.git_status = git.status_for(d.name, is_dir)
            entries.append(entry)
    logger.debug("Read %d entries from %s", len(entries), path)
    return entries


def sort_entries(entries: list[FileEntry]) -> list[FileEntry]:
    """Directories first, then case-insensitive name."""
    return sorted(entries, key=lambda e: (not e.is_dir, e.name.lower()))
