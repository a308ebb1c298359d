"""Filesystem helpers for termkit."""

from __future__ import annotations

import os
import shutil
from datetime import datetime
from pathlib import Path

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def ensure_parent(path: Path) -> None:
    """Ensure the parent directory exists."""

    path.parent.mkdir(parents=True, exist_ok=True)


def symlink_points_to(link: Path, target: Path) -> bool:
    """Return ``True`` if ``link`` is a symlink resolving to ``target``."""

    if not link.is_symlink():
        return False
    current = Path(os.readlink(link))
    try:
        current_resolved = (link.parent / current).resolve(strict=False)
        target_resolved = target.resolve(strict=False)
    except (OSError, RuntimeError):
        # symlink loop
        return False
    return current_resolved == target_resolved


def create_symlink(link: Path, target: Path) -> None:
    """Create ``link`` pointing at the absolute ``target``."""

    ensure_parent(link)
    link.symlink_to(target.absolute(), target_is_directory=target.is_dir())


def backup_path(path: Path, *, now: datetime | None = None) -> Path:
    """Return a free ``<path>.backup.<timestamp>`` sibling of ``path``.

    A second backup within the same second gets a ``-<n>`` suffix instead of
    clobbering the first one.
    """

    stamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
    candidate = path.with_name(f"{path.name}.backup.{stamp}")
    counter = 1
    while candidate.exists() or candidate.is_symlink():
        counter += 1
        candidate = path.with_name(f"{path.name}.backup.{stamp}-{counter}")
    return candidate


def backup_entry(path: Path, *, now: datetime | None = None) -> Path:
    """Rename ``path`` out of the way and return where it went."""

    destination = backup_path(path, now=now)
    path.rename(destination)
    return destination


def remove_path(path: Path) -> None:
    """Delete ``path`` whether it is a file, directory, or symlink."""

    if not path.exists() and not path.is_symlink():
        return
    if path.is_symlink() or path.is_file():
        path.unlink()
        return
    shutil.rmtree(path)
