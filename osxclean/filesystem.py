"""File-system helpers: removal, size calculation and size formatting."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from osxclean import logger

_KB = 1024.0
_MB = _KB * 1024.0
_GB = _MB * 1024.0


def remove_path(path: os.PathLike | str, dry_run: bool) -> None:
    """Delete a file, symlink or directory tree.

    In dry-run mode nothing is touched. A path that does not exist is not an
    error. Failures during real removal raise ``OSError``.
    """
    path = Path(path)
    logger.debug(f"Attempting to remove path: {path}")

    if dry_run:
        return

    if not path.exists():
        logger.debug(f"Path does not exist: {path}")
        return

    if path.is_file() or path.is_symlink():
        logger.debug(f"Path is a file or symlink. Removing: {path}")
        path.unlink()
    elif path.is_dir():
        logger.debug(f"Path is a directory. Recursively removing: {path}")
        shutil.rmtree(path)
    else:
        logger.debug(f"Path is an unusual filesystem object. Removing as file: {path}")
        path.unlink()

    if os.environ.get("OSX_SHOW_DETAILS") is not None:
        logger.info(f"🗑  Successfully removed: {path}")


def calculate_dir_size(path: os.PathLike | str) -> int:
    """Return the size in bytes of a file, or the total of regular files under a directory.

    Symbolic links inside a directory are not followed and do not count.
    A path that is neither a file nor a directory has size 0. I/O failures
    raise ``OSError``.
    """
    path = Path(path)
    if path.is_file():
        return path.stat().st_size

    total = 0
    if path.is_dir():
        with os.scandir(path) as entries:
            for entry in entries:
                info = entry.stat(follow_symlinks=False)
                if entry.is_dir(follow_symlinks=False):
                    total += calculate_dir_size(entry.path)
                elif entry.is_file(follow_symlinks=False):
                    total += info.st_size
    return total


def bytes_to_human(num_bytes: int) -> str:
    """Format a byte count as bytes, KB, MB or GB with two decimals."""
    value = float(num_bytes)
    if value >= _GB:
        return f"{value / _GB:.2f} GB"
    if value >= _MB:
        return f"{value / _MB:.2f} MB"
    if value >= _KB:
        return f"{value / _KB:.2f} KB"
    return f"{num_bytes} bytes"


def split_filenames(key: str) -> tuple[str, str]:
    """Split a ``"Cleaner: path"`` key into its cleaner name and path.

    Without the separator the whole key is the path and the name is empty.
    """
    name, separator, rest = key.partition(": ")
    if not separator:
        return "", key
    return name, rest