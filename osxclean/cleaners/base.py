"""Shared result records, the cleaner base class and size helpers."""

from __future__ import annotations

import os
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from osxclean import logger
from osxclean.filesystem import bytes_to_human


def _column(header: str):
    """Declare a dataclass field together with its table column header."""
    return field(metadata={"header": header})


@dataclass(frozen=True)
class CleanupEntry:
    """A row of the cleanup summary: which cleaner, which path, how much."""

    cleaner_name: str = _column("Type")
    path: str = _column("Path")
    size: str = _column("Size")


@dataclass(frozen=True)
class FailedEntry:
    """A path, or a whole cleaner, that could not be cleaned."""

    path: str = _column("Path")
    error: str = _column("Error")


@dataclass(frozen=True)
class SkippedEntry:
    """A path left out because its size could not be determined."""

    path: str = _column("Path")
    reason: str = _column("Reason")


@dataclass(frozen=True)
class PathToCheck:
    """A candidate path found by a cleaner, measured before removal."""

    path: Path
    initial_size: int
    formatted_size: str
    cleaner_name: str


class Cleaner(ABC):
    """A source of junk paths that can be measured and then removed."""

    name: ClassVar[str] = "Cleaner"

    @abstractmethod
    def find_paths(self) -> list[Path]:
        """Return the paths this cleaner targets."""

    def clean(
        self,
        skipped_entries: list[SkippedEntry],
        ignore: Iterable[str],
    ) -> list[PathToCheck]:
        """Find, filter and measure this cleaner's paths.

        Paths whose text contains any (whitespace-trimmed) ignore pattern are
        dropped. Paths that cannot be measured are appended to
        ``skipped_entries``. Nothing is deleted here.
        """
        logger.debug(f"🚀 Starting {self.name} cleanup...")

        patterns = [pattern.strip() for pattern in ignore]
        found = [Path(p) for p in self.find_paths()]
        kept = [p for p in found if not any(pattern in str(p) for pattern in patterns)]
        if len(kept) < len(found):
            logger.debug(
                f"Filtered {len(found) - len(kept)} paths from {self.name} due to ignore list."
            )

        with ThreadPoolExecutor() as pool:
            measurements = list(pool.map(calculate_size, kept))

        results: list[PathToCheck] = []
        for path, measured in zip(kept, measurements):
            if measured is None:
                logger.warn(f"⚠️ Could not determine size for path: {path}")
                skipped_entries.append(
                    SkippedEntry(
                        path=str(path),
                        reason="Could not determine size or access path.",
                    )
                )
                continue
            size, formatted = measured
            results.append(
                PathToCheck(
                    path=path,
                    initial_size=size,
                    formatted_size=formatted,
                    cleaner_name=self.name,
                )
            )

        logger.debug(f"✅ Finished {self.name} cleanup.")
        return results


def calculate_size(path: os.PathLike | str) -> tuple[int, str] | None:
    """Return the size of a file or directory tree and its formatted form.

    Symbolic links are followed. Returns None when the path is neither a file
    nor a directory, or when it cannot be read.
    """
    path = Path(path)
    if path.is_file():
        try:
            size = path.stat().st_size
        except OSError:
            logger.warn(f"⚠️ Failed to get metadata for file: {path}")
            return None
    elif path.is_dir():
        try:
            children = list(path.iterdir())
        except OSError:
            return None
        size = 0
        for child in children:
            if child.is_file():
                try:
                    size += child.stat().st_size
                except OSError:
                    logger.warn(f"⚠️ Failed to get metadata for file in dir: {child}")
            elif child.is_dir():
                measured = calculate_size(child)
                if measured is not None:
                    size += measured[0]
    else:
        logger.warn(f"⚠️ Path is neither file nor directory: {path}")
        return None
    return size, format_bytes(size)


def format_bytes(num_bytes: int) -> str:
    """Format a byte count as bytes, KB, MB or GB with two decimals."""
    return bytes_to_human(num_bytes)


def is_sip_enabled() -> bool:
    """Report whether System Integrity Protection is enabled, via ``csrutil status``."""
    try:
        completed = subprocess.run(
            ["csrutil", "status"],
            capture_output=True,
            check=False,
        )
    except OSError:
        return False
    return "enabled" in completed.stdout.decode("utf-8", errors="replace")