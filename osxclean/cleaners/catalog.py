"""The concrete cleaners: caches, logs, temporary files, trash and large files."""

from __future__ import annotations

import glob
import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from osxclean import logger
from osxclean.cleaners.base import Cleaner

LARGE_FILE_THRESHOLD_BYTES = 100 * 1024 * 1024

_CHROME_CACHE_SUFFIXES = (
    "Library/Caches/Google/Chrome/Default/Cache",
    "Library/Application Support/Google/Chrome/Default/Cache",
    "Library/Application Support/Google/Chrome/Default/Code Cache",
    "Library/Application Support/Google/Chrome/Default/Service Worker/CacheStorage",
    "Library/Caches/Google/Chrome/*/Cache",
    "Library/Application Support/Google/Chrome/*/Cache",
    "Library/Application Support/Google/Chrome/*/Code Cache",
    "Library/Application Support/Google/Chrome/*/Service Worker/CacheStorage",
)

_FIREFOX_CACHE_SUFFIXES = ("Library/Caches/Firefox/Profiles/*/cache2",)

_BRAVE_CACHE_SUFFIXES = (
    "Library/Caches/BraveSoftware/Brave-Browser/Default/Cache",
    "Library/Application Support/BraveSoftware/Brave-Browser/Default/Cache",
    "Library/Application Support/BraveSoftware/Brave-Browser/Default/Code Cache",
    "Library/Caches/BraveSoftware/Brave-Browser/*/Cache",
    "Library/Application Support/BraveSoftware/Brave-Browser/*/Cache",
    "Library/Application Support/BraveSoftware/Brave-Browser/*/Code Cache",
)

_LARGE_FILE_DIRS = ("Downloads", "Desktop", "Documents", "Movies", "Music", "Pictures")


def _home() -> str:
    """The HOME variable, or an empty string when it is not set."""
    return os.environ.get("HOME", "")


class SystemCachesCleaner(Cleaner):
    """System-wide cache directories."""

    name: ClassVar[str] = "System Caches"

    def find_paths(self) -> list[Path]:
        return [Path("/Library/Caches"), Path("/System/Library/Caches")]


class UserCachesCleaner(Cleaner):
    """The current user's cache directory."""

    name: ClassVar[str] = "User Caches"

    def find_paths(self) -> list[Path]:
        return [Path(f"{_home()}/Library/Caches")]


class UserLogsCleaner(Cleaner):
    """The current user's log directory."""

    name: ClassVar[str] = "User Logs"

    def find_paths(self) -> list[Path]:
        return [Path(f"{_home()}/Library/Logs")]


class CrashReporterLogsCleaner(Cleaner):
    """The current user's crash reporter directory."""

    name: ClassVar[str] = "Crash Reporter Logs"

    def find_paths(self) -> list[Path]:
        return [Path(f"{_home()}/Library/Application Support/CrashReporter")]


@dataclass
class TemporaryFilesCleaner(Cleaner):
    """Entries inside the shared temporary directories, sparing the active TMPDIR."""

    name: ClassVar[str] = "Temporary Files"

    scan_dirs: tuple[Path, ...] = (Path("/tmp"), Path("/private/tmp"), Path("/var/tmp"))

    def find_paths(self) -> list[Path]:
        tmpdir = os.environ.get("TMPDIR")
        active_tmp = Path(tmpdir) if tmpdir is not None else None

        paths: list[Path] = []
        for directory in map(Path, self.scan_dirs):
            try:
                canonical = directory.resolve(strict=True)
            except OSError:
                logger.warn(f"Failed to canonicalize path: {directory}")
                canonical = directory

            try:
                entries = sorted(canonical.iterdir())
            except OSError:
                logger.warn(f"Could not read temporary directory: {canonical}")
                continue

            for entry in entries:
                if entry == canonical:
                    logger.debug(f"Skipping root temp dir: {entry}")
                    continue
                if active_tmp is not None and (
                    entry == active_tmp or _resolves_to(entry, active_tmp)
                ):
                    logger.debug(f"Skipping active TMPDIR entry: {entry}")
                    continue
                paths.append(entry)
        return paths


def _resolves_to(path: Path, target: Path) -> bool:
    try:
        return path.resolve(strict=True) == target
    except OSError:
        return False


@dataclass
class TrashCleaner(Cleaner):
    """The user's trash and the trash folders of mounted volumes."""

    name: ClassVar[str] = "Trash Bins"

    volumes_root: Path = Path("/Volumes")

    def find_paths(self) -> list[Path]:
        paths: list[Path] = []
        home = os.environ.get("HOME")
        if home is not None:
            paths.append(Path(f"{home}/.Trash"))

        try:
            volumes = sorted(Path(self.volumes_root).iterdir())
        except OSError:
            return paths
        paths.extend(
            volume / ".Trashes"
            for volume in volumes
            if volume.is_dir() and os.path.lexists(volume / ".Trashes")
        )
        return paths


class LargeFilesCleaner(Cleaner):
    """Files of at least 100 MiB in the user's common document folders."""

    name: ClassVar[str] = "Large Files"

    def find_paths(self) -> list[Path]:
        home = Path(_home())
        large_files: list[Path] = []
        for dir_name in _LARGE_FILE_DIRS:
            root = home / dir_name
            if not root.exists():
                continue
            for current, dirnames, filenames in os.walk(root):
                dirnames.sort()
                for filename in sorted(filenames):
                    path = Path(current) / filename
                    if not path.is_file():
                        continue
                    try:
                        size = path.stat().st_size
                    except OSError:
                        continue
                    if size >= LARGE_FILE_THRESHOLD_BYTES:
                        large_files.append(path)
        return large_files


class BrowserCachesCleaner(Cleaner):
    """Cache directories of Chrome, Firefox and Brave profiles."""

    name: ClassVar[str] = "Browser Caches"

    def find_paths(self) -> list[Path]:
        try:
            home = Path.home()
        except RuntimeError:
            logger.warn("Could not find home directory, skipping browser cache scan.")
            return []

        paths: list[Path] = []
        for browser, suffixes in (
            ("Chrome", _CHROME_CACHE_SUFFIXES),
            ("Firefox", _FIREFOX_CACHE_SUFFIXES),
            ("Brave", _BRAVE_CACHE_SUFFIXES),
        ):
            for suffix in suffixes:
                pattern = f"{glob.escape(str(home))}/{suffix}"
                for match in sorted(glob.glob(pattern)):
                    entry = Path(match)
                    if entry.is_dir():
                        logger.debug(f"Found {browser} cache directory: {entry}")
                        paths.append(entry)
                    else:
                        logger.debug(f"Skipping non-directory {browser} cache entry: {entry}")
        return paths