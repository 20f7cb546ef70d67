"""Remove an application or command-line tool together with its related files."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from osxclean import logger
from osxclean.filesystem import remove_path

_SYSTEM_LAUNCH_DIRS = ("/Library/LaunchAgents", "/Library/LaunchDaemons")
_RECEIPT_DIRS = ("/var/db/receipts", "/Library/Receipts")


def _home() -> str:
    return os.environ.get("HOME", "")


def _entries(directory: os.PathLike | str) -> list[Path]:
    """The entries of a directory in sorted order, or none if it cannot be read."""
    try:
        return sorted(Path(directory).iterdir())
    except OSError:
        return []


def find_launch_agents_for_app(
    app_name: str,
    directories: Iterable[os.PathLike | str] | None = None,
) -> list[Path]:
    """Return ``.plist`` launch agents and daemons whose file name mentions ``app_name``.

    The name match ignores case; the ``.plist`` suffix does not. By default
    the system-wide agent and daemon folders and the user's agent folder are
    searched.
    """
    if directories is None:
        directories = (*_SYSTEM_LAUNCH_DIRS, f"{_home()}/Library/LaunchAgents")
    needle = app_name.lower()
    return [
        entry
        for directory in directories
        for entry in _entries(directory)
        if needle in entry.name.lower() and entry.name.endswith(".plist")
    ]


def find_pkg_receipts(
    app_name: str,
    directories: Iterable[os.PathLike | str] | None = None,
) -> list[Path]:
    """Return installer receipts whose file name mentions ``app_name``, ignoring case."""
    if directories is None:
        directories = _RECEIPT_DIRS
    needle = app_name.lower()
    return [
        entry
        for directory in directories
        for entry in _entries(directory)
        if needle in entry.name.lower()
    ]


@dataclass
class Uninstaller(ABC):
    """Something installed under a name whose files can be found and removed.

    ``launch_agent_dirs`` and ``receipt_dirs`` override the folders searched
    for launch agents and package receipts; None means the standard ones.
    """

    name: str
    launch_agent_dirs: tuple[os.PathLike | str, ...] | None = None
    receipt_dirs: tuple[os.PathLike | str, ...] | None = None

    @abstractmethod
    def find_related_paths(self) -> list[Path]:
        """Return the paths that belong to this application or tool."""

    def _candidate_paths(self) -> list[Path]:
        paths = [Path(p) for p in self.find_related_paths()]
        paths.extend(find_launch_agents_for_app(self.name, self.launch_agent_dirs))
        paths.extend(find_pkg_receipts(self.name, self.receipt_dirs))
        return paths

    def uninstall(self, dry_run: bool) -> list[Path]:
        """Delete every existing related path, or only report them in a dry run.

        Paths that do not exist are skipped and failed deletions are logged
        as warnings. Returns the paths that were (or would be) deleted.
        """
        logger.debug(f"Starting uninstall for '{self.name}'")

        def process(path: Path) -> bool:
            logger.debug(f"Processing path: {path}")
            if not os.path.lexists(path):
                logger.warn(f"Not found: {path}")
                return False
            if dry_run:
                logger.info(f"Would delete: {path}")
                return True
            logger.info(f"Deleting: {path}")
            try:
                remove_path(path, dry_run)
            except OSError as exc:
                logger.warn(f"Failed to delete {path}: {exc}")
                return False
            return True

        paths = self._candidate_paths()
        if not paths:
            logger.debug(f"Completed uninstall for '{self.name}'")
            return []
        with ThreadPoolExecutor() as pool:
            outcomes = list(pool.map(process, paths))

        logger.debug(f"Completed uninstall for '{self.name}'")
        return [path for path, done in zip(paths, outcomes) if done]


class MacApp(Uninstaller):
    """A graphical application bundle and its support, preference and cache files."""

    def find_related_paths(self) -> list[Path]:
        home = _home()
        name = self.name
        templates = [
            f"/Applications/{name}.app",
            f"/Library/Application Support/{name}",
            f"{home}/Library/Application Support/{name}",
            f"/Library/Preferences/com.{name}.plist",
            f"{home}/Library/Preferences/com.{name}.plist",
            f"{home}/Library/Caches/{name}",
            f"{home}/Library/Logs/{name}",
            f"{home}/Library/Containers/{name}.*",
            f"{home}/Library/Group Containers/*{name}.*",
            f"{home}/Library/Application Support/CrashReporter/{name}_*.plist",
        ]
        for folder in (
            "Input Methods",
            "Screen Savers",
            "Widgets",
            "QuickLook",
            "Internet Plug-Ins",
            "Fonts",
        ):
            templates.append(f"/Library/{folder}/{name}")
        for folder in (
            "Input Methods",
            "Screen Savers",
            "Widgets",
            "QuickLook",
            "Internet Plug-Ins",
            "Fonts",
        ):
            templates.append(f"{home}/Library/{folder}/{name}")
        return [Path(text) for text in templates if text]


class CliTool(Uninstaller):
    """A command-line tool with its binaries, libraries, manuals and configuration."""

    def find_related_paths(self) -> list[Path]:
        name = self.name
        templates = [
            f"/usr/local/bin/{name}",
            f"/usr/bin/{name}",
            f"/opt/homebrew/bin/{name}",
            f"/usr/local/lib/{name}",
            f"/Library/Frameworks/{name}.framework",
            f"/usr/local/Frameworks/{name}.framework",
            f"/usr/local/share/man/man1/{name}.1",
            f"/usr/local/share/doc/{name}",
            f"/etc/{name}",
            f"/etc/paths.d/{name}",
        ]
        for cellar in ("/opt/homebrew/Cellar", "/usr/local/Cellar"):
            if Path(cellar).exists():
                templates.append(f"{cellar}/{name}")
        return [Path(text) for text in templates if text]