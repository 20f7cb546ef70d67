"""Run every cleaner, remove what they find and report the space reclaimed."""

from __future__ import annotations

import os
import sys
import threading
from collections import defaultdict
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, fields
from pathlib import Path

from tabulate import tabulate

from osxclean import logger
from osxclean.cleaners.base import (
    Cleaner,
    CleanupEntry,
    FailedEntry,
    PathToCheck,
    SkippedEntry,
    format_bytes,
    is_sip_enabled,
)
from osxclean.cleaners.catalog import (
    BrowserCachesCleaner,
    CrashReporterLogsCleaner,
    LargeFilesCleaner,
    SystemCachesCleaner,
    TemporaryFilesCleaner,
    TrashCleaner,
    UserCachesCleaner,
    UserLogsCleaner,
)
from osxclean.filesystem import (
    bytes_to_human,
    calculate_dir_size,
    remove_path,
    split_filenames,
)

_BOLD_UNDERLINE = "\033[1m\033[4m"
_RESET = "\033[0m"


def _heading(text: str) -> str:
    if os.environ.get("NO_COLOR") is not None:
        return text
    return f"{_BOLD_UNDERLINE}{text}{_RESET}"


def aggregation_key(cleaner_name: str, path: os.PathLike | str) -> str:
    """Return the ``"Cleaner: path"`` key under which a path's size is summed.

    A path with more than one component and a final name is grouped under its
    parent directory; otherwise the path itself is used.
    """
    path = Path(path)
    has_name = path.name not in ("", ".", "..")
    if len(path.parts) > 1 and has_name:
        shown = str(path.parent)
    else:
        shown = str(path)
    return f"{cleaner_name}: {shown}"


def standard_cleaners() -> list[Cleaner]:
    """The cleaners whose findings are always removed."""
    return [
        SystemCachesCleaner(),
        UserCachesCleaner(),
        TemporaryFilesCleaner(),
        UserLogsCleaner(),
        CrashReporterLogsCleaner(),
        TrashCleaner(),
        BrowserCachesCleaner(),
    ]


@dataclass
class _Outcome:
    total_bytes: int = 0
    checked: dict[str, int] = field(default_factory=dict)
    successful: dict[str, int] = field(default_factory=dict)
    failed: list[FailedEntry] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)
    large_files: dict[str, int] = field(default_factory=dict)


def _table(entry_type: type, entries: Sequence[object]) -> str:
    columns = fields(entry_type)
    headers = [column.metadata.get("header", column.name) for column in columns]
    rows = [[getattr(entry, column.name) for column in columns] for entry in entries]
    return tabulate(rows, headers=headers, tablefmt="simple_grid")


def _summary_entries(sizes: dict[str, int]) -> list[CleanupEntry]:
    entries = []
    for key, size in sorted(sizes.items()):
        name, shown = split_filenames(key)
        entries.append(CleanupEntry(cleaner_name=name, path=shown, size=format_bytes(size)))
    return entries


def _survey(
    cleaners: Sequence[Cleaner],
    ignore: list[str],
    outcome: _Outcome,
) -> list[PathToCheck]:
    lock = threading.Lock()
    checked: defaultdict[str, int] = defaultdict(int)

    def survey_one(cleaner: Cleaner) -> list[PathToCheck]:
        try:
            found = cleaner.clean(outcome.skipped, ignore)
        except Exception as exc:  # a failing cleaner must not stop the others
            logger.warn(f"❌ Cleaner '{cleaner.name}' failed to identify paths: {exc}")
            with lock:
                outcome.failed.append(
                    FailedEntry(path=f"Cleaner: {cleaner.name}", error=f"Failed to run: {exc}")
                )
            return []

        measured = []
        for candidate in found:
            try:
                size = calculate_dir_size(candidate.path)
            except OSError as exc:
                logger.warn(f"⚠️ Could not determine size for path {candidate.path}: {exc}")
                with lock:
                    outcome.skipped.append(
                        SkippedEntry(
                            path=str(candidate.path),
                            reason=f"Could not determine size or access path: {exc}",
                        )
                    )
                continue
            with lock:
                checked[aggregation_key(cleaner.name, candidate.path)] += size
            measured.append(
                PathToCheck(
                    path=candidate.path,
                    initial_size=size,
                    formatted_size=bytes_to_human(size),
                    cleaner_name=cleaner.name,
                )
            )
        return measured

    to_process: list[PathToCheck] = []
    if cleaners:
        with ThreadPoolExecutor() as pool:
            for measured in pool.map(survey_one, cleaners):
                to_process.extend(measured)
    outcome.checked = dict(checked)
    return to_process


def _survey_large_files(
    large_files_cleaner: Cleaner | None,
    dry_run: bool,
    ignore: list[str],
    outcome: _Outcome,
) -> list[PathToCheck]:
    if large_files_cleaner is None:
        return []
    try:
        found = large_files_cleaner.clean(outcome.skipped, ignore)
    except Exception as exc:  # reported, not fatal
        logger.warn(f"❌ Large Files Cleaner failed to identify paths: {exc}")
        outcome.failed.append(
            FailedEntry(path="Large Files Cleaner", error=f"Failed to run: {exc}")
        )
        return []

    if not dry_run:
        return found

    large: defaultdict[str, int] = defaultdict(int)
    for candidate in found:
        try:
            size = calculate_dir_size(candidate.path)
        except OSError as exc:
            logger.warn(f"⚠️ Could not determine size for large file path {candidate.path}: {exc}")
            outcome.skipped.append(
                SkippedEntry(
                    path=str(candidate.path),
                    reason=f"Could not determine size or access for large file: {exc}",
                )
            )
            continue
        large[aggregation_key(candidate.cleaner_name, candidate.path)] += size
    outcome.large_files = dict(large)
    return []


def _remove_all(to_process: list[PathToCheck], dry_run: bool, outcome: _Outcome) -> None:
    def attempt(candidate: PathToCheck) -> OSError | None:
        try:
            remove_path(candidate.path, dry_run)
        except OSError as exc:
            return exc
        return None

    if not to_process:
        return
    with ThreadPoolExecutor() as pool:
        results = list(pool.map(attempt, to_process))

    successful: defaultdict[str, int] = defaultdict(int)
    for candidate, problem in zip(to_process, results):
        if problem is None:
            successful[aggregation_key(candidate.cleaner_name, candidate.path)] += (
                candidate.initial_size
            )
            outcome.total_bytes += candidate.initial_size
        else:
            logger.warn(f"❌ Failed to clean {candidate.path}: {problem}")
            outcome.failed.append(FailedEntry(path=str(candidate.path), error=str(problem)))
    outcome.successful = dict(successful)


def _report(outcome: _Outcome, dry_run: bool) -> None:
    if outcome.successful:
        title = "☑️  Will reclaimed Space...\n" if dry_run else "☑️  Reclaimed Space...\n"
        print(f"\n{_heading(title)}", file=sys.stderr)
        verb = "Would Clean" if dry_run else "After Clean"
        for key, size in sorted(outcome.successful.items()):
            name, shown = split_filenames(key)
            logger.info(f"🧹🪣 {verb}: '{name}' {shown} ({format_bytes(size)})")

    total_fmt = format_bytes(outcome.total_bytes)
    entries = _summary_entries(outcome.successful)
    entries.append(CleanupEntry(cleaner_name="", path="Total", size=total_fmt))
    if dry_run:
        print(f"\n{_heading('📥📄🗑️  Estimated Cleanup Summary (Dry Run)')}\n")
    else:
        print(f"\n{_heading('📥📄🗑️  Cleanup Summary (Successful)')}\n")
    print(_table(CleanupEntry, entries))

    if outcome.failed:
        print("\n", file=sys.stderr)
        print(_heading("⚠️ Cleanup Failures"))
        print(_table(FailedEntry, outcome.failed))

    if dry_run and outcome.large_files:
        print("\n", file=sys.stderr)
        large_entries = _summary_entries(outcome.large_files)
        large_entries.append(
            CleanupEntry(
                cleaner_name="",
                path="Total Large Files",
                size=format_bytes(sum(outcome.large_files.values())),
            )
        )
        print(_heading("📦 Large Files Found (Dry Run)"))
        print(_table(CleanupEntry, large_entries))

    show_skipped = os.environ.get("OSX_SHOW_SKIPPED") is not None or logger.is_debug_enabled()
    if show_skipped and outcome.skipped:
        print("\n", file=sys.stderr)
        print(_heading("⚪ Skipped Paths (During Size Check)"))
        print(_table(SkippedEntry, outcome.skipped))

    print("\n", file=sys.stderr)
    if dry_run:
        logger.info(f"🧠 Estimated space to free: {total_fmt}")
    else:
        logger.info(f"✔ Total space freed: {total_fmt}")


def _run_cleanup(
    dry_run: bool,
    ignore: Iterable[str],
    cleaners: Sequence[Cleaner],
    large_files_cleaner: Cleaner | None,
) -> _Outcome:
    ignore = list(ignore)
    logger.debug(f"Starting clean_my_mac (dry_run: {dry_run})")
    outcome = _Outcome()

    print(f"\n{_heading('🔍 Verifying Paths...')}\n", file=sys.stderr)
    to_process = _survey(cleaners, ignore, outcome)
    to_process.extend(_survey_large_files(large_files_cleaner, dry_run, ignore, outcome))

    for key, size in sorted(outcome.checked.items()):
        name, shown = split_filenames(key)
        logger.info(f"🔍 Checking: '{name}' {shown} ({format_bytes(size)})")

    if not dry_run and os.environ.get("OSX_SHOW_DETAILS") is not None:
        print(f"\n{_heading('🚚🧹 Performing Cleanup...')}\n", file=sys.stderr)

    _remove_all(to_process, dry_run, outcome)
    _report(outcome, dry_run)
    return outcome


def clean_my_mac(dry_run: bool, ignore: Iterable[str]) -> int:
    """Clean caches, logs, temporary files, trash and (outside dry runs) large files.

    Paths containing any of the ``ignore`` substrings are left alone. Returns
    the number of bytes freed, or that would be freed in a dry run.
    """
    outcome = _run_cleanup(dry_run, ignore, standard_cleaners(), LargeFilesCleaner())
    if is_sip_enabled():
        logger.info(
            "⚠️  System Integrity Protection (SIP) is enabled. Some files may not be removable."
        )
    logger.debug("✅ Finished clean_my_mac.")
    return outcome.total_bytes