from pathlib import Path

import pytest

from osxclean.cleaners.base import Cleaner
from osxclean.filesystem import calculate_dir_size, split_filenames
from osxclean.orchestrator import (
    _run_cleanup,
    aggregation_key,
    clean_my_mac,
    standard_cleaners,
)


class _FixedCleaner(Cleaner):
    def __init__(self, name, paths):
        self.name = name
        self._paths = list(paths)

    def find_paths(self):
        return list(self._paths)


class _BrokenCleaner(Cleaner):
    name = "Broken"

    def find_paths(self):
        raise RuntimeError("boom")


def _make_tree(root: Path, sizes):
    root.mkdir(parents=True)
    for index, size in enumerate(sizes):
        (root / f"f{index}").write_bytes(b"x" * size)
    return root


def test_aggregation_key_groups_under_parent():
    key = aggregation_key("User Caches", Path("/home/someone/Library/Caches"))
    assert key == "User Caches: /home/someone/Library"


def test_aggregation_key_root_and_single_component():
    assert aggregation_key("X", Path("/")) == "X: /"
    assert aggregation_key("X", Path("relative")) == "X: relative"


@pytest.mark.parametrize("path", ["/a/b/c", "/var/tmp/thing", "dir/file.txt"])
def test_aggregation_key_splits_back(path):
    name, shown = split_filenames(aggregation_key("Some Cleaner", path))
    assert name == "Some Cleaner"
    assert shown == str(Path(path).parent)


def test_standard_cleaners_order():
    names = [cleaner.name for cleaner in standard_cleaners()]
    assert names == [
        "System Caches",
        "User Caches",
        "Temporary Files",
        "User Logs",
        "Crash Reporter Logs",
        "Trash Bins",
        "Browser Caches",
    ]


def test_real_run_removes_paths_and_counts_bytes(tmp_path):
    first = _make_tree(tmp_path / "one" / "cache", [10, 20])
    second = _make_tree(tmp_path / "two" / "logs", [5])
    expected = calculate_dir_size(first) + calculate_dir_size(second)

    outcome = _run_cleanup(
        False, [], [_FixedCleaner("A", [first]), _FixedCleaner("B", [second])], None
    )

    assert outcome.total_bytes == expected
    assert not first.exists()
    assert not second.exists()
    assert outcome.successful == {
        aggregation_key("A", first): 30,
        aggregation_key("B", second): 5,
    }
    assert outcome.failed == []


def test_dry_run_keeps_files(tmp_path):
    tree = _make_tree(tmp_path / "keep", [7, 8])
    outcome = _run_cleanup(True, [], [_FixedCleaner("A", [tree])], None)
    assert tree.exists()
    assert sorted(p.name for p in tree.iterdir()) == ["f0", "f1"]
    assert outcome.total_bytes == calculate_dir_size(tree)
    assert outcome.checked == outcome.successful


def test_ignore_patterns_protect_paths(tmp_path):
    kept = _make_tree(tmp_path / "precious", [3])
    gone = _make_tree(tmp_path / "junk", [4])
    outcome = _run_cleanup(
        False, ["  precious "], [_FixedCleaner("A", [kept, gone])], None
    )
    assert kept.exists()
    assert not gone.exists()
    assert outcome.total_bytes == 4


def test_failing_cleaner_is_reported(tmp_path):
    tree = _make_tree(tmp_path / "ok", [2])
    outcome = _run_cleanup(
        False, [], [_BrokenCleaner(), _FixedCleaner("A", [tree])], None
    )
    assert [entry.path for entry in outcome.failed] == ["Cleaner: Broken"]
    assert outcome.failed[0].error.startswith("Failed to run:")
    assert not tree.exists()


def test_large_files_only_listed_in_dry_run(tmp_path):
    big = tmp_path / "downloads" / "big.bin"
    big.parent.mkdir()
    big.write_bytes(b"y" * 50)
    outcome = _run_cleanup(True, [], [], _FixedCleaner("Large Files", [big]))
    assert big.exists()
    assert outcome.total_bytes == 0
    assert outcome.large_files == {aggregation_key("Large Files", big): 50}


def test_large_files_removed_in_real_run(tmp_path):
    big = tmp_path / "downloads" / "big.bin"
    big.parent.mkdir()
    big.write_bytes(b"y" * 50)
    outcome = _run_cleanup(False, [], [], _FixedCleaner("Large Files", [big]))
    assert not big.exists()
    assert outcome.large_files == {}
    assert outcome.successful == {aggregation_key("Large Files", big): 50}


def test_summary_table_has_total_row(tmp_path, capsys):
    tree = _make_tree(tmp_path / "t", [1])
    _run_cleanup(True, [], [_FixedCleaner("A", [tree])], None)
    out = capsys.readouterr().out
    assert "Estimated Cleanup Summary (Dry Run)" in out
    assert "Total" in out
    assert "Type" in out and "Path" in out and "Size" in out


def test_clean_my_mac_with_everything_ignored(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert clean_my_mac(False, ["/"]) == 0
    out = capsys.readouterr().out
    assert "Cleanup Summary (Successful)" in out
    assert "Total" in out