import os

import pytest

from osxclean import logger
from osxclean.filesystem import (
    bytes_to_human,
    calculate_dir_size,
    remove_path,
    split_filenames,
)


@pytest.fixture(autouse=True)
def _quiet(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("OSX_SHOW_DETAILS", raising=False)
    logger.init(False)


def test_remove_file(tmp_path):
    target = tmp_path / "junk.txt"
    target.write_text("data")
    remove_path(target, False)
    assert not target.exists()


def test_remove_directory_tree(tmp_path):
    root = tmp_path / "tree"
    (root / "a" / "b").mkdir(parents=True)
    (root / "a" / "b" / "f.bin").write_bytes(b"x" * 10)
    (root / "top.txt").write_text("t")
    remove_path(root, False)
    assert not root.exists()
    assert tmp_path.exists()


def test_dry_run_keeps_everything(tmp_path):
    target = tmp_path / "keep.txt"
    target.write_text("data")
    remove_path(target, True)
    assert target.read_text() == "data"


def test_missing_path_is_not_an_error(tmp_path):
    missing = tmp_path / "nope"
    remove_path(missing, False)
    assert not missing.exists()


def test_symlink_removed_but_target_kept(tmp_path):
    real = tmp_path / "real_dir"
    real.mkdir()
    (real / "inner.txt").write_text("inner")
    link = tmp_path / "link"
    link.symlink_to(real, target_is_directory=True)
    remove_path(link, False)
    assert not os.path.lexists(link)
    assert (real / "inner.txt").read_text() == "inner"


def test_remove_reports_details_when_requested(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("OSX_SHOW_DETAILS", "1")
    target = tmp_path / "gone.txt"
    target.write_text("x")
    remove_path(target, False)
    assert "Successfully removed" in capsys.readouterr().err
    assert not target.exists()


def test_size_of_file(tmp_path):
    payload = b"abcdefghij" * 7
    target = tmp_path / "f.bin"
    target.write_bytes(payload)
    assert calculate_dir_size(target) == len(payload)


def test_size_of_directory_sums_nested_files(tmp_path):
    (tmp_path / "sub").mkdir()
    first = b"a" * 100
    second = b"b" * 250
    third = b"c" * 3
    (tmp_path / "one").write_bytes(first)
    (tmp_path / "sub" / "two").write_bytes(second)
    (tmp_path / "sub" / "three").write_bytes(third)
    assert calculate_dir_size(tmp_path) == len(first) + len(second) + len(third)


def test_size_ignores_symlinks_in_directory(tmp_path):
    outside = tmp_path / "outside.bin"
    outside.write_bytes(b"z" * 500)
    inner = tmp_path / "inner"
    inner.mkdir()
    content = b"q" * 40
    (inner / "file").write_bytes(content)
    (inner / "link").symlink_to(outside)
    assert calculate_dir_size(inner) == len(content)


def test_size_of_missing_path_is_zero(tmp_path):
    assert calculate_dir_size(tmp_path / "absent") == 0


def test_size_of_empty_directory_is_zero(tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()
    assert calculate_dir_size(empty) == 0


@pytest.mark.parametrize("count", [0, 1, 512, 1023])
def test_small_sizes_in_bytes(count):
    assert bytes_to_human(count) == f"{count} bytes"


def test_kilobyte_boundary():
    assert bytes_to_human(1024) == "1.00 KB"


def test_megabyte_boundary():
    assert bytes_to_human(1024 * 1024) == "1.00 MB"


def test_gigabyte_boundary():
    assert bytes_to_human(1024 * 1024 * 1024) == "1.00 GB"


@pytest.mark.parametrize(
    "count, unit",
    [
        (1024 * 1024 - 1, "KB"),
        (1024 * 1024 * 1024 - 1, "MB"),
        (5 * 1024 * 1024 * 1024 * 1024, "GB"),
    ],
)
def test_unit_selection(count, unit):
    assert bytes_to_human(count).endswith(" " + unit)


def test_two_decimals_for_scaled_units():
    number = bytes_to_human(3 * 1024 + 7).split()[0]
    whole, decimals = number.split(".")
    assert whole.isdigit()
    assert len(decimals) == 2


def test_split_filenames_basic():
    assert split_filenames("System Caches: /Library/Caches") == (
        "System Caches",
        "/Library/Caches",
    )


def test_split_filenames_only_first_separator():
    assert split_filenames("Name: /a: b") == ("Name", "/a: b")


def test_split_filenames_without_separator():
    assert split_filenames("/just/a/path") == ("", "/just/a/path")


def test_split_filenames_round_trip():
    name, path = "User Logs", "/Users/someone/Library/Logs"
    assert split_filenames(f"{name}: {path}") == (name, path)