"""Tests for input file discovery."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from finestat.discovery import list_input_files


def test_lists_only_direct_json_files_case_insensitively(tmp_path: Path) -> None:
    (tmp_path / "b.json").write_text("[]")
    (tmp_path / "A.JSON").write_text("[]")
    (tmp_path / "c.Json").write_text("[]")
    (tmp_path / "notes.txt").write_text("x")
    (tmp_path / "data.json.bak").write_text("x")
    (tmp_path / "nested.json").mkdir()
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "deep.json").write_text("[]")

    files = list_input_files(tmp_path)

    assert [p.name for p in files] == ["A.JSON", "b.json", "c.Json"]
    assert all(p.parent == tmp_path for p in files)


def test_custom_extension(tmp_path: Path) -> None:
    (tmp_path / "a.json").write_text("[]")
    (tmp_path / "b.data").write_text("[]")
    assert [p.name for p in list_input_files(tmp_path, ".DATA")] == ["b.data"]


def test_empty_directory_returns_empty_list(tmp_path: Path) -> None:
    assert list_input_files(tmp_path) == []


def test_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        list_input_files(tmp_path / "missing")


def test_file_path_instead_of_directory_raises(tmp_path: Path) -> None:
    f = tmp_path / "a.json"
    f.write_text("[]")
    with pytest.raises(NotADirectoryError):
        list_input_files(f)


def test_skips_special_files_and_broken_symlinks(tmp_path: Path) -> None:
    (tmp_path / "real.json").write_text("[]")
    os.symlink(tmp_path / "real.json", tmp_path / "link.json")
    os.symlink(tmp_path / "gone.json", tmp_path / "broken.json")
    if hasattr(os, "mkfifo"):
        os.mkfifo(tmp_path / "pipe.json")

    assert [p.name for p in list_input_files(tmp_path)] == ["link.json", "real.json"]
