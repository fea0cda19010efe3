"""Shared fixtures for finestat tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest


@pytest.fixture
def write_violations(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper that writes a JSON violations file under ``tmp_path``.

    The helper accepts a file name and a list of record dicts (or raw text for
    malformed content) and returns the written path.
    """

    def _write(name: str, records: List[Dict[str, Any]] | str, subdir: str = "data") -> Path:
        directory = tmp_path / subdir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        if isinstance(records, str):
            path.write_text(records, encoding="utf-8")
        else:
            path.write_text(json.dumps(records), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_dir(write_violations: Callable[..., Path]) -> Path:
    """Directory with the two-file speeding/parking example."""
    write_violations("a.json", [{"type": "speeding", "fine_amount": 100.0}])
    path = write_violations(
        "b.json",
        [
            {"type": "speeding", "fine_amount": 50.0},
            {"type": "parking", "fine_amount": 30.0},
        ],
    )
    return path.parent


@pytest.fixture
def many_files_dir(write_violations: Callable[..., Path]) -> Path:
    """Directory with a dozen files covering several types and a tie."""
    types = ["speeding", "parking", "red_light", "no_seatbelt"]
    path = None
    for i in range(12):
        records = [
            {
                "type": types[(i + j) % len(types)],
                "fine_amount": round(10.1 * (j + 1) + i * 0.3, 2),
                "year": 2010 + i,
            }
            for j in range(25)
        ]
        path = write_violations(f"violations_{2010 + i}.json", records)
    assert path is not None
    return path.parent
