"""Tests for the concurrent file loader.

Covers merge correctness across pool sizes, bounded parallelism, the join
barrier, all-or-nothing failure semantics, and pool shutdown.
"""

from __future__ import annotations

import threading
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List

import pytest

from finestat import loader as loader_mod
from finestat.discovery import list_input_files
from finestat.errors import ParseError
from finestat.loader import LoadResult, RecordSink, load_all
from finestat.model import Violation
from finestat.parse import parse_records


class TestLoadAll:
    """Functional behavior of ``load_all``."""

    def test_merges_records_from_all_files(self, sample_dir: Path) -> None:
        result = load_all(list_input_files(sample_dir), parallelism=4)

        assert isinstance(result, LoadResult)
        assert result.files == 2
        assert result.parallelism == 2  # capped at number of files
        assert len(result) == 3
        assert Counter((v.type, v.fine_amount) for v in result.violations) == Counter(
            {("speeding", 100.0): 1, ("speeding", 50.0): 1, ("parking", 30.0): 1}
        )
        assert result.elapsed_ms >= 0.0

    def test_pool_size_one_and_eight_yield_same_multiset(
        self, many_files_dir: Path
    ) -> None:
        files = list_input_files(many_files_dir)
        sequential = load_all(files, parallelism=1)
        parallel = load_all(files, parallelism=8)

        assert sequential.parallelism == 1
        assert parallel.parallelism == 8
        assert len(sequential) == 12 * 25
        assert Counter(sequential.violations) == Counter(parallel.violations)

    def test_empty_file_list_returns_empty_result(self) -> None:
        result = load_all([], parallelism=4)
        assert result.violations == []
        assert result.files == 0
        assert result.parallelism == 0

    def test_accepts_string_paths(self, sample_dir: Path) -> None:
        result = load_all([str(p) for p in list_input_files(sample_dir)], 2)
        assert len(result) == 3

    @pytest.mark.parametrize("bad", [0, -1])
    def test_rejects_non_positive_parallelism(self, sample_dir: Path, bad: int) -> None:
        with pytest.raises(ValueError, match="parallelism"):
            load_all(list_input_files(sample_dir), parallelism=bad)

    @pytest.mark.parametrize("bad", [2.0, "4", True])
    def test_rejects_non_int_parallelism(self, sample_dir: Path, bad) -> None:
        with pytest.raises(TypeError, match="parallelism"):
            load_all(list_input_files(sample_dir), parallelism=bad)


class TestConcurrency:
    """Bounded pool, barrier and worker usage."""

    def test_concurrent_tasks_never_exceed_parallelism(
        self, many_files_dir: Path
    ) -> None:
        lock = threading.Lock()
        active = 0
        peak = 0

        def slow_parser(data: bytes) -> List[Violation]:
            nonlocal active, peak
            with lock:
                active += 1
                peak = max(peak, active)
            try:
                time.sleep(0.02)
                return parse_records(data)
            finally:
                with lock:
                    active -= 1

        result = load_all(
            list_input_files(many_files_dir), parallelism=3, parser=slow_parser
        )

        assert len(result) == 12 * 25
        assert 1 <= peak <= 3

    def test_tasks_run_on_worker_threads(self, sample_dir: Path) -> None:
        thread_names: List[str] = []
        lock = threading.Lock()

        def recording_parser(data: bytes) -> List[Violation]:
            with lock:
                thread_names.append(threading.current_thread().name)
            return parse_records(data)

        load_all(list_input_files(sample_dir), parallelism=2, parser=recording_parser)

        assert len(thread_names) == 2
        assert all(name.startswith("finestat-load") for name in thread_names)

    def test_returns_only_after_every_task_finished(self, many_files_dir: Path) -> None:
        finished: List[str] = []
        lock = threading.Lock()

        def parser(data: bytes) -> List[Violation]:
            records = parse_records(data)
            time.sleep(0.01)
            with lock:
                finished.append("done")
            return records

        files = list_input_files(many_files_dir)
        result = load_all(files, parallelism=4, parser=parser)

        assert len(finished) == len(files)
        assert len(result) == 12 * 25

    def test_pool_is_shut_down_on_success_and_failure(
        self, monkeypatch: pytest.MonkeyPatch, sample_dir: Path, write_violations
    ) -> None:
        shutdowns: List[bool] = []

        class TrackingExecutor(ThreadPoolExecutor):
            def shutdown(self, wait: bool = True, **kwargs) -> None:
                shutdowns.append(wait)
                super().shutdown(wait=wait, **kwargs)

        monkeypatch.setattr(loader_mod, "ThreadPoolExecutor", TrackingExecutor)

        load_all(list_input_files(sample_dir), parallelism=2)
        assert shutdowns == [True]

        write_violations("zz_bad.json", "not json")
        with pytest.raises(ParseError):
            load_all(list_input_files(sample_dir), parallelism=2)
        assert shutdowns == [True, True]


class TestFailures:
    """All-or-nothing semantics."""

    def test_one_malformed_file_fails_the_whole_load(
        self, sample_dir: Path, write_violations
    ) -> None:
        bad = write_violations("c.json", '[{"type": "speeding", "fine_amount": -1}]')

        with pytest.raises(ParseError) as exc_info:
            load_all(list_input_files(sample_dir), parallelism=3)

        assert exc_info.value.source == bad
        assert exc_info.value.index == 0

    def test_failure_does_not_cancel_sibling_tasks(
        self, sample_dir: Path, write_violations
    ) -> None:
        write_violations("0_bad.json", "{")
        parsed: List[bytes] = []
        lock = threading.Lock()

        def parser(data: bytes) -> List[Violation]:
            if data != b"{":
                time.sleep(0.02)
            with lock:
                parsed.append(data)
            return parse_records(data)

        files = list_input_files(sample_dir)
        with pytest.raises(ParseError):
            load_all(files, parallelism=1, parser=parser)

        # The bad file is first in submission order; both siblings still ran
        assert len(parsed) == len(files) == 3

    def test_earliest_submitted_failure_is_raised(
        self, sample_dir: Path, write_violations
    ) -> None:
        first_bad = write_violations("a_bad.json", "[1]")
        write_violations("z_bad.json", "nope")

        with pytest.raises(ParseError) as exc_info:
            load_all(list_input_files(sample_dir), parallelism=4)

        assert exc_info.value.source == first_bad

    def test_unreadable_file_raises_os_error(self, sample_dir: Path) -> None:
        files = list_input_files(sample_dir) + [sample_dir / "missing.json"]
        with pytest.raises(FileNotFoundError):
            load_all(files, parallelism=2)


class TestRecordSink:
    def test_concurrent_extends_lose_nothing(self) -> None:
        sink = RecordSink()
        batch = [Violation("speeding", 1.0)] * 100

        threads = [
            threading.Thread(target=sink.extend, args=(batch,)) for _ in range(16)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(sink) == 1600
        assert len(sink.snapshot()) == 1600

    def test_snapshot_is_a_copy(self) -> None:
        sink = RecordSink()
        sink.extend([Violation("parking", 2.0)])
        snap = sink.snapshot()
        snap.clear()
        assert len(sink) == 1
