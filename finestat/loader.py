"""Concurrent loading of violation files.

Fans out one load-and-parse task per file onto a bounded thread pool and fans
the parsed records back into a single shared collection. The caller blocks on
a barrier until every task has finished; only then is the merged collection
handed back.

Concurrency model:
- Tasks are independent. Each reads one file and parses it without touching
  any other task's data.
- The only shared state is the ``RecordSink``; its appends are serialized by a
  lock, and a task appends only after its whole file parsed successfully.
- Failures do not cancel siblings. All tasks run to completion, then the
  earliest submitted failure is raised and the merged records are discarded.
- The pool is shut down after the join on both the success and failure paths.

File reads release the GIL, so threads overlap I/O; JSON decoding is
CPU-bound and serializes on the GIL. Pool size 1 is equivalent to loading the
files one after another.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import ALL_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Sequence, Union

from finestat.errors import ParseError
from finestat.logging import get_logger
from finestat.model import Violation
from finestat.parse import parse_records

logger = get_logger(__name__)

DEFAULT_PARALLELISM = 4

FileId = Union[str, Path]
RecordParser = Callable[[bytes], Sequence[Violation]]


class RecordSink:
    """Append-only record collection shared by loader tasks."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: List[Violation] = []

    def extend(self, records: Iterable[Violation]) -> None:
        """Append a batch of records atomically with respect to other batches."""
        batch = list(records)
        with self._lock:
            self._records.extend(batch)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def snapshot(self) -> List[Violation]:
        """Return a copy of the records collected so far."""
        with self._lock:
            return list(self._records)


@dataclass(slots=True)
class LoadResult:
    """Merged output of a ``load_all`` call.

    Args:
        violations: Records from every file. Order across files follows task
            completion and is not meaningful.
        files: Number of files loaded.
        parallelism: Worker threads actually used (0 when there were no files).
        elapsed_ms: Wall-clock time of the load phase in milliseconds.
    """

    violations: List[Violation] = field(default_factory=list)
    files: int = 0
    parallelism: int = 0
    elapsed_ms: float = 0.0

    def __len__(self) -> int:
        return len(self.violations)


def _load_file(path: Path, parser: RecordParser, sink: RecordSink) -> int:
    """Read and parse one file, then publish its records to ``sink``."""
    data = path.read_bytes()
    try:
        records = parser(data)
    except ParseError as exc:
        raise exc.with_source(path) from exc
    sink.extend(records)
    logger.debug(f"Loaded {len(records)} record(s) from {path.name}")
    return len(records)


def _validate_parallelism(parallelism: int) -> int:
    if isinstance(parallelism, bool) or not isinstance(parallelism, int):
        raise TypeError(f"parallelism must be an int, got {parallelism!r}")
    if parallelism < 1:
        raise ValueError(f"parallelism must be >= 1, got {parallelism}")
    return parallelism


def load_all(
    file_ids: Sequence[FileId],
    parallelism: int = DEFAULT_PARALLELISM,
    parser: RecordParser = parse_records,
) -> LoadResult:
    """Load and parse all files concurrently and merge their records.

    Args:
        file_ids: Paths of the files to load.
        parallelism: Maximum number of worker threads.
        parser: Callable turning one file's bytes into violations.

    Returns:
        LoadResult holding every record from every file.

    Raises:
        ValueError: If ``parallelism`` is less than 1.
        TypeError: If ``parallelism`` is not an int.
        ParseError: If any file is malformed. The error names the file.
        OSError: If any file cannot be read.
    """
    parallelism = _validate_parallelism(parallelism)
    paths = [Path(f) for f in file_ids]
    total_tasks = len(paths)

    if total_tasks == 0:
        logger.info("No input files to load")
        return LoadResult()

    workers = min(parallelism, total_tasks)
    logger.info(f"Loading {total_tasks} file(s) with {workers} worker thread(s)")

    sink = RecordSink()
    start_time = time.perf_counter()

    pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="finestat-load")
    try:
        futures: List[Future[int]] = [
            pool.submit(_load_file, path, parser, sink) for path in paths
        ]
        logger.debug(f"Submitted {len(futures)} load task(s)")
        # Barrier: nothing downstream runs until every task has finished
        wait(futures, return_when=ALL_COMPLETED)
    finally:
        pool.shutdown(wait=True)

    elapsed_ms = (time.perf_counter() - start_time) * 1000.0

    failures = [
        (path, fut.exception())
        for path, fut in zip(paths, futures, strict=True)
        if fut.exception() is not None
    ]
    if failures:
        for path, exc in failures[1:]:
            logger.error(f"Additional load failure in {path}: {exc}")
        first_path, first_exc = failures[0]
        logger.error(
            f"Load failed for {len(failures)}/{total_tasks} file(s); "
            f"first failure in {first_path}: {type(first_exc).__name__}: {first_exc}"
        )
        raise first_exc

    violations = sink.snapshot()
    logger.info(
        f"Loaded {len(violations)} record(s) from {total_tasks} file(s) "
        f"in {elapsed_ms:.0f} ms"
    )
    return LoadResult(
        violations=violations,
        files=total_tasks,
        parallelism=workers,
        elapsed_ms=elapsed_ms,
    )
