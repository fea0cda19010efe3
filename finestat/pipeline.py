"""End-to-end aggregation run and pool-size benchmark.

``run`` wires discovery, concurrent loading, aggregation and report writing in
that order. The report file is opened only after loading and aggregation have
succeeded, so a failed run leaves no partial report behind.
"""

from __future__ import annotations

import statistics
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

from finestat.aggregate import OrderedPairs, order_descending, summarize
from finestat.config import RunConfig
from finestat.discovery import list_input_files
from finestat.loader import load_all
from finestat.logging import get_logger
from finestat.report import write_report_file

logger = get_logger(__name__)

DEFAULT_BENCH_POOLS = (1, 2, 4, 8)


@dataclass(slots=True)
class RunSummary:
    """Outcome of a successful ``run``."""

    files: int
    records: int
    parallelism: int
    elapsed_ms: float
    output_path: Path
    pairs: OrderedPairs = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": self.files,
            "records": self.records,
            "types": len(self.pairs),
            "parallelism": self.parallelism,
            "elapsed_ms": self.elapsed_ms,
            "output_path": str(self.output_path),
            "totals": [{"type": t, "fine_amount": a} for t, a in self.pairs],
        }


@dataclass(slots=True)
class BenchmarkRow:
    """Load timings for one pool size."""

    pool_size: int
    files: int
    records: int
    best_ms: float
    median_ms: float
    matches_baseline: bool


def run(config: RunConfig) -> RunSummary:
    """Aggregate every input file under ``config.input_dir`` into an XML report.

    Raises:
        OSError: If the input directory or a file cannot be read, or the report
            cannot be written.
        ParseError: If any input file is malformed.
    """
    logger.info(f"Scanning {config.input_dir} for '{config.extension}' files")
    files = list_input_files(config.input_dir, config.extension)

    loaded = load_all(files, parallelism=config.parallelism)

    totals = summarize(loaded.violations)
    pairs = order_descending(totals)
    logger.info(
        f"Aggregated {len(loaded)} record(s) into {len(pairs)} violation type(s)"
    )

    output_path = write_report_file(
        pairs, config.output_path, escape=config.escape_attributes
    )
    return RunSummary(
        files=loaded.files,
        records=len(loaded),
        parallelism=loaded.parallelism,
        elapsed_ms=loaded.elapsed_ms,
        output_path=output_path,
        pairs=pairs,
    )


def benchmark(
    config: RunConfig,
    pool_sizes: Sequence[int] = DEFAULT_BENCH_POOLS,
    repeat: int = 1,
) -> List[BenchmarkRow]:
    """Time the load phase over the same file set with each pool size.

    Every pool size must produce the same ordered totals as the first one;
    ``matches_baseline`` records whether it did. No report is written.

    Args:
        config: Run configuration; ``parallelism`` and ``output_path`` are ignored.
        pool_sizes: Worker counts to compare.
        repeat: Load repetitions per pool size. Best and median are reported.

    Raises:
        ValueError: If ``repeat`` is less than 1 or ``pool_sizes`` is empty.
    """
    if repeat < 1:
        raise ValueError(f"repeat must be >= 1, got {repeat}")
    if not pool_sizes:
        raise ValueError("pool_sizes must not be empty")

    files = list_input_files(config.input_dir, config.extension)
    logger.info(
        f"Benchmarking {len(files)} file(s) with pool sizes "
        f"{', '.join(str(p) for p in pool_sizes)} ({repeat} repeat(s) each)"
    )

    baseline: OrderedPairs | None = None
    rows: List[BenchmarkRow] = []
    for pool_size in pool_sizes:
        timings: List[float] = []
        pairs: OrderedPairs = []
        records = 0
        for _ in range(repeat):
            loaded = load_all(files, parallelism=pool_size)
            timings.append(loaded.elapsed_ms)
            records = len(loaded)
            pairs = order_descending(summarize(loaded.violations))

        if baseline is None:
            baseline = pairs
        matches = pairs == baseline
        if not matches:
            logger.warning(f"Pool size {pool_size} produced totals that differ from baseline")

        rows.append(
            BenchmarkRow(
                pool_size=pool_size,
                files=len(files),
                records=records,
                best_ms=min(timings),
                median_ms=statistics.median(timings),
                matches_baseline=matches,
            )
        )
        logger.debug(f"Pool size {pool_size}: best {min(timings):.1f} ms")
    return rows
