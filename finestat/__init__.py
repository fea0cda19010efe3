"""finestat: traffic-violation fine aggregation.

Loads every violation JSON file in a directory on a bounded thread pool, sums
fine amounts per violation type, and writes the totals, largest first, as a
small XML report.

Primary API:
    run() - End-to-end aggregation driven by a RunConfig
    load_all() - Concurrently load and parse a list of files
    summarize(), order_descending() - Aggregate and order fine totals
    write_report() - Serialize ordered totals as XML

Example:
    from finestat import RunConfig, run

    summary = run(RunConfig(input_dir="data", output_path="output.xml"))
    for violation_type, total in summary.pairs:
        print(violation_type, total)
"""

from __future__ import annotations

from finestat import cli, logging
from finestat._version import __version__
from finestat.aggregate import order_descending, summarize
from finestat.config import RunConfig, load_config
from finestat.discovery import list_input_files
from finestat.errors import ConfigError, ParseError
from finestat.loader import LoadResult, load_all
from finestat.model import FineTotals, Violation
from finestat.parse import parse_records
from finestat.pipeline import BenchmarkRow, RunSummary, benchmark, run
from finestat.report import write_report, write_report_file

__all__ = [
    # Version
    "__version__",
    # Model
    "Violation",
    "FineTotals",
    # Pipeline stages
    "list_input_files",
    "parse_records",
    "load_all",
    "LoadResult",
    "summarize",
    "order_descending",
    "write_report",
    "write_report_file",
    # Orchestration
    "RunConfig",
    "load_config",
    "run",
    "RunSummary",
    "benchmark",
    "BenchmarkRow",
    # Errors
    "ParseError",
    "ConfigError",
    # Utilities
    "cli",
    "logging",
]
