"""Command-line interface for finestat."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, List, Optional

from finestat.config import RunConfig, load_config
from finestat.errors import ConfigError, ParseError
from finestat.logging import get_logger, set_global_log_level
from finestat.pipeline import DEFAULT_BENCH_POOLS, benchmark, run
from finestat.utils.output_paths import report_path_for_run

logger = get_logger(__name__)


def _format_table(
    headers: List[str],
    rows: List[List[str]],
    min_width: int = 8,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width

    Returns:
        Formatted table string
    """
    if not rows:
        return ""

    all_data = [headers] + rows
    col_widths = []
    for col_idx in range(len(headers)):
        max_width = max(len(str(row[col_idx])) for row in all_data)
        col_widths.append(max(max_width, min_width))

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{str(item):<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    for row in rows:
        lines.append(format_row(row))
    return "\n".join(lines)


def _format_duration(seconds: float) -> str:
    """Return a concise human-readable duration string.

    Examples:
        0.123 -> "123.0 ms"; 1.234 -> "1.23 s"; 75.2 -> "1m 15.2s".
    """
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    if seconds < 60.0:
        return f"{seconds:.2f} s"
    minutes = int(seconds // 60)
    rem = seconds - minutes * 60
    return f"{minutes}m {rem:.1f}s"


def _plural(n: int, singular: str, plural: Optional[str] = None) -> str:
    """Return grammatically correct unit for count n."""
    if n == 1:
        return singular
    return plural or (singular + "s")


def _resolve_config(
    input_dir: Optional[Path], config_path: Optional[Path], **overrides: Any
) -> RunConfig:
    """Build the effective run config from a config file and CLI overrides.

    Raises:
        ConfigError: If neither an input directory nor a config file was given.
    """
    if config_path is not None:
        logger.info(f"Loading config from: {config_path}")
        config = load_config(config_path)
        if input_dir is not None:
            config = config.with_overrides(input_dir=input_dir)
    elif input_dir is not None:
        config = RunConfig(input_dir=input_dir)
    else:
        raise ConfigError("an input directory or --config file is required")
    return config.with_overrides(**overrides)


def _run(
    input_dir: Optional[Path],
    config_path: Optional[Path],
    output: Optional[Path],
    parallelism: Optional[int],
    no_escape: bool,
    summary_json: bool,
) -> None:
    """Run the aggregation and write the XML report."""
    _start_time = perf_counter()

    try:
        config = _resolve_config(
            input_dir,
            config_path,
            parallelism=parallelism,
            escape_attributes=False if no_escape else None,
        )
        output_path = report_path_for_run(
            configured=config.output_path,
            report_override=output,
        )
        config = config.with_overrides(output_path=output_path)

        summary = run(config)

        print(f"Used time {summary.elapsed_ms:.0f} ms")
        print(
            f"✅ Report written to: {summary.output_path} "
            f"({len(summary.pairs)} {_plural(len(summary.pairs), 'violation type')} "
            f"from {summary.files} {_plural(summary.files, 'file')})"
        )
        if summary_json:
            print(json.dumps(summary.to_dict(), indent=2))

        _elapsed = perf_counter() - _start_time
        logger.info(f"Run completed successfully in {_format_duration(_elapsed)}")

    except FileNotFoundError as e:
        logger.error(f"Input not found: {e.filename or e}")
        print(f"❌ ERROR: Input not found: {e.filename or e}")
        sys.exit(1)
    except ParseError as e:
        logger.error(f"Malformed input: {e}")
        print(f"❌ ERROR: Malformed input: {e}")
        sys.exit(1)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to run: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to run: {type(e).__name__}: {e}")
        sys.exit(1)


def _bench(
    input_dir: Optional[Path],
    config_path: Optional[Path],
    pools: List[int],
    repeat: int,
) -> None:
    """Compare load-phase timings across worker pool sizes."""
    try:
        config = _resolve_config(input_dir, config_path)
        rows = benchmark(config, pool_sizes=pools, repeat=repeat)
    except FileNotFoundError as e:
        logger.error(f"Input not found: {e.filename or e}")
        print(f"❌ ERROR: Input not found: {e.filename or e}")
        sys.exit(1)
    except (OSError, ValueError) as e:
        logger.error(f"Benchmark failed: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Benchmark failed: {type(e).__name__}: {e}")
        sys.exit(1)

    table = _format_table(
        ["Pool", "Files", "Records", "Best ms", "Median ms", "Same totals"],
        [
            [
                str(r.pool_size),
                str(r.files),
                str(r.records),
                f"{r.best_ms:.1f}",
                f"{r.median_ms:.1f}",
                "yes" if r.matches_baseline else "NO",
            ]
            for r in rows
        ],
    )
    print(table)
    if not all(r.matches_baseline for r in rows):
        print("❌ ERROR: totals differ between pool sizes")
        sys.exit(1)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``finestat`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="finestat",
        description="Aggregate traffic-violation fines from JSON files into an XML report.",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{run,bench}",
        help="Available commands",
    )

    run_parser = subparsers.add_parser("run", help="Aggregate a directory of files")
    run_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Report file path (default: config output_path, else ./output.xml)",
    )
    run_parser.add_argument(
        "--parallelism",
        "-p",
        type=int,
        default=None,
        help="Worker threads used to load files (default: 4)",
    )
    run_parser.add_argument(
        "--no-escape",
        action="store_true",
        help="Write violation type names without XML escaping",
    )
    run_parser.add_argument(
        "--summary-json",
        action="store_true",
        help="Also print a JSON run summary to stdout",
    )

    bench_parser = subparsers.add_parser(
        "bench", help="Compare load time across worker pool sizes"
    )
    bench_parser.add_argument(
        "--pools",
        type=int,
        nargs="+",
        default=list(DEFAULT_BENCH_POOLS),
        help="Pool sizes to compare (default: 1 2 4 8)",
    )
    bench_parser.add_argument(
        "--repeat",
        "-n",
        type=int,
        default=3,
        help="Load repetitions per pool size",
    )

    for p in (run_parser, bench_parser):
        p.add_argument(
            "input_dir",
            type=Path,
            nargs="?",
            default=None,
            help="Directory containing violation JSON files",
        )
        p.add_argument(
            "--config",
            "-c",
            type=Path,
            default=None,
            help="YAML run configuration",
        )

    effective_args = sys.argv[1:] if argv is None else argv

    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        set_global_log_level(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(logging.INFO)

    if args.command == "run":
        _run(
            input_dir=args.input_dir,
            config_path=args.config,
            output=args.output,
            parallelism=args.parallelism,
            no_escape=args.no_escape,
            summary_json=args.summary_json,
        )
    elif args.command == "bench":
        _bench(
            input_dir=args.input_dir,
            config_path=args.config,
            pools=args.pools,
            repeat=args.repeat,
        )


if __name__ == "__main__":
    main()
