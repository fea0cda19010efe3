"""Path helpers for the report file written by the CLI.

The report location is resolved from, in order: an explicit CLI override, the
``output_path`` of the run configuration, and finally ``output.xml`` in the
current working directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

DEFAULT_REPORT_NAME = "output.xml"


def ensure_parent_dir(path: Path) -> None:
    """Ensure the parent directory exists for a file path."""
    path.parent.mkdir(parents=True, exist_ok=True)


def resolve_override_path(
    override: Optional[Path], base_dir: Optional[Path]
) -> Optional[Path]:
    """Resolve an override path with respect to an optional base directory.

    - Absolute override paths are returned as-is.
    - Relative override paths are interpreted relative to ``base_dir`` when
      provided; otherwise relative to the current working directory.

    Args:
        override: Path supplied by the user.
        base_dir: Optional base directory for relative overrides.

    Returns:
        The resolved path or None if no override was provided.
    """
    if override is None:
        return None
    if override.is_absolute():
        return override
    if base_dir is not None:
        return (base_dir / override).resolve()
    return override


def report_path_for_run(
    configured: Optional[Path],
    report_override: Optional[Path],
) -> Path:
    """Determine where the ``run`` command writes its XML report.

    Args:
        configured: ``output_path`` from the run configuration, if any.
        report_override: ``--output`` value from the command line, if any.

    Returns:
        The report path.
    """
    resolved = resolve_override_path(report_override, None)
    if resolved is not None:
        return resolved
    if configured is not None:
        return configured
    return Path(DEFAULT_REPORT_NAME)
