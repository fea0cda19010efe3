"""Small helpers used across finestat that do not depend on package internals."""

from finestat.utils.output_paths import (
    ensure_parent_dir,
    report_path_for_run,
    resolve_override_path,
)

__all__ = [
    "ensure_parent_dir",
    "report_path_for_run",
    "resolve_override_path",
]
