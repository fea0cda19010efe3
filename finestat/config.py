"""Run configuration for finestat.

A run is described by a small YAML (or JSON) document::

    input_dir: data/violations
    output_path: out/output.xml
    parallelism: 4
    extension: .json
    escape_attributes: true

Only ``input_dir`` is required. Relative paths are resolved against the
directory containing the config file.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import jsonschema
import yaml

from finestat.errors import ConfigError
from finestat.logging import get_logger
from finestat.schemas import load_schema
from finestat.utils.output_paths import DEFAULT_REPORT_NAME, resolve_override_path

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunConfig:
    """Settings for one aggregation run."""

    # Directory scanned (non-recursively) for input files
    input_dir: Path

    # Destination of the XML report
    output_path: Path = field(default_factory=lambda: Path(DEFAULT_REPORT_NAME))

    # Worker threads used to load files; 1 loads sequentially
    parallelism: int = 4

    # Input file name suffix, matched case-insensitively
    extension: str = ".json"

    # XML-escape violation type names in the report
    escape_attributes: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "input_dir", Path(self.input_dir))
        object.__setattr__(self, "output_path", Path(self.output_path))
        if isinstance(self.parallelism, bool) or not isinstance(self.parallelism, int):
            raise ConfigError(f"parallelism must be an integer, got {self.parallelism!r}")
        if self.parallelism < 1:
            raise ConfigError(f"parallelism must be >= 1, got {self.parallelism}")
        if not self.extension.startswith(".") or len(self.extension) < 2:
            raise ConfigError(f"extension must look like '.json', got {self.extension!r}")

    def with_overrides(self, **overrides: Any) -> "RunConfig":
        """Return a copy with the non-None keyword values applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], base_dir: Optional[Path] = None
    ) -> "RunConfig":
        """Validate a decoded config mapping and build a ``RunConfig``.

        Raises:
            ConfigError: If the mapping does not match the config schema.
        """
        try:
            jsonschema.validate(data, load_schema("config.json"))
        except jsonschema.ValidationError as exc:
            location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
            raise ConfigError(f"Invalid config at {location}: {exc.message}") from exc

        values = dict(data)
        values["input_dir"] = resolve_override_path(Path(values["input_dir"]), base_dir)
        if "output_path" in values:
            values["output_path"] = resolve_override_path(
                Path(values["output_path"]), base_dir
            )
        return cls(**values)


def load_config(path: Union[str, Path]) -> RunConfig:
    """Load a run configuration from a YAML or JSON file.

    Args:
        path: Config file location.

    Returns:
        Validated configuration with paths resolved against the file's directory.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file cannot be parsed or fails validation.
    """
    p = Path(path).expanduser()
    text = p.read_text(encoding="utf-8")

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse config {p}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {p} must map to a dictionary at top-level.")

    config = RunConfig.from_dict(data, base_dir=p.resolve().parent)
    logger.debug(f"Loaded config from {p}: {config}")
    return config
