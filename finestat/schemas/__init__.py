"""Packaged JSON schemas for finestat inputs."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Dict


@lru_cache(maxsize=None)
def load_schema(name: str) -> Dict[str, Any]:
    """Load a packaged JSON schema by file name (e.g. ``"violations.json"``)."""
    try:
        with (
            resources.files(__name__).joinpath(name).open("r", encoding="utf-8")
        ) as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as exc:  # pragma: no cover
        raise RuntimeError(
            f"Failed to locate packaged finestat schema 'finestat/schemas/{name}'."
        ) from exc
