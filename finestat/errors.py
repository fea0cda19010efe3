"""Exception types raised by finestat.

Filesystem problems surface as the built-in ``OSError`` family and are not
wrapped here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ParseError(ValueError):
    """Input file content is not a valid sequence of violation records.

    Attributes:
        source: File the bytes came from, when known.
        index: Position of the offending record in the top-level array, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        source: Optional[Path] = None,
        index: Optional[int] = None,
    ) -> None:
        self.message = message
        self.source = source
        self.index = index
        super().__init__(self._render())

    def _render(self) -> str:
        where = ""
        if self.source is not None:
            where = f"{self.source}: "
        if self.index is not None:
            where += f"record {self.index}: "
        return f"{where}{self.message}"

    def with_source(self, source: Path) -> "ParseError":
        """Return a copy of this error annotated with the originating file."""
        return ParseError(self.message, source=source, index=self.index)


class ConfigError(ValueError):
    """Run configuration is missing, malformed, or inconsistent."""
