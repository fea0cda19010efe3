"""XML report writer for ordered fine totals.

Output shape::

    <violations>
        <violation type="speeding" fine_amount="150.0" />
    </violations>

Amounts use Python's float ``repr``. The ``type`` attribute is XML-escaped by
default; ``escape=False`` writes it verbatim, which can produce malformed XML
for names containing quotes, ``&`` or ``<``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, TextIO, Tuple, Union
from xml.sax.saxutils import escape as _xml_escape

from finestat.logging import get_logger
from finestat.utils.output_paths import ensure_parent_dir

logger = get_logger(__name__)

ROOT_ELEMENT = "violations"
CHILD_ELEMENT = "violation"
INDENT = "    "

_ATTR_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}


def _attr(value: str, escape: bool) -> str:
    return _xml_escape(value, _ATTR_ENTITIES) if escape else value


def format_line(type_name: str, amount: float, escape: bool = True) -> str:
    """Render one child element line, including indent and newline."""
    return (
        f'{INDENT}<{CHILD_ELEMENT} type="{_attr(type_name, escape)}" '
        f'fine_amount="{float(amount)!r}" />\n'
    )


def write_report(
    pairs: Iterable[Tuple[str, float]], sink: TextIO, escape: bool = True
) -> int:
    """Write the report to an open text stream.

    Args:
        pairs: ``(type, total)`` pairs in the order they should appear.
        sink: Writable text stream.
        escape: Escape XML special characters in ``type``.

    Returns:
        Number of child elements written.
    """
    count = 0
    sink.write(f"<{ROOT_ELEMENT}>\n")
    for type_name, amount in pairs:
        sink.write(format_line(type_name, amount, escape))
        count += 1
    sink.write(f"</{ROOT_ELEMENT}>\n")
    return count


def write_report_file(
    pairs: Iterable[Tuple[str, float]],
    path: Union[str, Path],
    escape: bool = True,
) -> Path:
    """Write the report to ``path`` as UTF-8, creating parent directories.

    Raises:
        OSError: If the file cannot be created or written.
    """
    out = Path(path)
    ensure_parent_dir(out)
    logger.info(f"Writing report to: {out}")
    with out.open("w", encoding="utf-8", newline="\n") as f:
        count = write_report(pairs, f, escape=escape)
    logger.debug(f"Report contains {count} violation type(s)")
    return out
