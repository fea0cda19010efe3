"""Fold violations into per-type fine totals and order them for reporting.

Both functions are pure. Totals are computed with ``math.fsum`` so the result
does not depend on the order records arrived from the loader, and equal totals
are ordered by type name, which makes the report byte-identical for any pool
size.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Mapping, Tuple

from finestat.model import FineTotals, Violation

OrderedPairs = List[Tuple[str, float]]


def _total(values: List[float]) -> float:
    """Correctly rounded sum; totals past the float range become ``inf``."""
    try:
        return math.fsum(values)
    except OverflowError:
        return math.inf


def summarize(violations: Iterable[Violation]) -> FineTotals:
    """Sum ``fine_amount`` per violation type.

    Args:
        violations: Records to fold. Any iterable; consumed once.

    Returns:
        FineTotals keyed by type in first-seen order.
    """
    amounts: Dict[str, List[float]] = {}
    for violation in violations:
        amounts.setdefault(violation.type, []).append(violation.fine_amount)
    return FineTotals({key: _total(values) for key, values in amounts.items()})


def order_descending(totals: Mapping[str, float]) -> OrderedPairs:
    """Return ``(type, total)`` pairs sorted by total, largest first.

    Ties are broken by type name in ascending order.
    """
    return sorted(totals.items(), key=lambda item: (-item[1], item[0]))
