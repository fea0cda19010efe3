"""Domain types: violation records and aggregated fine totals."""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict

# Keys consumed by the model; everything else is carried in ``Violation.extra``.
CORE_FIELDS = ("type", "fine_amount")


@dataclass(frozen=True, slots=True)
class Violation:
    """A single traffic-fine record.

    Args:
        type: Violation category. Non-empty string.
        fine_amount: Monetary amount. Finite and non-negative.
        extra: Pass-through fields from the source record (read-only).
    """

    type: str
    fine_amount: float
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        """Validate and normalize fields.

        Raises:
            TypeError: If ``type`` is not a string or ``fine_amount`` is not numeric.
            ValueError: If ``type`` is empty or ``fine_amount`` is negative/NaN/inf.
        """
        if not isinstance(self.type, str):
            raise TypeError(f"Violation.type must be a string, got {self.type!r}")
        if not self.type:
            raise ValueError("Violation.type must be a non-empty string")
        if isinstance(self.fine_amount, bool) or not isinstance(
            self.fine_amount, (int, float)
        ):
            raise TypeError(
                f"Violation.fine_amount must be a number, got {self.fine_amount!r}"
            )
        try:
            amount = float(self.fine_amount)
        except OverflowError as exc:
            raise ValueError(
                f"Violation.fine_amount is too large for a float: {self.fine_amount!r}"
            ) from exc
        if not math.isfinite(amount) or amount < 0:
            raise ValueError(
                f"Violation.fine_amount must be finite and non-negative, got {amount!r}"
            )
        object.__setattr__(self, "fine_amount", amount)
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Violation":
        """Build a violation from a decoded JSON object."""
        extra = {k: v for k, v in data.items() if k not in CORE_FIELDS}
        return cls(type=data["type"], fine_amount=data["fine_amount"], extra=extra)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-safe dict with core fields first."""
        return {"type": self.type, "fine_amount": self.fine_amount, **self.extra}


class FineTotals(Mapping[str, float]):
    """Read-only mapping of violation type to summed fine amount.

    Iteration follows the order in which types were first recorded. Instances
    are never mutated after construction.
    """

    __slots__ = ("_totals",)

    def __init__(self, totals: Mapping[str, float] | None = None) -> None:
        self._totals = MappingProxyType(dict(totals or {}))

    def __getitem__(self, key: str) -> float:
        return self._totals[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._totals)

    def __len__(self) -> int:
        return len(self._totals)

    def __repr__(self) -> str:
        return f"FineTotals({dict(self._totals)!r})"

    def grand_total(self) -> float:
        """Sum of all per-type totals; ``inf`` past the float range."""
        try:
            return math.fsum(self._totals.values())
        except OverflowError:
            return math.inf
