"""
Variance classification for a physical count against system stock.

A count is compared in base units, so "1 CTN + 6 PC" and "18 PC" are the
same count for a 12-piece carton. The classifier only ever sees a fully
resolved CountEntry; input rules (digits only, auto-fill) live on
CountEntry itself.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Literal

from .units import QuantityPair, UnitSpec, from_base_units, to_base_units, to_number

CountField = Literal["counted_primary", "counted_base"]

_DIGITS_RE = re.compile(r"[0-9]+")


class StatusKind(Enum):
    """Outcome of comparing a count with system stock."""

    NOT_COUNTED = "not_counted"
    ALL_THERE = "all_there"
    MISSING = "missing"
    EXTRA = "extra"


# Sort order used when ordering rows by status
STATUS_RANK = {
    StatusKind.NOT_COUNTED: 1,
    StatusKind.ALL_THERE: 2,
    StatusKind.MISSING: 3,
    StatusKind.EXTRA: 4,
}


@dataclass(frozen=True)
class CountEntry:
    """
    User-entered physical count for one row.

    Both fields hold digits only, or "" for "not entered". Use with_input()
    to apply a keystroke: it rejects non-digit input and, when a base count
    is typed while the primary count is still empty, fills primary with "0".
    """

    counted_primary: str = ""
    counted_base: str = ""

    def with_input(self, field: CountField, value: str | None) -> "CountEntry":
        """Return the entry after one field edit (unchanged if rejected)."""
        value = "" if value is None else str(value)
        if field not in ("counted_primary", "counted_base"):
            return self
        if value != "" and not _DIGITS_RE.fullmatch(value):
            return self

        updated = replace(self, **{field: value})
        if field == "counted_base" and value != "" and updated.counted_primary == "":
            updated = replace(updated, counted_primary="0")
        return updated

    def is_entered(self, has_dual_units: bool) -> bool:
        """Dual-unit rows count as entered unless both fields are empty."""
        if has_dual_units:
            return self.counted_primary != "" or self.counted_base != ""
        return self.counted_primary != ""

    def as_pair(self) -> QuantityPair:
        return QuantityPair.coerce(self.counted_primary, self.counted_base)


@dataclass(frozen=True)
class ReconciliationStatus:
    """
    Classification of one row.

    variance is the positive base-unit delta for MISSING/EXTRA (0 otherwise)
    and variance_text its rendered form; aggregation keys on the number,
    display uses the text.
    """

    kind: StatusKind
    variance: int | float = 0
    variance_text: str = ""

    def __post_init__(self):
        if self.kind in (StatusKind.MISSING, StatusKind.EXTRA):
            if not self.variance > 0:
                raise ValueError(f"{self.kind.value} status needs a positive variance, got {self.variance}")
        elif self.variance != 0:
            raise ValueError(f"{self.kind.value} status cannot carry a variance")

    @classmethod
    def not_counted(cls) -> "ReconciliationStatus":
        return cls(StatusKind.NOT_COUNTED)

    @classmethod
    def all_there(cls) -> "ReconciliationStatus":
        return cls(StatusKind.ALL_THERE)

    @property
    def key(self) -> str:
        return self.kind.value

    @property
    def rank(self) -> int:
        return STATUS_RANK[self.kind]

    @property
    def label(self) -> str:
        if self.kind is StatusKind.NOT_COUNTED:
            return "Not Counted"
        if self.kind is StatusKind.ALL_THERE:
            return "All There"
        if self.kind is StatusKind.MISSING:
            return f"Missing ({self.variance_text})"
        return f"Extra ({self.variance_text})"

    @property
    def signed_variance(self) -> int | float:
        """Counted minus system, in base units."""
        if self.kind is StatusKind.MISSING:
            return -self.variance
        return self.variance


def classify(system: QuantityPair, counted: CountEntry, unit: UnitSpec) -> ReconciliationStatus:
    """
    Compare a count with system stock.

    Steps:
    1. Nothing entered -> NOT_COUNTED (even when system stock is zero)
    2. Normalize both sides to base units, empty fields counting as 0
    3. Equal -> ALL_THERE, less -> MISSING, more -> EXTRA, with the delta
       rendered through from_base_units
    """
    dual = unit.has_dual_units
    if not counted.is_entered(dual):
        return ReconciliationStatus.not_counted()

    factor = unit.conversion_factor
    system_total = to_base_units(system, factor, dual)
    counted_total = to_base_units(counted.as_pair(), factor, dual)

    if counted_total == system_total:
        return ReconciliationStatus.all_there()

    delta = to_number(abs(system_total - counted_total))
    text = from_base_units(delta, factor, unit.primary_unit_label, unit.base_unit_label, dual)
    kind = StatusKind.MISSING if counted_total < system_total else StatusKind.EXTRA
    return ReconciliationStatus(kind, variance=delta, variance_text=text)
