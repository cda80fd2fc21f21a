"""
Unit-of-measure math and formatting for stock counts.

Items are stocked in up to two nested units: a coarse "primary" unit
(e.g. CTN) and a fine "base" unit (e.g. PC), with a fixed integer factor
between them. Everything here is total over its inputs:
- unparsable, missing or non-finite numbers are treated as 0
- a factor below 1 behaves as 1
- missing unit labels fall back rather than fail
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

# Rendered when neither unit label is known
FALLBACK_UNIT_LABEL = "UNIT"


def to_number(value: Any) -> int | float:
    """Coerce operator or feed input to a finite number, defaulting to 0."""
    if value is None or isinstance(value, bool):
        return int(value or 0)

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0

    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0

    if not math.isfinite(number):
        return 0
    if number.is_integer():
        return int(number)
    return number


def clamp_factor(factor: Any) -> int:
    """Effective conversion factor: max(1, floor(factor))."""
    return max(1, math.floor(to_number(factor) or 1))


def format_number(value: Any) -> str:
    """Render a number the way the report shows it (10.0 -> "10")."""
    return str(to_number(value))


@dataclass(frozen=True)
class UnitSpec:
    """Unit configuration attached to an item (or overridden per row)."""

    primary_unit_label: str = ""
    base_unit_label: str | None = None
    conversion_factor: int = 1

    def __post_init__(self):
        object.__setattr__(self, "conversion_factor", clamp_factor(self.conversion_factor))
        if not self.base_unit_label:
            object.__setattr__(self, "base_unit_label", None)
        if self.primary_unit_label is None:
            object.__setattr__(self, "primary_unit_label", "")

    @property
    def has_dual_units(self) -> bool:
        return self.base_unit_label is not None and self.conversion_factor > 1


@dataclass(frozen=True)
class QuantityPair:
    """A quantity split across the primary and base tiers."""

    primary_qty: int | float = 0
    base_qty: int | float = 0

    @classmethod
    def coerce(cls, primary: Any, base: Any = 0) -> "QuantityPair":
        return cls(primary_qty=to_number(primary), base_qty=to_number(base))


def to_base_units(pair: QuantityPair, factor: Any, has_dual_units: bool) -> int | float:
    """
    Normalize a quantity pair to a single base-unit total.

    Single-unit items return the primary quantity as-is; the base tier
    contributes nothing for them even when it is nonzero.
    """
    primary = to_number(pair.primary_qty)
    if not has_dual_units:
        return primary
    return primary * clamp_factor(factor) + to_number(pair.base_qty)


def split_base_units(total_base_units: Any, factor: Any) -> tuple[int, int]:
    """Split a base-unit total into (primary, base) parts."""
    total = max(0, math.floor(to_number(total_base_units)))
    factor = clamp_factor(factor)
    if total <= 0:
        return 0, 0
    return total // factor, total % factor


def compact_unit_text(value: Any, unit_label: str | None) -> str:
    """
    UOM-safe quantity text: "12CTN", "5PC", or a bare "3" without a label.

    No separator and no pluralization, so the same value always renders
    to the same text on screen and on paper.
    """
    number = format_number(value)
    if not unit_label:
        return number
    return f"{number}{unit_label}"


def pluralized_unit_text(value: Any, unit_label: str | None) -> str:
    """
    Pluralizing quantity text used by the current-stock overview.

    Examples: 9 pack -> "9Packs", 1 piece -> "1Piece", 2 box -> "2boxs".
    Kept separate from compact_unit_text; the two screens follow different
    conventions.
    """
    number = to_number(value)
    if not unit_label:
        return f"{number}"

    label = f"{unit_label}".lower()
    if label == "pack":
        pretty = "Pack" if number == 1 else "Packs"
    elif label == "piece":
        pretty = "Piece" if number == 1 else "Pieces"
    else:
        pretty = unit_label if number == 1 else f"{unit_label}s"
    return f"{number}{pretty}"


def from_base_units(
    total_base_units: Any,
    factor: Any,
    primary_label: str | None,
    base_label: str | None,
    has_dual_units: bool,
) -> str:
    """
    Render a base-unit total as mixed-unit text.

    Rendering rules:
    - single unit (or no base label, or factor <= 1): the total against
      the primary label, else the base label, else "UNIT"
    - both parts nonzero: "1CTN + 6PC"
    - only the primary part: "2CTN"
    - otherwise the base part, so zero renders as "0PC"
    """
    total = max(0, math.floor(to_number(total_base_units)))
    effective_factor = clamp_factor(factor)

    if not has_dual_units or not base_label or effective_factor <= 1:
        return compact_unit_text(total, primary_label or base_label or FALLBACK_UNIT_LABEL)

    primary_part, base_part = split_base_units(total, effective_factor)

    if primary_part > 0 and base_part > 0:
        return f"{compact_unit_text(primary_part, primary_label)} + {compact_unit_text(base_part, base_label)}"
    if primary_part > 0:
        return compact_unit_text(primary_part, primary_label)
    return compact_unit_text(base_part, base_label)
