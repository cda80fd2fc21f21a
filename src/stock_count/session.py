"""
In-progress physical count held by the report view.

Counts are transient: created empty, changed only by operator keystrokes,
cleared in bulk, never persisted.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType

from .variance import CountEntry, CountField

logger = logging.getLogger(__name__)


class CountSession:
    """Owns the CountEntry for every row id of one report session."""

    def __init__(self):
        self._counts: dict[str, CountEntry] = {}

    def get(self, row_id: str) -> CountEntry:
        return self._counts.get(row_id, CountEntry())

    def enter(self, row_id: str, field: CountField, value: str | None, has_dual_units: bool = True) -> bool:
        """
        Apply one field edit for a row.

        Returns False when the input was rejected (non-digit text, or a base
        count on a single-unit row), in which case the stored count is left
        as it was.
        """
        value = "" if value is None else str(value)
        current = self.get(row_id)
        if field == "counted_base" and not has_dual_units and value != current.counted_base:
            logger.debug("Rejected base count %r for single-unit row %s", value, row_id)
            return False

        updated = current.with_input(field, value)
        if updated == current and value != getattr(current, field, None):
            logger.debug("Rejected count input %r for %s.%s", value, row_id, field)
            return False

        if updated == CountEntry():
            self._counts.pop(row_id, None)
        else:
            self._counts[row_id] = updated
        return True

    @property
    def counts(self) -> Mapping[str, CountEntry]:
        """Read-only view keyed by row id."""
        return MappingProxyType(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def clear(self) -> None:
        """Drop every entered count ("Clear Unload Counts")."""
        cleared = len(self._counts)
        self._counts.clear()
        logger.info("All entered unload counts cleared (%d rows)", cleared)

    reset = clear
