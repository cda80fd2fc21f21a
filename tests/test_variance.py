"""Tests for count entry rules and variance classification."""

from __future__ import annotations

import pytest

from stock_count.units import QuantityPair, UnitSpec
from stock_count.variance import STATUS_RANK, CountEntry, ReconciliationStatus, StatusKind, classify

CARTON = UnitSpec("CTN", "PC", 12)
KG = UnitSpec("KG", None, 1)


class TestCountEntry:
    def test_accepts_digits(self) -> None:
        entry = CountEntry().with_input("counted_primary", "12")
        assert entry.counted_primary == "12"

    @pytest.mark.parametrize("value", ["1.5", "-3", "abc", "1 2", " 4"])
    def test_rejects_non_digit_input(self, value: str) -> None:
        """Rejected input leaves the entry unchanged."""
        entry = CountEntry(counted_primary="3")
        assert entry.with_input("counted_primary", value) == entry

    def test_empty_string_clears_a_field(self) -> None:
        entry = CountEntry(counted_primary="3", counted_base="4")
        assert entry.with_input("counted_base", "") == CountEntry(counted_primary="3", counted_base="")

    def test_base_input_fills_empty_primary(self) -> None:
        """Typing a base count with primary still empty sets primary to "0"."""
        entry = CountEntry().with_input("counted_base", "6")
        assert entry == CountEntry(counted_primary="0", counted_base="6")

    def test_base_input_keeps_existing_primary(self) -> None:
        entry = CountEntry(counted_primary="2").with_input("counted_base", "6")
        assert entry == CountEntry(counted_primary="2", counted_base="6")

    def test_clearing_base_does_not_fill_primary(self) -> None:
        entry = CountEntry().with_input("counted_base", "")
        assert entry == CountEntry()

    def test_unknown_field_is_ignored(self) -> None:
        entry = CountEntry(counted_primary="1")
        assert entry.with_input("counted_other", "5") == entry  # type: ignore[arg-type]

    def test_is_entered(self) -> None:
        assert not CountEntry().is_entered(True)
        assert CountEntry(counted_base="4").is_entered(True)
        assert not CountEntry(counted_base="4").is_entered(False)
        assert CountEntry(counted_primary="0").is_entered(False)


class TestReconciliationStatus:
    def test_missing_requires_positive_variance(self) -> None:
        with pytest.raises(ValueError):
            ReconciliationStatus(StatusKind.MISSING, variance=0)

    def test_extra_requires_positive_variance(self) -> None:
        with pytest.raises(ValueError):
            ReconciliationStatus(StatusKind.EXTRA, variance=-2)

    def test_all_there_cannot_carry_variance(self) -> None:
        with pytest.raises(ValueError):
            ReconciliationStatus(StatusKind.ALL_THERE, variance=3)

    def test_labels(self) -> None:
        assert ReconciliationStatus.not_counted().label == "Not Counted"
        assert ReconciliationStatus.all_there().label == "All There"
        assert ReconciliationStatus(StatusKind.MISSING, 6, "6PC").label == "Missing (6PC)"
        assert ReconciliationStatus(StatusKind.EXTRA, 6, "6PC").label == "Extra (6PC)"

    def test_signed_variance(self) -> None:
        assert ReconciliationStatus(StatusKind.MISSING, 6, "6PC").signed_variance == -6
        assert ReconciliationStatus(StatusKind.EXTRA, 6, "6PC").signed_variance == 6
        assert ReconciliationStatus.all_there().signed_variance == 0

    def test_rank_order(self) -> None:
        ordered = sorted(StatusKind, key=STATUS_RANK.get)
        assert ordered == [StatusKind.NOT_COUNTED, StatusKind.ALL_THERE, StatusKind.MISSING, StatusKind.EXTRA]


class TestClassify:
    def test_nothing_entered_is_not_counted_even_for_zero_stock(self) -> None:
        status = classify(QuantityPair(0, 0), CountEntry(), CARTON)
        assert status.kind is StatusKind.NOT_COUNTED
        assert status.variance == 0

    def test_single_unit_exact_match(self) -> None:
        status = classify(QuantityPair(10, 0), CountEntry(counted_primary="10"), KG)
        assert status.kind is StatusKind.ALL_THERE

    def test_dual_missing(self) -> None:
        status = classify(QuantityPair(2, 0), CountEntry("1", "6"), CARTON)
        assert status.kind is StatusKind.MISSING
        assert status.variance == 6
        assert status.variance_text == "6PC"
        assert status.label == "Missing (6PC)"

    def test_dual_extra(self) -> None:
        status = classify(QuantityPair(2, 0), CountEntry("2", "6"), CARTON)
        assert status.kind is StatusKind.EXTRA
        assert status.label == "Extra (6PC)"

    def test_equivalent_mixed_counts_are_all_there(self) -> None:
        """1 CTN + 6 PC and 0 CTN + 18 PC are the same count."""
        system = QuantityPair(1, 6)
        assert classify(system, CountEntry("0", "18"), CARTON).kind is StatusKind.ALL_THERE

    def test_large_variance_renders_mixed_text(self) -> None:
        status = classify(QuantityPair(3, 0), CountEntry("1", "6"), CARTON)
        assert status.variance == 18
        assert status.label == "Missing (1CTN + 6PC)"

    def test_single_unit_ignores_typed_base(self) -> None:
        status = classify(QuantityPair(5, 7), CountEntry("5", "99"), UnitSpec("PC", None, 1))
        assert status.kind is StatusKind.ALL_THERE

    def test_fractional_system_stock_keeps_raw_delta(self) -> None:
        status = classify(QuantityPair(2.5, 0), CountEntry(counted_primary="2"), KG)
        assert status.kind is StatusKind.MISSING
        assert status.variance == 0.5
        assert status.variance_text == "0KG"

    def test_counted_zero_against_stock_is_missing(self) -> None:
        status = classify(QuantityPair(4, 0), CountEntry(counted_primary="0"), KG)
        assert status.label == "Missing (4KG)"
