"""Tests for Money and DateRange."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from shared.domain.value_objects import CalendarWindow, DateRange, Money


def test_money_rounds_half_up_to_cents() -> None:
    assert Money(Decimal("112.485")).rounded().amount == Decimal("112.49")
    assert Money(Decimal("0.005")).rounded().amount == Decimal("0.01")
    assert Money(Decimal("2550.00")).minor_units == 255000
    assert Money.from_minor_units(420050) == Money(Decimal("4200.50"))


def test_money_rejects_bad_values() -> None:
    with pytest.raises(ValueError):
        Money(Decimal("-1"))
    with pytest.raises(ValueError):
        Money(Decimal("1"), "XYZ")
    with pytest.raises(ValueError):
        Money(Decimal("1"), "ZAR") + Money(Decimal("1"), "USD")
    with pytest.raises(TypeError):
        Money(Decimal("1")) * 1.5


def test_money_formatting() -> None:
    assert str(Money(Decimal("4350"))) == "4,350.00 ZAR"


def test_adjacent_stays_do_not_overlap() -> None:
    first = DateRange(date(2025, 3, 1), date(2025, 3, 5))

    assert not first.overlaps_with(DateRange(date(2025, 3, 5), date(2025, 3, 7)))
    assert first.overlaps_with(DateRange(date(2025, 3, 4), date(2025, 3, 7)))
    assert first.overlaps_with(DateRange(date(2025, 2, 1), date(2025, 4, 1)))
    assert first.nights == 4
    assert first.contains(date(2025, 3, 1))
    assert not first.contains(date(2025, 3, 5))


def test_calendar_window_includes_both_edges() -> None:
    blackout = CalendarWindow(date(2025, 3, 10), date(2025, 3, 12))

    assert blackout.intersects(DateRange(date(2025, 3, 12), date(2025, 3, 13)))
    assert blackout.intersects(DateRange(date(2025, 3, 8), date(2025, 3, 10)))
    assert not blackout.intersects(DateRange(date(2025, 3, 13), date(2025, 3, 15)))
    assert not blackout.intersects(DateRange(date(2025, 3, 7), date(2025, 3, 9)))
    with pytest.raises(ValueError):
        CalendarWindow(date(2025, 3, 12), date(2025, 3, 10))


def test_empty_range_is_rejected() -> None:
    with pytest.raises(ValueError):
        DateRange(date(2025, 3, 5), date(2025, 3, 5))
