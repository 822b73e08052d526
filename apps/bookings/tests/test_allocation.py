"""Unit tests for the availability rules and unit selection, without a database."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import SimpleNamespace

import pytest

from apps.bookings.domain.availability import (
    Rule,
    assess_pool,
    check_room_type_rules,
    is_unit_eligible,
    stay_dates,
    validate_guest_count,
)
from apps.bookings.domain.selection import GuestPreferences, select_unit
from shared.domain.exceptions import InvalidDateRange, ValidationError
from shared.domain.value_objects import CalendarWindow, DateRange


@dataclass
class FakeUnit:
    pk: int
    floor: str = ""
    status: str = "available"
    special_features: list = field(default_factory=list)
    maintenance_start_date: date | None = None
    maintenance_end_date: date | None = None

    @property
    def maintenance_window(self):
        if self.maintenance_start_date is None or self.maintenance_end_date is None:
            return None
        return CalendarWindow(self.maintenance_start_date, self.maintenance_end_date)

    def has_feature(self, tag: str) -> bool:
        return tag.strip().lower() in [feature.lower() for feature in self.special_features]


def room_type(**overrides):
    values = {"is_active": True, "max_guests": 4, "min_stay": 1, "max_stay": 30}
    values.update(overrides)
    return SimpleNamespace(**values)


def blackout(start: date, end: date, reason: str = ""):
    return SimpleNamespace(dates=CalendarWindow(start, end), reason=reason)


STAY = DateRange(date(2024, 3, 2), date(2024, 3, 4))


def test_stay_dates_rejects_checkout_not_after_checkin() -> None:
    with pytest.raises(InvalidDateRange):
        stay_dates(date(2024, 3, 5), date(2024, 3, 5))
    with pytest.raises(InvalidDateRange):
        stay_dates(date(2024, 3, 5), date(2024, 3, 1))


def test_stay_dates_reports_missing_fields() -> None:
    with pytest.raises(ValidationError) as excinfo:
        stay_dates(None, date(2024, 3, 5))
    assert set(excinfo.value.errors) == {"checkinDate"}


def test_guest_count_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        validate_guest_count(0)
    validate_guest_count(1)


def test_inactive_room_type_is_checked_first() -> None:
    rejection = check_room_type_rules(room_type(is_active=False, max_guests=1), STAY, 5, [])
    assert rejection is not None
    assert rejection.rule == Rule.INACTIVE


def test_capacity_is_checked_before_stay_length() -> None:
    rejection = check_room_type_rules(room_type(max_guests=4, min_stay=5), STAY, 5, [])
    assert rejection.rule == Rule.CAPACITY_EXCEEDED
    assert rejection.reason == "This room type can only accommodate 4 guests."


def test_stay_length_bounds() -> None:
    one_night = DateRange(date(2024, 3, 2), date(2024, 3, 3))
    too_short = check_room_type_rules(room_type(min_stay=2), one_night, 1, [])
    assert too_short.rule == Rule.STAY_LENGTH
    assert "Minimum stay is 2 nights" in too_short.reason

    too_long = check_room_type_rules(room_type(max_stay=1), STAY, 1, [])
    assert too_long.rule == Rule.STAY_LENGTH
    assert "Maximum stay is 1 nights" in too_long.reason


def test_blackout_window_includes_both_edges() -> None:
    blackouts = [blackout(date(2024, 3, 10), date(2024, 3, 12), reason="Staff holiday")]

    starts_on_last_day = DateRange(date(2024, 3, 12), date(2024, 3, 14))
    rejection = check_room_type_rules(room_type(), starts_on_last_day, 1, blackouts)
    assert rejection.rule == Rule.BLACKOUT
    assert "Staff holiday" in rejection.reason

    leaves_on_first_day = DateRange(date(2024, 3, 8), date(2024, 3, 10))
    assert check_room_type_rules(room_type(), leaves_on_first_day, 1, blackouts).rule == Rule.BLACKOUT

    leaves_day_before = DateRange(date(2024, 3, 7), date(2024, 3, 9))
    assert check_room_type_rules(room_type(), leaves_day_before, 1, blackouts) is None

    after = DateRange(date(2024, 3, 13), date(2024, 3, 15))
    assert check_room_type_rules(room_type(), after, 1, blackouts) is None


def test_units_out_of_service_are_not_eligible() -> None:
    assert is_unit_eligible(FakeUnit(1), STAY)
    assert not is_unit_eligible(FakeUnit(2, status="maintenance"), STAY)
    assert not is_unit_eligible(FakeUnit(3, status="cleaning"), STAY)
    assert not is_unit_eligible(FakeUnit(4, status="occupied"), STAY)


def test_maintenance_window_includes_both_edges() -> None:
    ends_on_checkin = FakeUnit(1, maintenance_start_date=date(2024, 2, 28), maintenance_end_date=date(2024, 3, 2))
    assert not is_unit_eligible(ends_on_checkin, STAY)

    starts_on_checkout = FakeUnit(2, maintenance_start_date=date(2024, 3, 4), maintenance_end_date=date(2024, 3, 6))
    assert not is_unit_eligible(starts_on_checkout, STAY)

    starts_after_checkout = FakeUnit(3, maintenance_start_date=date(2024, 3, 5), maintenance_end_date=date(2024, 3, 6))
    assert is_unit_eligible(starts_after_checkout, STAY)

    ended_before_checkin = FakeUnit(4, maintenance_start_date=date(2024, 2, 25), maintenance_end_date=date(2024, 3, 1))
    assert is_unit_eligible(ended_before_checkin, STAY)


def test_assess_pool_counts_eligible_and_free_units() -> None:
    units = [FakeUnit(1), FakeUnit(2), FakeUnit(3, status="maintenance")]

    result = assess_pool(units, STAY, occupied_unit_ids={1})

    assert result.available
    assert result.available_units == 1
    assert result.total_units == 2
    assert [unit.pk for unit in result.units] == [2]


def test_assess_pool_without_free_units() -> None:
    result = assess_pool([FakeUnit(1)], STAY, occupied_unit_ids={1})

    assert not result.available
    assert result.rule == Rule.NO_CAPACITY
    assert result.as_dict() == {
        "available": False,
        "availableUnits": 0,
        "totalUnits": 1,
        "reason": "No rooms of this type are available for the selected dates.",
        "rule": Rule.NO_CAPACITY,
    }


def test_floor_preference_picks_matching_unit() -> None:
    pool = [FakeUnit(1, floor="1"), FakeUnit(2, floor="3"), FakeUnit(3, floor="2")]

    chosen = select_unit(pool, GuestPreferences.from_dict({"floor": 3}))

    assert chosen.pk == 2


def test_floor_beats_view_and_view_beats_accessibility() -> None:
    pool = [
        FakeUnit(1, floor="1", special_features=["accessible"]),
        FakeUnit(2, floor="2", special_features=["Garden"]),
        FakeUnit(3, floor="3"),
    ]

    prefs = GuestPreferences(floor="3", view="garden", accessibility=True)
    assert select_unit(pool, prefs).pk == 3

    prefs = GuestPreferences(view="garden", accessibility=True)
    assert select_unit(pool, prefs).pk == 2

    prefs = GuestPreferences(accessibility=True)
    assert select_unit(pool, prefs).pk == 1


def test_unmatched_preference_falls_through() -> None:
    pool = [FakeUnit(1, floor="1"), FakeUnit(2, floor="2", special_features=["sea"])]

    prefs = GuestPreferences(floor="9", view="sea")

    assert select_unit(pool, prefs).pk == 2


def test_default_is_first_unit_and_empty_pool_is_none() -> None:
    pool = [FakeUnit(5), FakeUnit(6)]
    assert select_unit(pool).pk == 5
    assert select_unit(pool, GuestPreferences(smoking=True)).pk == 5
    assert select_unit([]) is None


def test_preferences_from_dict_normalizes_values() -> None:
    prefs = GuestPreferences.from_dict({"floor": None, "view": " Mountain ", "smoking": 1})

    assert prefs == GuestPreferences(floor="", view="Mountain", accessibility=False, smoking=True)
    assert GuestPreferences.from_dict(None) == GuestPreferences()
