"""
Availability Rules

Decides whether a room type can take a stay. The checks run in a fixed
order and stop at the first failure:

1. the room type is active
2. the party fits (guest count <= max guests)
3. the stay length is within [min_stay, max_stay]
4. no blackout window touches the stay (both window ends included)
5. the eligible pool: units in service with no maintenance clash
6. minus units already holding a non-cancelled booking for those nights

Rules 1-4 need only the room type and its blackouts, so callers can
reject a request before loading any inventory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Sequence

from shared.domain.exceptions import InvalidDateRange, ValidationError
from shared.domain.value_objects import DateRange

AVAILABLE_STATUS = "available"


class Rule:
    INACTIVE = "inactive"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    STAY_LENGTH = "stay_length"
    BLACKOUT = "blackout"
    NO_CAPACITY = "no_capacity"


@dataclass(frozen=True)
class Rejection:
    rule: str
    reason: str


@dataclass(frozen=True)
class AvailabilityResult:
    """
    Outcome of an availability check

    `total_units` is the eligible pool size before booked units are
    removed; `units` holds the free units in inventory order.
    """
    available: bool
    available_units: int = 0
    total_units: int = 0
    reason: str = ""
    rule: str = ""
    units: tuple = field(default=(), compare=False, repr=False)

    @classmethod
    def rejected(cls, rejection: Rejection) -> "AvailabilityResult":
        return cls(available=False, reason=rejection.reason, rule=rejection.rule)

    def as_dict(self) -> dict:
        payload = {
            "available": self.available,
            "availableUnits": self.available_units,
            "totalUnits": self.total_units,
        }
        if self.reason:
            payload["reason"] = self.reason
        if self.rule:
            payload["rule"] = self.rule
        return payload


def stay_dates(checkin: date | None, checkout: date | None) -> DateRange:
    """Validate raw check-in/check-out dates and return the stay range."""

    if checkin is None or checkout is None:
        raise ValidationError(
            "Check-in and check-out dates are required.",
            errors={
                key: ["This field is required."]
                for key, value in (("checkinDate", checkin), ("checkoutDate", checkout))
                if value is None
            },
        )
    if checkin >= checkout:
        raise InvalidDateRange(errors={"checkoutDate": ["Check-out date must be after check-in date."]})
    return DateRange(checkin, checkout)


def validate_guest_count(guest_count: int) -> None:
    if guest_count is None or guest_count < 1:
        raise ValidationError(
            "At least one guest is required.",
            errors={"numberOfGuests": ["Ensure this value is greater than or equal to 1."]},
        )


def check_room_type_rules(room_type, stay: DateRange, guest_count: int, blackouts: Iterable) -> Rejection | None:
    """Rules 1-4. Returns the first failing rule, or None."""

    if not room_type.is_active:
        return Rejection(Rule.INACTIVE, "This room type is not currently available for booking.")

    if guest_count > room_type.max_guests:
        return Rejection(
            Rule.CAPACITY_EXCEEDED,
            f"This room type can only accommodate {room_type.max_guests} guests.",
        )

    nights = stay.nights
    if nights < room_type.min_stay:
        return Rejection(Rule.STAY_LENGTH, f"Minimum stay is {room_type.min_stay} nights.")
    if nights > room_type.max_stay:
        return Rejection(Rule.STAY_LENGTH, f"Maximum stay is {room_type.max_stay} nights.")

    for blackout in blackouts:
        if blackout.dates.intersects(stay):
            reason = "Room type is not available for the selected dates due to a blackout period"
            if blackout.reason:
                reason = f"{reason} ({blackout.reason})"
            return Rejection(Rule.BLACKOUT, f"{reason}.")

    return None


def is_unit_eligible(unit, stay: DateRange) -> bool:
    """A unit can take a new booking only when in service and not under maintenance for the stay."""

    if unit.status != AVAILABLE_STATUS:
        return False
    window = unit.maintenance_window
    return window is None or not window.intersects(stay)


def eligible_units(units: Iterable, stay: DateRange) -> list:
    return [unit for unit in units if is_unit_eligible(unit, stay)]


def free_units(pool: Sequence, occupied_unit_ids: Iterable[int]) -> list:
    occupied = set(occupied_unit_ids)
    return [unit for unit in pool if unit.pk not in occupied]


def assess_pool(units: Iterable, stay: DateRange, occupied_unit_ids: Iterable[int]) -> AvailabilityResult:
    """Rules 5-7 over already loaded units and the ids of booked units."""

    pool = eligible_units(units, stay)
    free = free_units(pool, occupied_unit_ids)
    if not free:
        return AvailabilityResult(
            available=False,
            available_units=0,
            total_units=len(pool),
            reason="No rooms of this type are available for the selected dates.",
            rule=Rule.NO_CAPACITY,
        )
    return AvailabilityResult(
        available=True,
        available_units=len(free),
        total_units=len(pool),
        units=tuple(free),
    )
