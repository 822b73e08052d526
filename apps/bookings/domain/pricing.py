"""
Pricing Calculator

total = base price x nights x seasonal multiplier, rounded half-up to
cents. The multiplier comes from the first active seasonal entry (in list
order) whose inclusive window contains the check-in date; overlapping
seasons do not stack.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable

from shared.domain.value_objects import Money

NO_MULTIPLIER = Decimal("1")


@dataclass(frozen=True)
class PriceQuote:
    nights: int
    nightly_rate: Money
    multiplier: Decimal
    total: Money
    seasonal_rule: str = ""

    def as_dict(self) -> dict:
        return {
            "nights": self.nights,
            "nightlyRate": f"{self.nightly_rate.rounded().amount:.2f}",
            "multiplier": str(self.multiplier.normalize()),
            "seasonalRule": self.seasonal_rule,
            "totalAmount": f"{self.total.amount:.2f}",
            "currency": self.total.currency,
        }


def seasonal_multiplier(seasons: Iterable, checkin: date) -> tuple[Decimal, str]:
    """Return (multiplier, season name) for the first active season containing checkin."""

    for season in seasons:
        if season.is_active and season.start_date <= checkin <= season.end_date:
            return Decimal(str(season.price_multiplier)), season.name
    return NO_MULTIPLIER, ""


def compute_total(room_type, checkin: date, nights: int, seasons: Iterable | None = None) -> PriceQuote:
    """
    Price a stay of `nights` nights starting on `checkin`

    `seasons` defaults to the room type's own seasonal pricing; pass a
    list to avoid a query when it is already loaded.
    """
    if nights < 1:
        raise ValueError("A stay must be at least one night")
    if seasons is None:
        seasons = room_type.seasonal_pricing.all()

    multiplier, rule_name = seasonal_multiplier(seasons, checkin)
    base = Money(room_type.price, room_type.currency)
    total = (base * nights * multiplier).rounded()
    return PriceQuote(
        nights=nights,
        nightly_rate=base * multiplier,
        multiplier=multiplier,
        total=total,
        seasonal_rule=rule_name,
    )
