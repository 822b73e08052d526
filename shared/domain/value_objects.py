"""
Common Value Objects

Value objects used across the guesthouse domain:
- Money: Represents monetary amounts with currency
- DateRange: Represents a stay (check-in to check-out, half-open)
- CalendarWindow: Blackout or maintenance days, both ends included
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from shared.domain.base import ValueObject

CENTS = Decimal("0.01")

SUPPORTED_CURRENCIES = ("ZAR", "USD", "EUR", "GBP", "NGN", "GHS", "KES")


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a monetary amount with currency.
    Arithmetic keeps full precision; call rounded() before storing or
    sending an amount anywhere.
    """
    amount: Decimal
    currency: str = 'ZAR'

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")

    def __add__(self, other: 'Money') -> 'Money':
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor) -> 'Money':
        if not isinstance(factor, (int, Decimal)):
            raise TypeError("Money can only be multiplied by int or Decimal")
        return Money(self.amount * factor, self.currency)

    def rounded(self) -> 'Money':
        """Round half-up to whole cents."""
        return Money(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP), self.currency)

    @property
    def minor_units(self) -> int:
        """Amount in cents, as payment gateways expect it."""
        return int((self.rounded().amount * 100).to_integral_value())

    @classmethod
    def from_minor_units(cls, value: int, currency: str = 'ZAR') -> 'Money':
        return cls(Decimal(value) / 100, currency).rounded()

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date (inclusive) to end_date (exclusive).
    A stay from the 1st to the 5th covers the nights of the 1st to the 4th,
    so a stay ending on the 5th and one starting on the 5th do not overlap.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must be before end date ({self.end_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        Examples:
            - DateRange(25, 28) overlaps with DateRange(27, 30) -> True
            - DateRange(25, 28) overlaps with DateRange(28, 31) -> False (adjacent)
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        # Overlap formula: start1 < end2 AND end1 > start2
        return (self.start_date < other.end_date and
                self.end_date > other.start_date)

    def contains(self, check_date: date) -> bool:
        """start_date is inclusive, end_date is exclusive"""
        return self.start_date <= check_date < self.end_date

    @property
    def nights(self) -> int:
        return (self.end_date - self.start_date).days

    def __len__(self) -> int:
        return self.nights

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"


@dataclass(frozen=True)
class CalendarWindow(ValueObject):
    """
    Calendar window value object

    Blackout and maintenance windows as entered by staff: first_day and
    last_day are both included. A window touches a stay when
    checkin <= last_day AND checkout >= first_day, so a stay that checks
    out on the first day of the window is still refused.
    """
    first_day: date
    last_day: date

    def __post_init__(self):
        if self.last_day < self.first_day:
            raise ValueError(f"Window end ({self.last_day}) must not be before its start ({self.first_day})")

    def intersects(self, stay: DateRange) -> bool:
        if not isinstance(stay, DateRange):
            raise TypeError("Can only check a window against a DateRange")
        return stay.start_date <= self.last_day and stay.end_date >= self.first_day

    def __str__(self):
        return f"{self.first_day.isoformat()} - {self.last_day.isoformat()}"
