"""
Common Value Objects

Value objects used across the booking contexts:
- Money: Amounts in Colombian pesos, rounded to whole pesos
- DateRange: Half-open range of dates (check-in to check-out)
- TimeRange: Hours of the day occupied by an event in a hall
"""

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal, ROUND_HALF_UP

from shared.domain.base import ValueObject

DEFAULT_CURRENCY = 'COP'


def round_pesos(value) -> Decimal:
    """Round half-up to whole pesos."""
    return Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    All amounts handled by the engine are COP; there is no conversion.
    """
    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if self.currency != DEFAULT_CURRENCY:
            raise ValueError(f"Unsupported currency: {self.currency}")

    def __add__(self, other: 'Money') -> 'Money':
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        return Money(self.amount + other.amount, self.currency)

    def rounded(self) -> 'Money':
        return Money(round_pesos(self.amount), self.currency)

    def percent(self, pct) -> 'Money':
        """Return ``pct`` percent of this amount, rounded to whole pesos."""
        return Money(round_pesos(self.amount * Decimal(str(pct)) / Decimal('100')), self.currency)

    def __str__(self):
        return f"${self.amount:,.0f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date (inclusive) to end_date (exclusive).
    The check-out day is not occupied, so back-to-back stays do not clash.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(
                f"Start date ({self.start_date}) must be before end date ({self.end_date})"
            )

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        Examples:
            - DateRange(25, 28) overlaps with DateRange(27, 30) -> True
            - DateRange(25, 28) overlaps with DateRange(28, 31) -> False (adjacent)
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")
        return self.start_date < other.end_date and other.start_date < self.end_date

    @property
    def nights(self) -> int:
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{self.start_date.strftime('%d/%m/%Y')} - {self.end_date.strftime('%d/%m/%Y')}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """Hours of a day, start inclusive and end exclusive."""
    start: time
    end: time

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time ({self.start}) must be before end time ({self.end})")

    def overlaps_with(self, other: 'TimeRange') -> bool:
        return self.start < other.end and other.start < self.end

    def __str__(self):
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"
