"""
Tariff computation

A tariff is ``unit_price x units`` plus IVA, rounded to whole pesos.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from shared.domain.value_objects import DEFAULT_CURRENCY, Money


class TariffError(ValueError):
    pass


@dataclass(frozen=True)
class Tariff:
    unit_price: Decimal
    units: int
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    currency: str = DEFAULT_CURRENCY

    @classmethod
    def compute(cls, unit_price, units: int, tax_percent) -> "Tariff":
        unit_price = Decimal(str(unit_price))
        subtotal = Money(unit_price * units).rounded()
        tax = subtotal.percent(tax_percent)
        return cls(
            unit_price=unit_price,
            units=units,
            subtotal=subtotal.amount,
            tax=tax.amount,
            total=(subtotal + tax).amount,
        )

    @classmethod
    def from_amounts(cls, *, unit_price, units: int, subtotal, tax, total=None) -> "Tariff":
        """Build a caller-supplied tariff, checking it adds up."""
        unit_price = Decimal(str(unit_price))
        subtotal = Decimal(str(subtotal))
        tax = Decimal(str(tax))
        total = subtotal + tax if total is None else Decimal(str(total))
        if min(unit_price, subtotal, tax, total) < 0:
            raise TariffError("Los montos de la tarifa no pueden ser negativos.")
        if total != subtotal + tax:
            raise TariffError("El total de la tarifa debe ser subtotal + impuestos.")
        return cls(unit_price=unit_price, units=units, subtotal=subtotal, tax=tax, total=total)

    def as_fields(self) -> dict:
        return {
            "unit_price": self.unit_price,
            "units": self.units,
            "subtotal": self.subtotal,
            "tax": self.tax,
            "total": self.total,
            "currency": self.currency,
        }
