"""In-memory fakes for testing.

These implement the same abstract interfaces as the production adapters
but keep everything in memory. No file I/O, no side effects.
"""

from __future__ import annotations

from decimal import Decimal

from eventquote.domain.model.value_objects import Money
from eventquote.domain.repository.tax_rate_repository import TaxRateRepository
from eventquote.domain.service.tax import FlatRateTax, TaxCalculator


class FakeTaxRateRepository(TaxRateRepository):

    def __init__(self, rates: dict[str, str] | None = None) -> None:
        self._store: dict[str, FlatRateTax] = {
            location.lower(): FlatRateTax(rate=Decimal(rate), description=f"{location} Tax")
            for location, rate in (rates or {}).items()
        }
        self.lookups: list[str] = []

    def get_by_location(self, location: str) -> FlatRateTax | None:
        self.lookups.append(location)
        return self._store.get(location.lower())


class RecordingTaxCalculator(TaxCalculator):
    """Charges a fixed amount and remembers every base it was asked about."""

    def __init__(self, amount: str = "0") -> None:
        self._amount = Money.of(amount)
        self.bases: list[Money] = []

    def calculate(self, taxable_base: Money) -> Money:
        self.bases.append(taxable_base)
        return self._amount
