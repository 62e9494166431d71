"""Tax calculation port.

Finding the right rate for a jurisdiction is somebody else's job; the
calculator is handed a ``TaxCalculator`` and only applies it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from eventquote.domain.exceptions import ValidationError
from eventquote.domain.model.value_objects import Money, to_decimal


class TaxCalculator(ABC):

    @abstractmethod
    def calculate(self, taxable_base: Money) -> Money:
        """Return the tax owed on ``taxable_base``."""
        ...


@dataclass(frozen=True)
class FlatRateTax(TaxCalculator):
    """A single rate, expressed as a fraction (``0.0875`` is 8.75 %)."""

    rate: Decimal
    description: str = "Sales Tax"
    jurisdiction: str = ""

    def __post_init__(self) -> None:
        rate = to_decimal(self.rate)
        if rate < 0 or rate >= 1:
            raise ValidationError(f"Tax rate must be a fraction between 0 and 1, got {rate}")
        object.__setattr__(self, "rate", rate)

    def calculate(self, taxable_base: Money) -> Money:
        return taxable_base.multiply_by_ratio(self.rate)

    def __str__(self) -> str:
        return f"{self.description} ({self.rate * 100:.3f}%)"
