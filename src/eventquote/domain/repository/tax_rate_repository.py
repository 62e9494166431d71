from __future__ import annotations

from abc import ABC, abstractmethod

from eventquote.domain.service.tax import FlatRateTax


class TaxRateRepository(ABC):
    """Abstract lookup of the sales tax rate that applies at a location."""

    @abstractmethod
    def get_by_location(self, location: str) -> FlatRateTax | None:
        ...
