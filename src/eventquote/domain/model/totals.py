"""Pricing results returned by the domain services."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from eventquote.domain.model.delivery import DeliveryResolution
from eventquote.domain.model.value_objects import Money


@dataclass(frozen=True)
class BreakdownLine:
    """One priced line for display and audit.

    Informational lines (``included=False``) explain a figure that is
    already part of another line and must not be summed again.
    """

    name: str
    quantity: int
    unit_price: Money
    total: Money
    included: bool = True
    unpriced: bool = False


@dataclass(frozen=True)
class CateringResult:
    subtotal: Money
    lines: tuple[BreakdownLine, ...] = ()


@dataclass(frozen=True)
class ServiceLineResult:
    service_id: str
    service_name: str
    line_total: Money
    lines: tuple[BreakdownLine, ...] = ()


@dataclass(frozen=True)
class AdjustmentLine:
    label: str
    amount: Money
    taxable: bool


@dataclass(frozen=True)
class OrderTotals:
    services_subtotal: Money
    adjustments: tuple[AdjustmentLine, ...]
    adjustments_total: Money
    service_fee: Money
    tax: Money
    delivery_fees_total: Money
    grand_total: Money
    taxable_base: Money
    service_lines: tuple[ServiceLineResult, ...] = ()
    deliveries: Mapping[str, DeliveryResolution] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "deliveries", MappingProxyType(dict(self.deliveries)))
