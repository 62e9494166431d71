"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Amounts are formatted
strings, e.g. "$1,250.00".
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BreakdownLineDTO:
    name: str
    quantity: int
    unit_price: str
    total: str
    included: bool
    unpriced: bool


@dataclass(frozen=True)
class ServiceLineDTO:
    service_id: str
    service_name: str
    line_total: str
    lines: list[BreakdownLineDTO]


@dataclass(frozen=True)
class AdjustmentDTO:
    label: str
    amount: str
    taxable: bool


@dataclass(frozen=True)
class DeliveryDTO:
    """Output: one delivery check as displayed to the user."""

    eligible: bool
    fee: str
    distance_eligible: bool
    range_label: str | None
    reason: str | None
    minimum_required: str | None


@dataclass(frozen=True)
class OrderTotalsDTO:
    """Output: a priced order as displayed to the user."""

    services: list[ServiceLineDTO]
    services_subtotal: str
    adjustments: list[AdjustmentDTO]
    adjustments_total: str
    service_fee: str
    delivery_fees_total: str
    deliveries: dict[str, DeliveryDTO]
    tax: str
    tax_description: str
    grand_total: str
    grand_total_cents: int  # for payment intents
