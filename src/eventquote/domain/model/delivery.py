"""Delivery tiers a vendor offers, and the outcome of checking one order."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from eventquote.domain.exceptions import InvalidDistance
from eventquote.domain.model.value_objects import Money


class DeliveryIneligibility(Enum):
    OUT_OF_SERVICE_AREA = "OUT_OF_SERVICE_AREA"
    BELOW_MINIMUM = "BELOW_MINIMUM"


@dataclass(frozen=True)
class DeliveryRangeFee:
    """One distance tier: deliveries up to ``max_distance_miles`` cost ``fee``."""

    range_label: str
    max_distance_miles: Decimal
    fee: Money

    def __post_init__(self) -> None:
        if self.max_distance_miles < 0:
            raise InvalidDistance(
                f"Delivery range '{self.range_label}' has a negative bound"
            )


@dataclass(frozen=True)
class DeliveryOptions:
    ranges: tuple[DeliveryRangeFee, ...] = ()
    delivery_minimum: Money | None = None


@dataclass(frozen=True)
class DeliveryResolution:
    """Result of a delivery check.

    ``eligible`` is the overall answer.  ``distance_eligible`` is reported
    separately so callers can tell "too far" apart from "order too small".
    """

    eligible: bool
    fee: Money
    distance_eligible: bool
    matched_range: DeliveryRangeFee | None = None
    reason: DeliveryIneligibility | None = None
    minimum_required: Money | None = None
