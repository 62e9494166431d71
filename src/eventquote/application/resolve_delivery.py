"""Application service: Resolve Delivery use case (query)."""

from __future__ import annotations

from decimal import Decimal

from eventquote.application.dto import DeliveryDTO
from eventquote.application.price_order import delivery_to_dto
from eventquote.domain.model.delivery import DeliveryRangeFee
from eventquote.domain.model.value_objects import Money
from eventquote.domain.service.delivery_fee_resolver import DeliveryFeeResolver


class ResolveDeliveryHandler:

    def __init__(self, resolver: DeliveryFeeResolver | None = None) -> None:
        self._resolver = resolver or DeliveryFeeResolver()

    def handle(
        self,
        distance_miles: Decimal,
        ranges: list[tuple[Decimal, str]],
        subtotal: str = "0",
        minimum: str | None = None,
    ) -> DeliveryDTO:
        """Check one delivery.

        ``ranges`` holds ``(max_miles, fee)`` pairs as entered by a vendor.
        """
        tiers = [
            DeliveryRangeFee(
                range_label=f"up to {max_miles} miles",
                max_distance_miles=max_miles,
                fee=Money.of(fee),
            )
            for max_miles, fee in ranges
        ]
        resolution = self._resolver.resolve(
            distance_miles,
            tiers,
            Money.of(subtotal),
            Money.of(minimum) if minimum is not None else None,
        )
        return delivery_to_dto(resolution)
