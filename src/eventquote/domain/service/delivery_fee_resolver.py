"""Domain service: Delivery fee resolution.

Given how far the event is from the vendor and the vendor's distance
tiers, finds the tier that applies.  Ineligibility (too far, order too
small) is an answer, not an error: the caller decides whether to hide
delivery or show a message.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from decimal import Decimal

from eventquote.domain.exceptions import InvalidDistance
from eventquote.domain.model.delivery import (
    DeliveryIneligibility,
    DeliveryRangeFee,
    DeliveryResolution,
)
from eventquote.domain.model.value_objects import Money, to_decimal

logger = logging.getLogger(__name__)


class DeliveryFeeResolver:

    def resolve(
        self,
        distance_miles: Decimal | int | str,
        ranges: Sequence[DeliveryRangeFee],
        order_subtotal: Money,
        delivery_minimum: Money | None = None,
    ) -> DeliveryResolution:
        """Match ``distance_miles`` against ``ranges``.

        Ranges are checked nearest first, whatever order the vendor entered
        them in; the first one reaching the distance wins.  A vendor with no
        ranges delivers for free.
        """
        distance = to_decimal(distance_miles)
        if distance < 0:
            raise InvalidDistance(f"Delivery distance cannot be negative, got {distance}")

        matched = self.match_range(distance, ranges)
        if ranges and matched is None:
            logger.debug("No delivery range reaches %s miles", distance)
            return DeliveryResolution(
                eligible=False,
                fee=Money.zero(order_subtotal.currency),
                distance_eligible=False,
                reason=DeliveryIneligibility.OUT_OF_SERVICE_AREA,
            )

        fee = matched.fee if matched is not None else Money.zero(order_subtotal.currency)

        if delivery_minimum is not None and order_subtotal < delivery_minimum:
            logger.debug(
                "Order subtotal %s below delivery minimum %s", order_subtotal, delivery_minimum
            )
            return DeliveryResolution(
                eligible=False,
                fee=Money.zero(order_subtotal.currency),
                distance_eligible=True,
                matched_range=matched,
                reason=DeliveryIneligibility.BELOW_MINIMUM,
                minimum_required=delivery_minimum,
            )

        logger.debug(
            "Distance %s miles matched range %s, fee %s",
            distance,
            matched.range_label if matched else "(none)",
            fee,
        )
        return DeliveryResolution(
            eligible=True,
            fee=fee,
            distance_eligible=True,
            matched_range=matched,
        )

    @staticmethod
    def match_range(
        distance: Decimal, ranges: Sequence[DeliveryRangeFee]
    ) -> DeliveryRangeFee | None:
        for delivery_range in sorted(ranges, key=lambda r: r.max_distance_miles):
            if delivery_range.max_distance_miles >= distance:
                return delivery_range
        return None
