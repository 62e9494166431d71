"""Domain service: Order totals.

The single place where an order's grand total is produced, so booking,
invoice, proposal and payment views all agree on the same figure.

Order of work:
  1. price every service and resolve its delivery tier;
  2. custom adjustments, all computed from the same services subtotal;
  3. platform service fee (unless waived);
  4. tax on services plus taxable adjustments (unless exempt);
  5. grand total = sum of the above.

Every term is rounded once on its own, so the grand total is an exact sum
of the figures shown to the host.  Any error aborts the whole calculation.
"""

from __future__ import annotations

import logging

from eventquote.domain.exceptions import InvalidAdjustment, ValidationError
from eventquote.domain.model.delivery import DeliveryResolution
from eventquote.domain.model.order import (
    AdjustmentKind,
    AdjustmentMode,
    CustomAdjustment,
    OrderInput,
    ServiceFeeConfig,
    ServiceFeeType,
)
from eventquote.domain.model.totals import AdjustmentLine, OrderTotals, ServiceLineResult
from eventquote.domain.model.value_objects import Money, to_decimal
from eventquote.domain.service.delivery_fee_resolver import DeliveryFeeResolver
from eventquote.domain.service.service_total_aggregator import ServiceTotalAggregator

logger = logging.getLogger(__name__)


class OrderTotalsCalculator:

    def __init__(
        self,
        aggregator: ServiceTotalAggregator | None = None,
        delivery_resolver: DeliveryFeeResolver | None = None,
        currency: str = "USD",
    ) -> None:
        self._aggregator = aggregator or ServiceTotalAggregator()
        self._delivery = delivery_resolver or DeliveryFeeResolver()
        self._currency = currency

    def compute(self, order: OrderInput) -> OrderTotals:
        zero = Money.zero(self._currency)

        # Step 1: services and delivery
        service_lines: list[ServiceLineResult] = []
        deliveries: dict[str, DeliveryResolution] = {}
        services_subtotal = zero
        delivery_fees_total = zero

        for service in order.services:
            line = self._aggregator.compute(
                service, order.selected_items, order.guest_count, order.item_hours
            )
            service_lines.append(line)
            services_subtotal = services_subtotal + line.line_total

            distance = order.distance_for(service.id)
            if service.delivery is None or distance is None:
                continue
            resolution = self._delivery.resolve(
                distance,
                service.delivery.ranges,
                line.line_total,
                service.delivery.delivery_minimum,
            )
            deliveries[service.id] = resolution
            if resolution.eligible:
                delivery_fees_total = delivery_fees_total + resolution.fee

        # Step 2: adjustments
        adjustment_lines = tuple(
            AdjustmentLine(
                label=adj.label,
                amount=self.adjustment_amount(adj, services_subtotal),
                taxable=adj.taxable,
            )
            for adj in order.adjustments
        )
        adjustments_total = sum((a.amount for a in adjustment_lines), zero)
        taxable_adjustments = sum((a.amount for a in adjustment_lines if a.taxable), zero)

        # Step 3: service fee
        if order.is_service_fee_waived:
            service_fee = zero
        else:
            service_fee = self.service_fee(order.service_fee, services_subtotal)

        # Step 4: tax
        taxable_base = services_subtotal + taxable_adjustments
        if taxable_base.is_negative():
            taxable_base = zero
        if order.is_tax_exempt or order.tax_calculator is None:
            tax = zero
        else:
            tax = order.tax_calculator.calculate(taxable_base)

        # Step 5: grand total
        grand_total = services_subtotal + adjustments_total + service_fee + delivery_fees_total + tax

        logger.debug(
            "Order totals: services=%s adjustments=%s fee=%s delivery=%s tax=%s total=%s",
            services_subtotal,
            adjustments_total,
            service_fee,
            delivery_fees_total,
            tax,
            grand_total,
        )
        return OrderTotals(
            services_subtotal=services_subtotal,
            adjustments=adjustment_lines,
            adjustments_total=adjustments_total,
            service_fee=service_fee,
            tax=tax,
            delivery_fees_total=delivery_fees_total,
            grand_total=grand_total,
            taxable_base=taxable_base,
            service_lines=tuple(service_lines),
            deliveries=deliveries,
        )

    # --- Pricing rules --------------------------------------------------------

    @staticmethod
    def adjustment_amount(adjustment: CustomAdjustment, services_subtotal: Money) -> Money:
        """Signed contribution of one adjustment.

        Percentages always apply to the services subtotal, never to a total
        that already includes another adjustment.
        """
        if not isinstance(adjustment.kind, AdjustmentKind):
            raise InvalidAdjustment(
                f"Adjustment '{adjustment.label}' has unknown kind {adjustment.kind!r}"
            )
        if not isinstance(adjustment.mode, AdjustmentMode):
            raise InvalidAdjustment(
                f"Adjustment '{adjustment.label}' has unknown mode {adjustment.mode!r}"
            )
        try:
            value = to_decimal(adjustment.value)
        except ValidationError as exc:
            raise InvalidAdjustment(
                f"Adjustment '{adjustment.label}' has invalid value {adjustment.value!r}"
            ) from exc
        if value < 0:
            raise InvalidAdjustment(
                f"Adjustment '{adjustment.label}' value cannot be negative; use discount mode"
            )

        if adjustment.kind is AdjustmentKind.PERCENTAGE:
            amount = services_subtotal.percent(value)
        else:
            amount = Money.of(value, services_subtotal.currency)

        if adjustment.mode is AdjustmentMode.DISCOUNT:
            amount = -amount
        return amount

    @staticmethod
    def service_fee(config: ServiceFeeConfig, services_subtotal: Money) -> Money:
        if config.fee_type is ServiceFeeType.PERCENTAGE:
            return services_subtotal.percent(config.percentage)
        if config.fee_type is ServiceFeeType.FIXED:
            return config.fixed
        return services_subtotal.percent(config.percentage) + config.fixed
