"""Application service: Price Order use case.

Orchestrates the flow from a raw order payload to display-ready totals:
normalize the payload, pick the tax rate, run the calculator, map the
result to DTOs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from eventquote.application.dto import (
    AdjustmentDTO,
    BreakdownLineDTO,
    DeliveryDTO,
    OrderTotalsDTO,
    ServiceLineDTO,
)
from eventquote.application.order_input_mapper import OrderInputMapper
from eventquote.domain.model.delivery import DeliveryResolution
from eventquote.domain.model.order import ServiceFeeConfig
from eventquote.domain.model.totals import OrderTotals
from eventquote.domain.repository.tax_rate_repository import TaxRateRepository
from eventquote.domain.service.order_totals_calculator import OrderTotalsCalculator
from eventquote.domain.service.tax import FlatRateTax

logger = logging.getLogger(__name__)


class PriceOrderHandler:

    def __init__(
        self,
        tax_rate_repo: TaxRateRepository | None = None,
        default_service_fee: ServiceFeeConfig | None = None,
        calculator: OrderTotalsCalculator | None = None,
    ) -> None:
        self._tax_rate_repo = tax_rate_repo
        self._default_service_fee = default_service_fee or ServiceFeeConfig()
        self._calculator = calculator or OrderTotalsCalculator()
        self._mapper = OrderInputMapper()

    def handle(
        self,
        payload: Mapping[str, Any],
        tax_rate: Decimal | None = None,
        location: str | None = None,
    ) -> OrderTotalsDTO:
        """Price an order payload.

        Steps:
        1. Choose the tax: an explicit rate wins over the payload's
           ``taxRate``, which wins over a lookup of the event location.
        2. Normalize the payload into an OrderInput (rejects bad data).
        3. Compute the totals and return a DTO.
        """
        tax = self._resolve_tax(payload, tax_rate, location)
        order = self._mapper.to_order_input(
            payload,
            tax_calculator=tax,
            service_fee=self._default_service_fee,
        )
        totals = self._calculator.compute(order)

        if order.is_tax_exempt:
            tax_description = "Tax exempt"
        elif tax is None:
            tax_description = "No tax"
        else:
            tax_description = str(tax)
        return self._to_dto(totals, tax_description)

    def _resolve_tax(
        self,
        payload: Mapping[str, Any],
        tax_rate: Decimal | None,
        location: str | None,
    ) -> FlatRateTax | None:
        if tax_rate is None and payload.get("taxRate") is not None:
            tax_rate = payload["taxRate"]
        if tax_rate is not None:
            return FlatRateTax(rate=tax_rate)

        location = location or payload.get("location")
        if not location or self._tax_rate_repo is None:
            return None
        tax = self._tax_rate_repo.get_by_location(location)
        if tax is None:
            logger.warning("No tax rate found for location %r", location)
        return tax

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_dto(totals: OrderTotals, tax_description: str) -> OrderTotalsDTO:
        return OrderTotalsDTO(
            services=[
                ServiceLineDTO(
                    service_id=line.service_id,
                    service_name=line.service_name,
                    line_total=str(line.line_total),
                    lines=[
                        BreakdownLineDTO(
                            name=item.name,
                            quantity=item.quantity,
                            unit_price=str(item.unit_price),
                            total=str(item.total),
                            included=item.included,
                            unpriced=item.unpriced,
                        )
                        for item in line.lines
                    ],
                )
                for line in totals.service_lines
            ],
            services_subtotal=str(totals.services_subtotal),
            adjustments=[
                AdjustmentDTO(label=adj.label, amount=str(adj.amount), taxable=adj.taxable)
                for adj in totals.adjustments
            ],
            adjustments_total=str(totals.adjustments_total),
            service_fee=str(totals.service_fee),
            delivery_fees_total=str(totals.delivery_fees_total),
            deliveries={
                service_id: delivery_to_dto(resolution)
                for service_id, resolution in totals.deliveries.items()
            },
            tax=str(totals.tax),
            tax_description=tax_description,
            grand_total=str(totals.grand_total),
            grand_total_cents=totals.grand_total.cents,
        )


def delivery_to_dto(resolution: DeliveryResolution) -> DeliveryDTO:
    return DeliveryDTO(
        eligible=resolution.eligible,
        fee=str(resolution.fee),
        distance_eligible=resolution.distance_eligible,
        range_label=resolution.matched_range.range_label if resolution.matched_range else None,
        reason=resolution.reason.value if resolution.reason else None,
        minimum_required=(
            str(resolution.minimum_required) if resolution.minimum_required else None
        ),
    )
