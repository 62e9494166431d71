"""Domain service: one line total per selected service.

Each service type has its own pricing shape; this service normalizes all
of them into a ``ServiceLineResult``.  Every branch is a pure function of
the service, its own selections and the order-level guest count.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal

from eventquote.domain.exceptions import InvalidQuantity, ValidationError
from eventquote.domain.model.catalog import PriceType, ServiceType
from eventquote.domain.model.order import ComboItemKey, ItemKey, SelectedService, SelectionKey
from eventquote.domain.model.totals import BreakdownLine, ServiceLineResult
from eventquote.domain.model.value_objects import Money, Quantity
from eventquote.domain.service.catering_price_calculator import CateringPriceCalculator

logger = logging.getLogger(__name__)


class ServiceTotalAggregator:

    def __init__(self, catering_calculator: CateringPriceCalculator | None = None) -> None:
        self._catering = catering_calculator or CateringPriceCalculator()

    def compute(
        self,
        service: SelectedService,
        selections: Mapping[SelectionKey, int],
        guest_count: int = 1,
        item_hours: Mapping[ItemKey, Decimal] | None = None,
    ) -> ServiceLineResult:
        """Price ``service`` from the selections that belong to it.

        ``selections`` may hold keys for every service in the order; only
        those carrying this service's id are considered.
        """
        own = {key: qty for key, qty in selections.items() if key.service_id == service.id}
        hours = {
            key: value
            for key, value in (item_hours or {}).items()
            if key.service_id == service.id
        }

        if service.quoted_total is not None:
            for qty in own.values():
                Quantity(qty)
            logger.debug("Using quoted total %s for '%s'", service.quoted_total, service.name)
            lines: list[BreakdownLine] = [
                BreakdownLine(
                    name=service.name,
                    quantity=1,
                    unit_price=service.quoted_total,
                    total=service.quoted_total,
                )
            ]
        elif service.service_type is ServiceType.CATERING:
            lines = list(self._catering.compute(service.details, own, guest_count).lines)
        else:
            if any(isinstance(key, ComboItemKey) for key in own):
                raise ValidationError(
                    f"Combo selections only apply to catering, not '{service.name}'"
                )
            if service.service_type is ServiceType.VENUE:
                lines = self._price_venue(service, own)
            elif service.service_type is ServiceType.PARTY_RENTAL:
                lines = self._price_rentals(service, own)
            else:
                lines = self._price_staff(service, own, hours)

        line_total = sum(
            (line.total for line in lines if line.included),
            Money.zero(service.base_price.currency),
        )
        logger.debug(
            "Service '%s' (%s) total %s", service.name, service.service_type.value, line_total
        )
        return ServiceLineResult(
            service_id=service.id,
            service_name=service.name,
            line_total=line_total,
            lines=tuple(lines),
        )

    # --- Venue ----------------------------------------------------------------

    def _price_venue(
        self,
        service: SelectedService,
        selections: dict[ItemKey, int],
    ) -> list[BreakdownLine]:
        # Per-person and per-hour venues are billed per booked unit.
        units = 1 if service.price_type is PriceType.FLAT else service.quantity
        total = service.base_price * units
        name = service.name
        if service.price_type is PriceType.PER_HOUR and service.hours is not None:
            if service.hours < 0:
                raise InvalidQuantity(f"Venue hours cannot be negative, got {service.hours}")
            total = service.base_price.multiply_by_ratio(units * service.hours)
            name = f"{service.name} ({service.hours} h)"

        lines = [
            BreakdownLine(
                name=name,
                quantity=units,
                unit_price=service.base_price,
                total=total,
            )
        ]
        for key, raw_qty in selections.items():
            qty = Quantity(raw_qty).value
            if qty == 0:
                continue
            option = service.details.find_option(key.item_id)
            if option is None:
                lines.append(self._unpriced_line(service, key, qty))
                continue
            lines.append(
                BreakdownLine(
                    name=option.name,
                    quantity=qty,
                    unit_price=option.price,
                    total=option.price * qty,
                )
            )
        return lines

    # --- Party rentals --------------------------------------------------------

    def _price_rentals(
        self,
        service: SelectedService,
        selections: dict[ItemKey, int],
    ) -> list[BreakdownLine]:
        lines: list[BreakdownLine] = []
        for key, raw_qty in selections.items():
            qty = Quantity(raw_qty).value
            if qty == 0:
                continue
            item = service.details.find_item(key.item_id)
            if item is None:
                lines.append(self._unpriced_line(service, key, qty))
                continue
            qty = max(qty, item.min_quantity)
            lines.append(
                BreakdownLine(
                    name=item.name,
                    quantity=qty,
                    unit_price=item.price,
                    total=item.price * qty,
                )
            )
        return lines

    # --- Staff ----------------------------------------------------------------

    def _price_staff(
        self,
        service: SelectedService,
        selections: dict[ItemKey, int],
        item_hours: dict[ItemKey, Decimal],
    ) -> list[BreakdownLine]:
        lines: list[BreakdownLine] = []
        for key, raw_qty in selections.items():
            count = Quantity(raw_qty).value
            if count == 0:
                continue
            hours = self._staff_hours(service, item_hours.get(key))

            # Keyed by the service itself: generic staff at the service rate.
            if key.item_id == service.id:
                lines.append(
                    BreakdownLine(
                        name=service.name,
                        quantity=count,
                        unit_price=service.base_price,
                        total=service.base_price.multiply_by_ratio(count * hours),
                    )
                )
                continue

            role = service.details.find_role(key.item_id)
            if role is None:
                lines.append(self._unpriced_line(service, key, count))
                continue

            count = max(count, role.min_quantity)
            if role.price_type is PriceType.PER_HOUR:
                total = role.price.multiply_by_ratio(count * hours)
                name = f"{role.name} ({hours} h)"
            else:
                total = role.price * count
                name = role.name
            lines.append(
                BreakdownLine(name=name, quantity=count, unit_price=role.price, total=total)
            )
        return lines

    @staticmethod
    def _staff_hours(service: SelectedService, role_hours: Decimal | None) -> Decimal:
        minimum = service.details.minimum_hours
        hours = role_hours if role_hours is not None else service.hours
        if hours is None:
            return minimum
        if hours < 0:
            raise InvalidQuantity(f"Staff hours cannot be negative, got {hours}")
        return max(hours, minimum)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _unpriced_line(service: SelectedService, key: ItemKey, qty: int) -> BreakdownLine:
        # TODO: reject once vendor catalogs are validated on save; until then
        # rental and staff lookups are freeform and may miss.
        logger.warning(
            "Item '%s' not found in catalog of '%s'; pricing it at zero",
            key.item_id,
            service.name,
        )
        zero = Money.zero(service.base_price.currency)
        return BreakdownLine(
            name=key.item_id,
            quantity=qty,
            unit_price=zero,
            total=zero,
            unpriced=True,
        )
