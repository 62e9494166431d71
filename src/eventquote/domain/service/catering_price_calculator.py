"""Domain service: Catering price calculation.

Prices one catering service from the vendor's menu and the host's
selections:

- menu items are ``price x quantity``, times the guest count when priced
  per person;
- a combo is ``base_price_per_person x combos ordered`` plus every chosen
  category item's upcharge once per guest.  Combos ordered is the total
  quantity picked in the combo's primary category (e.g. 30 chicken + 20
  beef = 50), falling back to the quantity selected for the combo itself,
  and never less than one once anything in the combo is selected.

Category item prices are listed for the host to see but are already
covered by the combo's base price, so those lines are informational.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from eventquote.domain.exceptions import InvalidGuestCount, UnknownMenuItem
from eventquote.domain.model.catalog import CateringDetails, Combo, PriceType
from eventquote.domain.model.order import ComboItemKey, SelectionKey
from eventquote.domain.model.totals import BreakdownLine, CateringResult
from eventquote.domain.model.value_objects import Money, Quantity

logger = logging.getLogger(__name__)


class CateringPriceCalculator:

    def compute(
        self,
        details: CateringDetails,
        selections: Mapping[SelectionKey, int],
        guest_count: int,
    ) -> CateringResult:
        """Compute the subtotal of one catering service.

        Raises InvalidGuestCount, InvalidQuantity or UnknownMenuItem.
        No partial result is returned.
        """
        if isinstance(guest_count, bool) or not isinstance(guest_count, int) or guest_count < 1:
            raise InvalidGuestCount(f"Guest count must be at least 1, got {guest_count!r}")

        lines: list[BreakdownLine] = []
        combo_quantities: dict[str, int] = {}
        combo_choices: dict[str, list[tuple[ComboItemKey, int]]] = {}

        for key, raw_quantity in selections.items():
            quantity = Quantity(raw_quantity).value
            if quantity == 0:
                continue

            if isinstance(key, ComboItemKey):
                self._assert_combo_choice_exists(details, key)
                combo_choices.setdefault(key.combo_id, []).append((key, quantity))
                continue

            menu_item = details.find_menu_item(key.item_id)
            if menu_item is not None:
                total = menu_item.price * quantity
                if menu_item.price_type is PriceType.PER_PERSON:
                    total = total * guest_count
                lines.append(
                    BreakdownLine(
                        name=menu_item.name,
                        quantity=quantity,
                        unit_price=menu_item.price,
                        total=total,
                    )
                )
                continue

            if details.find_combo(key.item_id) is not None:
                combo_quantities[key.item_id] = quantity
                continue

            raise UnknownMenuItem(f"Menu item '{key.item_id}' is not on this vendor's menu")

        for combo in details.combos:
            own_quantity = combo_quantities.get(combo.id, 0)
            choices = combo_choices.get(combo.id, [])
            if own_quantity == 0 and not choices:
                continue
            lines.extend(self._price_combo(combo, own_quantity, choices, guest_count))

        subtotal = sum((line.total for line in lines if line.included), Money.zero())
        logger.debug(
            "Catering subtotal %s for %d guests (%d lines)", subtotal, guest_count, len(lines)
        )
        return CateringResult(subtotal=subtotal, lines=tuple(lines))

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def effective_quantity(
        combo: Combo,
        own_quantity: int,
        choices: list[tuple[ComboItemKey, int]],
    ) -> int:
        """Number of combos ordered."""
        primary = sum(
            quantity
            for key, quantity in choices
            if combo.find_category(key.category_id).counts_combos
        )
        if primary > 0:
            return primary
        return max(own_quantity, 1)

    def _price_combo(
        self,
        combo: Combo,
        own_quantity: int,
        choices: list[tuple[ComboItemKey, int]],
        guest_count: int,
    ) -> list[BreakdownLine]:
        combos_ordered = self.effective_quantity(combo, own_quantity, choices)
        lines = [
            BreakdownLine(
                name=combo.name,
                quantity=combos_ordered,
                unit_price=combo.base_price_per_person,
                total=combo.base_price_per_person * combos_ordered,
            )
        ]

        for key, quantity in choices:
            item = combo.find_category(key.category_id).find_item(key.item_id)
            if not item.additional_charge.is_zero():
                lines.append(
                    BreakdownLine(
                        name=f"{item.name} (upcharge)",
                        quantity=guest_count,
                        unit_price=item.additional_charge,
                        total=item.additional_charge * guest_count,
                    )
                )
            lines.append(
                BreakdownLine(
                    name=item.name,
                    quantity=quantity,
                    unit_price=item.price,
                    total=item.price * quantity,
                    included=False,
                )
            )

        logger.debug(
            "Combo '%s': %d ordered at %s", combo.name, combos_ordered, combo.base_price_per_person
        )
        return lines

    @staticmethod
    def _assert_combo_choice_exists(details: CateringDetails, key: ComboItemKey) -> None:
        combo = details.find_combo(key.combo_id)
        if combo is None:
            raise UnknownMenuItem(f"Combo '{key.combo_id}' is not on this vendor's menu")
        category = combo.find_category(key.category_id)
        if category is None:
            raise UnknownMenuItem(
                f"Combo '{combo.name}' has no category '{key.category_id}'"
            )
        if category.find_item(key.item_id) is None:
            raise UnknownMenuItem(
                f"Category '{category.name}' of combo '{combo.name}' "
                f"has no item '{key.item_id}'"
            )
