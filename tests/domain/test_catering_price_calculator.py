"""Unit tests for CateringPriceCalculator."""

import pytest

from eventquote.domain.exceptions import InvalidGuestCount, InvalidQuantity, UnknownMenuItem
from eventquote.domain.model.catalog import (
    CateringDetails,
    Combo,
    ComboCategory,
    ComboCategoryItem,
    MenuItem,
    PriceType,
)
from eventquote.domain.model.order import ComboItemKey, ItemKey
from eventquote.domain.model.value_objects import Money
from eventquote.domain.service.catering_price_calculator import CateringPriceCalculator

SERVICE = "svc-1"


def _item(item_id, price="0", upcharge="0", name=None):
    return ComboCategoryItem(
        id=item_id,
        name=name or item_id.title(),
        price=Money.of(price),
        additional_charge=Money.of(upcharge),
    )


def _make_details():
    taco_bar = Combo(
        id="taco-bar",
        name="Taco Bar",
        base_price_per_person=Money.of("14"),
        categories=(
            ComboCategory(
                id="protein",
                name="Proteins",
                max_selections=2,
                items=(_item("chicken"), _item("steak", upcharge="2")),
            ),
            ComboCategory(
                id="sides",
                name="Sides",
                items=(_item("rice", price="1"), _item("beans", price="1")),
            ),
        ),
    )
    return CateringDetails(
        menu_items=(
            MenuItem(id="chips", name="Chips", price=Money.of("12"), price_type=PriceType.PER_PERSON),
            MenuItem(id="churros", name="Churros", price=Money.of("45")),
        ),
        combos=(taco_bar,),
    )


def _menu(item_id):
    return ItemKey(SERVICE, item_id)


def _choice(category_id, item_id, combo_id="taco-bar"):
    return ComboItemKey(SERVICE, combo_id, category_id, item_id)


class TestMenuItems:

    def test_per_person_item_multiplied_by_guests(self):
        result = CateringPriceCalculator().compute(_make_details(), {_menu("chips"): 1}, 50)
        assert result.subtotal == Money.of("600.00")

    def test_flat_item_ignores_guest_count(self):
        result = CateringPriceCalculator().compute(_make_details(), {_menu("churros"): 2}, 50)
        assert result.subtotal == Money.of("90")

    def test_zero_quantity_is_skipped(self):
        result = CateringPriceCalculator().compute(
            _make_details(), {_menu("churros"): 0, _menu("chips"): 0}, 10
        )
        assert result.subtotal == Money.zero()
        assert result.lines == ()

    def test_empty_selection(self):
        result = CateringPriceCalculator().compute(_make_details(), {}, 10)
        assert result.subtotal == Money.zero()

    def test_unknown_item_rejected(self):
        with pytest.raises(UnknownMenuItem, match="lobster"):
            CateringPriceCalculator().compute(_make_details(), {_menu("lobster"): 1}, 10)

    def test_unknown_item_with_zero_quantity_ignored(self):
        result = CateringPriceCalculator().compute(_make_details(), {_menu("lobster"): 0}, 10)
        assert result.subtotal == Money.zero()


class TestCombos:

    def test_primary_category_counts_combos(self):
        selections = {_choice("protein", "chicken"): 30, _choice("protein", "steak"): 20}
        result = CateringPriceCalculator().compute(_make_details(), selections, 50)
        combo_line = result.lines[0]
        assert combo_line.quantity == 50
        # 14 x 50 base, plus the steak upcharge once per guest
        assert result.subtotal == Money.of("700") + Money.of("100")

    def test_category_item_prices_not_double_counted(self):
        selections = {_choice("protein", "chicken"): 10, _choice("sides", "rice"): 10}
        result = CateringPriceCalculator().compute(_make_details(), selections, 10)
        assert result.subtotal == Money.of("140")
        rice = [line for line in result.lines if line.name == "Rice"][0]
        assert rice.included is False
        assert rice.total == Money.of("10")

    def test_combo_selected_directly_uses_its_quantity(self):
        result = CateringPriceCalculator().compute(_make_details(), {_menu("taco-bar"): 3}, 10)
        assert result.subtotal == Money.of("42")

    def test_non_primary_choices_only_order_one_combo(self):
        result = CateringPriceCalculator().compute(
            _make_details(), {_choice("sides", "beans"): 5}, 10
        )
        assert result.lines[0].quantity == 1
        assert result.subtotal == Money.of("14")

    def test_primary_choices_win_over_direct_quantity(self):
        selections = {_menu("taco-bar"): 3, _choice("protein", "chicken"): 8}
        result = CateringPriceCalculator().compute(_make_details(), selections, 10)
        assert result.subtotal == Money.of("112")

    def test_explicit_primary_flag_overrides_name(self):
        combo = Combo(
            id="bowl",
            name="Bowl",
            base_price_per_person=Money.of("10"),
            categories=(
                ComboCategory(id="base", name="Base", items=(_item("rice"),), is_primary=True),
                ComboCategory(id="meat", name="Meat", items=(_item("pork"),), is_primary=False),
            ),
        )
        details = CateringDetails(combos=(combo,))
        selections = {
            _choice("base", "rice", combo_id="bowl"): 4,
            _choice("meat", "pork", combo_id="bowl"): 9,
        }
        result = CateringPriceCalculator().compute(details, selections, 4)
        assert result.subtotal == Money.of("40")

    def test_unknown_combo_rejected(self):
        with pytest.raises(UnknownMenuItem, match="Combo 'nacho-bar'"):
            CateringPriceCalculator().compute(
                _make_details(), {_choice("protein", "chicken", combo_id="nacho-bar"): 1}, 10
            )

    def test_unknown_category_rejected(self):
        with pytest.raises(UnknownMenuItem, match="no category 'desserts'"):
            CateringPriceCalculator().compute(
                _make_details(), {_choice("desserts", "flan"): 1}, 10
            )

    def test_unknown_category_item_rejected(self):
        with pytest.raises(UnknownMenuItem, match="no item 'tofu'"):
            CateringPriceCalculator().compute(_make_details(), {_choice("protein", "tofu"): 1}, 10)


class TestPrimaryCategoryNames:

    @pytest.mark.parametrize("name", ["Proteins", "Choose your Protien", "MEATS", "Main Course", "Entrée"])
    def test_primary_names(self, name):
        assert ComboCategory(id="c", name=name).counts_combos

    @pytest.mark.parametrize("name", ["Sides", "Salsas", "Drinks"])
    def test_other_names(self, name):
        assert not ComboCategory(id="c", name=name).counts_combos


class TestValidation:

    @pytest.mark.parametrize("guests", [0, -5, 2.5, None, True])
    def test_invalid_guest_count(self, guests):
        with pytest.raises(InvalidGuestCount):
            CateringPriceCalculator().compute(_make_details(), {_menu("chips"): 1}, guests)

    def test_negative_quantity_rejected(self):
        with pytest.raises(InvalidQuantity):
            CateringPriceCalculator().compute(_make_details(), {_menu("chips"): -1}, 10)

    def test_deterministic(self):
        selections = {
            _menu("chips"): 2,
            _choice("protein", "steak"): 7,
            _choice("sides", "rice"): 7,
        }
        calculator = CateringPriceCalculator()
        first = calculator.compute(_make_details(), selections, 7)
        second = calculator.compute(_make_details(), selections, 7)
        assert first == second

    def test_more_guests_never_cheaper(self):
        selections = {_menu("chips"): 1, _menu("churros"): 1, _choice("protein", "steak"): 5}
        calculator = CateringPriceCalculator()
        previous = Money.zero()
        for guests in (1, 2, 10, 50, 200):
            subtotal = calculator.compute(_make_details(), selections, guests).subtotal
            assert subtotal >= previous
            previous = subtotal
