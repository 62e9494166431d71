"""Normalizes a web-layer order payload into an ``OrderInput``.

The booking, invoice and admin screens all hold orders as loosely-typed
JSON: camelCase keys, prices as strings ("$12.50/person"), selections as a
flat ``{key: quantity}`` map.  This module is the one boundary where that
shape is validated and turned into domain objects.  Unrecognized service
types, price types, adjustment kinds and modes are rejected, not guessed.

Selection keys accepted in ``selectedItems``:

- ``itemId``                          a menu item, combo, rental, role, option
- ``serviceId_itemId``                the same, prefixed with the service id
- ``comboId_categoryId_itemId``       a combo choice (catering only; the
                                      first part must name one of the
                                      service's combos)
- ``itemId_duration``                 hours booked for a staff role
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from eventquote.domain.exceptions import (
    InvalidAdjustment,
    InvalidGuestCount,
    InvalidServiceType,
    ValidationError,
)
from eventquote.domain.model.catalog import (
    CateringDetails,
    Combo,
    ComboCategory,
    ComboCategoryItem,
    MenuItem,
    PartyRentalDetails,
    PriceType,
    RentalItem,
    ServiceDetails,
    ServiceType,
    StaffDetails,
    StaffRole,
    VenueDetails,
    VenueOption,
)
from eventquote.domain.model.delivery import DeliveryOptions, DeliveryRangeFee
from eventquote.domain.model.order import (
    AdjustmentKind,
    AdjustmentMode,
    ComboItemKey,
    CustomAdjustment,
    ItemKey,
    OrderInput,
    SelectedService,
    SelectionKey,
    ServiceFeeConfig,
    ServiceFeeType,
)
from eventquote.domain.model.value_objects import Money, to_decimal
from eventquote.domain.service.tax import TaxCalculator

# Vendors enter tiers as free text; nobody delivers further than this.
MAX_DELIVERY_MILES = Decimal("100")

DURATION_SUFFIX = "_duration"

SERVICE_TYPES = {
    "catering": ServiceType.CATERING,
    "venue": ServiceType.VENUE,
    "venues": ServiceType.VENUE,
    "party-rental": ServiceType.PARTY_RENTAL,
    "party-rentals": ServiceType.PARTY_RENTAL,
    "staff": ServiceType.STAFF,
}

PRICE_TYPES = {
    "flat": PriceType.FLAT,
    "flat_rate": PriceType.FLAT,
    "fixed": PriceType.FLAT,
    "one_time": PriceType.FLAT,
    "per_event": PriceType.FLAT,
    "per_item": PriceType.FLAT,
    "per_person": PriceType.PER_PERSON,
    "per_guest": PriceType.PER_PERSON,
    "per_hour": PriceType.PER_HOUR,
    "hourly": PriceType.PER_HOUR,
}

_RANGE_UNITS = re.compile(r"\bmi(?:les?)?\b")
_RANGE_NUMBERS = re.compile(r"(\d+(?:\.\d+)?)\s*(?:-\s*(\d+(?:\.\d+)?))?")
_PRICE_JUNK = re.compile(r"[^0-9.\-]")


class OrderInputMapper:

    def to_order_input(
        self,
        payload: Mapping[str, Any],
        tax_calculator: TaxCalculator | None = None,
        service_fee: ServiceFeeConfig | None = None,
    ) -> OrderInput:
        if not isinstance(payload, Mapping):
            raise ValidationError("Order payload must be a JSON object")

        raw_services = payload.get("services") or []
        if not isinstance(raw_services, list):
            raise ValidationError("'services' must be a list")

        services: list[SelectedService] = []
        selected_items: dict[SelectionKey, int] = {}
        item_hours: dict[ItemKey, Decimal] = {}
        for raw in raw_services:
            service = self.to_service(raw)
            services.append(service)
            selections, hours = self.to_selections(service, raw.get("selectedItems") or {})
            selected_items.update(selections)
            item_hours.update(hours)
            for choice in raw.get("comboSelections") or []:
                key = ComboItemKey(
                    service_id=service.id,
                    combo_id=_required_str(choice, "comboId"),
                    category_id=_required_str(choice, "categoryId"),
                    item_id=_required_str(choice, "itemId"),
                )
                selected_items[key] = _as_int(choice.get("quantity", 1), "quantity")

        if "serviceFee" in payload:
            service_fee = self.to_service_fee(payload["serviceFee"])

        distances = {
            str(service_id): to_decimal(miles)
            for service_id, miles in (payload.get("distancesByService") or {}).items()
        }
        distance = payload.get("distanceMiles")

        return OrderInput(
            services=tuple(services),
            selected_items=selected_items,
            guest_count=self.to_guest_count(payload.get("guestCount", 1)),
            item_hours=item_hours,
            distance_miles=to_decimal(distance) if distance is not None else None,
            distances_by_service=distances,
            adjustments=tuple(
                self.to_adjustment(raw) for raw in payload.get("adjustments") or []
            ),
            service_fee=service_fee or ServiceFeeConfig(),
            tax_calculator=tax_calculator,
            is_tax_exempt=_as_bool(payload.get("isTaxExempt", False), "isTaxExempt"),
            is_service_fee_waived=_as_bool(
                payload.get("isServiceFeeWaived", False), "isServiceFeeWaived"
            ),
        )

    # --- Services -------------------------------------------------------------

    def to_service(self, raw: Mapping[str, Any]) -> SelectedService:
        if not isinstance(raw, Mapping):
            raise ValidationError("Each service must be a JSON object")
        service_id = _required_str(raw, "id", "serviceId")
        name = str(raw.get("name") or raw.get("serviceName") or service_id)

        type_name = str(raw.get("serviceType") or raw.get("type") or "").strip().lower()
        service_type = SERVICE_TYPES.get(type_name)
        if service_type is None:
            raise InvalidServiceType(f"Service '{name}' has unknown type '{type_name}'")

        details = raw.get("details") or raw.get("service_details") or {}
        quoted = raw.get("totalPrice")
        hours = raw.get("hours", raw.get("duration"))

        return SelectedService(
            id=service_id,
            name=name,
            service_type=service_type,
            details=self.to_details(service_type, details),
            base_price=_money(raw.get("price", raw.get("servicePrice"))),
            price_type=self.to_price_type(raw.get("priceType", raw.get("price_type"))),
            quantity=_as_int(raw.get("quantity", 1), "quantity"),
            hours=to_decimal(hours) if hours is not None else None,
            delivery=self.to_delivery(raw.get("deliveryOptions") or details.get("deliveryOptions")),
            vendor_name=str(raw.get("vendorName") or ""),
            quoted_total=_money(quoted) if quoted else None,
        )

    def to_details(self, service_type: ServiceType, raw: Mapping[str, Any]) -> ServiceDetails:
        if service_type is ServiceType.CATERING:
            return CateringDetails(
                menu_items=tuple(self._menu_item(item) for item in raw.get("menuItems") or []),
                combos=tuple(self._combo(combo) for combo in raw.get("combos") or []),
            )
        if service_type is ServiceType.VENUE:
            return VenueDetails(
                options=tuple(
                    VenueOption(
                        id=_required_str(option, "id"),
                        name=str(option.get("name") or option["id"]),
                        price=_money(option.get("price")),
                    )
                    for option in raw.get("venueOptions") or raw.get("options") or []
                )
            )
        if service_type is ServiceType.PARTY_RENTAL:
            return PartyRentalDetails(
                items=tuple(
                    RentalItem(
                        id=_required_str(item, "id"),
                        name=str(item.get("name") or item["id"]),
                        price=_money(item.get("price")),
                        min_quantity=_as_int(item.get("minQuantity", 1), "minQuantity"),
                    )
                    for item in raw.get("rentalItems") or raw.get("items") or []
                )
            )
        minimum_hours = raw.get("minimumHours")
        return StaffDetails(
            roles=tuple(
                StaffRole(
                    id=_required_str(role, "id"),
                    name=str(role.get("name") or role["id"]),
                    price=_money(role.get("price", role.get("hourlyRate"))),
                    price_type=self.to_price_type(role.get("priceType", "per_hour")),
                    min_quantity=_as_int(role.get("minQuantity", 1), "minQuantity"),
                )
                for role in raw.get("staffServices") or raw.get("roles") or []
            ),
            minimum_hours=to_decimal(minimum_hours) if minimum_hours else Decimal("1"),
        )

    def _menu_item(self, raw: Mapping[str, Any]) -> MenuItem:
        return MenuItem(
            id=_required_str(raw, "id", "itemId"),
            name=str(raw.get("name") or raw.get("itemName") or raw.get("id")),
            price=_money(raw.get("price")),
            price_type=self.to_price_type(raw.get("priceType")),
        )

    def _combo(self, raw: Mapping[str, Any]) -> Combo:
        categories = []
        for category in raw.get("comboCategories") or raw.get("categories") or []:
            behavior = category.get("selectionBehavior")
            is_primary = category.get("isPrimary")
            if is_primary is None and behavior is not None:
                is_primary = behavior == "quantity"
            categories.append(
                ComboCategory(
                    id=_required_str(category, "id", "categoryId"),
                    name=str(category.get("name") or ""),
                    max_selections=_as_int(category.get("maxSelections", 1), "maxSelections"),
                    is_primary=is_primary,
                    items=tuple(
                        ComboCategoryItem(
                            id=_required_str(item, "id", "itemId"),
                            name=str(item.get("name") or item.get("itemName") or item.get("id")),
                            price=_money(item.get("price")),
                            additional_charge=_money(item.get("additionalCharge")),
                        )
                        for item in category.get("items") or []
                    ),
                )
            )
        return Combo(
            id=_required_str(raw, "id", "itemId"),
            name=str(raw.get("name") or raw.get("id")),
            base_price_per_person=_money(raw.get("pricePerPerson", raw.get("price"))),
            categories=tuple(categories),
        )

    @staticmethod
    def to_price_type(raw: Any) -> PriceType:
        if raw is None or raw == "":
            return PriceType.FLAT
        price_type = PRICE_TYPES.get(str(raw).strip().lower())
        if price_type is None:
            raise ValidationError(f"Unknown price type '{raw}'")
        return price_type

    # --- Delivery -------------------------------------------------------------

    def to_delivery(self, raw: Mapping[str, Any] | None) -> DeliveryOptions | None:
        if not raw or not raw.get("delivery", True):
            return None
        ranges = []
        for entry in raw.get("deliveryRanges") or []:
            label = str(entry.get("range") or entry.get("rangeLabel") or "")
            if entry.get("maxDistanceMiles") is not None:
                max_miles = to_decimal(entry["maxDistanceMiles"])
            else:
                max_miles = self.parse_range_label(label)
            ranges.append(
                DeliveryRangeFee(
                    range_label=label or f"0-{max_miles} miles",
                    max_distance_miles=max_miles,
                    fee=_money(entry.get("fee")),
                )
            )
        minimum = raw.get("deliveryMinimum")
        return DeliveryOptions(
            ranges=tuple(ranges),
            delivery_minimum=_money(minimum) if minimum else None,
        )

    @staticmethod
    def parse_range_label(label: str) -> Decimal:
        """Upper bound in miles of a tier label like "10-15 miles"."""
        text = label.lower()
        for dash in ("–", "—", "−"):
            text = text.replace(dash, "-")
        text = _RANGE_UNITS.sub("", text)
        match = _RANGE_NUMBERS.search(text)
        if match is None:
            raise ValidationError(f"Cannot read a distance from delivery range '{label}'")
        upper = Decimal(match.group(2) or match.group(1))
        return min(upper, MAX_DELIVERY_MILES)

    # --- Selections -----------------------------------------------------------

    def to_selections(
        self,
        service: SelectedService,
        raw: Mapping[str, Any],
    ) -> tuple[dict[SelectionKey, int], dict[ItemKey, Decimal]]:
        if not isinstance(raw, Mapping):
            raise ValidationError(f"'selectedItems' of '{service.name}' must be an object")
        combo_ids = set()
        if isinstance(service.details, CateringDetails):
            combo_ids = {combo.id for combo in service.details.combos}

        selections: dict[SelectionKey, int] = {}
        hours: dict[ItemKey, Decimal] = {}
        prefix = service.id + "_"
        for raw_key, raw_value in raw.items():
            key = str(raw_key)
            if key.endswith(DURATION_SUFFIX):
                item_id = key[: -len(DURATION_SUFFIX)]
                if item_id.startswith(prefix):
                    item_id = item_id[len(prefix):]
                hours[ItemKey(service.id, item_id)] = to_decimal(raw_value)
                continue
            if key.startswith(prefix):
                key = key[len(prefix):]
            selections[self.parse_selection_key(service.id, key, combo_ids)] = _as_int(
                raw_value, key
            )
        return selections, hours

    @staticmethod
    def parse_selection_key(service_id: str, key: str, combo_ids: set[str]) -> SelectionKey:
        parts = key.split("_", 2)
        if len(parts) == 3 and parts[0] in combo_ids:
            return ComboItemKey(service_id, parts[0], parts[1], parts[2])
        return ItemKey(service_id, key)

    # --- Order-level settings -------------------------------------------------

    @staticmethod
    def to_guest_count(raw: Any) -> int:
        try:
            return _as_int(raw, "guestCount")
        except ValidationError as exc:
            raise InvalidGuestCount(f"Invalid guest count: {raw!r}") from exc

    @staticmethod
    def to_adjustment(raw: Mapping[str, Any]) -> CustomAdjustment:
        label = str(raw.get("label") or "Adjustment")
        try:
            kind = AdjustmentKind(str(raw.get("type", raw.get("kind"))).lower())
            mode = AdjustmentMode(str(raw.get("mode")).lower())
            value = to_decimal(raw.get("value"))
        except (ValueError, ValidationError) as exc:
            raise InvalidAdjustment(f"Adjustment '{label}' is malformed: {exc}") from exc
        return CustomAdjustment(
            label=label,
            kind=kind,
            mode=mode,
            value=value,
            taxable=raw.get("taxable") is not False,
        )

    @staticmethod
    def to_service_fee(raw: Mapping[str, Any]) -> ServiceFeeConfig:
        try:
            fee_type = ServiceFeeType(str(raw.get("type", "percentage")).lower())
        except ValueError as exc:
            raise ValidationError(f"Unknown service fee type '{raw.get('type')}'") from exc
        return ServiceFeeConfig(
            fee_type=fee_type,
            percentage=to_decimal(raw.get("percentage", "5")),
            fixed=_money(raw.get("fixed")),
        )


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _required_str(raw: Mapping[str, Any], *names: str) -> str:
    for name in names:
        value = raw.get(name)
        if value is not None and str(value).strip():
            return str(value).strip()
    raise ValidationError(f"Missing required field '{names[0]}'")


def _as_int(raw: Any, field_name: str) -> int:
    if isinstance(raw, bool):
        raise ValidationError(f"'{field_name}' must be a whole number, got {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str) and re.fullmatch(r"\s*-?\d+\s*", raw):
        return int(raw)
    raise ValidationError(f"'{field_name}' must be a whole number, got {raw!r}")


def _as_bool(raw: Any, field_name: str) -> bool:
    if raw is None:
        return False
    if not isinstance(raw, bool):
        raise ValidationError(f"'{field_name}' must be true or false, got {raw!r}")
    return raw


def _money(raw: Any) -> Money:
    """Parse a price the way vendors enter it ("$12.50", "12.50/person")."""
    if raw is None or raw == "":
        return Money.zero()
    if isinstance(raw, str):
        raw = _PRICE_JUNK.sub("", raw)
    amount = Money.of(raw)
    if amount.is_negative():
        raise ValidationError(f"Price cannot be negative: {raw!r}")
    return amount
