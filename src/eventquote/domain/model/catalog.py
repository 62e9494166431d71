"""Vendor catalogs: what a service offers and at which price.

Each service type carries its own details variant.  The union is closed:
``ServiceDetails`` lists every shape the pricing services know how to
price, and a service whose details do not match its type is rejected.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Union

from eventquote.domain.model.value_objects import Money


class ServiceType(Enum):
    CATERING = "catering"
    VENUE = "venue"
    PARTY_RENTAL = "party-rental"
    STAFF = "staff"


class PriceType(Enum):
    FLAT = "flat"
    PER_PERSON = "per_person"
    PER_HOUR = "per_hour"


# Category names that mark the "how many combos" choice when a vendor
# has not flagged the primary category explicitly.
PRIMARY_CATEGORY_NAMES = (
    "protein",
    "meat",
    "main",
    "entree",
)


def looks_like_primary_category(name: str) -> bool:
    normalized = unicodedata.normalize("NFD", name.strip().lower())
    normalized = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    normalized = normalized.replace("protien", "protein")
    return any(word in normalized for word in PRIMARY_CATEGORY_NAMES)


# ---------------------------------------------------------------------------
# Catering
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MenuItem:
    id: str
    name: str
    price: Money
    price_type: PriceType = PriceType.FLAT


@dataclass(frozen=True)
class ComboCategoryItem:
    id: str
    name: str
    price: Money
    additional_charge: Money


@dataclass(frozen=True)
class ComboCategory:
    """A "pick N" group inside a combo.

    ``is_primary`` marks the category whose selected quantities count the
    combos ordered.  ``None`` means the vendor did not say, in which case
    the category name decides.
    """

    id: str
    name: str
    items: tuple[ComboCategoryItem, ...] = ()
    max_selections: int = 1
    is_primary: bool | None = None

    @property
    def counts_combos(self) -> bool:
        if self.is_primary is not None:
            return self.is_primary
        return looks_like_primary_category(self.name)

    def find_item(self, item_id: str) -> ComboCategoryItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


@dataclass(frozen=True)
class Combo:
    id: str
    name: str
    base_price_per_person: Money
    categories: tuple[ComboCategory, ...] = ()

    def find_category(self, category_id: str) -> ComboCategory | None:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None


@dataclass(frozen=True)
class CateringDetails:
    menu_items: tuple[MenuItem, ...] = ()
    combos: tuple[Combo, ...] = ()

    def find_menu_item(self, item_id: str) -> MenuItem | None:
        for item in self.menu_items:
            if item.id == item_id:
                return item
        return None

    def find_combo(self, combo_id: str) -> Combo | None:
        for combo in self.combos:
            if combo.id == combo_id:
                return combo
        return None


# ---------------------------------------------------------------------------
# Venue, rentals, staff
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VenueOption:
    id: str
    name: str
    price: Money


@dataclass(frozen=True)
class VenueDetails:
    options: tuple[VenueOption, ...] = ()

    def find_option(self, option_id: str) -> VenueOption | None:
        for option in self.options:
            if option.id == option_id:
                return option
        return None


@dataclass(frozen=True)
class RentalItem:
    id: str
    name: str
    price: Money
    min_quantity: int = 1


@dataclass(frozen=True)
class PartyRentalDetails:
    items: tuple[RentalItem, ...] = ()

    def find_item(self, item_id: str) -> RentalItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


@dataclass(frozen=True)
class StaffRole:
    id: str
    name: str
    price: Money
    price_type: PriceType = PriceType.PER_HOUR
    min_quantity: int = 1


@dataclass(frozen=True)
class StaffDetails:
    roles: tuple[StaffRole, ...] = ()
    minimum_hours: Decimal = field(default=Decimal("1"))

    def find_role(self, role_id: str) -> StaffRole | None:
        for role in self.roles:
            if role.id == role_id:
                return role
        return None


ServiceDetails = Union[CateringDetails, VenueDetails, PartyRentalDetails, StaffDetails]

DETAILS_BY_TYPE: dict[ServiceType, type] = {
    ServiceType.CATERING: CateringDetails,
    ServiceType.VENUE: VenueDetails,
    ServiceType.PARTY_RENTAL: PartyRentalDetails,
    ServiceType.STAFF: StaffDetails,
}
