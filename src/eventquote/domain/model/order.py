"""Order input: the normalized snapshot the calculator prices.

An ``OrderInput`` is built fresh for every pricing call and never written
back to.  The calculator returns new totals instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping, Union

from eventquote.domain.exceptions import InvalidGuestCount, InvalidServiceType
from eventquote.domain.model.catalog import (
    DETAILS_BY_TYPE,
    PriceType,
    ServiceDetails,
    ServiceType,
)
from eventquote.domain.model.delivery import DeliveryOptions
from eventquote.domain.model.value_objects import Money, Quantity

if TYPE_CHECKING:
    from eventquote.domain.service.tax import TaxCalculator


# ---------------------------------------------------------------------------
# Selection keys
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ItemKey:
    """A directly selected item (menu item, combo, rental, role, option)."""

    service_id: str
    item_id: str


@dataclass(frozen=True)
class ComboItemKey:
    """A choice inside one category of a combo."""

    service_id: str
    combo_id: str
    category_id: str
    item_id: str


SelectionKey = Union[ItemKey, ComboItemKey]


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SelectedService:
    """One bookable offering in the order.

    ``quoted_total`` is a total already agreed on an invoice; when present
    it is used verbatim instead of being recomputed from the catalog.
    """

    id: str
    name: str
    service_type: ServiceType
    details: ServiceDetails
    base_price: Money = field(default_factory=Money.zero)
    price_type: PriceType = PriceType.FLAT
    quantity: int = 1
    hours: Decimal | None = None
    delivery: DeliveryOptions | None = None
    vendor_name: str = ""
    quoted_total: Money | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.service_type, ServiceType):
            raise InvalidServiceType(f"Unknown service type: {self.service_type!r}")
        expected = DETAILS_BY_TYPE[self.service_type]
        if not isinstance(self.details, expected):
            raise InvalidServiceType(
                f"Service '{self.name}' is {self.service_type.value} "
                f"but carries {type(self.details).__name__}"
            )
        Quantity(self.quantity)


# ---------------------------------------------------------------------------
# Adjustments and fees
# ---------------------------------------------------------------------------


class AdjustmentKind(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class AdjustmentMode(Enum):
    SURCHARGE = "surcharge"
    DISCOUNT = "discount"


@dataclass(frozen=True)
class CustomAdjustment:
    """A surcharge or discount entered by an admin or vendor.

    ``value`` is always non-negative: a percentage (``10`` is 10 %) or a
    dollar amount.  ``mode`` carries the sign.
    """

    label: str
    kind: AdjustmentKind
    mode: AdjustmentMode
    value: Decimal
    taxable: bool = True


class ServiceFeeType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    HYBRID = "hybrid"


@dataclass(frozen=True)
class ServiceFeeConfig:
    fee_type: ServiceFeeType = ServiceFeeType.PERCENTAGE
    percentage: Decimal = Decimal("5")
    fixed: Money = field(default_factory=Money.zero)


# ---------------------------------------------------------------------------
# The order
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OrderInput:
    services: tuple[SelectedService, ...]
    selected_items: Mapping[SelectionKey, int] = field(default_factory=dict)
    guest_count: int = 1
    item_hours: Mapping[ItemKey, Decimal] = field(default_factory=dict)
    distance_miles: Decimal | None = None
    distances_by_service: Mapping[str, Decimal] = field(default_factory=dict)
    adjustments: tuple[CustomAdjustment, ...] = ()
    service_fee: ServiceFeeConfig = field(default_factory=ServiceFeeConfig)
    tax_calculator: TaxCalculator | None = None
    is_tax_exempt: bool = False
    is_service_fee_waived: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.guest_count, bool) or not isinstance(self.guest_count, int):
            raise InvalidGuestCount(f"Guest count must be an integer, got {self.guest_count!r}")
        # Freeze caller-owned containers so a snapshot cannot change mid-call.
        object.__setattr__(self, "services", tuple(self.services))
        object.__setattr__(self, "adjustments", tuple(self.adjustments))
        object.__setattr__(self, "selected_items", MappingProxyType(dict(self.selected_items)))
        object.__setattr__(self, "item_hours", MappingProxyType(dict(self.item_hours)))
        object.__setattr__(
            self, "distances_by_service", MappingProxyType(dict(self.distances_by_service))
        )

    def distance_for(self, service_id: str) -> Decimal | None:
        return self.distances_by_service.get(service_id, self.distance_miles)
