"""Domain-level exceptions.

All pricing failures are expressed as subclasses of DomainException so the
CLI layer can catch them uniformly and display user-friendly messages.
Delivery ineligibility is a business outcome, not an error, and is never
raised (see ``DeliveryIneligibility``).
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A payload could not be normalized into an order."""


class PricingError(DomainException):
    """An order cannot be priced; no partial totals are produced."""


class InvalidGuestCount(PricingError):
    """Guest count is missing or below one."""


class InvalidQuantity(PricingError):
    """A selected quantity or duration is negative."""


class InvalidDistance(PricingError):
    """A delivery distance is negative."""


class UnknownMenuItem(PricingError):
    """A catering selection references an item missing from the catalog."""


class InvalidAdjustment(PricingError):
    """A custom adjustment has an unrecognized kind/mode or a bad value."""


class InvalidServiceType(PricingError):
    """A service type is unrecognized or its details do not match it."""


class RoundingOverflow(PricingError):
    """A minor-unit amount no longer fits a signed 64-bit integer."""
