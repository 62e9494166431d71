"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from eventquote.domain.exceptions import InvalidQuantity, RoundingOverflow, ValidationError

# Amounts are handed to payment intents as signed 64-bit minor units.
MAX_MINOR_UNITS = 2**63 - 1

_CENT = Decimal("0.01")
_ONE = Decimal("1")
_HUNDRED = Decimal("100")


def to_decimal(value: str | int | float | Decimal) -> Decimal:
    """Coerce to Decimal without going through binary float."""
    if isinstance(value, bool):
        raise ValidationError(f"Expected a number, got {value!r}")
    if isinstance(value, Decimal):
        return value
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid number: {value!r}") from exc
    if not result.is_finite():
        raise ValidationError(f"Invalid number: {value!r}")
    return result


def _round_half_up(exact: Decimal) -> int:
    """Round to a whole number of minor units."""
    try:
        return int(exact.quantize(_ONE, rounding=ROUND_HALF_UP))
    except InvalidOperation as exc:
        # quantize refuses results wider than the context precision
        raise RoundingOverflow(f"Amount {exact} is too large to represent") from exc


@dataclass(frozen=True)
class Money:
    """Monetary amount held as integer minor units (cents).

    Signed: discounts are carried as negative amounts.  Every operation
    that can produce a fractional cent rounds exactly once, half-up
    (away from zero), so totals never drift.
    """

    cents: int
    currency: str = "USD"

    def __post_init__(self) -> None:
        if isinstance(self.cents, bool) or not isinstance(self.cents, int):
            raise ValidationError(
                f"Money cents must be an int, got {type(self.cents).__name__}"
            )
        if abs(self.cents) > MAX_MINOR_UNITS:
            raise RoundingOverflow(
                f"Amount of {self.cents} minor units exceeds the 64-bit limit"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.cents + other.cents, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.cents - other.cents, self.currency)

    def __neg__(self) -> Money:
        return Money(-self.cents, self.currency)

    def __mul__(self, factor: int) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.cents * factor, self.currency)

    __rmul__ = __mul__

    def multiply_by_ratio(self, ratio: str | int | Decimal) -> Money:
        """Multiply by an arbitrary decimal ratio, rounding once to the cent."""
        exact = Decimal(self.cents) * to_decimal(ratio)
        return Money(_round_half_up(exact), self.currency)

    def percent(self, percentage: str | int | Decimal) -> Money:
        """Return ``percentage`` % of this amount (``percent(5)`` is 5 %)."""
        return self.multiply_by_ratio(to_decimal(percentage) / _HUNDRED)

    def allocate(self, parts: int) -> list[Money]:
        """Split into ``parts`` amounts that always sum back to this one.

        Integer division truncates toward zero; the leftover cents go one
        each to the leading parts.
        """
        if parts < 1:
            raise ValidationError("Cannot allocate money into fewer than one part")
        sign = -1 if self.cents < 0 else 1
        share, remainder = divmod(abs(self.cents), parts)
        return [
            Money(sign * (share + (1 if i < remainder else 0)), self.currency)
            for i in range(parts)
        ]

    def is_negative(self) -> bool:
        return self.cents < 0

    def is_zero(self) -> bool:
        return self.cents == 0

    @property
    def amount(self) -> Decimal:
        return (Decimal(self.cents) * _CENT).quantize(_CENT)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.cents < other.cents

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.cents <= other.cents

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.cents > other.cents

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.cents >= other.cents

    # --- Display --------------------------------------------------------------

    def to_display_string(self) -> str:
        sign = "-" if self.cents < 0 else ""
        return f"{sign}${abs(self.amount):,.2f}"

    def __str__(self) -> str:
        return self.to_display_string()

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Expected Money, got {type(other).__name__}")
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "USD") -> Money:
        """Convenient factory: ``Money.of("12.50")`` is 1250 cents."""
        cents = _round_half_up(to_decimal(amount) / _CENT)
        return Money(cents, currency)

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(0, currency)


@dataclass(frozen=True)
class Quantity:
    """A selected quantity.

    Zero means "not selected"; negative quantities can never exist.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidQuantity(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 0:
            raise InvalidQuantity(f"Quantity cannot be negative, got {self.value}")

    @property
    def is_selected(self) -> bool:
        return self.value > 0

    def __str__(self) -> str:
        return str(self.value)
