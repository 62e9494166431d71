"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from eventquote.domain.exceptions import InvalidQuantity, RoundingOverflow, ValidationError
from eventquote.domain.model.value_objects import MAX_MINOR_UNITS, Money, Quantity


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(1050)
        assert m.cents == 1050
        assert m.amount == Decimal("10.50")
        assert m.currency == "USD"

    def test_of_factory_from_string(self):
        assert Money.of("25.99") == Money(2599)

    def test_of_factory_from_int(self):
        assert Money.of(10) == Money(1000)

    def test_of_factory_rounds_sub_cent_half_up(self):
        assert Money.of("0.125") == Money(13)
        assert Money.of("0.124") == Money(12)

    def test_of_factory_from_float_goes_through_str(self):
        assert Money.of(0.1) + Money.of(0.2) == Money.of("0.30")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid number"):
            Money.of("twelve")

    def test_float_cents_rejected(self):
        with pytest.raises(ValidationError, match="must be an int"):
            Money(10.5)

    def test_negative_amounts_allowed(self):
        m = Money.of("-15")
        assert m.is_negative()
        assert str(m) == "-$15.00"

    def test_addition_and_subtraction(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")
        assert Money.of("5") - Money.of("10") == Money.of("-5")

    def test_negation(self):
        assert -Money.of("3.25") == Money(-325)

    def test_multiplication_by_int(self):
        assert Money.of("7.50") * 3 == Money.of("22.50")
        assert 3 * Money.of("7.50") == Money.of("22.50")

    def test_multiplication_by_float_rejected(self):
        with pytest.raises(TypeError):
            Money.of("7.50") * 1.5

    def test_percent_rounds_half_up_once(self):
        # 5 % of $0.50 is 2.5 cents
        assert Money.of("0.50").percent(5) == Money(3)
        assert Money.of("200").percent(5) == Money.of("10")

    def test_multiply_by_ratio(self):
        assert Money.of("35").multiply_by_ratio(Decimal("2.5")) == Money.of("87.50")
        assert Money.of("2015.20").multiply_by_ratio("0.0863") == Money.of("173.91")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(1000, "USD") + Money(500, "EUR")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "$15.00"
        assert str(Money.of("1234.5")) == "$1,234.50"

    def test_comparison_operators(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") > Money.of("5")
        assert Money.of("10") >= Money.of("10")
        assert Money.of("10") <= Money.of("10")

    def test_overflow_guarded(self):
        with pytest.raises(RoundingOverflow):
            Money(MAX_MINOR_UNITS + 1)
        with pytest.raises(RoundingOverflow):
            Money(MAX_MINOR_UNITS) + Money(1)

    def test_amount_beyond_decimal_precision_is_overflow(self):
        with pytest.raises(RoundingOverflow):
            Money.of("9" * 30)

    def test_ratio_beyond_decimal_precision_is_overflow(self):
        with pytest.raises(RoundingOverflow):
            Money(10**18).multiply_by_ratio(Decimal("1e12"))

    def test_percent_beyond_decimal_precision_is_overflow(self):
        with pytest.raises(RoundingOverflow):
            Money(MAX_MINOR_UNITS).percent("1e20")


class TestMoneyAllocate:

    def test_remainder_goes_to_leading_parts(self):
        parts = Money.of("100").allocate(3)
        assert parts == [Money(3334), Money(3333), Money(3333)]

    def test_parts_always_sum_back(self):
        for cents in (1, 7, 999, 100_001, -1001):
            for n in (1, 2, 3, 7, 13):
                parts = Money(cents).allocate(n)
                assert sum(parts, Money.zero()) == Money(cents)

    def test_negative_truncates_toward_zero(self):
        assert Money(-10).allocate(3) == [Money(-4), Money(-3), Money(-3)]

    def test_zero_parts_rejected(self):
        with pytest.raises(ValidationError, match="fewer than one"):
            Money.of("10").allocate(0)


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(5).value == 5
        assert Quantity(5).is_selected

    def test_zero_means_not_selected(self):
        assert not Quantity(0).is_selected

    def test_negative_rejected(self):
        with pytest.raises(InvalidQuantity, match="cannot be negative"):
            Quantity(-3)

    def test_non_integer_rejected(self):
        with pytest.raises(InvalidQuantity, match="must be an integer"):
            Quantity(1.5)

    def test_str(self):
        assert str(Quantity(7)) == "7"
