"""
Unit tests for money helpers.

Tests cover:
- Decimal conversion without float artifacts
- Minor-unit (cents) conversion
- Rounding modes
"""

import pytest
from decimal import Decimal, ROUND_HALF_EVEN, ROUND_HALF_UP

from bizcalc.core.money import (
    to_decimal,
    to_minor_units,
    from_minor_units,
    round_money,
    round_percent,
    check_rounding,
)
from bizcalc.core.exceptions import ValidationError


class TestToDecimal:
    """Tests for to_decimal."""

    def test_float_goes_through_str(self):
        """
        GIVEN the float 0.1
        WHEN converted
        THEN the result is exactly Decimal("0.1")
        """
        assert to_decimal(0.1) == Decimal("0.1")

    def test_none_is_zero(self):
        assert to_decimal(None) == Decimal("0")

    def test_int_and_str(self):
        assert to_decimal(3) == Decimal("3")
        assert to_decimal("12.50") == Decimal("12.50")

    def test_invalid_string_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            to_decimal("twelve", "unit_price")
        assert "unit_price" in exc_info.value.message

    def test_bool_rejected(self):
        with pytest.raises(ValidationError):
            to_decimal(True)

    def test_infinity_rejected(self):
        with pytest.raises(ValidationError):
            to_decimal("Infinity")


class TestMinorUnits:
    """Tests for cent conversion."""

    def test_to_minor_units(self):
        assert to_minor_units(Decimal("12.34")) == 1234

    def test_to_minor_units_rounds_half_up_by_default(self):
        assert to_minor_units(Decimal("0.125")) == 13

    def test_to_minor_units_half_even(self):
        assert to_minor_units(Decimal("0.125"), ROUND_HALF_EVEN) == 12

    def test_from_minor_units_has_two_places(self):
        result = from_minor_units(48713)
        assert result == Decimal("487.13")
        assert str(result) == "487.13"

    def test_negative_cents(self):
        assert from_minor_units(-5) == Decimal("-0.05")


class TestRounding:
    """Tests for round_money / round_percent."""

    def test_round_money_half_up(self):
        assert round_money(Decimal("37.125")) == Decimal("37.13")

    def test_round_money_half_even(self):
        assert round_money(Decimal("37.125"), ROUND_HALF_EVEN) == Decimal("37.12")

    def test_round_percent(self):
        assert round_percent(Decimal("33.3333")) == Decimal("33.33")

    def test_check_rounding_default(self):
        assert check_rounding(None) == ROUND_HALF_UP

    def test_check_rounding_unknown_mode(self):
        with pytest.raises(ValidationError):
            check_rounding("ROUND_SIDEWAYS")
