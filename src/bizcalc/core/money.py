"""Currency helpers.

Amounts are carried as integer minor units (cents) inside the calculators and
converted to two-place Decimals only when results leave them. Rounding modes
are the ``decimal`` module constants, which are plain strings and can be read
straight from settings.
"""

from decimal import (
    Decimal,
    InvalidOperation,
    ROUND_HALF_UP,
    ROUND_HALF_EVEN,
    ROUND_HALF_DOWN,
    ROUND_UP,
    ROUND_DOWN,
    ROUND_CEILING,
    ROUND_FLOOR,
)
from typing import Optional, Union

from bizcalc.core.exceptions import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

DEFAULT_ROUNDING = ROUND_HALF_UP

ROUNDING_MODES = frozenset(
    {
        ROUND_HALF_UP,
        ROUND_HALF_EVEN,
        ROUND_HALF_DOWN,
        ROUND_UP,
        ROUND_DOWN,
        ROUND_CEILING,
        ROUND_FLOOR,
    }
)

Numeric = Union[Decimal, int, float, str]


def to_decimal(value: Optional[Numeric], field: str = "value") -> Decimal:
    """
    Convert a number to Decimal.

    Floats go through ``str`` so 0.1 stays 0.1 rather than its binary
    expansion. None becomes zero.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number, got {value!r}")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number, got {value!r}")
    if not result.is_finite():
        raise ValidationError(f"{field} must be finite, got {value!r}")
    return result


def check_rounding(rounding: Optional[str]) -> str:
    """Return a valid decimal rounding mode (the default when None)."""
    if rounding is None:
        return DEFAULT_ROUNDING
    if rounding not in ROUNDING_MODES:
        raise ValidationError(f"Unknown rounding mode: {rounding}")
    return rounding


def to_minor_units(amount: Numeric, rounding: Optional[str] = None) -> int:
    """Convert a currency amount to integer cents."""
    value = to_decimal(amount) * HUNDRED
    return int(value.quantize(Decimal("1"), rounding=check_rounding(rounding)))


def from_minor_units(cents: int) -> Decimal:
    """Convert integer cents to a two-place Decimal."""
    return (Decimal(cents) / HUNDRED).quantize(CENT)


def round_money(amount: Numeric, rounding: Optional[str] = None) -> Decimal:
    """Round an amount to cents."""
    return to_decimal(amount).quantize(CENT, rounding=check_rounding(rounding))


def round_percent(value: Numeric, rounding: Optional[str] = None) -> Decimal:
    """Round a percentage to two decimal places."""
    return to_decimal(value).quantize(CENT, rounding=check_rounding(rounding))
