"""Line-item pricing: subtotal, tax, discounts, fees and total."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional

from bizcalc.core.exceptions import ValidationError
from bizcalc.core.money import (
    check_rounding,
    from_minor_units,
    to_decimal,
    to_minor_units,
)
from bizcalc.domain.models import LineItem, LineItemKind
from bizcalc.domain.views import PricingResult

logger = logging.getLogger(__name__)


def validate_line_items(items: list[LineItem]) -> None:
    """Raise ValidationError for an empty list or any negative quantity/price."""
    if not items:
        raise ValidationError("At least one line item is required")
    for index, item in enumerate(items):
        if item.quantity < 0:
            raise ValidationError(
                f"line_items[{index}].quantity cannot be negative (got {item.quantity})"
            )
        if item.unit_price < 0:
            raise ValidationError(
                f"line_items[{index}].unit_price cannot be negative (got {item.unit_price})"
            )
        if item.tax_rate is not None and item.tax_rate < 0:
            raise ValidationError(f"line_items[{index}].tax_rate cannot be negative")


def compute_pricing(
    items: Iterable[LineItem],
    tax_rate: Decimal,
    rounding: Optional[str] = None,
) -> PricingResult:
    """
    Price a set of line items.

    Each line total is converted to cents once; every sum after that is an
    integer sum, so total_amount == subtotal + total_tax + total_fees -
    total_discounts holds exactly for any number of lines. Tax is computed
    on the taxable base per rate and rounded once for the whole document.

    Args:
        items: Line items; lines are taxable unless is_taxable is False
        tax_rate: Document tax rate as a fraction (0.0825 for 8.25%)
        rounding: decimal rounding mode (default ROUND_HALF_UP)

    Raises:
        ValidationError: empty items, negative quantity, price or rate
    """
    items = list(items)
    rate = to_decimal(tax_rate, "tax_rate")
    if rate < 0:
        raise ValidationError("tax_rate cannot be negative")
    validate_line_items(items)
    mode = check_rounding(rounding)

    subtotal_cents = 0
    fee_cents = 0
    discount_cents = 0
    taxable_by_rate: dict[Decimal, int] = defaultdict(int)

    for item in items:
        line_cents = to_minor_units(item.total_price, mode)
        subtotal_cents += line_cents

        if item.is_taxable is not False:
            line_rate = item.tax_rate if item.tax_rate is not None else rate
            taxable_by_rate[line_rate] += line_cents

        if item.kind == LineItemKind.FEE:
            fee_cents += line_cents
        elif item.kind == LineItemKind.DISCOUNT and item.discount_amount is not None:
            discount_cents += to_minor_units(abs(item.discount_amount), mode)

    raw_tax_cents = sum(
        (Decimal(cents) * line_rate for line_rate, cents in taxable_by_rate.items()),
        Decimal("0"),
    )
    tax_cents = int(raw_tax_cents.quantize(Decimal("1"), rounding=mode))
    taxable_cents = sum(taxable_by_rate.values())

    total_cents = subtotal_cents + tax_cents + fee_cents - discount_cents
    if total_cents < 0:
        # Not clamped: a credit balance is reported as-is
        logger.info("Line items price to a negative total: %s cents", total_cents)

    return PricingResult(
        subtotal=from_minor_units(subtotal_cents),
        total_tax=from_minor_units(tax_cents),
        total_discounts=from_minor_units(discount_cents),
        total_fees=from_minor_units(fee_cents),
        total_amount=from_minor_units(total_cents),
        taxable_amount=from_minor_units(taxable_cents),
    )
