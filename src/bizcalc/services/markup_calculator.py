"""Cost-plus markup pricing and profit margin."""

from typing import Optional

from bizcalc.core.exceptions import ValidationError
from bizcalc.core.money import HUNDRED, ZERO, round_money, round_percent
from bizcalc.domain.models import MarkupPricing
from bizcalc.domain.views import MarkupPricingResult


def compute_markup_pricing(
    pricing: MarkupPricing,
    rounding: Optional[str] = None,
) -> MarkupPricingResult:
    """
    Price a job from base price, labor, materials and a markup percentage.

    Formula:
        subtotal = base + materials + labor_rate x hours
        total = subtotal x (1 + markup% / 100)
        costs = materials + labor_rate x hours
        margin% = (total - costs) / total x 100, or 0 when costs is 0

    Base price is not part of costs, so margin is measured against labor
    and materials only. Intermediate values keep full precision; only the
    returned figures are rounded.
    """
    for name in ("base_price", "labor_rate", "estimated_hours", "material_costs"):
        if getattr(pricing, name) < 0:
            raise ValidationError(f"{name} cannot be negative")
    if pricing.markup_percent <= -HUNDRED:
        raise ValidationError("markup_percent must be greater than -100")

    labor = pricing.labor_cost
    subtotal = pricing.base_price + pricing.material_costs + labor
    total = subtotal * (1 + pricing.markup_percent / HUNDRED)
    costs = pricing.material_costs + labor
    profit = total - costs

    if costs > 0 and total != 0:
        margin = profit / total * HUNDRED
    else:
        margin = ZERO

    return MarkupPricingResult(
        subtotal=round_money(subtotal, rounding),
        total_with_markup=round_money(total, rounding),
        costs=round_money(costs, rounding),
        profit=round_money(profit, rounding),
        profit_margin_percent=round_percent(margin, rounding),
    )
