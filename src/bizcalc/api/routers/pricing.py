"""Line-item and markup pricing endpoints."""

from fastapi import APIRouter, Depends

from bizcalc.api.deps import get_app_settings
from bizcalc.api.schemas import (
    PricingRequest,
    PricingResponse,
    MarkupRequest,
    MarkupResponse,
    to_line_items,
)
from bizcalc.config.settings import Settings
from bizcalc.services import compute_pricing, compute_markup_pricing

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.post("/line-items", response_model=PricingResponse)
def price_line_items(
    data: PricingRequest,
    settings: Settings = Depends(get_app_settings),
) -> PricingResponse:
    """Compute subtotal, tax, discounts, fees and total for line items."""
    tax_rate = data.tax_rate if data.tax_rate is not None else settings.default_tax_rate
    result = compute_pricing(to_line_items(data.line_items), tax_rate, settings.money_rounding)
    return PricingResponse.model_validate(result)


@router.post("/markup", response_model=MarkupResponse)
def price_markup(
    data: MarkupRequest,
    settings: Settings = Depends(get_app_settings),
) -> MarkupResponse:
    """Compute a cost-plus price and profit margin."""
    result = compute_markup_pricing(data.to_domain(), settings.money_rounding)
    return MarkupResponse.model_validate(result)
