"""Estimate endpoints."""

from fastapi import APIRouter, Depends

from bizcalc.api.deps import get_app_settings
from bizcalc.api.schemas import EstimateExpiryRequest, EstimateExpiryResponse
from bizcalc.config.settings import Settings
from bizcalc.services import resolve_expiry_date

router = APIRouter(prefix="/estimates", tags=["estimates"])


@router.post("/expiry", response_model=EstimateExpiryResponse)
def estimate_expiry(
    data: EstimateExpiryRequest,
    settings: Settings = Depends(get_app_settings),
) -> EstimateExpiryResponse:
    """Compute the date an estimate expires."""
    days = (
        data.validity_period_days
        if data.validity_period_days is not None
        else settings.estimate_validity_days
    )
    return EstimateExpiryResponse(
        issue_date=data.issue_date,
        validity_period_days=days,
        expires_date=resolve_expiry_date(data.issue_date, days),
    )
