"""Capital gains and tax report endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from bizcalc.api.deps import get_tax_lot_engine, get_tax_report_service
from bizcalc.api.schemas import (
    CapitalGainsRequest,
    CapitalGainsResponse,
    TaxReportRequest,
    TaxReportResponse,
    TaxReportListItem,
    TaxReportListResponse,
)
from bizcalc.services import TaxLotEngine, TaxReportService

router = APIRouter(prefix="/tax-reports", tags=["tax-reports"])


@router.post("/capital-gains", response_model=CapitalGainsResponse)
def classify_capital_gains(
    data: CapitalGainsRequest,
    engine: TaxLotEngine = Depends(get_tax_lot_engine),
) -> CapitalGainsResponse:
    """Match sales to lots and classify realized gains (nothing is stored)."""
    report = engine.classify([t.to_domain() for t in data.transactions], data.method)
    return CapitalGainsResponse.model_validate(report)


@router.post("", response_model=TaxReportResponse, status_code=201)
def generate_tax_report(
    data: TaxReportRequest,
    service: TaxReportService = Depends(get_tax_report_service),
) -> TaxReportResponse:
    """Generate and store a tax report for one tax year."""
    report = service.generate_report(
        portfolio_id=data.portfolio_id,
        tax_year=data.tax_year,
        transactions=[t.to_domain() for t in data.transactions],
        method=data.method,
        prices=data.prices,
    )
    return TaxReportResponse.model_validate(report)


@router.get("", response_model=TaxReportListResponse)
def list_tax_reports(
    portfolio_id: str = Query(..., description="Portfolio ID"),
    tax_year: Optional[int] = Query(None, description="Filter by tax year"),
    service: TaxReportService = Depends(get_tax_report_service),
) -> TaxReportListResponse:
    """List stored reports for a portfolio, newest first."""
    reports = service.list_reports(portfolio_id, tax_year)
    return TaxReportListResponse(
        reports=[
            TaxReportListItem(
                report_id=r.report_id,
                portfolio_id=r.portfolio_id,
                tax_year=r.tax_year,
                generated_at=r.generated_at,
                cost_basis_method=r.cost_basis_method,
                net_realized_gain_loss=r.summary.net_realized_gain_loss,
                estimated_tax_owed=r.summary.estimated_tax_owed,
            )
            for r in reports
        ],
        count=len(reports),
    )


@router.get("/{report_id}", response_model=TaxReportResponse)
def get_tax_report(
    report_id: str,
    service: TaxReportService = Depends(get_tax_report_service),
) -> TaxReportResponse:
    """Get a stored tax report."""
    report = service.get_report(report_id)
    return TaxReportResponse.model_validate(report)


@router.delete("/{report_id}", status_code=204)
def delete_tax_report(
    report_id: str,
    service: TaxReportService = Depends(get_tax_report_service),
) -> None:
    """Delete a stored tax report."""
    service.delete_report(report_id)
