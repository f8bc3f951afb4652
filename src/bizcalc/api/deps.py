"""Dependency injection for FastAPI."""

from fastapi import Depends
from sqlalchemy.orm import Session

from bizcalc.config.settings import Settings, get_settings
from bizcalc.config.tax_assumptions import TaxAssumptions
from bizcalc.repositories.sqlalchemy.database import get_db
from bizcalc.repositories.sqlalchemy import SqlAlchemyTaxReportRepository
from bizcalc.services import (
    InvoiceService,
    NullRiskScorer,
    RiskScorer,
    TaxLotEngine,
    TaxReportService,
)


def get_app_settings() -> Settings:
    """Provide the current Settings instance."""
    return get_settings()


def get_tax_assumptions(settings: Settings = Depends(get_app_settings)) -> TaxAssumptions:
    """Provide TaxAssumptions built from settings."""
    return TaxAssumptions.from_settings(settings)


def get_report_repo(db: Session = Depends(get_db)) -> SqlAlchemyTaxReportRepository:
    """Provide TaxReportRepository instance."""
    return SqlAlchemyTaxReportRepository(db)


def get_risk_scorer() -> RiskScorer:
    """Provide RiskScorer instance (null scorer until one is configured)."""
    return NullRiskScorer()


def get_invoice_service(
    risk_scorer: RiskScorer = Depends(get_risk_scorer),
    settings: Settings = Depends(get_app_settings),
) -> InvoiceService:
    """Provide InvoiceService instance."""
    return InvoiceService(risk_scorer=risk_scorer, settings=settings)


def get_tax_lot_engine(
    assumptions: TaxAssumptions = Depends(get_tax_assumptions),
) -> TaxLotEngine:
    """Provide TaxLotEngine instance."""
    return TaxLotEngine(assumptions)


def get_tax_report_service(
    report_repo: SqlAlchemyTaxReportRepository = Depends(get_report_repo),
    assumptions: TaxAssumptions = Depends(get_tax_assumptions),
) -> TaxReportService:
    """Provide TaxReportService instance."""
    return TaxReportService(repository=report_repo, assumptions=assumptions)
