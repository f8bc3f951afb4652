"""SQLAlchemy implementation of TaxReportRepository."""

from typing import Optional

from pydantic import TypeAdapter
from sqlalchemy.orm import Session

from bizcalc.domain.views import TaxReport
from bizcalc.repositories.sqlalchemy.orm_models import TaxReportORM

_REPORT_ADAPTER = TypeAdapter(TaxReport)


class SqlAlchemyTaxReportRepository:
    """SQLAlchemy-backed tax report repository."""

    def __init__(self, db: Session):
        self._db = db

    def save(self, report: TaxReport) -> TaxReport:
        """Persist a report, replacing any stored report with the same ID."""
        orm_report = self._db.query(TaxReportORM).filter(
            TaxReportORM.report_id == report.report_id
        ).first()
        if orm_report is None:
            orm_report = TaxReportORM(report_id=report.report_id)
            self._db.add(orm_report)

        orm_report.portfolio_id = report.portfolio_id
        orm_report.tax_year = report.tax_year
        orm_report.cost_basis_method = report.cost_basis_method
        orm_report.net_realized_gain_loss = report.summary.net_realized_gain_loss
        orm_report.generated_at = report.generated_at
        orm_report.payload = _REPORT_ADAPTER.dump_json(report).decode("utf-8")

        self._db.commit()
        self._db.refresh(orm_report)
        return self._to_domain(orm_report)

    def get_by_id(self, report_id: str) -> Optional[TaxReport]:
        """Retrieve report by ID."""
        orm_report = self._db.query(TaxReportORM).filter(
            TaxReportORM.report_id == report_id
        ).first()
        return self._to_domain(orm_report) if orm_report else None

    def list_by_portfolio(
        self,
        portfolio_id: str,
        tax_year: Optional[int] = None,
    ) -> list[TaxReport]:
        """List reports for a portfolio, newest first."""
        query = self._db.query(TaxReportORM).filter(
            TaxReportORM.portfolio_id == portfolio_id
        )
        if tax_year is not None:
            query = query.filter(TaxReportORM.tax_year == tax_year)
        query = query.order_by(TaxReportORM.generated_at.desc(), TaxReportORM.created_at.desc())
        return [self._to_domain(r) for r in query.all()]

    def delete(self, report_id: str) -> None:
        """Delete a report (hard delete)."""
        self._db.query(TaxReportORM).filter(
            TaxReportORM.report_id == report_id
        ).delete()
        self._db.commit()

    @staticmethod
    def _to_domain(orm: TaxReportORM) -> TaxReport:
        """Convert ORM model to domain model."""
        return _REPORT_ADAPTER.validate_json(orm.payload)
