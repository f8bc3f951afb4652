"""Tax report repository protocol."""

from typing import Protocol, Optional

from bizcalc.domain.views import TaxReport


class TaxReportRepository(Protocol):
    """Interface for generated tax report storage."""

    def save(self, report: TaxReport) -> TaxReport:
        """Persist a report (insert or replace by report_id)."""
        ...

    def get_by_id(self, report_id: str) -> Optional[TaxReport]:
        """Retrieve report by ID."""
        ...

    def list_by_portfolio(
        self,
        portfolio_id: str,
        tax_year: Optional[int] = None,
    ) -> list[TaxReport]:
        """List reports for a portfolio, newest first."""
        ...

    def delete(self, report_id: str) -> None:
        """Delete a report (hard delete)."""
        ...
