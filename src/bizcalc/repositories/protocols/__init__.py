"""Repository protocol definitions (interfaces)."""

from bizcalc.repositories.protocols.report_repo import TaxReportRepository

__all__ = [
    "TaxReportRepository",
]
