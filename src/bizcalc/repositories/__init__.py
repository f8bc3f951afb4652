"""Repository layer - data access abstractions and implementations."""

from bizcalc.repositories.protocols import TaxReportRepository

__all__ = [
    "TaxReportRepository",
]
