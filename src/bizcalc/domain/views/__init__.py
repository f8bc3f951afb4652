"""View models for calculator outputs."""

from bizcalc.domain.views.pricing import (
    PricingResult,
    MarkupPricingResult,
    InvoiceBalance,
    RiskFlag,
    RiskAssessment,
    InvoiceQuote,
)
from bizcalc.domain.views.tax import (
    ESTIMATE_DISCLAIMER,
    CapitalGainTransaction,
    WashSaleAdjustment,
    CapitalGainsReport,
    DividendLine,
    DividendIncomeReport,
    InterestLine,
    InterestIncomeReport,
    HoldingValuation,
    UnrealizedGains,
    TaxReportSummary,
    TaxForm,
    TaxReport,
)

__all__ = [
    "PricingResult",
    "MarkupPricingResult",
    "InvoiceBalance",
    "RiskFlag",
    "RiskAssessment",
    "InvoiceQuote",
    "ESTIMATE_DISCLAIMER",
    "CapitalGainTransaction",
    "WashSaleAdjustment",
    "CapitalGainsReport",
    "DividendLine",
    "DividendIncomeReport",
    "InterestLine",
    "InterestIncomeReport",
    "HoldingValuation",
    "UnrealizedGains",
    "TaxReportSummary",
    "TaxForm",
    "TaxReport",
]
