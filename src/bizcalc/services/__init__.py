"""Service layer - calculators and report orchestration."""

from bizcalc.services.pricing_calculator import compute_pricing, validate_line_items
from bizcalc.services.payment_terms import (
    parse_payment_term,
    resolve_due_date,
    resolve_expiry_date,
    compute_invoice_balance,
)
from bizcalc.services.markup_calculator import compute_markup_pricing
from bizcalc.services.tax_lot_engine import TaxLotEngine, classify_gains, summarize_gains
from bizcalc.services.tax_report_service import (
    TaxReportService,
    build_tax_summary,
    build_dividend_income_report,
    build_interest_income_report,
    build_tax_forms,
    value_open_lots,
)
from bizcalc.services.risk import RiskScorer, NullRiskScorer
from bizcalc.services.invoice_service import InvoiceService

__all__ = [
    "compute_pricing",
    "validate_line_items",
    "parse_payment_term",
    "resolve_due_date",
    "resolve_expiry_date",
    "compute_invoice_balance",
    "compute_markup_pricing",
    "TaxLotEngine",
    "classify_gains",
    "summarize_gains",
    "TaxReportService",
    "build_tax_summary",
    "build_dividend_income_report",
    "build_interest_income_report",
    "build_tax_forms",
    "value_open_lots",
    "RiskScorer",
    "NullRiskScorer",
    "InvoiceService",
]
