"""Pydantic schemas for API request/response."""

from bizcalc.api.schemas.pricing import (
    LineItemRequest,
    PricingRequest,
    PricingResponse,
    MarkupRequest,
    MarkupResponse,
    to_line_items,
)
from bizcalc.api.schemas.invoice import (
    InvoiceQuoteRequest,
    InvoiceQuoteResponse,
    RiskFlagResponse,
    RiskAssessmentResponse,
    DueDateRequest,
    DueDateResponse,
    PaymentRequest,
    InvoiceBalanceRequest,
    InvoiceBalanceResponse,
    EstimateExpiryRequest,
    EstimateExpiryResponse,
)
from bizcalc.api.schemas.tax import (
    TransactionRequest,
    CapitalGainsRequest,
    CapitalGainsResponse,
    TaxReportRequest,
    TaxReportResponse,
    TaxReportListItem,
    TaxReportListResponse,
)

__all__ = [
    "LineItemRequest",
    "PricingRequest",
    "PricingResponse",
    "MarkupRequest",
    "MarkupResponse",
    "to_line_items",
    "InvoiceQuoteRequest",
    "InvoiceQuoteResponse",
    "RiskFlagResponse",
    "RiskAssessmentResponse",
    "DueDateRequest",
    "DueDateResponse",
    "PaymentRequest",
    "InvoiceBalanceRequest",
    "InvoiceBalanceResponse",
    "EstimateExpiryRequest",
    "EstimateExpiryResponse",
    "TransactionRequest",
    "CapitalGainsRequest",
    "CapitalGainsResponse",
    "TaxReportRequest",
    "TaxReportResponse",
    "TaxReportListItem",
    "TaxReportListResponse",
]
