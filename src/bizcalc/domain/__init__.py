"""Domain layer - pure business models with no external dependencies."""

from bizcalc.domain.models import (
    LineItem,
    MarkupPricing,
    Transaction,
    Lot,
    InvoiceDraft,
    Payment,
    LineItemKind,
    PaymentTerm,
    InvoiceStatus,
    TransactionType,
    CostBasisMethod,
    HoldingTerm,
    DividendType,
    InterestType,
)

__all__ = [
    "LineItem",
    "MarkupPricing",
    "Transaction",
    "Lot",
    "InvoiceDraft",
    "Payment",
    "LineItemKind",
    "PaymentTerm",
    "InvoiceStatus",
    "TransactionType",
    "CostBasisMethod",
    "HoldingTerm",
    "DividendType",
    "InterestType",
]
