"""Domain models package."""

from bizcalc.domain.models.enums import (
    LineItemKind,
    PaymentTerm,
    InvoiceStatus,
    TransactionType,
    CostBasisMethod,
    HoldingTerm,
    DividendType,
    InterestType,
)
from bizcalc.domain.models.line_item import LineItem
from bizcalc.domain.models.markup import MarkupPricing
from bizcalc.domain.models.transaction import Transaction, Lot
from bizcalc.domain.models.invoice import InvoiceDraft, Payment

__all__ = [
    "LineItemKind",
    "PaymentTerm",
    "InvoiceStatus",
    "TransactionType",
    "CostBasisMethod",
    "HoldingTerm",
    "DividendType",
    "InterestType",
    "LineItem",
    "MarkupPricing",
    "Transaction",
    "Lot",
    "InvoiceDraft",
    "Payment",
]
