"""View models for pricing and invoice outputs."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from bizcalc.domain.models.enums import PaymentTerm, InvoiceStatus


@dataclass
class PricingResult:
    """Totals for a set of line items. All amounts are two-place Decimals."""

    subtotal: Decimal
    total_tax: Decimal
    total_discounts: Decimal
    total_fees: Decimal
    total_amount: Decimal
    taxable_amount: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class MarkupPricingResult:
    """Cost-plus price breakdown."""

    subtotal: Decimal
    total_with_markup: Decimal
    costs: Decimal
    profit: Decimal
    profit_margin_percent: Decimal


@dataclass
class InvoiceBalance:
    """Outstanding balance of an invoice as of a date."""

    total_amount: Decimal
    amount_paid: Decimal
    amount_due: Decimal
    days_overdue: int
    late_fees: Decimal
    status: InvoiceStatus
    last_payment_date: Optional[date] = None


@dataclass
class RiskFlag:
    """Single indicator raised by a risk scorer."""

    type: str
    description: str
    confidence: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class RiskAssessment:
    """Risk scorer output; score is 0-100."""

    score: int = 0
    flags: list[RiskFlag] = field(default_factory=list)
    scorer: str = "none"


@dataclass
class InvoiceQuote:
    """Priced invoice with resolved due date and risk assessment."""

    customer_id: str
    issue_date: date
    due_date: date
    payment_term: PaymentTerm
    pricing: PricingResult
    risk: RiskAssessment
    title: Optional[str] = None
    term_fallback_applied: bool = False
