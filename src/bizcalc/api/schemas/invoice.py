"""Pydantic schemas for invoice and estimate endpoints."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from bizcalc.api.schemas.pricing import LineItemRequest, PricingResponse
from bizcalc.domain.models import InvoiceStatus, Payment, PaymentTerm


class InvoiceQuoteRequest(BaseModel):
    """Request schema for quoting an invoice."""

    customer_id: str = Field(..., min_length=1, description="Customer ID")
    title: Optional[str] = Field(default=None, max_length=255)
    line_items: list[LineItemRequest]
    issue_date: date
    payment_term: Optional[str] = Field(
        default="net_30",
        description="due_on_receipt, net_15, net_30, net_60 or custom",
    )
    custom_due_date: Optional[date] = None
    tax_rate: Optional[Decimal] = Field(default=None, ge=0)


class RiskFlagResponse(BaseModel):
    """Response schema for a risk flag."""

    model_config = {"from_attributes": True}

    type: str
    description: str
    confidence: Decimal


class RiskAssessmentResponse(BaseModel):
    """Response schema for a risk assessment."""

    model_config = {"from_attributes": True}

    score: int
    flags: list[RiskFlagResponse]
    scorer: str


class InvoiceQuoteResponse(BaseModel):
    """Response schema for an invoice quote."""

    model_config = {"from_attributes": True}

    customer_id: str
    title: Optional[str] = None
    issue_date: date
    due_date: date
    payment_term: PaymentTerm
    term_fallback_applied: bool
    pricing: PricingResponse
    risk: RiskAssessmentResponse


class DueDateRequest(BaseModel):
    """Request schema for resolving a due date."""

    payment_term: Optional[str] = None
    issue_date: date
    custom_due_date: Optional[date] = None


class DueDateResponse(BaseModel):
    """Response schema for a resolved due date."""

    payment_term: PaymentTerm
    issue_date: date
    due_date: date
    term_fallback_applied: bool


class PaymentRequest(BaseModel):
    """Request schema for a payment against an invoice."""

    amount: Decimal = Field(..., ge=0)
    payment_date: date
    method: str = Field(default="other", max_length=50)
    reference_number: Optional[str] = Field(default=None, max_length=100)

    def to_domain(self) -> Payment:
        return Payment(
            amount=self.amount,
            payment_date=self.payment_date,
            method=self.method,
            reference_number=self.reference_number,
        )


class InvoiceBalanceRequest(BaseModel):
    """Request schema for an invoice balance."""

    total_amount: Decimal
    payments: list[PaymentRequest] = Field(default_factory=list)
    due_date: date
    as_of: Optional[date] = Field(default=None, description="Balance date; defaults to today (UTC)")
    late_fee_rate: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Late fee per 30 overdue days, as a fraction of the outstanding amount",
    )


class InvoiceBalanceResponse(BaseModel):
    """Response schema for an invoice balance."""

    model_config = {"from_attributes": True}

    total_amount: Decimal
    amount_paid: Decimal
    amount_due: Decimal
    days_overdue: int
    late_fees: Decimal
    status: InvoiceStatus
    last_payment_date: Optional[date] = None


class EstimateExpiryRequest(BaseModel):
    """Request schema for an estimate expiry date."""

    issue_date: date
    validity_period_days: Optional[int] = Field(default=None, ge=0)


class EstimateExpiryResponse(BaseModel):
    """Response schema for an estimate expiry date."""

    issue_date: date
    validity_period_days: int
    expires_date: date
