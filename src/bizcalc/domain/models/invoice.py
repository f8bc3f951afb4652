"""Invoice draft and payment domain models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from bizcalc.core.dates import to_utc_date
from bizcalc.core.money import to_decimal
from bizcalc.domain.models.enums import PaymentTerm
from bizcalc.domain.models.line_item import LineItem


@dataclass
class Payment:
    """Payment recorded against an invoice."""

    amount: Decimal
    payment_date: date
    method: str = "other"
    reference_number: Optional[str] = None

    def __post_init__(self) -> None:
        self.amount = to_decimal(self.amount, "amount")
        self.payment_date = to_utc_date(self.payment_date)


@dataclass
class InvoiceDraft:
    """
    Input for quoting an invoice.

    payment_term may be an unknown string; the due date resolver falls
    back to net 30 for those.
    """

    customer_id: str
    line_items: list[LineItem]
    issue_date: date
    payment_term: Union[PaymentTerm, str] = PaymentTerm.NET_30
    custom_due_date: Optional[date] = None
    tax_rate: Optional[Decimal] = None
    title: Optional[str] = None

    def __post_init__(self) -> None:
        self.issue_date = to_utc_date(self.issue_date)
        if self.custom_due_date is not None:
            self.custom_due_date = to_utc_date(self.custom_due_date)
        if self.tax_rate is not None:
            self.tax_rate = to_decimal(self.tax_rate, "tax_rate")
