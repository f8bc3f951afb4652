"""Enumerations for domain models."""

from enum import Enum
from typing import Optional, Union

from bizcalc.core.exceptions import UnsupportedCostBasisMethodError


class LineItemKind(str, Enum):
    """Kinds of invoice/estimate line items."""

    SERVICE = "service"
    PART = "part"
    LABOR = "labor"
    MATERIAL = "material"
    TAX = "tax"
    DISCOUNT = "discount"
    FEE = "fee"


class PaymentTerm(str, Enum):
    """Invoice payment terms."""

    DUE_ON_RECEIPT = "due_on_receipt"
    NET_15 = "net_15"
    NET_30 = "net_30"
    NET_60 = "net_60"
    CUSTOM = "custom"  # caller supplies the due date

    @property
    def offset_days(self) -> Optional[int]:
        """Days after issue date; None for CUSTOM."""
        return _TERM_OFFSETS.get(self)


_TERM_OFFSETS = {
    PaymentTerm.DUE_ON_RECEIPT: 0,
    PaymentTerm.NET_15: 15,
    PaymentTerm.NET_30: 30,
    PaymentTerm.NET_60: 60,
}


class InvoiceStatus(str, Enum):
    """Payment status derived from an invoice balance."""

    UNPAID = "unpaid"
    PARTIAL_PAID = "partial_paid"
    PAID = "paid"
    OVERDUE = "overdue"


class TransactionType(str, Enum):
    """Types of portfolio transactions."""

    BUY = "BUY"
    SELL = "SELL"
    DIVIDEND = "DIVIDEND"
    INTEREST = "INTEREST"


class CostBasisMethod(str, Enum):
    """Methods for matching sold units to purchase lots."""

    FIFO = "fifo"  # First In, First Out (default)
    LIFO = "lifo"  # Last In, First Out
    AVERAGE_COST = "average_cost"  # Blended cost across open lots
    SPECIFIC_ID = "specific_id"  # Sale names the lot it consumes

    @classmethod
    def parse(cls, value: Union[str, "CostBasisMethod"]) -> "CostBasisMethod":
        """Accept enum members or case-insensitive names/values."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value, member.name.lower()):
                return member
        raise UnsupportedCostBasisMethodError(str(value))


class HoldingTerm(str, Enum):
    """Capital gain holding-period classification."""

    SHORT_TERM = "short_term"
    LONG_TERM = "long_term"


class DividendType(str, Enum):
    """Dividend classifications reported on 1099-DIV."""

    ORDINARY = "ordinary"
    QUALIFIED = "qualified"
    CAPITAL_GAINS = "capital_gains"
    RETURN_OF_CAPITAL = "return_of_capital"


class InterestType(str, Enum):
    """Interest income classifications."""

    TAXABLE = "taxable"
    TAX_EXEMPT = "tax_exempt"
    FOREIGN = "foreign"
