"""Line item domain model for invoices and estimates."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from bizcalc.core.money import to_decimal
from bizcalc.domain.models.enums import LineItemKind


@dataclass
class LineItem:
    """
    Single priced line on an invoice or estimate.

    - total_price = quantity x unit_price
    - is_taxable defaults to True
    - tax_rate, when set, overrides the document tax rate for this line
    - discount_amount is only read from lines of kind DISCOUNT
    """

    id: str
    kind: LineItemKind
    quantity: Decimal
    unit_price: Decimal
    is_taxable: bool = True
    tax_rate: Optional[Decimal] = None
    discount_amount: Optional[Decimal] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.kind, str):
            self.kind = LineItemKind(self.kind)
        self.quantity = to_decimal(self.quantity, "quantity")
        self.unit_price = to_decimal(self.unit_price, "unit_price")
        if self.tax_rate is not None:
            self.tax_rate = to_decimal(self.tax_rate, "tax_rate")
        if self.discount_amount is not None:
            self.discount_amount = to_decimal(self.discount_amount, "discount_amount")

    @property
    def total_price(self) -> Decimal:
        """Extended price of the line (full precision)."""
        return self.quantity * self.unit_price
