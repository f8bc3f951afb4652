"""Portfolio transaction and tax lot domain models."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from bizcalc.core.dates import to_utc_date
from bizcalc.core.money import to_decimal
from bizcalc.domain.models.enums import TransactionType, DividendType, InterestType


@dataclass
class Transaction:
    """
    Portfolio transaction fed to the tax-lot classifier and income reports.

    Supports: BUY, SELL, DIVIDEND, INTEREST.
    - BUY/SELL require symbol, quantity, price
    - SELL may name the lot it consumes (lot_id) for specific-ID matching
    - DIVIDEND/INTEREST require amount
    - Fractional shares supported via Decimal
    """

    txn_id: str
    txn_type: TransactionType
    trade_date: date
    symbol: Optional[str] = None
    quantity: Optional[Decimal] = None
    price: Optional[Decimal] = None
    fees: Decimal = field(default_factory=lambda: Decimal("0"))
    amount: Optional[Decimal] = None
    lot_id: Optional[str] = None
    dividend_type: Optional[DividendType] = None
    interest_type: Optional[InterestType] = None
    foreign_tax_paid: Decimal = field(default_factory=lambda: Decimal("0"))
    reinvested: bool = False
    source: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.txn_type, str):
            self.txn_type = TransactionType(self.txn_type.upper())
        if isinstance(self.dividend_type, str):
            self.dividend_type = DividendType(self.dividend_type)
        if isinstance(self.interest_type, str):
            self.interest_type = InterestType(self.interest_type)
        self.trade_date = to_utc_date(self.trade_date)
        if self.symbol:
            self.symbol = self.symbol.strip().upper()
        if self.quantity is not None:
            self.quantity = to_decimal(self.quantity, "quantity")
        if self.price is not None:
            self.price = to_decimal(self.price, "price")
        if self.amount is not None:
            self.amount = to_decimal(self.amount, "amount")
        self.fees = to_decimal(self.fees, "fees")
        self.foreign_tax_paid = to_decimal(self.foreign_tax_paid, "foreign_tax_paid")

    @property
    def is_trade(self) -> bool:
        """Return True if this is a BUY or SELL transaction."""
        return self.txn_type in (TransactionType.BUY, TransactionType.SELL)


@dataclass
class Lot:
    """
    Open purchase lot.

    Created on a BUY and consumed, fully or partially, by SELLs. The lot's
    cost for its remaining quantity is remaining_cost; cost_basis_adjustment
    holds disallowed wash-sale losses added to the lot.
    """

    lot_id: str
    symbol: str
    quantity: Decimal
    purchase_date: date
    purchase_price: Decimal
    fees: Decimal = field(default_factory=lambda: Decimal("0"))
    cost_basis_adjustment: Decimal = field(default_factory=lambda: Decimal("0"))
    remaining_cost: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if self.remaining_cost is None:
            self.remaining_cost = (
                self.quantity * self.purchase_price + self.fees + self.cost_basis_adjustment
            )

    @property
    def cost_basis(self) -> Decimal:
        """Cost basis of the remaining quantity (full precision)."""
        return self.remaining_cost

    @property
    def is_depleted(self) -> bool:
        return self.quantity <= 0

    def adjust_basis(self, amount: Decimal) -> None:
        """Add a disallowed loss (or other adjustment) to this lot's basis."""
        self.cost_basis_adjustment += amount
        self.remaining_cost += amount

    def consume(self, quantity: Decimal) -> Decimal:
        """
        Remove quantity from the lot and return the cost it carried.

        Cost leaves the lot pro rata, so the unit cost of what remains is
        unchanged.
        """
        if quantity >= self.quantity:
            cost = self.remaining_cost
            self.quantity = Decimal("0")
            self.remaining_cost = Decimal("0")
            return cost
        cost = self.remaining_cost * quantity / self.quantity
        self.quantity -= quantity
        self.remaining_cost -= cost
        return cost
