"""View models for capital gains and tax reporting outputs."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from bizcalc.domain.models.enums import (
    CostBasisMethod,
    HoldingTerm,
    DividendType,
    InterestType,
)
from bizcalc.domain.models.transaction import Lot

ESTIMATE_DISCLAIMER = (
    "Estimated liability uses flat, bracket-free rates and is not a "
    "filing-grade tax calculation."
)


@dataclass
class CapitalGainTransaction:
    """
    One matched (purchase lot, sale) pair.

    gain_loss is proceeds - cost_basis before any wash-sale adjustment;
    wash_sale_adjustment is the disallowed loss as a positive amount.
    """

    transaction_id: str
    lot_id: str
    symbol: str
    quantity: Decimal
    purchase_date: date
    sale_date: date
    purchase_price: Decimal
    sale_price: Decimal
    cost_basis: Decimal
    proceeds: Decimal
    gain_loss: Decimal
    holding_period: int
    term: HoldingTerm
    is_wash_sale: bool = False
    wash_sale_adjustment: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def is_long_term(self) -> bool:
        return self.term == HoldingTerm.LONG_TERM

    @property
    def adjusted_gain_loss(self) -> Decimal:
        """Gain/loss after adding back any disallowed wash-sale loss."""
        return self.gain_loss + self.wash_sale_adjustment


@dataclass
class WashSaleAdjustment:
    """Disallowed loss moved onto a replacement lot."""

    sale_transaction_id: str
    symbol: str
    sale_date: date
    sale_quantity: Decimal
    replacement_txn_id: str
    replacement_date: date
    replacement_quantity: Decimal
    disallowed_loss: Decimal
    adjusted_cost_basis: Optional[Decimal] = None
    reason: str = ""


@dataclass
class CapitalGainsReport:
    """Classified realized gains for a set of transactions."""

    method: CostBasisMethod
    short_term_gains: list[CapitalGainTransaction] = field(default_factory=list)
    long_term_gains: list[CapitalGainTransaction] = field(default_factory=list)
    short_term_total: Decimal = field(default_factory=lambda: Decimal("0"))
    long_term_total: Decimal = field(default_factory=lambda: Decimal("0"))
    wash_sales_adjustment: Decimal = field(default_factory=lambda: Decimal("0"))
    net_capital_gain: Decimal = field(default_factory=lambda: Decimal("0"))
    wash_sales: list[WashSaleAdjustment] = field(default_factory=list)
    open_lots: list[Lot] = field(default_factory=list)

    @property
    def transactions(self) -> list[CapitalGainTransaction]:
        """All matched pairs, short-term first."""
        return self.short_term_gains + self.long_term_gains

    @property
    def total_proceeds(self) -> Decimal:
        return sum((t.proceeds for t in self.transactions), Decimal("0"))

    @property
    def total_cost_basis(self) -> Decimal:
        return sum((t.cost_basis for t in self.transactions), Decimal("0"))


@dataclass
class DividendLine:
    """Single dividend payment."""

    transaction_id: str
    symbol: Optional[str]
    pay_date: date
    amount: Decimal
    dividend_type: DividendType
    foreign_tax_paid: Decimal = field(default_factory=lambda: Decimal("0"))
    reinvested: bool = False


@dataclass
class DividendIncomeReport:
    """Dividend income grouped by 1099-DIV classification."""

    ordinary_dividends: list[DividendLine] = field(default_factory=list)
    qualified_dividends: list[DividendLine] = field(default_factory=list)
    capital_gain_distributions: list[DividendLine] = field(default_factory=list)
    return_of_capital: list[DividendLine] = field(default_factory=list)
    total_ordinary_dividends: Decimal = field(default_factory=lambda: Decimal("0"))
    total_qualified_dividends: Decimal = field(default_factory=lambda: Decimal("0"))
    total_capital_gain_distributions: Decimal = field(default_factory=lambda: Decimal("0"))
    total_return_of_capital: Decimal = field(default_factory=lambda: Decimal("0"))
    foreign_dividends: Decimal = field(default_factory=lambda: Decimal("0"))
    foreign_tax_paid: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class InterestLine:
    """Single interest payment."""

    transaction_id: str
    source: Optional[str]
    payment_date: date
    amount: Decimal
    interest_type: InterestType
    reinvested: bool = False


@dataclass
class InterestIncomeReport:
    """Interest income; total_interest_income counts taxable and foreign lines."""

    transactions: list[InterestLine] = field(default_factory=list)
    total_interest_income: Decimal = field(default_factory=lambda: Decimal("0"))
    tax_exempt_interest: Decimal = field(default_factory=lambda: Decimal("0"))
    foreign_interest: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class HoldingValuation:
    """Open position valued at a market price."""

    symbol: str
    quantity: Decimal
    cost_basis: Decimal
    market_value: Decimal
    unrealized_gain_loss: Decimal
    unrealized_gain_loss_percent: Optional[Decimal] = None
    weight_percent: Optional[Decimal] = None


@dataclass
class UnrealizedGains:
    """Valuation of all open lots that have a price."""

    holdings: list[HoldingValuation] = field(default_factory=list)
    total_unrealized_gains: Decimal = field(default_factory=lambda: Decimal("0"))
    total_unrealized_losses: Decimal = field(default_factory=lambda: Decimal("0"))
    net_unrealized_gain_loss: Decimal = field(default_factory=lambda: Decimal("0"))
    unpriced_symbols: list[str] = field(default_factory=list)


@dataclass
class TaxReportSummary:
    """
    Roll-up of realized gains and income.

    estimated_tax_owed is an approximation (see disclaimer), never a
    filing-grade number.
    """

    total_realized_gains: Decimal
    total_realized_losses: Decimal
    net_realized_gain_loss: Decimal
    total_dividend_income: Decimal
    total_interest_income: Decimal
    total_tax_liability: Decimal
    estimated_tax_owed: Decimal
    tax_loss_carryforward: Decimal
    total_unrealized_gains: Decimal = field(default_factory=lambda: Decimal("0"))
    total_unrealized_losses: Decimal = field(default_factory=lambda: Decimal("0"))
    net_unrealized_gain_loss: Decimal = field(default_factory=lambda: Decimal("0"))
    is_estimate: bool = True
    disclaimer: str = ESTIMATE_DISCLAIMER


@dataclass
class TaxForm:
    """Summary totals for an information return."""

    form_type: str
    form_data: dict[str, Any] = field(default_factory=dict)


@dataclass
class TaxReport:
    """Full tax report for one portfolio and tax year."""

    report_id: str
    portfolio_id: str
    tax_year: int
    generated_at: datetime
    start_date: date
    end_date: date
    cost_basis_method: CostBasisMethod
    summary: TaxReportSummary
    capital_gains: CapitalGainsReport
    dividend_income: DividendIncomeReport
    interest_income: InterestIncomeReport
    unrealized: Optional[UnrealizedGains] = None
    forms: list[TaxForm] = field(default_factory=list)
