"""Pydantic schemas for capital gains and tax report endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from bizcalc.domain.models import (
    CostBasisMethod,
    DividendType,
    HoldingTerm,
    InterestType,
    Transaction,
    TransactionType,
)


class TransactionRequest(BaseModel):
    """Request schema for a portfolio transaction."""

    txn_id: Optional[str] = Field(default=None, description="Transaction ID; generated if omitted")
    txn_type: TransactionType = Field(..., description="BUY, SELL, DIVIDEND or INTEREST")
    trade_date: date
    symbol: Optional[str] = Field(default=None, max_length=20)
    quantity: Optional[Decimal] = Field(default=None, description="Units (BUY/SELL)")
    price: Optional[Decimal] = Field(default=None, description="Price per unit (BUY/SELL)")
    fees: Decimal = Field(default=Decimal("0"), ge=0)
    amount: Optional[Decimal] = Field(default=None, description="Cash amount (DIVIDEND/INTEREST)")
    lot_id: Optional[str] = Field(default=None, description="Lot consumed by a specific-ID sale")
    dividend_type: Optional[DividendType] = None
    interest_type: Optional[InterestType] = None
    foreign_tax_paid: Decimal = Field(default=Decimal("0"), ge=0)
    reinvested: bool = False
    source: Optional[str] = Field(default=None, max_length=255)

    @field_validator("symbol")
    @classmethod
    def uppercase_symbol(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else None

    def to_domain(self) -> Transaction:
        return Transaction(
            txn_id=self.txn_id or str(uuid.uuid4()),
            txn_type=self.txn_type,
            trade_date=self.trade_date,
            symbol=self.symbol,
            quantity=self.quantity,
            price=self.price,
            fees=self.fees,
            amount=self.amount,
            lot_id=self.lot_id,
            dividend_type=self.dividend_type,
            interest_type=self.interest_type,
            foreign_tax_paid=self.foreign_tax_paid,
            reinvested=self.reinvested,
            source=self.source,
        )


class CapitalGainsRequest(BaseModel):
    """Request schema for classifying realized gains."""

    transactions: list[TransactionRequest]
    method: str = Field(default="fifo", description="fifo, lifo, average_cost or specific_id")


class TaxReportRequest(BaseModel):
    """Request schema for generating a tax report."""

    portfolio_id: str = Field(..., min_length=1, max_length=64)
    tax_year: int
    transactions: list[TransactionRequest]
    method: str = Field(default="fifo", description="fifo, lifo, average_cost or specific_id")
    prices: Optional[dict[str, Decimal]] = Field(
        default=None,
        description="Market prices by symbol for valuing open lots",
    )


class CapitalGainTransactionResponse(BaseModel):
    """Response schema for one matched (lot, sale) pair."""

    model_config = {"from_attributes": True}

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
    is_wash_sale: bool
    wash_sale_adjustment: Decimal


class WashSaleResponse(BaseModel):
    """Response schema for a wash-sale adjustment."""

    model_config = {"from_attributes": True}

    sale_transaction_id: str
    symbol: str
    sale_date: date
    sale_quantity: Decimal
    replacement_txn_id: str
    replacement_date: date
    replacement_quantity: Decimal
    disallowed_loss: Decimal
    adjusted_cost_basis: Optional[Decimal] = None
    reason: str


class LotResponse(BaseModel):
    """Response schema for an open lot."""

    model_config = {"from_attributes": True}

    lot_id: str
    symbol: str
    quantity: Decimal
    purchase_date: date
    purchase_price: Decimal
    fees: Decimal
    cost_basis_adjustment: Decimal
    cost_basis: Decimal


class CapitalGainsResponse(BaseModel):
    """Response schema for classified realized gains."""

    model_config = {"from_attributes": True}

    method: CostBasisMethod
    short_term_gains: list[CapitalGainTransactionResponse]
    long_term_gains: list[CapitalGainTransactionResponse]
    short_term_total: Decimal
    long_term_total: Decimal
    wash_sales_adjustment: Decimal
    net_capital_gain: Decimal
    total_proceeds: Decimal
    total_cost_basis: Decimal
    wash_sales: list[WashSaleResponse]
    open_lots: list[LotResponse]


class DividendLineResponse(BaseModel):
    """Response schema for a dividend payment."""

    model_config = {"from_attributes": True}

    transaction_id: str
    symbol: Optional[str] = None
    pay_date: date
    amount: Decimal
    dividend_type: DividendType
    foreign_tax_paid: Decimal
    reinvested: bool


class DividendIncomeResponse(BaseModel):
    """Response schema for dividend income."""

    model_config = {"from_attributes": True}

    ordinary_dividends: list[DividendLineResponse]
    qualified_dividends: list[DividendLineResponse]
    capital_gain_distributions: list[DividendLineResponse]
    return_of_capital: list[DividendLineResponse]
    total_ordinary_dividends: Decimal
    total_qualified_dividends: Decimal
    total_capital_gain_distributions: Decimal
    total_return_of_capital: Decimal
    foreign_dividends: Decimal
    foreign_tax_paid: Decimal


class InterestLineResponse(BaseModel):
    """Response schema for an interest payment."""

    model_config = {"from_attributes": True}

    transaction_id: str
    source: Optional[str] = None
    payment_date: date
    amount: Decimal
    interest_type: InterestType
    reinvested: bool


class InterestIncomeResponse(BaseModel):
    """Response schema for interest income."""

    model_config = {"from_attributes": True}

    transactions: list[InterestLineResponse]
    total_interest_income: Decimal
    tax_exempt_interest: Decimal
    foreign_interest: Decimal


class HoldingValuationResponse(BaseModel):
    """Response schema for a valued holding."""

    model_config = {"from_attributes": True}

    symbol: str
    quantity: Decimal
    cost_basis: Decimal
    market_value: Decimal
    unrealized_gain_loss: Decimal
    unrealized_gain_loss_percent: Optional[Decimal] = None
    weight_percent: Optional[Decimal] = None


class UnrealizedGainsResponse(BaseModel):
    """Response schema for unrealized gains."""

    model_config = {"from_attributes": True}

    holdings: list[HoldingValuationResponse]
    total_unrealized_gains: Decimal
    total_unrealized_losses: Decimal
    net_unrealized_gain_loss: Decimal
    unpriced_symbols: list[str]


class TaxSummaryResponse(BaseModel):
    """Response schema for a tax summary."""

    model_config = {"from_attributes": True}

    total_realized_gains: Decimal
    total_realized_losses: Decimal
    net_realized_gain_loss: Decimal
    total_dividend_income: Decimal
    total_interest_income: Decimal
    total_tax_liability: Decimal
    estimated_tax_owed: Decimal
    tax_loss_carryforward: Decimal
    total_unrealized_gains: Decimal
    total_unrealized_losses: Decimal
    net_unrealized_gain_loss: Decimal
    is_estimate: bool
    disclaimer: str


class TaxFormResponse(BaseModel):
    """Response schema for information-return totals."""

    model_config = {"from_attributes": True}

    form_type: str
    form_data: dict[str, str]


class TaxReportResponse(BaseModel):
    """Response schema for a full tax report."""

    model_config = {"from_attributes": True}

    report_id: str
    portfolio_id: str
    tax_year: int
    generated_at: datetime
    start_date: date
    end_date: date
    cost_basis_method: CostBasisMethod
    summary: TaxSummaryResponse
    capital_gains: CapitalGainsResponse
    dividend_income: DividendIncomeResponse
    interest_income: InterestIncomeResponse
    unrealized: Optional[UnrealizedGainsResponse] = None
    forms: list[TaxFormResponse]


class TaxReportListItem(BaseModel):
    """Response schema for a stored report in a listing."""

    report_id: str
    portfolio_id: str
    tax_year: int
    generated_at: datetime
    cost_basis_method: CostBasisMethod
    net_realized_gain_loss: Decimal
    estimated_tax_owed: Decimal


class TaxReportListResponse(BaseModel):
    """Response schema for listing stored reports."""

    reports: list[TaxReportListItem]
    count: int
