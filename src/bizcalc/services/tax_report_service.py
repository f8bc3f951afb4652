"""Tax report aggregation: summary, income reports, valuations and stored reports."""

import logging
import uuid
from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable, Iterable, Mapping, Optional, Union

from bizcalc.config.tax_assumptions import TaxAssumptions
from bizcalc.core.dates import now_utc
from bizcalc.core.exceptions import NotFoundError, ValidationError
from bizcalc.core.money import HUNDRED, ZERO, round_money, round_percent, to_decimal
from bizcalc.domain.models import (
    CostBasisMethod,
    DividendType,
    InterestType,
    Lot,
    Transaction,
    TransactionType,
)
from bizcalc.domain.views import (
    CapitalGainsReport,
    DividendIncomeReport,
    DividendLine,
    HoldingValuation,
    InterestIncomeReport,
    InterestLine,
    TaxForm,
    TaxReport,
    TaxReportSummary,
    UnrealizedGains,
)
from bizcalc.repositories.protocols import TaxReportRepository
from bizcalc.services.tax_lot_engine import TaxLotEngine, summarize_gains

logger = logging.getLogger(__name__)


def build_tax_summary(
    capital_gains: CapitalGainsReport,
    dividend_income: DividendIncomeReport,
    interest_income: InterestIncomeReport,
    assumptions: Optional[TaxAssumptions] = None,
    unrealized: Optional[UnrealizedGains] = None,
) -> TaxReportSummary:
    """
    Roll realized gains and income up into a TaxReportSummary.

    Losses beyond the capital-loss deduction limit carry forward. The tax
    estimate nets short- and long-term results against each other first,
    then applies flat rates: long-term gains and capital-gain distributions
    at the long-term rate, short-term gains at the short-term rate,
    qualified dividends at the qualified rate, ordinary dividends and
    taxable interest at the ordinary rate.
    """
    assumptions = assumptions or TaxAssumptions()
    rounding = assumptions.rounding

    net = capital_gains.net_capital_gain
    realized_gains = max(net, ZERO)
    realized_losses = abs(min(net, ZERO))
    carryforward = max(-net - assumptions.capital_loss_deduction_limit, ZERO)

    short_net, long_net = _net_by_term(capital_gains)
    long_net += dividend_income.total_capital_gain_distributions
    taxable_short = max(short_net + min(long_net, ZERO), ZERO)
    taxable_long = max(long_net + min(short_net, ZERO), ZERO)

    estimated = (
        taxable_long * assumptions.long_term_rate
        + taxable_short * assumptions.short_term_rate
        + dividend_income.total_qualified_dividends * assumptions.qualified_dividend_rate
        + dividend_income.total_ordinary_dividends * assumptions.ordinary_income_rate
        + interest_income.total_interest_income * assumptions.ordinary_income_rate
    )
    liability = round_money(estimated, rounding)

    summary = TaxReportSummary(
        total_realized_gains=round_money(realized_gains, rounding),
        total_realized_losses=round_money(realized_losses, rounding),
        net_realized_gain_loss=round_money(net, rounding),
        total_dividend_income=round_money(
            dividend_income.total_ordinary_dividends + dividend_income.total_qualified_dividends,
            rounding,
        ),
        total_interest_income=round_money(interest_income.total_interest_income, rounding),
        total_tax_liability=liability,
        estimated_tax_owed=max(liability, ZERO),
        tax_loss_carryforward=round_money(carryforward, rounding),
    )
    if unrealized is not None:
        summary.total_unrealized_gains = unrealized.total_unrealized_gains
        summary.total_unrealized_losses = unrealized.total_unrealized_losses
        summary.net_unrealized_gain_loss = unrealized.net_unrealized_gain_loss
    return summary


def _net_by_term(capital_gains: CapitalGainsReport) -> tuple[Decimal, Decimal]:
    """Short- and long-term nets with disallowed wash-sale losses removed."""
    short_disallowed = sum(
        (g.wash_sale_adjustment for g in capital_gains.short_term_gains if g.is_wash_sale), ZERO
    )
    long_disallowed = sum(
        (g.wash_sale_adjustment for g in capital_gains.long_term_gains if g.is_wash_sale), ZERO
    )
    return (
        capital_gains.short_term_total + short_disallowed,
        capital_gains.long_term_total + long_disallowed,
    )


def _income_amount(txn: Transaction) -> Decimal:
    if txn.amount is None:
        raise ValidationError(f"Transaction {txn.txn_id}: amount is required")
    if txn.amount < 0:
        raise ValidationError(f"Transaction {txn.txn_id}: amount cannot be negative")
    return txn.amount


def build_dividend_income_report(
    transactions: Iterable[Transaction],
    rounding: Optional[str] = None,
) -> DividendIncomeReport:
    """
    Group DIVIDEND transactions by classification.

    A dividend without a dividend_type counts as ordinary. Dividends that
    carry foreign tax are also totalled as foreign dividends.
    """
    report = DividendIncomeReport()
    buckets = {
        DividendType.ORDINARY: report.ordinary_dividends,
        DividendType.QUALIFIED: report.qualified_dividends,
        DividendType.CAPITAL_GAINS: report.capital_gain_distributions,
        DividendType.RETURN_OF_CAPITAL: report.return_of_capital,
    }
    foreign_dividends = ZERO
    foreign_tax = ZERO

    for txn in transactions:
        if txn.txn_type != TransactionType.DIVIDEND:
            continue
        line = DividendLine(
            transaction_id=txn.txn_id,
            symbol=txn.symbol,
            pay_date=txn.trade_date,
            amount=_income_amount(txn),
            dividend_type=txn.dividend_type or DividendType.ORDINARY,
            foreign_tax_paid=txn.foreign_tax_paid,
            reinvested=txn.reinvested,
        )
        buckets[line.dividend_type].append(line)
        if line.foreign_tax_paid > 0:
            foreign_dividends += line.amount
            foreign_tax += line.foreign_tax_paid

    def total(lines: list[DividendLine]) -> Decimal:
        return round_money(sum((line.amount for line in lines), ZERO), rounding)

    report.total_ordinary_dividends = total(report.ordinary_dividends)
    report.total_qualified_dividends = total(report.qualified_dividends)
    report.total_capital_gain_distributions = total(report.capital_gain_distributions)
    report.total_return_of_capital = total(report.return_of_capital)
    report.foreign_dividends = round_money(foreign_dividends, rounding)
    report.foreign_tax_paid = round_money(foreign_tax, rounding)
    return report


def build_interest_income_report(
    transactions: Iterable[Transaction],
    rounding: Optional[str] = None,
) -> InterestIncomeReport:
    """
    Collect INTEREST transactions.

    total_interest_income counts taxable and foreign interest; tax-exempt
    interest is reported separately. Interest without a type is taxable.
    """
    lines: list[InterestLine] = []
    totals: dict[InterestType, Decimal] = defaultdict(lambda: ZERO)

    for txn in transactions:
        if txn.txn_type != TransactionType.INTEREST:
            continue
        line = InterestLine(
            transaction_id=txn.txn_id,
            source=txn.source or txn.symbol,
            payment_date=txn.trade_date,
            amount=_income_amount(txn),
            interest_type=txn.interest_type or InterestType.TAXABLE,
            reinvested=txn.reinvested,
        )
        lines.append(line)
        totals[line.interest_type] += line.amount

    return InterestIncomeReport(
        transactions=lines,
        total_interest_income=round_money(
            totals[InterestType.TAXABLE] + totals[InterestType.FOREIGN], rounding
        ),
        tax_exempt_interest=round_money(totals[InterestType.TAX_EXEMPT], rounding),
        foreign_interest=round_money(totals[InterestType.FOREIGN], rounding),
    )


def value_open_lots(
    open_lots: Iterable[Lot],
    prices: Mapping[str, Union[Decimal, int, float, str]],
    rounding: Optional[str] = None,
) -> UnrealizedGains:
    """
    Value open lots at market prices, one holding per symbol.

    Symbols without a price are listed in unpriced_symbols and left out of
    the totals. Weights are shares of the total priced market value.
    """
    quotes = {symbol.strip().upper(): to_decimal(price, "price") for symbol, price in prices.items()}
    quantities: dict[str, Decimal] = defaultdict(lambda: ZERO)
    costs: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for lot in open_lots:
        if lot.is_depleted:
            continue
        quantities[lot.symbol] += lot.quantity
        costs[lot.symbol] += lot.cost_basis

    unpriced = sorted(symbol for symbol in quantities if symbol not in quotes)
    priced = sorted(symbol for symbol in quantities if symbol in quotes)
    market_values = {symbol: quantities[symbol] * quotes[symbol] for symbol in priced}
    total_value = sum(market_values.values(), ZERO)

    holdings: list[HoldingValuation] = []
    gains = ZERO
    losses = ZERO
    for symbol in priced:
        value = market_values[symbol]
        unrealized = value - costs[symbol]
        if unrealized >= 0:
            gains += unrealized
        else:
            losses += -unrealized

        pct: Optional[Decimal] = None
        if costs[symbol] != 0:
            pct = round_percent(unrealized / costs[symbol] * HUNDRED, rounding)
        weight: Optional[Decimal] = None
        if total_value != 0:
            weight = round_percent(value / total_value * HUNDRED, rounding)

        holdings.append(
            HoldingValuation(
                symbol=symbol,
                quantity=quantities[symbol],
                cost_basis=round_money(costs[symbol], rounding),
                market_value=round_money(value, rounding),
                unrealized_gain_loss=round_money(unrealized, rounding),
                unrealized_gain_loss_percent=pct,
                weight_percent=weight,
            )
        )

    return UnrealizedGains(
        holdings=holdings,
        total_unrealized_gains=round_money(gains, rounding),
        total_unrealized_losses=round_money(losses, rounding),
        net_unrealized_gain_loss=round_money(gains - losses, rounding),
        unpriced_symbols=unpriced,
    )


def build_tax_forms(
    capital_gains: CapitalGainsReport,
    dividend_income: DividendIncomeReport,
    interest_income: InterestIncomeReport,
) -> list[TaxForm]:
    """Summary totals for 1099-B, 1099-DIV and 1099-INT. Amounts are strings."""
    short_net, long_net = _net_by_term(capital_gains)
    disallowed = sum(
        (g.wash_sale_adjustment for g in capital_gains.transactions if g.is_wash_sale), ZERO
    )
    form_b = TaxForm(
        form_type="1099-B",
        form_data={
            "transaction_count": str(len(capital_gains.transactions)),
            "total_proceeds": str(round_money(capital_gains.total_proceeds)),
            "total_cost_basis": str(round_money(capital_gains.total_cost_basis)),
            "short_term_gain_loss": str(round_money(short_net)),
            "long_term_gain_loss": str(round_money(long_net)),
            "wash_sale_loss_disallowed": str(round_money(disallowed)),
        },
    )
    form_div = TaxForm(
        form_type="1099-DIV",
        form_data={
            # Box 1a includes the qualified amount reported in box 1b
            "total_ordinary_dividends": str(
                round_money(
                    dividend_income.total_ordinary_dividends
                    + dividend_income.total_qualified_dividends
                )
            ),
            "qualified_dividends": str(dividend_income.total_qualified_dividends),
            "total_capital_gain_distributions": str(
                dividend_income.total_capital_gain_distributions
            ),
            "nondividend_distributions": str(dividend_income.total_return_of_capital),
            "foreign_tax_paid": str(dividend_income.foreign_tax_paid),
        },
    )
    form_int = TaxForm(
        form_type="1099-INT",
        form_data={
            "interest_income": str(interest_income.total_interest_income),
            "tax_exempt_interest": str(interest_income.tax_exempt_interest),
            "foreign_interest": str(interest_income.foreign_interest),
        },
    )
    return [form_b, form_div, form_int]


class TaxReportService:
    """
    Service for generating and retrieving stored tax reports.

    Reports cover one calendar tax year. Lots are rebuilt from the full
    transaction history so sales in the year match purchases from earlier
    years; purchases up to the wash-sale window after year end are replayed
    so December losses see January replacements.
    """

    def __init__(
        self,
        repository: TaxReportRepository,
        assumptions: Optional[TaxAssumptions] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._repo = repository
        self._assumptions = assumptions or TaxAssumptions()
        self._clock = clock

    def generate_report(
        self,
        portfolio_id: str,
        tax_year: int,
        transactions: Iterable[Transaction],
        method: Union[CostBasisMethod, str] = CostBasisMethod.FIFO,
        prices: Optional[Mapping[str, Union[Decimal, int, float, str]]] = None,
    ) -> TaxReport:
        """
        Build, store and return a tax report.

        Raises:
            ValidationError: missing portfolio_id, bad tax year or malformed
                transactions
            UnsupportedCostBasisMethodError: unknown method
            InsufficientLotsError: a sale exceeds the open quantity
        """
        if not portfolio_id or not portfolio_id.strip():
            raise ValidationError("portfolio_id is required")
        if not 1900 <= tax_year < 9999:
            raise ValidationError(f"tax_year out of range: {tax_year}")
        method = CostBasisMethod.parse(method)
        rounding = self._assumptions.rounding

        start = date(tax_year, 1, 1)
        end = date(tax_year, 12, 31)
        horizon = end + timedelta(days=self._assumptions.wash_sale_window_days)
        transactions = list(transactions)

        engine = TaxLotEngine(self._assumptions)
        replayed = engine.classify(
            [t for t in transactions if t.trade_date <= horizon], method
        )
        year_end = engine.classify([t for t in transactions if t.trade_date <= end], method)

        capital_gains = summarize_gains(
            method,
            (g for g in replayed.transactions if start <= g.sale_date <= end),
            (w for w in replayed.wash_sales if start <= w.sale_date <= end),
            year_end.open_lots,
        )
        in_year = [t for t in transactions if start <= t.trade_date <= end]
        dividends = build_dividend_income_report(in_year, rounding)
        interest = build_interest_income_report(in_year, rounding)
        unrealized = (
            value_open_lots(capital_gains.open_lots, prices, rounding)
            if prices is not None
            else None
        )
        summary = build_tax_summary(
            capital_gains, dividends, interest, self._assumptions, unrealized
        )

        report = TaxReport(
            report_id=str(uuid.uuid4()),
            portfolio_id=portfolio_id.strip(),
            tax_year=tax_year,
            generated_at=self._clock(),
            start_date=start,
            end_date=end,
            cost_basis_method=method,
            summary=summary,
            capital_gains=capital_gains,
            dividend_income=dividends,
            interest_income=interest,
            unrealized=unrealized,
            forms=build_tax_forms(capital_gains, dividends, interest),
        )
        self._repo.save(report)
        logger.info(
            "Generated tax report %s for portfolio %s (%s, %s): net %s",
            report.report_id,
            report.portfolio_id,
            tax_year,
            method.value,
            summary.net_realized_gain_loss,
        )
        return report

    def get_report(self, report_id: str) -> TaxReport:
        """
        Get a stored report by ID.

        Raises:
            NotFoundError: If report doesn't exist
        """
        report = self._repo.get_by_id(report_id)
        if not report:
            raise NotFoundError("TaxReport", report_id)
        return report

    def list_reports(self, portfolio_id: str, tax_year: Optional[int] = None) -> list[TaxReport]:
        """List stored reports for a portfolio, newest first."""
        return self._repo.list_by_portfolio(portfolio_id, tax_year)

    def delete_report(self, report_id: str) -> None:
        """
        Delete a stored report.

        Raises:
            NotFoundError: If report doesn't exist
        """
        self.get_report(report_id)
        self._repo.delete(report_id)
        logger.info("Deleted tax report %s", report_id)
