"""Tax-lot matching and capital gains classification."""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Union

from bizcalc.config.tax_assumptions import TaxAssumptions
from bizcalc.core.dates import days_between
from bizcalc.core.exceptions import InsufficientLotsError, ValidationError
from bizcalc.core.money import ZERO, round_money
from bizcalc.domain.models import (
    CostBasisMethod,
    HoldingTerm,
    Lot,
    Transaction,
    TransactionType,
)
from bizcalc.domain.views import (
    CapitalGainsReport,
    CapitalGainTransaction,
    WashSaleAdjustment,
)

logger = logging.getLogger(__name__)


@dataclass
class _MatchedPiece:
    """Portion of a sale covered by one lot."""

    lot: Lot
    quantity: Decimal
    cost: Decimal
    purchase_date: date
    purchase_price: Decimal


class TaxLotEngine:
    """
    Replays trades to match sales against purchase lots.

    Lots are opened by BUY transactions and consumed by SELL transactions
    in trade-date order; on a shared date buys replay before sells, and
    otherwise input order is kept. Every (lot, sale) pair becomes one
    CapitalGainTransaction classified short- or long-term by holding period.
    Losses with a same-symbol purchase inside the wash-sale window are
    disallowed share for share and pushed onto the replacement lot's basis.
    Each purchase replaces at most its own quantity across all sales.

    The engine keeps no state between classify() calls.
    """

    def __init__(self, assumptions: Optional[TaxAssumptions] = None):
        self._assumptions = assumptions or TaxAssumptions()

    def classify(
        self,
        transactions: Iterable[Transaction],
        method: Union[CostBasisMethod, str] = CostBasisMethod.FIFO,
    ) -> CapitalGainsReport:
        """
        Classify realized gains for a set of transactions.

        DIVIDEND and INTEREST transactions are ignored here.

        Raises:
            UnsupportedCostBasisMethodError: method is not recognized
            InsufficientLotsError: a sale exceeds the open quantity
            ValidationError: malformed trade
        """
        method = CostBasisMethod.parse(method)
        trades = sorted(
            (t for t in transactions if t.is_trade),
            key=lambda t: (t.trade_date, t.txn_type != TransactionType.BUY),
        )
        for txn in trades:
            self._validate_trade(txn, method)

        buys_by_symbol: dict[str, list[Transaction]] = defaultdict(list)
        for txn in trades:
            if txn.txn_type == TransactionType.BUY:
                buys_by_symbol[txn.symbol].append(txn)
        # Quantity of each purchase not yet matched against a wash-sale loss
        replacement_left = {
            txn.txn_id: txn.quantity
            for txns in buys_by_symbol.values()
            for txn in txns
        }

        open_lots: dict[str, list[Lot]] = defaultdict(list)
        lots_by_id: dict[str, Lot] = {}
        pending_adjustments: dict[str, Decimal] = defaultdict(lambda: ZERO)
        gains: list[CapitalGainTransaction] = []
        wash_sales: list[WashSaleAdjustment] = []

        for txn in trades:
            if txn.txn_type == TransactionType.BUY:
                lot = Lot(
                    lot_id=txn.txn_id,
                    symbol=txn.symbol,
                    quantity=txn.quantity,
                    purchase_date=txn.trade_date,
                    purchase_price=txn.price,
                    fees=txn.fees,
                )
                if txn.txn_id in pending_adjustments:
                    lot.adjust_basis(pending_adjustments.pop(txn.txn_id))
                open_lots[txn.symbol].append(lot)
                lots_by_id[lot.lot_id] = lot
                continue

            pieces = self._match(open_lots[txn.symbol], txn, method)
            open_lots[txn.symbol] = [lot for lot in open_lots[txn.symbol] if not lot.is_depleted]
            consumed_ids = {p.lot.lot_id for p in pieces}

            for piece in pieces:
                gain = self._to_gain(txn, piece)
                if gain.gain_loss < 0:
                    wash_sales.extend(
                        self._apply_wash_sale(
                            gain,
                            txn,
                            buys_by_symbol[txn.symbol],
                            consumed_ids,
                            lots_by_id,
                            pending_adjustments,
                            replacement_left,
                        )
                    )
                gains.append(gain)

        return summarize_gains(
            method,
            gains,
            wash_sales,
            (lot for lots in open_lots.values() for lot in lots),
        )

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate_trade(txn: Transaction, method: CostBasisMethod) -> None:
        if not txn.symbol:
            raise ValidationError(f"Transaction {txn.txn_id}: symbol is required")
        if txn.quantity is None or txn.quantity <= 0:
            raise ValidationError(f"Transaction {txn.txn_id}: quantity must be positive")
        if txn.price is None or txn.price < 0:
            raise ValidationError(f"Transaction {txn.txn_id}: price cannot be negative")
        if txn.fees < 0:
            raise ValidationError(f"Transaction {txn.txn_id}: fees cannot be negative")
        if (
            method == CostBasisMethod.SPECIFIC_ID
            and txn.txn_type == TransactionType.SELL
            and not txn.lot_id
        ):
            raise ValidationError(
                f"Transaction {txn.txn_id}: specific-ID sales must name a lot_id"
            )

    # -------------------------------------------------------------------------
    # Lot matching
    # -------------------------------------------------------------------------

    def _match(
        self,
        lots: list[Lot],
        sale: Transaction,
        method: CostBasisMethod,
    ) -> list[_MatchedPiece]:
        """Consume lots for a sale in the method's order."""
        available = sum((lot.quantity for lot in lots), ZERO)
        if sale.quantity > available:
            raise InsufficientLotsError(sale.symbol, str(sale.quantity), str(available))

        if method == CostBasisMethod.SPECIFIC_ID:
            lot = next((candidate for candidate in lots if candidate.lot_id == sale.lot_id), None)
            lot_available = lot.quantity if lot is not None else ZERO
            if sale.quantity > lot_available:
                raise InsufficientLotsError(
                    f"{sale.symbol} lot {sale.lot_id}",
                    str(sale.quantity),
                    str(lot_available),
                )
            ordered = [lot]
        elif method == CostBasisMethod.LIFO:
            ordered = list(reversed(lots))
        else:
            ordered = list(lots)

        if method == CostBasisMethod.AVERAGE_COST:
            # One blended unit cost across the pool; dates still leave oldest first
            total_cost = sum((lot.remaining_cost for lot in lots), ZERO)
            unit_cost = total_cost / available
            for lot in lots:
                lot.remaining_cost = unit_cost * lot.quantity

        pieces: list[_MatchedPiece] = []
        remaining = sale.quantity
        for lot in ordered:
            if remaining <= 0:
                break
            take = min(remaining, lot.quantity)
            if take <= 0:
                continue
            purchase_date = lot.purchase_date
            purchase_price = lot.purchase_price
            cost = lot.consume(take)
            pieces.append(
                _MatchedPiece(
                    lot=lot,
                    quantity=take,
                    cost=cost,
                    purchase_date=purchase_date,
                    purchase_price=purchase_price,
                )
            )
            remaining -= take
            logger.debug(
                "Matched %s %s of lot %s to sale %s",
                take,
                sale.symbol,
                lot.lot_id,
                sale.txn_id,
            )
        return pieces

    def _to_gain(self, sale: Transaction, piece: _MatchedPiece) -> CapitalGainTransaction:
        rounding = self._assumptions.rounding
        fee_share = sale.fees * piece.quantity / sale.quantity
        proceeds = round_money(piece.quantity * sale.price - fee_share, rounding)
        cost_basis = round_money(piece.cost, rounding)
        holding_period = days_between(piece.purchase_date, sale.trade_date)
        term = (
            HoldingTerm.LONG_TERM
            if holding_period > self._assumptions.long_term_holding_days
            else HoldingTerm.SHORT_TERM
        )
        return CapitalGainTransaction(
            transaction_id=sale.txn_id,
            lot_id=piece.lot.lot_id,
            symbol=sale.symbol,
            quantity=piece.quantity,
            purchase_date=piece.purchase_date,
            sale_date=sale.trade_date,
            purchase_price=piece.purchase_price,
            sale_price=sale.price,
            cost_basis=cost_basis,
            proceeds=proceeds,
            gain_loss=proceeds - cost_basis,
            holding_period=holding_period,
            term=term,
        )

    # -------------------------------------------------------------------------
    # Wash sales
    # -------------------------------------------------------------------------

    def _apply_wash_sale(
        self,
        gain: CapitalGainTransaction,
        sale: Transaction,
        buys: list[Transaction],
        consumed_ids: set[str],
        lots_by_id: dict[str, Lot],
        pending_adjustments: dict[str, Decimal],
        replacement_left: dict[str, Decimal],
    ) -> list[WashSaleAdjustment]:
        """
        Disallow the part of a loss covered by replacement purchases.

        A replacement is a BUY of the same symbol dated within the window on
        either side of the sale, not consumed by this sale, and still able to
        carry basis: either an open lot or a purchase not yet replayed.
        Replacements are taken in trade-date order. Each one covers at most
        the shares it has left, and the loss is disallowed pro rata to the
        shares covered; any uncovered remainder stays deductible.
        """
        window = timedelta(days=self._assumptions.wash_sale_window_days)
        start, end = sale.trade_date - window, sale.trade_date + window
        rounding = self._assumptions.rounding
        loss = -gain.gain_loss
        uncovered = gain.quantity
        disallowed_total = ZERO
        adjustments: list[WashSaleAdjustment] = []

        for buy in buys:
            if uncovered <= 0:
                break
            if not start <= buy.trade_date <= end or buy.txn_id in consumed_ids:
                continue
            lot = lots_by_id.get(buy.txn_id)
            available = replacement_left.get(buy.txn_id, ZERO)
            if lot is not None:
                available = min(available, lot.quantity)
            matched = min(uncovered, available)
            if matched <= 0:
                continue

            uncovered -= matched
            replacement_left[buy.txn_id] -= matched
            if uncovered <= 0:
                # Last slice takes the remainder so slices sum to the loss
                disallowed = loss - disallowed_total
            else:
                disallowed = round_money(loss * matched / gain.quantity, rounding)
            disallowed_total += disallowed

            if lot is not None:
                lot.adjust_basis(disallowed)
                adjusted_basis = round_money(lot.cost_basis, rounding)
            else:
                pending_adjustments[buy.txn_id] += disallowed
                adjusted_basis = round_money(
                    buy.quantity * buy.price + buy.fees + pending_adjustments[buy.txn_id],
                    rounding,
                )

            logger.debug(
                "Wash sale: %s loss %s on %s (%s shares) disallowed onto purchase %s",
                gain.symbol,
                disallowed,
                sale.txn_id,
                matched,
                buy.txn_id,
            )
            adjustments.append(
                WashSaleAdjustment(
                    sale_transaction_id=sale.txn_id,
                    symbol=gain.symbol,
                    sale_date=sale.trade_date,
                    sale_quantity=matched,
                    replacement_txn_id=buy.txn_id,
                    replacement_date=buy.trade_date,
                    replacement_quantity=buy.quantity,
                    disallowed_loss=disallowed,
                    adjusted_cost_basis=adjusted_basis,
                    reason=(
                        f"Replacement purchase on {buy.trade_date.isoformat()} within "
                        f"{self._assumptions.wash_sale_window_days} days of loss sale"
                    ),
                )
            )

        if adjustments:
            gain.is_wash_sale = True
            gain.wash_sale_adjustment = disallowed_total
        return adjustments


def summarize_gains(
    method: CostBasisMethod,
    gains: Iterable[CapitalGainTransaction],
    wash_sales: Iterable[WashSaleAdjustment],
    open_lots: Iterable[Lot],
) -> CapitalGainsReport:
    """
    Total realized gains into a CapitalGainsReport.

    Used by the engine for a full replay and by the report service after
    restricting gains to a tax year.
    """
    gains = list(gains)
    short_term = [g for g in gains if not g.is_long_term]
    long_term = [g for g in gains if g.is_long_term]
    short_total = sum((g.gain_loss for g in short_term), ZERO)
    long_total = sum((g.gain_loss for g in long_term), ZERO)
    # Disallowed losses as a negative amount; subtracting it removes them
    wash_total = ZERO - sum((g.wash_sale_adjustment for g in gains if g.is_wash_sale), ZERO)

    remaining = sorted(
        (lot for lot in open_lots if not lot.is_depleted),
        key=lambda lot: (lot.symbol, lot.purchase_date),
    )

    return CapitalGainsReport(
        method=method,
        short_term_gains=short_term,
        long_term_gains=long_term,
        short_term_total=short_total,
        long_term_total=long_total,
        wash_sales_adjustment=wash_total,
        net_capital_gain=short_total + long_total - wash_total,
        wash_sales=list(wash_sales),
        open_lots=remaining,
    )


def classify_gains(
    transactions: Iterable[Transaction],
    method: Union[CostBasisMethod, str] = CostBasisMethod.FIFO,
    assumptions: Optional[TaxAssumptions] = None,
) -> CapitalGainsReport:
    """Classify realized capital gains; see TaxLotEngine.classify."""
    return TaxLotEngine(assumptions).classify(transactions, method)
