"""Payment-term due dates, estimate expiry and invoice balances."""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Union

from bizcalc.config.settings import get_settings
from bizcalc.core.dates import DateLike, to_utc_date
from bizcalc.core.exceptions import ValidationError
from bizcalc.core.money import ZERO, round_money, to_decimal
from bizcalc.domain.models import InvoiceStatus, Payment, PaymentTerm
from bizcalc.domain.views import InvoiceBalance

logger = logging.getLogger(__name__)

FALLBACK_TERM = PaymentTerm.NET_30
LATE_FEE_PERIOD_DAYS = 30


def parse_payment_term(term: Union[PaymentTerm, str, None]) -> tuple[PaymentTerm, bool]:
    """
    Map a term value to a PaymentTerm.

    Returns (term, fallback_applied). Unknown or missing values resolve to
    net 30 and are logged, so callers can surface the substitution.
    """
    if isinstance(term, PaymentTerm):
        return term, False
    if term is not None:
        try:
            return PaymentTerm(str(term).strip().lower()), False
        except ValueError:
            pass
    logger.warning("Unknown payment term %r; falling back to %s", term, FALLBACK_TERM.value)
    return FALLBACK_TERM, True


def resolve_due_date(
    term: Union[PaymentTerm, str, None],
    issue_date: DateLike,
    custom_due_date: Optional[DateLike] = None,
) -> date:
    """
    Resolve an invoice due date from its payment term.

    due_on_receipt -> issue date; net_15/30/60 -> issue date plus that many
    calendar days; custom -> custom_due_date, which is required. Dates are
    compared as UTC calendar dates.

    Raises:
        ValidationError: custom term without a due date, or a custom due
            date before the issue date
    """
    issue = to_utc_date(issue_date)
    resolved, _ = parse_payment_term(term)

    if resolved == PaymentTerm.CUSTOM:
        if custom_due_date is None:
            raise ValidationError("custom payment terms require a custom_due_date")
        due = to_utc_date(custom_due_date)
        if due < issue:
            raise ValidationError(
                f"custom_due_date {due.isoformat()} is before issue_date {issue.isoformat()}"
            )
        return due

    return issue + timedelta(days=resolved.offset_days)


def resolve_expiry_date(
    issue_date: DateLike,
    validity_period_days: Optional[int] = None,
) -> date:
    """
    Date after which an estimate is no longer valid.

    validity_period_days defaults to Settings.estimate_validity_days.
    """
    days = (
        get_settings().estimate_validity_days
        if validity_period_days is None
        else validity_period_days
    )
    if days < 0:
        raise ValidationError("validity_period_days cannot be negative")
    return to_utc_date(issue_date) + timedelta(days=days)


def compute_invoice_balance(
    total_amount: Decimal,
    payments: Iterable[Payment],
    due_date: DateLike,
    as_of: DateLike,
    late_fee_rate: Optional[Decimal] = None,
    rounding: Optional[str] = None,
) -> InvoiceBalance:
    """
    Outstanding balance of an invoice on a given date.

    Payments dated after as_of are ignored. While a balance remains past the
    due date, late_fee_rate (a fraction of the outstanding amount) is charged
    once per started 30-day overdue period.
    """
    total = to_decimal(total_amount, "total_amount")
    due = to_utc_date(due_date)
    on = to_utc_date(as_of)
    rate = to_decimal(late_fee_rate, "late_fee_rate")
    if rate < 0:
        raise ValidationError("late_fee_rate cannot be negative")

    counted = [p for p in payments if p.payment_date <= on]
    for payment in counted:
        if payment.amount < 0:
            raise ValidationError("payment amounts cannot be negative")
    paid = sum((p.amount for p in counted), ZERO)
    last_payment = max((p.payment_date for p in counted), default=None)

    outstanding = total - paid
    days_overdue = (on - due).days if outstanding > 0 and on > due else 0

    late_fees = ZERO
    if days_overdue > 0 and rate > 0:
        periods = -(-days_overdue // LATE_FEE_PERIOD_DAYS)
        late_fees = round_money(outstanding * rate * periods, rounding)

    if outstanding <= 0:
        status = InvoiceStatus.PAID
    elif days_overdue > 0:
        status = InvoiceStatus.OVERDUE
    elif paid > 0:
        status = InvoiceStatus.PARTIAL_PAID
    else:
        status = InvoiceStatus.UNPAID

    return InvoiceBalance(
        total_amount=round_money(total, rounding),
        amount_paid=round_money(paid, rounding),
        amount_due=round_money(max(outstanding, ZERO) + late_fees, rounding),
        days_overdue=days_overdue,
        late_fees=late_fees,
        status=status,
        last_payment_date=last_payment,
    )
