"""Invoice quoting, due date and balance endpoints."""

from fastapi import APIRouter, Depends

from bizcalc.api.deps import get_app_settings, get_invoice_service
from bizcalc.api.schemas import (
    InvoiceQuoteRequest,
    InvoiceQuoteResponse,
    DueDateRequest,
    DueDateResponse,
    InvoiceBalanceRequest,
    InvoiceBalanceResponse,
    to_line_items,
)
from bizcalc.config.settings import Settings
from bizcalc.core.dates import today_utc
from bizcalc.domain.models import InvoiceDraft
from bizcalc.services import (
    InvoiceService,
    compute_invoice_balance,
    parse_payment_term,
    resolve_due_date,
)

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("/quote", response_model=InvoiceQuoteResponse)
def quote_invoice(
    data: InvoiceQuoteRequest,
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceQuoteResponse:
    """Price a draft invoice, resolve its due date and score its risk."""
    draft = InvoiceDraft(
        customer_id=data.customer_id,
        line_items=to_line_items(data.line_items),
        issue_date=data.issue_date,
        payment_term=data.payment_term,
        custom_due_date=data.custom_due_date,
        tax_rate=data.tax_rate,
        title=data.title,
    )
    quote = service.quote(draft)
    return InvoiceQuoteResponse.model_validate(quote)


@router.post("/due-date", response_model=DueDateResponse)
def due_date(data: DueDateRequest) -> DueDateResponse:
    """Resolve a due date from a payment term."""
    term, fallback = parse_payment_term(data.payment_term)
    resolved = resolve_due_date(term, data.issue_date, data.custom_due_date)
    return DueDateResponse(
        payment_term=term,
        issue_date=data.issue_date,
        due_date=resolved,
        term_fallback_applied=fallback,
    )


@router.post("/balance", response_model=InvoiceBalanceResponse)
def invoice_balance(
    data: InvoiceBalanceRequest,
    settings: Settings = Depends(get_app_settings),
) -> InvoiceBalanceResponse:
    """Compute amount paid, amount due, days overdue and late fees."""
    balance = compute_invoice_balance(
        total_amount=data.total_amount,
        payments=[p.to_domain() for p in data.payments],
        due_date=data.due_date,
        as_of=data.as_of or today_utc(),
        late_fee_rate=data.late_fee_rate,
        rounding=settings.money_rounding,
    )
    return InvoiceBalanceResponse.model_validate(balance)
