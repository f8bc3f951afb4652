"""Invoice quoting service."""

import logging
from typing import Optional

from bizcalc.config.settings import Settings, get_settings
from bizcalc.core.exceptions import RiskRejectedError, ValidationError
from bizcalc.domain.models import InvoiceDraft
from bizcalc.domain.views import InvoiceQuote
from bizcalc.services.payment_terms import parse_payment_term, resolve_due_date
from bizcalc.services.pricing_calculator import compute_pricing
from bizcalc.services.risk import NullRiskScorer, RiskScorer

logger = logging.getLogger(__name__)


class InvoiceService:
    """
    Service for quoting invoices.

    Combines line-item pricing, due-date resolution and risk scoring. The
    service holds no state beyond its collaborators.
    """

    def __init__(
        self,
        risk_scorer: Optional[RiskScorer] = None,
        settings: Optional[Settings] = None,
    ):
        self._risk = risk_scorer or NullRiskScorer()
        self._settings = settings or get_settings()

    def quote(self, draft: InvoiceDraft) -> InvoiceQuote:
        """
        Price a draft invoice and resolve its due date.

        The draft's tax_rate overrides the configured default rate.

        Raises:
            ValidationError: bad line items, rates or dates
            RiskRejectedError: risk score above the configured threshold
        """
        if not draft.customer_id or not draft.customer_id.strip():
            raise ValidationError("customer_id is required")

        assessment = self._risk.score(draft)
        threshold = self._settings.risk_block_threshold
        if assessment.score > threshold:
            logger.warning(
                "Invoice for customer %s blocked: risk score %s (%s)",
                draft.customer_id,
                assessment.score,
                assessment.scorer,
            )
            raise RiskRejectedError(assessment.score, threshold)

        tax_rate = (
            draft.tax_rate if draft.tax_rate is not None else self._settings.default_tax_rate
        )
        pricing = compute_pricing(draft.line_items, tax_rate, self._settings.money_rounding)

        term, fallback = parse_payment_term(draft.payment_term)
        due_date = resolve_due_date(term, draft.issue_date, draft.custom_due_date)

        return InvoiceQuote(
            customer_id=draft.customer_id,
            issue_date=draft.issue_date,
            due_date=due_date,
            payment_term=term,
            pricing=pricing,
            risk=assessment,
            title=draft.title,
            term_fallback_applied=fallback,
        )
