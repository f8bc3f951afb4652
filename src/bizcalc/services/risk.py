"""Risk scoring seam for invoice quoting."""

from typing import Protocol

from bizcalc.domain.models import InvoiceDraft
from bizcalc.domain.views import RiskAssessment


class RiskScorer(Protocol):
    """Scores a draft document from 0 (clean) to 100 (certainly fraudulent)."""

    def score(self, draft: InvoiceDraft) -> RiskAssessment:
        """Assess a draft before it is priced and issued."""
        ...


class NullRiskScorer:
    """Scorer used when no real scorer is configured: always 0, no flags."""

    def score(self, draft: InvoiceDraft) -> RiskAssessment:
        return RiskAssessment(score=0, flags=[], scorer="none")
