"""Tax-year constants injected into the tax-lot engine and report aggregator."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from bizcalc.config.settings import Settings, get_settings


@dataclass(frozen=True)
class TaxAssumptions:
    """
    Jurisdiction/tax-year parameters.

    Defaults are the US federal figures the estimate was designed around:
    $3,000 capital-loss deduction cap, 20% long-term and qualified-dividend
    rate, 37% short-term and ordinary rate, 30-day wash-sale window and a
    365-day long-term threshold.
    """

    capital_loss_deduction_limit: Decimal = field(default_factory=lambda: Decimal("3000"))
    long_term_rate: Decimal = field(default_factory=lambda: Decimal("0.20"))
    short_term_rate: Decimal = field(default_factory=lambda: Decimal("0.37"))
    qualified_dividend_rate: Decimal = field(default_factory=lambda: Decimal("0.20"))
    ordinary_income_rate: Decimal = field(default_factory=lambda: Decimal("0.37"))
    wash_sale_window_days: int = 30
    long_term_holding_days: int = 365
    rounding: str = "ROUND_HALF_UP"

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "TaxAssumptions":
        """Build assumptions from application settings."""
        settings = settings or get_settings()
        return cls(
            capital_loss_deduction_limit=settings.capital_loss_deduction_limit,
            long_term_rate=settings.long_term_rate,
            short_term_rate=settings.short_term_rate,
            qualified_dividend_rate=settings.qualified_dividend_rate,
            ordinary_income_rate=settings.ordinary_income_rate,
            wash_sale_window_days=settings.wash_sale_window_days,
            long_term_holding_days=settings.long_term_holding_days,
            rounding=settings.money_rounding,
        )
