"""Core utilities and shared functionality."""

from bizcalc.core.dates import (
    now_utc,
    today_utc,
    to_utc,
    to_utc_date,
    parse_datetime_utc,
    days_between,
    UTC_TZ,
)
from bizcalc.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    InsufficientLotsError,
    UnsupportedCostBasisMethodError,
    RiskRejectedError,
)
from bizcalc.core.money import (
    to_decimal,
    to_minor_units,
    from_minor_units,
    round_money,
    round_percent,
)

__all__ = [
    "now_utc",
    "today_utc",
    "to_utc",
    "to_utc_date",
    "parse_datetime_utc",
    "days_between",
    "UTC_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "InsufficientLotsError",
    "UnsupportedCostBasisMethodError",
    "RiskRejectedError",
    "to_decimal",
    "to_minor_units",
    "from_minor_units",
    "round_money",
    "round_percent",
]
