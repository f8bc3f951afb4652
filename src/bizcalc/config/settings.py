"""Application settings and configuration."""

from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bizcalc.core.money import ROUNDING_MODES


def get_default_data_dir() -> Path:
    """Return the default data directory."""
    return Path.home() / ".bizcalc"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Business Pricing & Tax Engine"
    app_version: str = "0.1.0"

    # Data directory (report database lives here)
    data_dir: Optional[Path] = None

    # Database URL (derived from data_dir if not set explicitly)
    database_url: Optional[str] = None

    log_level: str = "INFO"

    # Pricing
    default_tax_rate: Decimal = Decimal("0.0825")
    money_rounding: str = "ROUND_HALF_UP"
    estimate_validity_days: int = 30

    # Tax-year assumptions; change per jurisdiction and year
    capital_loss_deduction_limit: Decimal = Decimal("3000")
    long_term_rate: Decimal = Decimal("0.20")
    short_term_rate: Decimal = Decimal("0.37")
    qualified_dividend_rate: Decimal = Decimal("0.20")
    ordinary_income_rate: Decimal = Decimal("0.37")
    wash_sale_window_days: int = 30
    long_term_holding_days: int = 365

    # Risk scoring
    risk_block_threshold: int = 80

    @field_validator("money_rounding")
    @classmethod
    def _known_rounding(cls, value: str) -> str:
        if value not in ROUNDING_MODES:
            raise ValueError(f"money_rounding must be one of {sorted(ROUNDING_MODES)}")
        return value

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "reports.db"
        return f"sqlite:///{db_path}"


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
