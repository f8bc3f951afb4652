"""Application context for in-process service management.

Provides access to the calculators and the report service without HTTP.
Construct one per session; nothing here is a global singleton.
"""

from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from bizcalc.config.settings import Settings, set_settings, get_settings
from bizcalc.config.tax_assumptions import TaxAssumptions
from bizcalc.repositories.sqlalchemy.database import (
    init_db_with_path,
    get_session,
)
from bizcalc.repositories.sqlalchemy import SqlAlchemyTaxReportRepository
from bizcalc.services import (
    InvoiceService,
    RiskScorer,
    TaxLotEngine,
    TaxReportService,
)


class AppContext:
    """
    Application context providing in-process access to services.

    Services are created lazily and share one database session, which
    close() releases.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        risk_scorer: Optional[RiskScorer] = None,
    ):
        """
        Initialize application context.

        Args:
            data_dir: Optional data directory. If not provided, uses default.
            risk_scorer: Scorer for invoice quotes; the null scorer if omitted.
        """
        self._data_dir = data_dir
        self._risk_scorer = risk_scorer
        self._session: Optional[Session] = None
        self._initialized = False

        # Service instances (lazy initialized)
        self._invoice_service: Optional[InvoiceService] = None
        self._tax_lot_engine: Optional[TaxLotEngine] = None
        self._tax_report_service: Optional[TaxReportService] = None

    def initialize(self, data_dir: Optional[Path] = None) -> None:
        """
        Initialize or reinitialize the report database in a data directory.

        Args:
            data_dir: Data directory path. Uses default if not provided.
        """
        if data_dir:
            self._data_dir = data_dir

        settings = Settings(data_dir=self._data_dir)
        set_settings(settings)

        self.close()
        init_db_with_path(settings.get_data_dir() / "reports.db")

        self._invoice_service = None
        self._tax_lot_engine = None
        self._tax_report_service = None
        self._initialized = True

    @property
    def is_initialized(self) -> bool:
        """Check if context is initialized."""
        return self._initialized

    @property
    def data_dir(self) -> Path:
        """Get the current data directory."""
        return get_settings().get_data_dir()

    def _get_session(self) -> Session:
        """Get or create database session."""
        if self._session is None:
            self._session = get_session()
        return self._session

    def _get_assumptions(self) -> TaxAssumptions:
        return TaxAssumptions.from_settings(get_settings())

    @property
    def invoices(self) -> InvoiceService:
        """Get the InvoiceService instance."""
        if self._invoice_service is None:
            self._invoice_service = InvoiceService(
                risk_scorer=self._risk_scorer,
                settings=get_settings(),
            )
        return self._invoice_service

    @property
    def tax_lots(self) -> TaxLotEngine:
        """Get the TaxLotEngine instance."""
        if self._tax_lot_engine is None:
            self._tax_lot_engine = TaxLotEngine(self._get_assumptions())
        return self._tax_lot_engine

    @property
    def tax_reports(self) -> TaxReportService:
        """Get the TaxReportService instance."""
        if self._tax_report_service is None:
            self._tax_report_service = TaxReportService(
                repository=SqlAlchemyTaxReportRepository(self._get_session()),
                assumptions=self._get_assumptions(),
            )
        return self._tax_report_service

    def close(self) -> None:
        """Clean up resources."""
        if self._session:
            self._session.close()
            self._session = None
        self._tax_report_service = None
