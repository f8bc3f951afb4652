"""
Pytest configuration and fixtures for pricing and tax engine tests.

This module provides:
- In-memory SQLite database fixtures
- Factory helpers for line items and portfolio transactions
- Fixed clocks for deterministic report timestamps
- Service and repository fixtures
- FastAPI test client with the database dependency overridden
"""

import itertools
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional, Union

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from bizcalc.main import app
from bizcalc.repositories.sqlalchemy.database import Base, get_db, reset_database
# Import ORM models to register them with Base before creating tables
from bizcalc.repositories.sqlalchemy import orm_models  # noqa: F401
from bizcalc.repositories.sqlalchemy import SqlAlchemyTaxReportRepository
from bizcalc.config.settings import Settings, reset_settings, set_settings
from bizcalc.config.tax_assumptions import TaxAssumptions
from bizcalc.core.dates import UTC_TZ
from bizcalc.domain.models import (
    DividendType,
    InterestType,
    LineItem,
    LineItemKind,
    Transaction,
    TransactionType,
)
from bizcalc.services import InvoiceService, TaxLotEngine, TaxReportService

Number = Union[Decimal, int, str]


# =============================================================================
# TIME HELPERS
# =============================================================================


def utc_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 12,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in UTC."""
    return UTC_TZ.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return utc_datetime(2025, 2, 15, 9, 30, 0)


@pytest.fixture
def ticking_clock(fixed_now) -> Callable[[], datetime]:
    """Clock that advances one minute per call."""
    ticks = itertools.count()
    return lambda: fixed_now + timedelta(minutes=next(ticks))


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def report_repo(test_session) -> SqlAlchemyTaxReportRepository:
    """Provide test TaxReportRepository."""
    return SqlAlchemyTaxReportRepository(test_session)


class InMemoryTaxReportRepository:
    """Dict-backed TaxReportRepository for service tests."""

    def __init__(self):
        self._reports = {}

    def save(self, report):
        self._reports[report.report_id] = report
        return report

    def get_by_id(self, report_id):
        return self._reports.get(report_id)

    def list_by_portfolio(self, portfolio_id, tax_year=None):
        reports = [
            r for r in self._reports.values()
            if r.portfolio_id == portfolio_id and (tax_year is None or r.tax_year == tax_year)
        ]
        return sorted(reports, key=lambda r: r.generated_at, reverse=True)

    def delete(self, report_id):
        self._reports.pop(report_id, None)


@pytest.fixture
def memory_report_repo() -> InMemoryTaxReportRepository:
    """Provide in-memory TaxReportRepository."""
    return InMemoryTaxReportRepository()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def assumptions() -> TaxAssumptions:
    """Default US federal assumptions."""
    return TaxAssumptions()


@pytest.fixture
def tax_lot_engine(assumptions) -> TaxLotEngine:
    """Provide test TaxLotEngine."""
    return TaxLotEngine(assumptions)


@pytest.fixture
def tax_report_service(memory_report_repo, assumptions, ticking_clock) -> TaxReportService:
    """Provide TaxReportService backed by the in-memory repository."""
    return TaxReportService(
        repository=memory_report_repo,
        assumptions=assumptions,
        clock=ticking_clock,
    )


@pytest.fixture
def sqlite_tax_report_service(report_repo, assumptions, ticking_clock) -> TaxReportService:
    """Provide TaxReportService backed by SQLite."""
    return TaxReportService(
        repository=report_repo,
        assumptions=assumptions,
        clock=ticking_clock,
    )


@pytest.fixture
def app_settings() -> Settings:
    """Settings with defaults, isolated from any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def invoice_service(app_settings) -> InvoiceService:
    """Provide InvoiceService with the null risk scorer."""
    return InvoiceService(settings=app_settings)


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(test_engine, tmp_path) -> TestClient:
    """Provide FastAPI test client with test database."""
    set_settings(Settings(_env_file=None, data_dir=tmp_path))
    reset_database()
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_database()
    reset_settings()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(Decimal(actual) - Decimal(expected))
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"


def make_line_item(
    quantity: Number,
    unit_price: Number,
    kind: LineItemKind = LineItemKind.SERVICE,
    is_taxable: bool = True,
    tax_rate: Optional[Number] = None,
    discount_amount: Optional[Number] = None,
    item_id: str = "1",
) -> LineItem:
    """Helper to create a line item."""
    return LineItem(
        id=item_id,
        kind=kind,
        quantity=Decimal(str(quantity)),
        unit_price=Decimal(str(unit_price)),
        is_taxable=is_taxable,
        tax_rate=Decimal(str(tax_rate)) if tax_rate is not None else None,
        discount_amount=Decimal(str(discount_amount)) if discount_amount is not None else None,
    )


def buy(
    txn_id: str,
    symbol: str,
    quantity: Number,
    price: Number,
    trade_date: date,
    fees: Number = "0",
) -> Transaction:
    """Helper to create a BUY transaction."""
    return Transaction(
        txn_id=txn_id,
        txn_type=TransactionType.BUY,
        trade_date=trade_date,
        symbol=symbol,
        quantity=Decimal(str(quantity)),
        price=Decimal(str(price)),
        fees=Decimal(str(fees)),
    )


def sell(
    txn_id: str,
    symbol: str,
    quantity: Number,
    price: Number,
    trade_date: date,
    fees: Number = "0",
    lot_id: Optional[str] = None,
) -> Transaction:
    """Helper to create a SELL transaction."""
    return Transaction(
        txn_id=txn_id,
        txn_type=TransactionType.SELL,
        trade_date=trade_date,
        symbol=symbol,
        quantity=Decimal(str(quantity)),
        price=Decimal(str(price)),
        fees=Decimal(str(fees)),
        lot_id=lot_id,
    )


def dividend(
    txn_id: str,
    symbol: str,
    amount: Number,
    pay_date: date,
    dividend_type: DividendType = DividendType.ORDINARY,
    foreign_tax_paid: Number = "0",
) -> Transaction:
    """Helper to create a DIVIDEND transaction."""
    return Transaction(
        txn_id=txn_id,
        txn_type=TransactionType.DIVIDEND,
        trade_date=pay_date,
        symbol=symbol,
        amount=Decimal(str(amount)),
        dividend_type=dividend_type,
        foreign_tax_paid=Decimal(str(foreign_tax_paid)),
    )


def interest(
    txn_id: str,
    amount: Number,
    payment_date: date,
    interest_type: InterestType = InterestType.TAXABLE,
    source: str = "Treasury Bill",
) -> Transaction:
    """Helper to create an INTEREST transaction."""
    return Transaction(
        txn_id=txn_id,
        txn_type=TransactionType.INTEREST,
        trade_date=payment_date,
        amount=Decimal(str(amount)),
        interest_type=interest_type,
        source=source,
    )
