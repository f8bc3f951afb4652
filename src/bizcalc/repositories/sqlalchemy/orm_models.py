"""SQLAlchemy ORM model definitions."""

from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    Integer,
    DateTime,
    Text,
    Numeric,
    Enum as SqlEnum,
)

from bizcalc.repositories.sqlalchemy.database import Base
from bizcalc.domain.models.enums import CostBasisMethod


class TaxReportORM(Base):
    """
    SQLAlchemy model for a generated TaxReport.

    The full report is stored as JSON in payload; the other columns are
    copies used for lookup and ordering.
    """

    __tablename__ = "tax_reports"

    report_id = Column(String(36), primary_key=True)
    portfolio_id = Column(String(64), nullable=False, index=True)
    tax_year = Column(Integer, nullable=False)
    cost_basis_method = Column(SqlEnum(CostBasisMethod), nullable=False)
    net_realized_gain_loss = Column(Numeric(precision=18, scale=2), nullable=False)
    generated_at = Column(DateTime, nullable=False)
    payload = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
