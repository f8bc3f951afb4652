"""SQLAlchemy repository implementations."""

from bizcalc.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    get_db,
    get_session,
    init_db,
    init_db_with_path,
    reset_database,
    Base,
)
from bizcalc.repositories.sqlalchemy.report_repo import SqlAlchemyTaxReportRepository

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_db",
    "get_session",
    "init_db",
    "init_db_with_path",
    "reset_database",
    "Base",
    "SqlAlchemyTaxReportRepository",
]
