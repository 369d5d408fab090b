"""SQLAlchemy models for eventbudget database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    String,
    DateTime,
    Date,
    Boolean,
    JSON,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class ProjectRow(Base):
    """Project model.

    Descriptive fields are columns; the nested collections (budget items per
    category, VAT rates, payments, advances, expenses) are stored as JSON in
    the shape of the persisted project record. The exchange rate and service
    fee are kept as decimal text so they round-trip without rounding.
    """

    __tablename__ = "projects"

    id = Column(String(36), primary_key=True)
    name = Column(String, nullable=False, default="")
    client = Column(String, nullable=False, default="")
    date = Column(Date, nullable=False)
    currency = Column(String(3), nullable=False)
    exchange_rate = Column(String(40), nullable=False)
    is_international = Column(Boolean, default=False, nullable=False)
    service_fee_percent = Column(String(40), nullable=False)
    categories = Column(JSON, nullable=False, default=dict)
    category_vat_rates = Column(JSON, nullable=False, default=list)
    payments = Column(JSON, nullable=False, default=list)
    advances = Column(JSON, nullable=False, default=list)
    expenses = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_db_engine(database_url: str) -> Engine:
    """Create a SQLAlchemy engine.

    SQLite connections are shared with the autosave timer thread, so the
    same-thread check is disabled for them.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=False, connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    return sessionmaker(bind=engine, expire_on_commit=False)
