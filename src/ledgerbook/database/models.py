"""SQLAlchemy models for ledgerbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Organization(Base):
    """Organization model."""

    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    accounts = relationship("Account", back_populates="organization")


class Account(Base):
    """Ledger account model.

    ``debits`` and ``credits`` are running totals in cents. The credit card
    columns are only populated for credit card accounts.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False)
    name = Column(String, nullable=False)
    kind = Column(String, nullable=False)
    debits = Column(BigInteger, default=0, nullable=False)
    credits = Column(BigInteger, default=0, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    due_day = Column(Integer, nullable=True)
    statement_day = Column(Integer, nullable=True)
    credit_limit = Column(BigInteger, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("organization_id", "name", name="uq_organization_account_name"),)

    # Relationships
    organization = relationship("Organization", back_populates="accounts")
    adjustments = relationship("Adjustment", back_populates="account")


class Schedule(Base):
    """Schedule model."""

    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    amount = Column(BigInteger, nullable=True)
    period = Column(String, nullable=True)
    frequency = Column(Integer, nullable=True)
    starts_on = Column(Date, nullable=False)
    ends_on = Column(Date, nullable=True)
    last_materialized_on = Column(Date, nullable=True)
    debit_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    credit_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    relative_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transfers = relationship("Transfer", back_populates="schedule")


class Transfer(Base):
    """Transfer model."""

    __tablename__ = "transfers"

    id = Column(Integer, primary_key=True)
    state = Column(String, default="pending", nullable=False)
    amount = Column(BigInteger, nullable=False)
    pending_on = Column(Date, nullable=False)
    posted_on = Column(Date, nullable=True)
    debit_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    credit_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    schedule_id = Column(Integer, ForeignKey("schedules.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    schedule = relationship("Schedule", back_populates="transfers")


class Adjustment(Base):
    """Adjustment model."""

    __tablename__ = "adjustments"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    credit_amount = Column(BigInteger, nullable=True)
    debit_amount = Column(BigInteger, nullable=True)
    note = Column(Text, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    account = relationship("Account", back_populates="adjustments")


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Turn on foreign key enforcement for SQLite connections."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
