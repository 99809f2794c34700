"""SQLAlchemy models for bankrecon database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    bank_name = Column(String, nullable=False)
    account_number = Column(String, nullable=True)
    branch_number = Column(String, nullable=True)
    tax_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    ledger_entries = relationship("LedgerEntry", back_populates="account")
    statement_imports = relationship("StatementImport", back_populates="account")


class LedgerEntry(Base):
    """Ledger entry model (income or expense)."""

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    kind = Column(String, nullable=False)
    transaction_date = Column(Date, nullable=False)
    reconciled = Column(Boolean, default=False, nullable=False)
    reconciled_at = Column(Date, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    account = relationship("Account", back_populates="ledger_entries")


class StatementImport(Base):
    """Confirmed statement import model."""

    __tablename__ = "statement_imports"

    id = Column(String, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    file_name = Column(String, nullable=False)
    file_type = Column(String, nullable=False)
    status = Column(String, nullable=False)
    total_movements = Column(Integer, default=0, nullable=False)
    reconciled_count = Column(Integer, default=0, nullable=False)
    period_start = Column(Date, nullable=True)
    period_end = Column(Date, nullable=True)
    error_message = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    account = relationship("Account", back_populates="statement_imports")
    lines = relationship(
        "StatementLine", back_populates="statement_import", cascade="all, delete-orphan"
    )


class StatementLine(Base):
    """Statement line model, keyed by import and position."""

    __tablename__ = "statement_lines"

    import_id = Column(String, ForeignKey("statement_imports.id"), primary_key=True)
    id = Column(Integer, primary_key=True, autoincrement=False)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    direction = Column(String, nullable=False)
    reconciled = Column(Boolean, default=False, nullable=False)
    linked_entry_id = Column(Integer, ForeignKey("ledger_entries.id"), nullable=True)

    # Relationships
    statement_import = relationship("StatementImport", back_populates="lines")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
