"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so enum values and numeric types
are translated in one place.
"""

from bankrecon.domain import entities as domain
from bankrecon.database.models import (
    Account as ORMAccount,
    LedgerEntry as ORMLedgerEntry,
    StatementImport as ORMStatementImport,
    StatementLine as ORMStatementLine,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        created_at=orm_account.created_at,
        account_number=orm_account.account_number,
        branch_number=orm_account.branch_number,
        tax_id=orm_account.tax_id,
    )


def ledger_entry_to_domain(orm_entry: ORMLedgerEntry) -> domain.LedgerEntry:
    """Convert SQLAlchemy LedgerEntry model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        description=orm_entry.description,
        amount=orm_entry.amount,
        kind=domain.EntryKind(orm_entry.kind),
        transaction_date=orm_entry.transaction_date,
        reconciled=orm_entry.reconciled,
        account_id=orm_entry.account_id,
        created_at=orm_entry.created_at,
        reconciled_at=orm_entry.reconciled_at,
    )


def statement_import_to_domain(orm_import: ORMStatementImport) -> domain.StatementImport:
    """Convert SQLAlchemy StatementImport model to domain StatementImport."""
    return domain.StatementImport(
        id=orm_import.id,
        account_id=orm_import.account_id,
        file_name=orm_import.file_name,
        file_type=domain.FileType(orm_import.file_type),
        created_at=orm_import.created_at,
        status=domain.ImportStatus(orm_import.status),
        total_movements=orm_import.total_movements,
        reconciled_count=orm_import.reconciled_count,
        period_start=orm_import.period_start,
        period_end=orm_import.period_end,
        error_message=orm_import.error_message,
    )


def statement_line_to_domain(orm_line: ORMStatementLine) -> domain.StatementLine:
    """Convert SQLAlchemy StatementLine model to domain StatementLine."""
    return domain.StatementLine(
        id=orm_line.id,
        import_id=orm_line.import_id,
        date=orm_line.date,
        description=orm_line.description,
        amount=orm_line.amount,
        direction=domain.Direction(orm_line.direction),
        reconciled=orm_line.reconciled,
        linked_entry_id=orm_line.linked_entry_id,
    )


def statement_import_to_orm(
    statement_import: domain.StatementImport, lines: list[domain.StatementLine]
) -> ORMStatementImport:
    """Build a SQLAlchemy StatementImport (with lines) from the domain aggregate."""
    orm_import = ORMStatementImport(
        id=statement_import.id,
        account_id=statement_import.account_id,
        file_name=statement_import.file_name,
        file_type=statement_import.file_type.value,
        status=statement_import.status.value,
        total_movements=statement_import.total_movements,
        reconciled_count=statement_import.reconciled_count,
        period_start=statement_import.period_start,
        period_end=statement_import.period_end,
        error_message=statement_import.error_message,
        created_at=statement_import.created_at,
    )
    orm_import.lines = [
        ORMStatementLine(
            id=line.id,
            import_id=statement_import.id,
            date=line.date,
            description=line.description,
            amount=line.amount,
            direction=line.direction.value,
            reconciled=line.reconciled,
            linked_entry_id=line.linked_entry_id,
        )
        for line in lines
    ]
    return orm_import
