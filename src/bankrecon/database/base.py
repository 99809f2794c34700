"""Abstract ledger store interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from bankrecon.domain.entities import (
    Account,
    EntryKind,
    LedgerEntry,
    StatementImport,
    StatementLine,
)


class Database(ABC):
    """Abstract ledger store for bankrecon.

    Write operations raise PersistenceError when the underlying store
    rejects them.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        bank_name: str,
        account_number: Optional[str] = None,
        branch_number: Optional[str] = None,
        tax_id: Optional[str] = None,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    # Ledger entry operations
    @abstractmethod
    def create_ledger_entry(
        self,
        description: str,
        amount: Decimal,
        kind: EntryKind,
        transaction_date: date,
        account_id: Optional[int] = None,
        reconciled: bool = False,
    ) -> int:
        """Create a ledger entry. Returns entry ID."""
        pass

    @abstractmethod
    def get_ledger_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get ledger entry by ID."""
        pass

    @abstractmethod
    def list_ledger_entries(
        self,
        account_id: Optional[int] = None,
        reconciled: Optional[bool] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[LedgerEntry]:
        """List ledger entries with optional filters."""
        pass

    @abstractmethod
    def list_unreconciled(self, account_id: Optional[int] = None) -> list[LedgerEntry]:
        """List entries not yet reconciled, ordered by (transaction_date, id).

        Args:
            account_id: If given, only entries of that account plus entries
                without an account are returned.
        """
        pass

    @abstractmethod
    def reconcile_entry(self, entry_id: int) -> bool:
        """Mark an entry reconciled if it is currently unreconciled.

        Returns:
            True if the entry was flipped, False if it does not exist or was
            already reconciled.
        """
        pass

    @abstractmethod
    def reconcile_entries(self, entry_ids: list[int]) -> list[int]:
        """Conditionally reconcile several entries. Returns the IDs flipped."""
        pass

    @abstractmethod
    def unreconcile_entries(self, entry_ids: list[int]) -> int:
        """Clear the reconciled flag. Returns how many entries changed.

        Entries that are already unreconciled (or missing) are ignored.
        """
        pass

    # Statement import operations
    @abstractmethod
    def create_import_record(
        self, statement_import: StatementImport, lines: list[StatementLine]
    ) -> StatementImport:
        """Persist a statement import together with its lines."""
        pass

    @abstractmethod
    def get_import_record(self, import_id: str) -> Optional[StatementImport]:
        """Get persisted statement import by ID."""
        pass

    @abstractmethod
    def list_import_lines(self, import_id: str) -> list[StatementLine]:
        """Get the persisted lines of a statement import, by line ID."""
        pass

    @abstractmethod
    def list_import_records(self, account_id: Optional[int] = None) -> list[StatementImport]:
        """List persisted statement imports, newest first."""
        pass

    @abstractmethod
    def delete_import_record(self, import_id: str) -> bool:
        """Delete a persisted import and its lines. Returns False if absent."""
        pass
