"""Ledger entry domain service."""

from typing import Optional
from datetime import date
from decimal import Decimal
from bankrecon.database.base import Database
from bankrecon.domain.entities import EntryKind, LedgerEntry as LedgerEntryEntity
from bankrecon.domain.errors import NotFoundError, ValidationError, account_not_found


class LedgerService:
    """Service for managing ledger entries."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_entry(
        self,
        description: str,
        amount: Decimal,
        kind: EntryKind | str,
        transaction_date: date,
        account_id: Optional[int] = None,
        reconciled: bool = False,
    ) -> int:
        """Create a ledger entry.

        Args:
            description: Entry description
            amount: Unsigned amount
            kind: "income" or "expense"
            transaction_date: Date the money moved
            account_id: Optional account ID
            reconciled: Create the entry already reconciled

        Returns:
            Ledger entry ID

        Raises:
            ValidationError: If amount is negative or kind is unknown
            NotFoundError: If the account doesn't exist
        """
        if amount < 0:
            raise ValidationError(f"Ledger entry amount must not be negative (got {amount})")

        try:
            kind = EntryKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown ledger entry kind '{kind}' (use income or expense)")

        if account_id is not None and self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        return self.db.create_ledger_entry(
            description=description,
            amount=amount,
            kind=kind,
            transaction_date=transaction_date,
            account_id=account_id,
            reconciled=reconciled,
        )

    def get_entry(self, entry_id: int) -> Optional[LedgerEntryEntity]:
        """Get ledger entry by ID."""
        return self.db.get_ledger_entry(entry_id)

    def list_entries(
        self,
        account_id: Optional[int] = None,
        unreconciled_only: bool = False,
    ) -> list[LedgerEntryEntity]:
        """List ledger entries.

        Args:
            account_id: Optional account filter
            unreconciled_only: If True, only entries not yet reconciled
        """
        return self.db.list_ledger_entries(
            account_id=account_id,
            reconciled=False if unreconciled_only else None,
        )
