"""Account domain service."""

from typing import Optional
from bankrecon.database.base import Database
from bankrecon.domain.entities import Account as AccountEntity
from bankrecon.domain.errors import ConflictError


class AccountService:
    """Service for managing bank accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        bank_name: str,
        account_number: Optional[str] = None,
        branch_number: Optional[str] = None,
        tax_id: Optional[str] = None,
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            bank_name: Bank name
            account_number: Account number as printed by the bank
            branch_number: Branch (agency) number
            tax_id: Holder's tax id (e.g. CNPJ)

        Returns:
            Account ID

        Raises:
            ConflictError: If account name already exists
        """
        for acc in self.db.list_accounts():
            if acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

        return self.db.create_account(
            name=name,
            bank_name=bank_name,
            account_number=account_number,
            branch_number=branch_number,
            tax_id=tax_id,
        )

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID."""
        return self.db.get_account(account_id)

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts."""
        return self.db.list_accounts()
