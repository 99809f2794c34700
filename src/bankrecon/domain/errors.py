"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as an operation invalid for the current state."""


class DecodeError(DomainError):
    """Statement file could not be read as the declared format."""


class MismatchError(DomainError):
    """Statement belongs to a different account than the one selected."""

    def __init__(self, field: str, expected: Optional[str], found: Optional[str]):
        self.field = field
        self.expected = expected
        self.found = found
        super().__init__(identity_mismatch(field, expected, found))


class EmptyPeriodError(DomainError):
    """No statement movements fall inside the requested period."""

    def __init__(self, month: int, year: int):
        self.month = month
        self.year = year
        super().__init__(f"Statement has no movements for {month:02d}/{year}")


class LinkError(DomainError):
    """A manual link between a statement line and a ledger entry failed."""


class OrphanedEntryError(LinkError):
    """A ledger entry was created but could not be reconciled."""

    def __init__(self, entry_id: int, reason: str = ""):
        self.entry_id = entry_id
        message = f"Ledger entry {entry_id} was created but could not be reconciled"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PersistenceError(DomainError):
    """The ledger store rejected a write."""


_FIELD_LABELS = {
    "account": "account number",
    "branch": "branch number",
    "tax_id": "tax id",
}


def identity_mismatch(field: str, expected: Optional[str], found: Optional[str]) -> str:
    """Return message for a statement/account identity mismatch."""
    label = _FIELD_LABELS.get(field, field)
    return f"Statement {label} '{found}' does not match selected account ({expected})"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing ledger entry."""
    return f"Ledger entry {entry_id} not found"


def import_not_found(import_id: str) -> str:
    """Return message for missing statement import."""
    return f"Statement import '{import_id}' not found"


def line_not_found(import_id: str, line_id: int) -> str:
    """Return message for missing statement line."""
    return f"Line {line_id} not found in statement import '{import_id}'"


def import_not_under_review(import_id: str, status: str) -> str:
    """Return message when an import is not pending or concluded."""
    return f"Statement import '{import_id}' is {status}; only pending or concluded imports can be changed"
