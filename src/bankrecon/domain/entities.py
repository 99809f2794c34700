"""Domain model entities for bankrecon.

These are pure data classes representing business concepts, independent of
database schema. Persisted records (accounts, ledger entries) are frozen;
the statement import aggregate is mutable because a review session updates
it line by line until it is confirmed or deleted.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class Direction(str, Enum):
    """Direction of money on a bank statement."""

    CREDIT = "credit"
    DEBIT = "debit"


class EntryKind(str, Enum):
    """Ledger entry kind."""

    INCOME = "income"
    EXPENSE = "expense"


class FileType(str, Enum):
    """Supported statement file types."""

    OFX = "ofx"
    PDF = "pdf"


class ImportStatus(str, Enum):
    """Statement import lifecycle states."""

    PROCESSING = "processing"
    PENDING = "pending"
    CONCLUDED = "concluded"
    CONFIRMED = "confirmed"
    ERROR = "error"


def kind_for_direction(direction: Direction) -> EntryKind:
    """Map a statement direction to the ledger kind it reconciles with."""
    return EntryKind.INCOME if direction == Direction.CREDIT else EntryKind.EXPENSE


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: int
    name: str
    bank_name: str
    created_at: datetime
    account_number: Optional[str] = None
    branch_number: Optional[str] = None
    tax_id: Optional[str] = None


@dataclass(frozen=True)
class LedgerEntry:
    """Ledger entry (income or expense) owned by the ledger store."""

    id: int
    description: str
    amount: Decimal
    kind: EntryKind
    transaction_date: date
    reconciled: bool
    account_id: Optional[int]
    created_at: datetime
    reconciled_at: Optional[date] = None


@dataclass(frozen=True)
class StatementMovement:
    """A single dated movement decoded from a bank statement."""

    date: date
    description: str
    amount: Decimal
    direction: Direction

    @property
    def kind(self) -> EntryKind:
        return kind_for_direction(self.direction)


@dataclass(frozen=True)
class BankMeta:
    """Bank identifiers embedded in a statement. Any field may be missing."""

    account_id: Optional[str] = None
    branch_id: Optional[str] = None
    tax_id: Optional[str] = None
    bank_id: Optional[str] = None


@dataclass(frozen=True)
class DecodedStatement:
    """Result of decoding a statement file."""

    movements: list[StatementMovement]
    bank_meta: Optional[BankMeta] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass
class StatementLine:
    """Statement movement under review, optionally linked to a ledger entry."""

    id: int
    import_id: str
    date: date
    description: str
    amount: Decimal
    direction: Direction
    reconciled: bool = False
    linked_entry_id: Optional[int] = None

    @property
    def kind(self) -> EntryKind:
        return kind_for_direction(self.direction)

    def link(self, entry_id: int) -> None:
        self.reconciled = True
        self.linked_entry_id = entry_id

    def unlink(self) -> None:
        self.reconciled = False
        self.linked_entry_id = None


@dataclass
class StatementImport:
    """Statement import record."""

    id: str
    account_id: Optional[int]
    file_name: str
    file_type: FileType
    created_at: datetime
    status: ImportStatus = ImportStatus.PROCESSING
    total_movements: int = 0
    reconciled_count: int = 0
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    error_message: Optional[str] = None

    @property
    def is_under_review(self) -> bool:
        return self.status in (ImportStatus.PENDING, ImportStatus.CONCLUDED)

    def refresh_status(self) -> None:
        """Recompute pending/concluded from the counters."""
        if self.reconciled_count >= self.total_movements:
            self.status = ImportStatus.CONCLUDED
        else:
            self.status = ImportStatus.PENDING


@dataclass
class ImportSession:
    """Authoritative in-memory aggregate for one statement import.

    Holds the import record together with its lines. Only confirmed imports
    are persisted; everything else lives here until confirm or delete.
    """

    statement_import: StatementImport
    lines: list[StatementLine] = field(default_factory=list)
    persisted: bool = False

    @property
    def id(self) -> str:
        return self.statement_import.id

    def get_line(self, line_id: int) -> Optional[StatementLine]:
        for line in self.lines:
            if line.id == line_id:
                return line
        return None

    def unreconciled_lines(self) -> list[StatementLine]:
        return [line for line in self.lines if not line.reconciled]

    def linked_entry_ids(self) -> list[int]:
        return [
            line.linked_entry_id
            for line in self.lines
            if line.reconciled and line.linked_entry_id is not None
        ]
