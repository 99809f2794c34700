"""Domain layer for bankrecon application.

Services live in their own modules (decoder, validator, period, matcher,
linker, lifecycle) and are imported by full path; this package only
re-exports the entities and errors shared by all of them.
"""

from bankrecon.domain.entities import (
    Account,
    BankMeta,
    DecodedStatement,
    Direction,
    EntryKind,
    FileType,
    ImportSession,
    ImportStatus,
    LedgerEntry,
    StatementImport,
    StatementLine,
    StatementMovement,
)
from bankrecon.domain.errors import (
    ConflictError,
    DecodeError,
    DomainError,
    EmptyPeriodError,
    LinkError,
    MismatchError,
    NotFoundError,
    OrphanedEntryError,
    PersistenceError,
    ValidationError,
)

__all__ = [
    "Account",
    "BankMeta",
    "DecodedStatement",
    "Direction",
    "EntryKind",
    "FileType",
    "ImportSession",
    "ImportStatus",
    "LedgerEntry",
    "StatementImport",
    "StatementLine",
    "StatementMovement",
    "ConflictError",
    "DecodeError",
    "DomainError",
    "EmptyPeriodError",
    "LinkError",
    "MismatchError",
    "NotFoundError",
    "OrphanedEntryError",
    "PersistenceError",
    "ValidationError",
]
